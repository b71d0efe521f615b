"""Shared fixtures for memo-status tests."""

import pytest

import memo_status.io.logging_setup
from memo_status.app.memory_probe import MemorySnapshot
from memo_status.core.bytes_fmt import Bytes
from memo_status.engine.database import RootDatabase


class FakeClock:
    """Settable monotonic clock."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeProbe:
    def __init__(self, allocated: int = 0, resident: int = 0):
        self.snapshot = MemorySnapshot(Bytes(allocated), Bytes(resident))
        self.calls = 0

    def current(self) -> MemorySnapshot:
        self.calls += 1
        return self.snapshot


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Keep settings and log files out of the real home directory."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("MEMO_STATUS_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.delenv("MEMO_STATUS_LOG_FILE", raising=False)
    monkeypatch.delenv("MEMO_STATUS_LOG_LEVEL", raising=False)
    monkeypatch.delenv("MEMO_STATUS_PROFILING", raising=False)
    yield
    memo_status.io.logging_setup.reset()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fake_probe():
    return FakeProbe(allocated=5 * 1024 * 1024, resident=12 * 1024 * 1024)


LIBRARY_SOURCE = """\
fn open(path)
struct File
    fn read(self)
const MAX_OPEN = 16
"""

LOCAL_SOURCE = """\
fn main()
debug!(fn helper)
empty!()
let x = open(1)
"""


@pytest.fixture
def db(clock):
    """Database with one local file (two macro calls) and one library root."""
    database = RootDatabase(clock=clock)
    database.set_file_text(0, LOCAL_SOURCE)
    database.set_file_text(1, LIBRARY_SOURCE)
    database.set_source_root(0, [0])
    database.set_source_root(1, [1], is_library=True)
    return database


@pytest.fixture
def loaded_db(db):
    """``db`` with every derived query computed once."""
    for file_id in (0, 1):
        db.parse(file_id)
        for macro_file in db.macro_files(file_id):
            db.parse_macro(macro_file)
    for root_id in db.library_roots():
        db.library_symbols(root_id)
    return db
