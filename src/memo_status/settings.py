"""Settings file I/O for memo-status.

Manages a JSON settings file at XDG_CONFIG_HOME/memo-status/settings.json.
Environment variables take precedence over the file for the keys they cover.

Import as: import memo_status.settings
"""

import json
import os
import tempfile
from pathlib import Path

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}

DEFAULT_SLOW_REPORT_MS = 250.0


def get_config_path() -> Path:
    """Return path to settings file.

    Uses XDG_CONFIG_HOME (default ~/.config) / memo-status / settings.json.
    """
    config_home = os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config"))
    return Path(config_home) / "memo-status" / "settings.json"


def load_settings() -> dict:
    """Load settings from JSON file. Returns empty dict on missing/corrupt file."""
    path = get_config_path()
    # [LAW:dataflow-not-control-flow] Always attempt read; empty dict is the "no data" value.
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (FileNotFoundError, json.JSONDecodeError, OSError):
        return {}
    return data if isinstance(data, dict) else {}


def save_settings(data: dict) -> None:
    """Atomic write of settings dict to JSON file.

    Creates parent directories if needed. Writes to temp file then renames
    to avoid partial writes on crash.
    """
    path = get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
            f.write("\n")
        os.replace(tmp_path, path)
    except Exception:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


def load_setting(key: str, default=None):
    """Load a single setting by key. Returns default if absent."""
    return load_settings().get(key, default)


def save_setting(key: str, value) -> None:
    """Save a single setting by key (merge into existing settings)."""
    data = load_settings()
    data[key] = value
    save_settings(data)


def _env_flag(name: str):
    raw = os.environ.get(name)
    if raw is None:
        return None
    normalized = raw.strip().lower()
    if normalized in _TRUTHY:
        return True
    if normalized in _FALSY:
        return False
    return None


def load_profiling_enabled() -> bool:
    """Whether memory profiling is on. MEMO_STATUS_PROFILING overrides the file."""
    from_env = _env_flag("MEMO_STATUS_PROFILING")
    if from_env is not None:
        return from_env
    return bool(load_setting("profiling_enabled", False))


def save_profiling_enabled(enabled: bool) -> None:
    save_setting("profiling_enabled", bool(enabled))


def load_slow_report_ms() -> float:
    """Threshold above which a report walk is logged as slow."""
    try:
        return float(load_setting("slow_report_ms", DEFAULT_SLOW_REPORT_MS))
    except (TypeError, ValueError):
        return DEFAULT_SLOW_REPORT_MS
