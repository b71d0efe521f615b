"""Lossless line/token syntax trees for source text.

Trees are small and immutable. Every character of the input is owned by
exactly one token, so ``parse_text(text).tree.text() == text``.

Shape::

    SOURCE_FILE
      LINE | MACRO_CALL      one per physical line
        IDENT | NUMBER | PUNCT | WHITESPACE
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

# Accounting model used by memory_size_of_subtree().
NODE_HEADER_SIZE = 32
CHILD_SLOT_SIZE = 8

_TOKEN_RE = re.compile(r"(?P<ws>\s+)|(?P<ident>[A-Za-z_]\w*)|(?P<number>\d+)|(?P<punct>.)")
_MACRO_CALL_RE = re.compile(r"^\s*[A-Za-z_]\w*!\(.*\)\s*;?\s*$")


class SyntaxKind(Enum):
    SOURCE_FILE = "source_file"
    LINE = "line"
    MACRO_CALL = "macro_call"
    IDENT = "ident"
    NUMBER = "number"
    PUNCT = "punct"
    WHITESPACE = "whitespace"


_TOKEN_KINDS = {
    "ws": SyntaxKind.WHITESPACE,
    "ident": SyntaxKind.IDENT,
    "number": SyntaxKind.NUMBER,
    "punct": SyntaxKind.PUNCT,
}


class SyntaxNode:
    """A tree node; tokens carry text, inner nodes carry children."""

    __slots__ = ("kind", "token_text", "children")

    def __init__(
        self,
        kind: SyntaxKind,
        children: tuple["SyntaxNode", ...] = (),
        token_text: str | None = None,
    ) -> None:
        self.kind = kind
        self.children = children
        self.token_text = token_text

    def __repr__(self) -> str:
        if self.token_text is not None:
            return f"SyntaxNode({self.kind.name}, {self.token_text!r})"
        return f"SyntaxNode({self.kind.name}, {len(self.children)} children)"

    def descendants(self):
        """Yield this node and every node below it, preorder."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def text(self) -> str:
        return "".join(n.token_text for n in self.descendants() if n.token_text is not None)

    def memory_size_of_subtree(self) -> int:
        """Bytes owned by this subtree, counting each distinct node once."""
        seen: set[int] = set()
        total = 0
        stack = [self]
        while stack:
            node = stack.pop()
            if id(node) in seen:
                continue
            seen.add(id(node))
            total += NODE_HEADER_SIZE + CHILD_SLOT_SIZE * len(node.children)
            if node.token_text is not None:
                total += len(node.token_text.encode("utf-8"))
            stack.extend(node.children)
        return total


@dataclass(frozen=True)
class Parse:
    """Result of parsing one file: the tree plus any syntax errors."""

    tree: SyntaxNode
    errors: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors


def _tokenize(line: str) -> tuple[SyntaxNode, ...]:
    return tuple(
        SyntaxNode(_TOKEN_KINDS[m.lastgroup], token_text=m.group())
        for m in _TOKEN_RE.finditer(line)
    )


def parse_text(text: str) -> Parse:
    """Parse ``text`` into a lossless tree, collecting delimiter errors."""
    lines: list[SyntaxNode] = []
    errors: list[str] = []
    for lineno, line in enumerate(text.splitlines(keepends=True), start=1):
        kind = SyntaxKind.MACRO_CALL if _MACRO_CALL_RE.match(line) else SyntaxKind.LINE
        lines.append(SyntaxNode(kind, _tokenize(line)))
        if line.count("(") != line.count(")"):
            errors.append(f"line {lineno}: unbalanced parentheses")
    return Parse(SyntaxNode(SyntaxKind.SOURCE_FILE, tuple(lines)), tuple(errors))


def macro_calls(tree: SyntaxNode) -> list[SyntaxNode]:
    """Top-level macro call nodes of a source file, in source order."""
    return [child for child in tree.children if child.kind is SyntaxKind.MACRO_CALL]


def macro_call_name(call: SyntaxNode) -> str:
    for token in call.children:
        if token.kind is SyntaxKind.IDENT:
            return token.token_text
    return ""


def macro_call_argument(call: SyntaxNode) -> str:
    """Text between the outermost parentheses of a macro call."""
    tokens = [t.token_text for t in call.children]
    start = tokens.index("(")
    end = len(tokens) - 1 - tokens[::-1].index(")")
    return "".join(tokens[start + 1:end])
