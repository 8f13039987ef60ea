"""Text ranges and the node payloads of a scope graph."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .namespace import SymbolId


@dataclass(frozen=True, order=True)
class Point:
    """A position in a source buffer: byte offset, line and column."""

    byte: int
    line: int
    column: int


@dataclass(frozen=True, order=True)
class TextRange:
    """A span of source text between two points."""

    start: Point
    end: Point

    def contains(self, other: TextRange) -> bool:
        """Whether ``other`` lies wholly within this range."""
        return self.start.byte <= other.start.byte and other.end.byte <= self.end.byte

    def size(self) -> int:
        """The number of bytes spanned."""
        return self.end.byte - self.start.byte

    def text(self, buffer: bytes) -> bytes:
        """The bytes of ``buffer`` covered by this range."""
        return buffer[self.start.byte : self.end.byte]


@dataclass(frozen=True)
class Symbol:
    """A named symbol kind found at a range."""

    kind: str
    range: TextRange


@dataclass(frozen=True)
class LocalScope:
    """A lexical scope."""

    range: TextRange


@dataclass(frozen=True)
class LocalDef:
    """A definition, optionally tagged with a symbol kind."""

    range: TextRange
    symbol_id: Optional[SymbolId] = None

    def name(self, buffer: bytes) -> bytes:
        """The defined name as it appears in ``buffer``."""
        return self.range.text(buffer)


@dataclass(frozen=True)
class LocalImport:
    """An imported name."""

    range: TextRange

    def name(self, buffer: bytes) -> bytes:
        """The imported name as it appears in ``buffer``."""
        return self.range.text(buffer)


@dataclass(frozen=True)
class Reference:
    """A reference to a name, optionally tagged with a symbol kind."""

    range: TextRange
    symbol_id: Optional[SymbolId] = None

    def name(self, buffer: bytes) -> bytes:
        """The referenced name as it appears in ``buffer``."""
        return self.range.text(buffer)