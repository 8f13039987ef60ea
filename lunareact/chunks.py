"""Search hits and the context chunks refilled around them."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class IndexChunk:
    """A chunk of a file returned by a search."""

    path: str
    start_byte: int
    end_byte: int
    start_line: int
    end_line: int
    text: str

    def key(self) -> tuple[str, int, int]:
        """The identity of a hit: path and byte span."""
        return (self.path, self.start_byte, self.end_byte)


@dataclass
class ContextChunk:
    """A snippet of a file shown to the model, with 0-based inclusive lines."""

    path: str
    alias: int
    snippet: str
    start_line: int
    end_line: int
    reason: str