"""Recognise definitions in code snippets by their leading keywords."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .chunks import ContextChunk


@dataclass(frozen=True)
class _DefPattern:
    prefixes: tuple[str, ...]
    skip_generic: bool


_DEF_PATTERNS: tuple[_DefPattern, ...] = (
    _DefPattern(("pub struct ", "struct "), True),
    _DefPattern(("pub enum ", "enum "), True),
    _DefPattern(("pub fn ", "fn ", "async fn ", "pub async fn "), True),
    _DefPattern(("pub trait ", "trait "), True),
    _DefPattern(("pub type ", "type "), False),
    _DefPattern(("pub const ", "const "), False),
    _DefPattern(("pub static ", "static "), False),
    _DefPattern(("pub impl ", "impl "), True),
    _DefPattern(("class ", "public class ", "private class ", "protected class "), True),
    _DefPattern(("def ",), False),
    _DefPattern(("function ", "export function "), False),
    _DefPattern(("func ",), False),
)


def _extract_identifier(s: str) -> str:
    """The identifier at the start of ``s``, stopping at the first other character."""
    s = s.lstrip()
    end = 0
    for ch in s:
        if ch.isalnum() or ch == "_":
            end += 1
        else:
            break
    return s[:end]


def extract_definition_name(chunk: ContextChunk) -> Optional[str]:
    """The name defined at the start of the chunk's snippet, or None."""
    snippet = chunk.snippet.lstrip()
    for pattern in _DEF_PATTERNS:
        for prefix in pattern.prefixes:
            if snippet.startswith(prefix):
                return _extract_identifier(snippet[len(prefix) :])
    return None


def is_definition_chunk(chunk: ContextChunk) -> bool:
    """Whether the chunk's snippet starts with a definition keyword."""
    snippet = chunk.snippet.lstrip()
    return any(
        snippet.startswith(prefix)
        for pattern in _DEF_PATTERNS
        for prefix in pattern.prefixes
    )