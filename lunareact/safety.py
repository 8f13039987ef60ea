"""Loop-safety bookkeeping: repeated searches and duplicate edits."""

from __future__ import annotations

import string
from dataclasses import dataclass
from typing import Optional

_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)


def _ascii_fold(s: str) -> str:
    return s.translate(_ASCII_LOWER)


@dataclass
class ReActSafetyState:
    """Safety-related state carried across steps of the loop."""

    no_delta_searches: int = 0
    last_search_query: Optional[str] = None
    last_edit: Optional[tuple[str, int, int]] = None

    def should_auto_answer(self, has_context: bool) -> bool:
        """Whether repeated fruitless searches mean the loop should just answer."""
        return self.no_delta_searches >= 2 and has_context

    def record_search(self, query: str, had_delta: bool) -> tuple[bool, bool]:
        """Record a search; return whether it repeated the last one and had no delta."""
        repeated = self.last_search_query is not None and _ascii_fold(
            self.last_search_query
        ) == _ascii_fold(query)
        if had_delta:
            self.no_delta_searches = 0
        else:
            self.no_delta_searches += 1
        self.last_search_query = query
        return repeated, not had_delta

    def is_duplicate_edit(self, path: str, start_line: int, end_line: int) -> bool:
        """Whether this edit targets exactly the same file and range as the last."""
        return self.last_edit == (path, start_line, end_line)

    def record_edit(self, path: str, start_line: int, end_line: int) -> None:
        """Remember the location of the latest edit."""
        self.last_edit = (path, start_line, end_line)