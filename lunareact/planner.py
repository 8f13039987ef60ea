"""Planner actions, the planning prompt and helpers for reading LLM output."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional, Union

_PLAN_SYSTEM_PROMPT = """You are a JSON API. Output ONLY a valid JSON object.

Actions:
- {"action":"search","query":"keywords"}
- {"action":"edit_file","path":"...","start_line":N,"end_line":N,"new_content":"...","create_backup":true,"confirm":true}  // 0-based, inclusive
- {"action":"answer"}
- {"action":"stop","reason":"..."}

Rules:
- Output ONLY the JSON object, no markdown
- For edit_file: start_line equals end_line (single line)
- When state shows the code → answer
- When state shows NO code → search"""


@dataclass(frozen=True)
class SearchAction:
    """Search the repository for the given keywords."""

    query: str

    def to_dict(self) -> dict[str, Any]:
        """The JSON object form of this action."""
        return {"action": "search", "query": self.query}


@dataclass(frozen=True)
class EditFileAction:
    """Replace an inclusive, 0-based range of lines in a file."""

    path: str
    start_line: int
    end_line: int
    new_content: str
    create_backup: bool
    confirm: Optional[bool] = None

    def to_dict(self) -> dict[str, Any]:
        """The JSON object form of this action."""
        return {
            "action": "edit_file",
            "path": self.path,
            "start_line": self.start_line,
            "end_line": self.end_line,
            "new_content": self.new_content,
            "create_backup": self.create_backup,
            "confirm": self.confirm,
        }


@dataclass(frozen=True)
class AnswerAction:
    """Answer the question from the gathered context."""

    def to_dict(self) -> dict[str, Any]:
        """The JSON object form of this action."""
        return {"action": "answer"}


@dataclass(frozen=True)
class StopAction:
    """Stop the loop, optionally giving a reason."""

    reason: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """The JSON object form of this action."""
        return {"action": "stop", "reason": self.reason}


ReActAction = Union[SearchAction, EditFileAction, AnswerAction, StopAction]


@dataclass
class ReActStepTrace:
    """What happened in a single step of the loop."""

    step: int
    plan_raw: str
    action: Optional[ReActAction]
    observation: str


def _required(data: dict[str, Any], key: str) -> Any:
    if key not in data:
        raise ValueError(f"missing field `{key}`")
    return data[key]


def _str_field(data: dict[str, Any], key: str) -> str:
    value = _required(data, key)
    if not isinstance(value, str):
        raise ValueError(f"field `{key}` must be a string")
    return value


def _uint_field(data: dict[str, Any], key: str) -> int:
    value = _required(data, key)
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"field `{key}` must be a non-negative integer")
    return value


def _bool_field(data: dict[str, Any], key: str) -> bool:
    value = _required(data, key)
    if not isinstance(value, bool):
        raise ValueError(f"field `{key}` must be a boolean")
    return value


def _optional(data: dict[str, Any], key: str, kind: type) -> Any:
    value = data.get(key)
    if value is not None and not isinstance(value, kind):
        raise ValueError(f"field `{key}` must be {kind.__name__} or null")
    return value


def parse_action(text: str) -> ReActAction:
    """Parse a JSON object tagged by its ``action`` field.

    Raises ValueError if the text is not such an object or a field is
    missing or of the wrong type.
    """
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError("action must be a JSON object")
    kind = _str_field(data, "action")
    if kind == "search":
        return SearchAction(query=_str_field(data, "query"))
    if kind == "edit_file":
        return EditFileAction(
            path=_str_field(data, "path"),
            start_line=_uint_field(data, "start_line"),
            end_line=_uint_field(data, "end_line"),
            new_content=_str_field(data, "new_content"),
            create_backup=_bool_field(data, "create_backup"),
            confirm=_optional(data, "confirm", bool),
        )
    if kind == "answer":
        return AnswerAction()
    if kind == "stop":
        return StopAction(reason=_optional(data, "reason", str))
    raise ValueError(f"unknown action `{kind}`")


def plan_prompt(question: str, state_summary: str) -> tuple[str, str]:
    """The system and user messages asking the LLM for its next action."""
    user = f"Question: {question.strip()}\n\nState:\n{state_summary.strip()}"
    return _PLAN_SYSTEM_PROMPT, user


def extract_first_json_object(s: str) -> Optional[str]:
    """The first balanced ``{...}`` span of ``s`` that is valid JSON.

    Tolerates surrounding prose or markdown code fences.
    """
    i = 0
    n = len(s)
    while i < n:
        if s[i] == "{":
            start = i
            depth = 0
            while i < n:
                ch = s[i]
                if ch == "{":
                    depth += 1
                elif ch == "}":
                    depth -= 1
                    if depth == 0:
                        candidate = s[start : i + 1]
                        try:
                            json.loads(candidate)
                        except ValueError:
                            break
                        return candidate
                i += 1
        i += 1
    return None


def _is_ident_char(ch: str) -> bool:
    return ch == "_" or (ch.isascii() and ch.isalnum())


def extract_identifiers(s: str) -> list[str]:
    """ASCII identifiers in ``s``, in order; runs starting with a digit are dropped."""
    words: list[str] = []
    current: list[str] = []
    for ch in s:
        if _is_ident_char(ch):
            current.append(ch)
        elif current:
            words.append("".join(current))
            current = []
    if current:
        words.append("".join(current))
    return [w for w in words if w[0] == "_" or w[0].isalpha()]


def snake_to_pascal(s: str) -> str:
    """Convert ``snake_case`` to ``PascalCase``."""
    out = []
    for part in s.split("_"):
        if not part:
            continue
        first = part[0]
        out.append((first.upper() if first.isascii() else first) + part[1:])
    return "".join(out)


def expand_seed_terms(question: str) -> list[str]:
    """Identifiers of ``question`` with singular and PascalCase variants.

    ``"context_chunks"`` gives ``["context_chunks", "context_chunk", "ContextChunk"]``.
    Order is kept and duplicates are removed.
    """
    terms: list[str] = []
    for ident in extract_identifiers(question):
        ident = ident.strip()
        if not ident:
            continue
        terms.append(ident)
        singular = ident.rstrip("s") if ident.endswith("s") and len(ident) > 1 else ident
        terms.append(singular)
        if "_" in singular:
            pascal = snake_to_pascal(singular)
            if pascal and pascal != ident:
                terms.append(pascal)
    return list(dict.fromkeys(terms))