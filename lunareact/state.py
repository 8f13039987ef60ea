"""Summaries of the search state for the planner, and merging of hit lists."""

from __future__ import annotations

from typing import Iterable

from .chunks import ContextChunk, IndexChunk
from .patterns import extract_definition_name, is_definition_chunk

_STATE_CONTEXT_PREVIEW_MAX = 6


def summarize_state(hits: list[IndexChunk], context: list[ContextChunk]) -> str:
    """A concise text view of hits, context chunks and found definitions."""
    definition_names = [
        name for name in map(extract_definition_name, context) if name is not None
    ]
    has_definition = "true" if definition_names else "false"
    parts = [f"hits={len(hits)} context_chunks={len(context)} has_definition={has_definition}"]
    if definition_names:
        parts.append(f" definitions=[{', '.join(definition_names)}]")

    has_list_dir = any(
        "fn list_dir" in c.snippet or "pub fn list_dir" in c.snippet for c in context
    )
    has_sort = any(
        "entries.sort_by" in c.snippet or "entries.sort_by_key" in c.snippet for c in context
    )
    if has_list_dir:
        parts.append(f" visible_functions=[list_dir] has_sort={'true' if has_sort else 'false'}")
    parts.append("\n")

    for c in context[:_STATE_CONTEXT_PREVIEW_MAX]:
        marker = " [def]" if is_definition_chunk(c) else ""
        name = extract_definition_name(c)
        name_part = f" ({name})" if name is not None else ""
        parts.append(
            f"- {c.path}:{c.start_line + 1}..={c.end_line + 1}{marker}{name_part} reason={c.reason}\n"
        )
    if len(context) > _STATE_CONTEXT_PREVIEW_MAX:
        parts.append("- ...\n")
    return "".join(parts)


def merge_hits(base: Iterable[IndexChunk], more: Iterable[IndexChunk]) -> list[IndexChunk]:
    """Hits of both lists, first occurrence of each key kept, sorted by key."""
    unique: dict[tuple[str, int, int], IndexChunk] = {}
    for hit in (*base, *more):
        unique.setdefault(hit.key(), hit)
    return [unique[key] for key in sorted(unique)]