"""Selecting, merging and rendering retrieved context for a prompt."""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import groupby
from typing import Any, Callable, Optional

from .chunks import ContextChunk, IndexChunk

ReadSnippet = Callable[[str, int, int], str]
CountTokens = Callable[[str], int]


@dataclass
class ContextEngineOptions:
    """Limits for the context shown to the model."""

    max_chunks: int = 8
    max_total_tokens: int = 2_000  # 0 means unlimited
    merge_gap_lines: int = 3


@dataclass
class ContextPack:
    """A query with its search hits, refilled context and tool trace."""

    query: str
    hits: list[IndexChunk] = field(default_factory=list)
    context: list[ContextChunk] = field(default_factory=list)
    trace: list[Any] = field(default_factory=list)


def _merge_ranges(chunks: list[ContextChunk], gap: int) -> list[tuple[int, int, str]]:
    merged: list[list[Any]] = []
    for c in sorted(chunks, key=lambda c: (c.start_line, c.end_line)):
        if merged and c.start_line <= merged[-1][1] + gap + 1:
            last = merged[-1]
            last[1] = max(last[1], c.end_line)
            if c.reason and c.reason not in last[2]:
                last[2] = f"{last[2]}; {c.reason}" if last[2] else c.reason
            continue
        merged.append([c.start_line, c.end_line, c.reason])
    return [(s, e, r) for s, e, r in merged]


def select_context_chunks(
    hits: list[IndexChunk],
    context: list[ContextChunk],
    read_snippet: ReadSnippet,
    count_tokens: CountTokens,
    options: Optional[ContextEngineOptions] = None,
) -> list[ContextChunk]:
    """Merge nearby chunks, rank them by hits, trim to budget and order by location.

    ``read_snippet(path, start_line, end_line)`` returns the text of the
    inclusive 0-based line range; ``count_tokens`` measures a text.
    """
    opt = options if options is not None else ContextEngineOptions()

    merged_all: list[ContextChunk] = []
    by_path = sorted(context, key=lambda c: c.path)
    for path, group in groupby(by_path, key=lambda c: c.path):
        for start, end, reason in _merge_ranges(list(group), opt.merge_gap_lines):
            merged_all.append(
                ContextChunk(
                    path=path,
                    alias=0,
                    snippet=read_snippet(path, start, end),
                    start_line=start,
                    end_line=end,
                    reason=reason,
                )
            )

    def hit_count(c: ContextChunk) -> int:
        return sum(
            1
            for h in hits
            if h.path == c.path and h.start_line >= c.start_line and h.end_line <= c.end_line
        )

    ranked = sorted(
        merged_all,
        key=lambda c: (-hit_count(c), max(c.end_line - c.start_line, 0), c.path, c.start_line),
    )
    selected = ranked[: max(opt.max_chunks, 1)]

    if opt.max_total_tokens > 0:
        total = 0
        kept = []
        for c in selected:
            tokens = count_tokens(f"{c.path}\n{c.snippet}")
            if total + tokens <= opt.max_total_tokens:
                total += tokens
                kept.append(c)
        selected = kept

    selected.sort(key=lambda c: (c.path, c.start_line))
    for alias, c in enumerate(selected):
        c.alias = alias
    return selected


def _lines(text: str) -> list[str]:
    parts = text.split("\n")
    if parts and parts[-1] == "":
        parts.pop()
    return [p[:-1] if p.endswith("\r") else p for p in parts]


def render_prompt_context(
    pack: ContextPack,
    read_snippet: ReadSnippet,
    count_tokens: CountTokens,
    options: Optional[ContextEngineOptions] = None,
) -> str:
    """The ``# Retrieved Context`` text for a prompt, with numbered lines."""
    selected = select_context_chunks(pack.hits, pack.context, read_snippet, count_tokens, options)
    out = [
        "# Retrieved Context\n\n",
        f"Query: {pack.query}\n\n",
        f"Chunks: {len(selected)}\n\n",
    ]
    for i, c in enumerate(selected):
        start1 = c.start_line + 1
        out.append(f"## [{i:02}] {c.path}:{start1}..={c.end_line + 1}\n")
        if c.reason:
            out.append(f"reason: {c.reason}\n")
        out.append("```\n")
        out.extend(f"{start1 + n:>5} {line}\n" for n, line in enumerate(_lines(c.snippet)))
        out.append("```\n\n")
    return "".join(out)