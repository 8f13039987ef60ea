import pytest

from lunareact.chunks import ContextChunk, IndexChunk
from lunareact.context import (
    ContextEngineOptions,
    ContextPack,
    render_prompt_context,
    select_context_chunks,
)

FILES = {
    "a.rs": "\n".join(f"a line {i}" for i in range(40)),
    "b.rs": "\n".join(f"b line {i}" for i in range(40)),
    "c.rs": "\n".join(f"c line {i}" for i in range(40)),
}


class Reader:
    def __init__(self):
        self.calls = []

    def __call__(self, path, start, end):
        self.calls.append((path, start, end))
        return "\n".join(FILES[path].split("\n")[start : end + 1])


def one_token(text):
    return 1


def chunk(path, start, end, reason="hit"):
    return ContextChunk(path=path, alias=0, snippet="", start_line=start, end_line=end, reason=reason)


def hit(path, start, end):
    return IndexChunk(path=path, start_byte=start, end_byte=end, start_line=start, end_line=end, text="")


def test_options_default():
    opt = ContextEngineOptions()
    assert opt.max_chunks == 8
    assert opt.max_total_tokens == 2000
    assert opt.merge_gap_lines == 3


def test_nearby_chunks_merge_and_reasons_join():
    reader = Reader()
    out = select_context_chunks([], [chunk("a.rs", 4, 6, "y"), chunk("a.rs", 0, 2, "x")], reader, one_token)
    assert len(out) == 1
    assert (out[0].start_line, out[0].end_line) == (0, 6)
    assert out[0].reason == "x; y"
    assert reader.calls == [("a.rs", 0, 6)]
    assert out[0].snippet.split("\n")[0] == "a line 0"


def test_repeated_reason_not_duplicated():
    out = select_context_chunks([], [chunk("a.rs", 0, 2), chunk("a.rs", 3, 5)], Reader(), one_token)
    assert len(out) == 1
    assert out[0].reason == "hit"


def test_distant_chunks_stay_separate_with_aliases():
    out = select_context_chunks([], [chunk("a.rs", 20, 22), chunk("a.rs", 0, 2)], Reader(), one_token)
    assert [c.start_line for c in out] == [0, 20]
    assert [c.alias for c in out] == [0, 1]


def test_max_chunks_prefers_chunks_with_hits():
    context = [chunk("a.rs", 0, 2), chunk("b.rs", 0, 2), chunk("c.rs", 0, 2)]
    hits = [hit("b.rs", 0, 1), hit("c.rs", 1, 2)]
    out = select_context_chunks(hits, context, Reader(), one_token, ContextEngineOptions(max_chunks=2))
    assert [c.path for c in out] == ["b.rs", "c.rs"]


def test_max_chunks_zero_still_keeps_one():
    context = [chunk("a.rs", 0, 2), chunk("b.rs", 0, 2)]
    out = select_context_chunks([], context, Reader(), one_token, ContextEngineOptions(max_chunks=0))
    assert len(out) == 1


def test_token_budget_trims():
    context = [chunk("a.rs", 0, 2), chunk("b.rs", 0, 2), chunk("c.rs", 0, 2)]
    out = select_context_chunks(
        [], context, Reader(), lambda text: 10, ContextEngineOptions(max_total_tokens=15)
    )
    assert len(out) == 1
    unlimited = select_context_chunks(
        [], context, Reader(), lambda text: 10, ContextEngineOptions(max_total_tokens=0)
    )
    assert len(unlimited) == 3


def test_output_sorted_by_path_and_line():
    context = [chunk("c.rs", 0, 1), chunk("a.rs", 30, 31), chunk("a.rs", 0, 1)]
    out = select_context_chunks([], context, Reader(), one_token)
    keys = [(c.path, c.start_line) for c in out]
    assert keys == sorted(keys)


def test_reader_errors_propagate():
    def failing(path, start, end):
        raise FileNotFoundError(path)

    with pytest.raises(FileNotFoundError):
        select_context_chunks([], [chunk("missing.rs", 0, 1)], failing, one_token)


def test_render_prompt_context():
    pack = ContextPack(query="where is foo", context=[chunk("a.rs", 0, 1, reason="")])
    out = render_prompt_context(pack, Reader(), one_token)
    assert out.startswith("# Retrieved Context\n\nQuery: where is foo\n\nChunks: 1\n\n")
    assert "## [00] a.rs:1..=2\n" in out
    assert "    1 a line 0\n    2 a line 1\n" in out
    assert "reason:" not in out
    assert out.endswith("```\n\n")


def test_render_includes_reason_and_empty_pack():
    pack = ContextPack(query="q", context=[chunk("b.rs", 0, 0, reason="search_hit")])
    assert "reason: search_hit\n" in render_prompt_context(pack, Reader(), one_token)
    empty = render_prompt_context(ContextPack(query="q"), Reader(), one_token)
    assert "Chunks: 0\n\n" in empty
    assert "##" not in empty