"""A readable, nested rendering of a scope graph."""

from __future__ import annotations

from dataclasses import dataclass, field

from .nodes import LocalDef, TextRange
from .scope_graph import EdgeKind, ScopeGraph

_INDENT = "    "


def context_line(range: TextRange, src: bytes) -> str:
    """The source line around ``range``, with the range marked by ``§``."""
    start, end = range.start.byte, range.end.byte
    before = src.rfind(b"\n", 0, start)
    context_start = start if before < 0 else before + 1
    after = src.find(b"\n", end)
    context_end = end if after < 0 else max(after - 1, 0)
    prefix = src[context_start:start].decode("utf-8").lstrip()
    body = src[start:end].decode("utf-8")
    suffix = src[end : context_end + 1].decode("utf-8").rstrip()
    return f"{prefix}§{body}§{suffix}"


def _debug_str(text: str) -> str:
    escapes = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\r": "\\r", "\t": "\\t", "\0": "\\0"}
    out = []
    for ch in text:
        if ch in escapes:
            out.append(escapes[ch])
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            out.append(f"\\u{{{ord(ch):x}}}")
        else:
            out.append(ch)
    return '"' + "".join(out) + '"'


def _struct(name: str, fields: list[tuple[str, str]], indent: int) -> str:
    pad = _INDENT * (indent + 1)
    lines = [f"{name} {{"]
    lines.extend(f"{pad}{key}: {value}," for key, value in fields)
    lines.append(_INDENT * indent + "}")
    return "\n".join(lines)


def _list(items: list[str], indent: int) -> str:
    if not items:
        return "[]"
    pad = _INDENT * (indent + 1)
    return "[\n" + "".join(f"{pad}{item},\n" for item in items) + _INDENT * indent + "]"


def _refs_field(refs: list[str], indent: int) -> tuple[str, str]:
    return (
        f"referenced in ({len(refs)})",
        _list([f"`{ref}`" for ref in refs], indent + 1),
    )


@dataclass
class _DefDebug:
    name: str
    range: TextRange
    context: str
    refs: list[str]
    symbol: str

    def render(self, indent: int) -> str:
        fields = [("kind", _debug_str(self.symbol)), ("context", _debug_str(self.context))]
        if self.refs:
            fields.append(_refs_field(self.refs, indent))
        return _struct(self.name, fields, indent)


@dataclass
class _ImportDebug:
    name: str
    range: TextRange
    context: str
    refs: list[str]

    def render(self, indent: int) -> str:
        fields = [("context", _debug_str(self.context))]
        if self.refs:
            fields.append(_refs_field(self.refs, indent))
        return _struct(self.name, fields, indent)


@dataclass
class ScopeDebug:
    """One scope with its definitions, imports and child scopes, sorted by range."""

    range: TextRange
    definitions: list[_DefDebug] = field(default_factory=list)
    imports: list[_ImportDebug] = field(default_factory=list)
    scopes: list[ScopeDebug] = field(default_factory=list)

    def render(self) -> str:
        """The nested textual form of this scope."""
        return self._render(0)

    def _render(self, indent: int) -> str:
        fields = [("definitions", _list([d.render(indent + 2) for d in self.definitions], indent + 1))]
        if self.imports:
            fields.append(("imports", _list([i.render(indent + 2) for i in self.imports], indent + 1)))
        fields.append(("child scopes", _list([s._render(indent + 2) for s in self.scopes], indent + 1)))
        return _struct("scope", fields, indent)

    def __str__(self) -> str:
        return self.render()


def _build(graph: ScopeGraph, start: int, src: bytes) -> ScopeDebug:
    incoming = [e for e in graph.edges() if e.target == start]
    nodes = graph.nodes

    def ref_contexts(idx: int) -> list[str]:
        ranges = sorted(nodes[r].range for r in graph.references(idx))
        return [context_line(r, src) for r in ranges]

    definitions = []
    imports = []
    scopes = []
    for edge in incoming:
        node = nodes[edge.source]
        if edge.kind is EdgeKind.DEF_TO_SCOPE:
            symbol = (
                node.symbol_id.name(graph.namespaces)
                if isinstance(node, LocalDef) and node.symbol_id is not None
                else "none"
            )
            definitions.append(
                _DefDebug(
                    name=node.range.text(src).decode("utf-8"),
                    range=node.range,
                    context=context_line(node.range, src),
                    refs=ref_contexts(edge.source),
                    symbol=symbol,
                )
            )
        elif edge.kind is EdgeKind.IMPORT_TO_SCOPE:
            imports.append(
                _ImportDebug(
                    name=node.range.text(src).decode("utf-8"),
                    range=node.range,
                    context=context_line(node.range, src),
                    refs=ref_contexts(edge.source),
                )
            )
        elif edge.kind is EdgeKind.SCOPE_TO_SCOPE:
            scopes.append(_build(graph, edge.source, src))

    return ScopeDebug(
        range=nodes[start].range,
        definitions=sorted(definitions, key=lambda d: d.range),
        imports=sorted(imports, key=lambda i: i.range),
        scopes=sorted(scopes, key=lambda s: s.range),
    )


def debug_scopes(graph: ScopeGraph, src: bytes) -> ScopeDebug:
    """A nested view of ``graph`` from its root scope."""
    return _build(graph, graph.root_idx, src)