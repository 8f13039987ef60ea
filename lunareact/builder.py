"""Assemble a scope graph from named query captures."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from .namespace import NameSpaces, symbol_id_of
from .nodes import LocalDef, LocalImport, LocalScope, Reference, TextRange
from .scope_graph import ScopeGraph

logger = logging.getLogger(__name__)


class Scoping(Enum):
    """Where a captured definition is placed in the scope graph."""

    GLOBAL = "global"
    HOISTED = "hoist"
    LOCAL = "local"


@dataclass(frozen=True)
class _DefCapture:
    ranges: list[TextRange]
    symbol: Optional[str]
    scoping: Scoping


@dataclass(frozen=True)
class _RefCapture:
    ranges: list[TextRange]
    symbol: Optional[str]


def _parse_scoping(keyword: str) -> Scoping:
    try:
        return Scoping(keyword)
    except ValueError:
        raise ValueError(f"invalid scope keyword: {keyword!r}") from None


def build_scope_graph(
    captures: Iterable[tuple[str, TextRange]],
    root_range: TextRange,
    src: bytes,
    namespaces: NameSpaces,
) -> ScopeGraph:
    """Build a lexical scope graph from ``(capture_name, range)`` pairs.

    Recognised capture names are ``local.scope``, ``local.import``,
    ``<scoping>.definition[.<symbol>]`` and ``local.reference[.<symbol>]``.
    Scopes are inserted first, then imports, then definitions, then
    references. Names starting with ``_`` are ignored silently; any other
    unknown name is logged.
    """
    grouped: dict[str, list[TextRange]] = {}
    for name, range in captures:
        grouped.setdefault(name, []).append(range)

    scope_ranges: list[TextRange] = []
    import_ranges: list[TextRange] = []
    def_captures: list[_DefCapture] = []
    ref_captures: list[_RefCapture] = []

    for name, ranges in grouped.items():
        parts = name.split(".")
        if len(parts) in (2, 3) and parts[1] == "definition":
            symbol = parts[2] if len(parts) == 3 else None
            def_captures.append(_DefCapture(ranges, symbol, _parse_scoping(parts[0])))
        elif len(parts) in (2, 3) and parts[:2] == ["local", "reference"]:
            symbol = parts[2] if len(parts) == 3 else None
            ref_captures.append(_RefCapture(ranges, symbol))
        elif parts == ["local", "scope"]:
            scope_ranges = ranges
        elif parts == ["local", "import"]:
            import_ranges = ranges
        elif not name.startswith("_"):
            logger.warning("unrecognized query capture: %s", name)

    graph = ScopeGraph(root_range, namespaces)

    for range in scope_ranges:
        graph.insert_local_scope(LocalScope(range))

    for range in import_ranges:
        graph.insert_local_import(LocalImport(range))

    inserters = {
        Scoping.HOISTED: graph.insert_hoisted_def,
        Scoping.GLOBAL: graph.insert_global_def,
        Scoping.LOCAL: graph.insert_local_def,
    }
    for capture in def_captures:
        symbol_id = symbol_id_of(namespaces, capture.symbol) if capture.symbol else None
        insert = inserters[capture.scoping]
        for range in capture.ranges:
            insert(LocalDef(range, symbol_id))

    for capture in ref_captures:
        symbol_id = symbol_id_of(namespaces, capture.symbol) if capture.symbol else None
        for range in capture.ranges:
            graph.insert_ref(Reference(range, symbol_id), src)

    return graph