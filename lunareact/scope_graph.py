"""A graph of lexical scopes, definitions, imports and references in one file."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Sequence, Union

from .namespace import NameSpaces
from .nodes import LocalDef, LocalImport, LocalScope, Reference, Symbol, TextRange

Node = Union[LocalScope, LocalDef, LocalImport, Reference]


class EdgeKind(Enum):
    """The relation between two nodes of a scope graph."""

    SCOPE_TO_SCOPE = "ScopeToScope"
    DEF_TO_SCOPE = "DefToScope"
    IMPORT_TO_SCOPE = "ImportToScope"
    REF_TO_DEF = "RefToDef"
    REF_TO_IMPORT = "RefToImport"


@dataclass(frozen=True)
class Edge:
    """A directed, labelled edge between two node indices."""

    source: int
    target: int
    kind: EdgeKind


class ScopeGraph:
    """Scopes and names of a single syntax tree.

    Node 0 is the root scope, spanning the whole file.
    """

    def __init__(self, range: TextRange, namespaces: NameSpaces) -> None:
        self.namespaces = namespaces
        self.root_idx = 0
        self._nodes: list[Node] = [LocalScope(range)]
        self._edges: list[Edge] = []

    @property
    def nodes(self) -> tuple[Node, ...]:
        """All nodes, indexed by their node index."""
        return tuple(self._nodes)

    def get_node(self, idx: int) -> Optional[Node]:
        """The node at ``idx``, or None if there is none."""
        if 0 <= idx < len(self._nodes):
            return self._nodes[idx]
        return None

    def edges(self) -> list[Edge]:
        """All edges in the order they were added."""
        return list(self._edges)

    def _add_node(self, node: Node) -> int:
        self._nodes.append(node)
        return len(self._nodes) - 1

    def _add_edge(self, source: int, target: int, kind: EdgeKind) -> None:
        self._edges.append(Edge(source, target, kind))

    # Most recently added edges come first, as adjacency lists are walked head-first.
    def _incoming(self, idx: int, *kinds: EdgeKind) -> Iterator[int]:
        for edge in reversed(self._edges):
            if edge.target == idx and edge.kind in kinds:
                yield edge.source

    def _outgoing(self, idx: int, *kinds: EdgeKind) -> Iterator[int]:
        for edge in reversed(self._edges):
            if edge.source == idx and edge.kind in kinds:
                yield edge.target

    def insert_local_scope(self, new: LocalScope) -> None:
        """Insert a scope beneath the smallest scope enclosing it."""
        parent = self._scope_by_range(new.range, self.root_idx)
        if parent is not None:
            self._add_edge(self._add_node(new), parent, EdgeKind.SCOPE_TO_SCOPE)

    def insert_local_def(self, new: LocalDef) -> None:
        """Insert a definition into the smallest scope enclosing it."""
        scope = self._scope_by_range(new.range, self.root_idx)
        if scope is not None:
            self._add_edge(self._add_node(new), scope, EdgeKind.DEF_TO_SCOPE)

    def insert_hoisted_def(self, new: LocalDef) -> None:
        """Insert a definition into the parent of its defining scope, if any."""
        scope = self._scope_by_range(new.range, self.root_idx)
        if scope is not None:
            new_idx = self._add_node(new)
            parent = self._parent_scope(scope)
            target = scope if parent is None else parent
            self._add_edge(new_idx, target, EdgeKind.DEF_TO_SCOPE)

    def insert_global_def(self, new: LocalDef) -> None:
        """Insert a definition into the root scope."""
        self._add_edge(self._add_node(new), self.root_idx, EdgeKind.DEF_TO_SCOPE)

    def insert_local_import(self, new: LocalImport) -> None:
        """Insert an import into the smallest scope enclosing it."""
        scope = self._scope_by_range(new.range, self.root_idx)
        if scope is not None:
            self._add_edge(self._add_node(new), scope, EdgeKind.IMPORT_TO_SCOPE)

    def insert_ref(self, new: Reference, src: bytes) -> None:
        """Insert a reference linked to every visible matching def and import.

        A reference that resolves to nothing is not inserted.
        """
        possible_defs: list[int] = []
        possible_imports: list[int] = []
        local_scope = self._scope_by_range(new.range, self.root_idx)
        if local_scope is not None:
            name = new.name(src)
            for scope in self.scope_stack(local_scope):
                for def_idx in self._incoming(scope, EdgeKind.DEF_TO_SCOPE):
                    node = self._nodes[def_idx]
                    if not isinstance(node, LocalDef) or node.name(src) != name:
                        continue
                    d, r = node.symbol_id, new.symbol_id
                    if d is not None and r is not None and d.namespace_idx != r.namespace_idx:
                        continue
                    possible_defs.append(def_idx)
                for imp_idx in self._incoming(scope, EdgeKind.IMPORT_TO_SCOPE):
                    node = self._nodes[imp_idx]
                    if isinstance(node, LocalImport) and node.name(src) == name:
                        possible_imports.append(imp_idx)

        if possible_defs or possible_imports:
            ref_idx = self._add_node(new)
            for def_idx in possible_defs:
                self._add_edge(ref_idx, def_idx, EdgeKind.REF_TO_DEF)
            for imp_idx in possible_imports:
                self._add_edge(ref_idx, imp_idx, EdgeKind.REF_TO_IMPORT)

    def scope_stack(self, start: int) -> Iterator[int]:
        """Scopes from ``start`` outwards to the root, ``start`` first."""
        current: Optional[int] = start
        while current is not None:
            yield current
            current = next(self._outgoing(current, EdgeKind.SCOPE_TO_SCOPE), None)

    def _scope_by_range(self, range: TextRange, start: int) -> Optional[int]:
        if not self._nodes[start].range.contains(range):
            return None
        for child in list(self._incoming(start, EdgeKind.SCOPE_TO_SCOPE)):
            found = self._scope_by_range(range, child)
            if found is not None:
                return found
        return start

    def _parent_scope(self, start: int) -> Optional[int]:
        if isinstance(self._nodes[start], LocalScope):
            return next(self._outgoing(start, EdgeKind.SCOPE_TO_SCOPE), None)
        return None

    def hoverable_ranges(self) -> Iterator[TextRange]:
        """Ranges of every def, ref and import, in node order."""
        for node in self._nodes:
            if not isinstance(node, LocalScope):
                yield node.range

    def definitions(self, reference_node: int) -> Iterator[int]:
        """Possible definitions of a reference."""
        return self._outgoing(reference_node, EdgeKind.REF_TO_DEF)

    def imports(self, reference_node: int) -> Iterator[int]:
        """Possible imports of a reference."""
        return self._outgoing(reference_node, EdgeKind.REF_TO_IMPORT)

    def references(self, definition_node: int) -> Iterator[int]:
        """References to a definition or import."""
        return self._incoming(definition_node, EdgeKind.REF_TO_DEF, EdgeKind.REF_TO_IMPORT)

    def node_by_range(self, start_byte: int, end_byte: int) -> Optional[int]:
        """The first def, ref or import whose range covers the byte span."""
        for idx, node in enumerate(self._nodes):
            if isinstance(node, LocalScope):
                continue
            if start_byte >= node.range.start.byte and end_byte <= node.range.end.byte:
                return idx
        return None

    def value_of_definition(self, def_idx: int) -> Optional[int]:
        """The scope holding the "value" of a definition.

        The smallest enclosing scope if it starts on the definition's line,
        otherwise the largest scope starting on that line.
        """
        def_range = self._nodes[def_idx].range
        line = def_range.start.line
        smallest = self._scope_by_range(def_range, self.root_idx)
        if smallest is not None and self._nodes[smallest].range.start.line == line:
            return smallest
        largest: Optional[int] = None
        largest_size = 0
        for idx, node in enumerate(self._nodes):
            if isinstance(node, LocalScope) and node.range.start.line == line:
                size = node.range.size()
                if largest is None or size >= largest_size:
                    largest, largest_size = idx, size
        return largest

    def node_by_position(self, line: int, column: int) -> Optional[int]:
        """The first def or ref on ``line`` whose columns cover ``column``."""
        for idx, node in enumerate(self._nodes):
            if not isinstance(node, (LocalDef, Reference)):
                continue
            r = node.range
            if (
                r.start.line == line
                and r.end.line == line
                and r.start.column <= column <= r.end.column
            ):
                return idx
        return None

    def symbols(self) -> list[Symbol]:
        """Every definition that carries a symbol kind."""
        return [
            Symbol(kind=node.symbol_id.name(self.namespaces), range=node.range)
            for node in self._nodes
            if isinstance(node, LocalDef) and node.symbol_id is not None
        ]

    def symbol_name_of(self, idx: int) -> Optional[str]:
        """The symbol kind of a def or ref, if it has one."""
        node = self._nodes[idx]
        if isinstance(node, (LocalDef, Reference)) and node.symbol_id is not None:
            return node.symbol_id.name(self.namespaces)
        return None

    def is_top_level(self, idx: int) -> bool:
        """Whether the node has an edge straight to the root scope."""
        return any(e.source == idx and e.target == self.root_idx for e in self._edges)

    def is_definition(self, idx: int) -> bool:
        return isinstance(self._nodes[idx], LocalDef)

    def is_reference(self, idx: int) -> bool:
        return isinstance(self._nodes[idx], Reference)

    def is_scope(self, idx: int) -> bool:
        return isinstance(self._nodes[idx], LocalScope)

    def is_import(self, idx: int) -> bool:
        return isinstance(self._nodes[idx], LocalImport)

    def _check_indices(self, indices: Sequence[int]) -> None:
        for idx in indices:
            self._nodes[idx]