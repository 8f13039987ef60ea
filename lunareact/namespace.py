"""Symbol namespaces: groups of symbol kinds that may refer to one another."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import chain
from typing import Optional, Sequence

NameSpace = Sequence[str]
NameSpaces = Sequence[NameSpace]


@dataclass(frozen=True)
class SymbolId:
    """An opaque identifier for a symbol kind within a set of namespaces."""

    namespace_idx: int
    symbol_idx: int

    def name(self, namespaces: NameSpaces) -> str:
        """The symbol kind this identifier denotes in ``namespaces``."""
        return namespaces[self.namespace_idx][self.symbol_idx]


def all_symbols(namespaces: NameSpaces) -> list[str]:
    """Every symbol kind of every namespace, in order."""
    return list(chain.from_iterable(namespaces))


def symbol_id_of(namespaces: NameSpaces, symbol: str) -> Optional[SymbolId]:
    """The identifier of the first occurrence of ``symbol``, or None."""
    for namespace_idx, namespace in enumerate(namespaces):
        for symbol_idx, candidate in enumerate(namespace):
            if candidate == symbol:
                return SymbolId(namespace_idx, symbol_idx)
    return None