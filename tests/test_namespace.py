import pytest

from lunareact.namespace import SymbolId, all_symbols, symbol_id_of

NAMESPACES = [
    ["function", "method", "getter"],
    ["var", "const", "static"],
]

TYPESCRIPT = [
    [
        "constant",
        "variable",
        "property",
        "parameter",
        "function",
        "method",
        "generator",
        "alias",
        "enum",
        "enumerator",
        "class",
        "interface",
        "label",
    ]
]


def test_all_symbols_flattens_in_order():
    assert all_symbols(NAMESPACES) == [
        "function",
        "method",
        "getter",
        "var",
        "const",
        "static",
    ]


def test_all_symbols_empty():
    assert all_symbols([]) == []


def test_symbol_id_of_first_namespace():
    assert symbol_id_of(NAMESPACES, "function") == SymbolId(0, 0)


def test_symbol_id_of_second_namespace():
    assert symbol_id_of(NAMESPACES, "const") == SymbolId(1, 1)


def test_symbol_id_of_unknown_symbol():
    assert symbol_id_of(NAMESPACES, "macro") is None


def test_symbol_id_of_prefers_first_occurrence():
    namespaces = [["a", "x"], ["x"]]
    assert symbol_id_of(namespaces, "x") == SymbolId(0, 1)


@pytest.mark.parametrize("symbol", all_symbols(TYPESCRIPT))
def test_round_trip_through_symbol_id(symbol):
    sid = symbol_id_of(TYPESCRIPT, symbol)
    assert sid.name(TYPESCRIPT) == symbol


def test_symbol_id_name():
    assert SymbolId(namespace_idx=1, symbol_idx=0).name(NAMESPACES) == "var"


def test_symbol_id_name_out_of_range():
    with pytest.raises(IndexError):
        SymbolId(5, 0).name(NAMESPACES)


def test_symbol_id_is_hashable_and_comparable():
    ids = {SymbolId(0, 0), SymbolId(0, 0), SymbolId(1, 0)}
    assert len(ids) == 2