"""Tests for class inheritance trees."""

from luatypes_mcp.parser import SymbolKind, ancestors, build_database, build_symbol_tree, flatten_tree


SOURCE = """\
---@class Base
---@class Mid : Base
---@class Leaf : Mid
---@class Orphan : Missing
"""


def test_build_symbol_tree():
    db = build_database([SOURCE])
    flat = [(s.name, depth) for s, depth in flatten_tree(build_symbol_tree(db))]

    assert flat == [
        ("Base", 0),
        ("Mid", 1),
        ("Leaf", 2),
        ("Missing", 0),
        ("Orphan", 1),
    ]


def test_unknown_parent_is_a_root():
    db = build_database([SOURCE])
    roots = build_symbol_tree(db)

    assert roots[1].symbol.kind == SymbolKind.UNKNOWN


def test_subtree():
    db = build_database([SOURCE])
    mid = db.find("Mid")
    (node,) = build_symbol_tree(db, root_id=mid.id)

    assert node.symbol is mid
    assert [c.symbol.name for c in node.children] == ["Leaf"]
    assert build_symbol_tree(db, root_id=10_000) == []


def test_ancestors():
    db = build_database([SOURCE])

    assert [s.name for s in ancestors(db, db.find("Leaf").id)] == ["Mid", "Base"]
    assert ancestors(db, db.find("Base").id) == []


def test_parent_cycle():
    db = build_database(["---@class A : B\n---@class B : A\n"])
    flat = [(s.name, depth) for s, depth in flatten_tree(build_symbol_tree(db))]

    assert flat == [("B", 0), ("A", 1)]
    assert [s.name for s in ancestors(db, db.find("A").id)] == ["B"]
