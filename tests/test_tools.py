"""Tests for tools module."""

import pytest

from luatypes_mcp.storage import DatabaseStore
from luatypes_mcp.tools.build_database import build_database, read_sources
from luatypes_mcp.tools.get_class_tree import get_class_tree
from luatypes_mcp.tools.get_file_outline import get_file_outline
from luatypes_mcp.tools.get_references import get_references
from luatypes_mcp.tools.get_symbol import get_symbol, get_symbols
from luatypes_mcp.tools.list_databases import list_databases
from luatypes_mcp.tools.list_unresolved import list_unresolved
from luatypes_mcp.tools.search_symbols import search_symbols


ACTOR_SOURCE = """\
---@class Actor : Object
---@field Name string
---@field Target Baz
local Actor = {}

---Moves the actor.
---@param a Vector
---@return boolean
function Actor:Move(a) end

---@enum Color
Color = { Red = 0 }
"""

PAWN_SOURCE = """\
---@class Pawn : Actor
---@field Speed Vector
"""


@pytest.fixture
def store():
    return DatabaseStore()


@pytest.fixture
def built(tmp_path, store):
    actor = tmp_path / "Actor.lua"
    actor.write_text(ACTOR_SOURCE)
    pawn = tmp_path / "Pawn.lua"
    pawn.write_text(PAWN_SOURCE)
    result = build_database([str(actor), str(pawn)], store=store)
    assert result["success"] is True
    return store


def test_read_sources_skips_missing(tmp_path):
    good = tmp_path / "a.lua"
    good.write_text("---@class A\n")

    paths, contents, warnings = read_sources([str(tmp_path / "missing.lua"), str(good)])

    assert paths == [str(good)]
    assert contents == ["---@class A\n"]
    assert "File not found" in warnings[0]


def test_build_database(tmp_path, store):
    path = tmp_path / "Actor.lua"
    path.write_text(ACTOR_SOURCE)

    result = build_database([str(path), str(tmp_path / "nope.lua")], name="game", store=store)

    assert result["success"] is True
    assert result["database"] == "game"
    assert result["stats"]["classes"] == 1
    assert result["stats"]["enums"] == 1
    assert result["stats"]["methods"] == 1
    assert set(result["unresolved"]) == {"Object", "Baz", "Vector"}
    assert result["diagnostics"] == []
    assert "File not found" in result["warnings"][0]
    assert store.load_database("game") is not None


def test_build_database_without_files(store, tmp_path):
    assert build_database([], store=store)["success"] is False

    result = build_database([str(tmp_path / "nope.lua")], store=store)
    assert result["success"] is False
    assert store.list_databases() == []


def test_list_databases(built):
    result = list_databases(store=built)

    assert result["count"] == 1
    assert result["databases"][0]["name"] == "default"
    assert result["databases"][0]["stats"]["classes"] == 2


def test_missing_database(store):
    assert "error" in search_symbols("x", store=store)
    assert "error" in get_symbol(0, store=store)
    assert "error" in get_file_outline(0, store=store)
    assert "error" in get_class_tree(store=store)
    assert "error" in list_unresolved(store=store)
    assert "error" in get_references("x", store=store)


def test_search_symbols(built):
    result = search_symbols("actor", store=built)

    assert result["result_count"] == 1
    top = result["results"][0]
    assert top["name"] == "Actor"
    assert top["kind"] == "Class"
    assert top["score"] == 20
    assert top["file"].endswith("Actor.lua")


def test_search_symbols_kind_and_members(built):
    result = search_symbols("o", kind="Enum", store=built)
    assert [r["name"] for r in result["results"]] == ["Color"]

    result = search_symbols("move", include_members=True, store=built)
    assert result["results"] == []
    assert [m["name"] for m in result["methods"]] == ["Move"]
    assert result["methods"][0]["summary"] == "Moves the actor."


def test_search_symbols_errors(built):
    assert "error" in search_symbols("(", regex=True, store=built)
    assert "error" in search_symbols("a", kind="Bogus", store=built)


def test_get_symbol(built):
    actor_id = search_symbols("Actor", store=built)["results"][0]["id"]
    result = get_symbol(actor_id, store=built)

    assert result["name"] == "Actor"
    assert [p["name"] for p in result["properties"]] == ["Name", "Target"]
    assert result["methods"][0]["params"][0]["name"] == "a"
    assert result["source"].startswith("---@class Actor : Object")
    assert result["source_file"].endswith("Actor.lua")


def test_get_symbols(built):
    actor_id = search_symbols("Actor", store=built)["results"][0]["id"]
    result = get_symbols([actor_id, 10_000], store=built)

    assert len(result["symbols"]) == 1
    assert result["errors"][0]["id"] == 10_000


def test_get_file_outline(built):
    result = get_file_outline("Actor.lua", store=built)

    assert result["file_index"] == 0
    assert [s["name"] for s in result["symbols"]] == ["Actor", "Color"]
    children = result["symbols"][0]["children"]
    assert [(c["kind"], c["name"]) for c in children] == [
        ("property", "Name"),
        ("property", "Target"),
        ("method", "Move"),
    ]
    assert result["symbols"][1]["children"][0]["value"] == "0"


def test_get_file_outline_by_index(built):
    assert get_file_outline(1, store=built)["symbols"][0]["name"] == "Pawn"
    assert "error" in get_file_outline(7, store=built)
    assert "error" in get_file_outline("Other.lua", store=built)


def test_get_class_tree(built):
    result = get_class_tree(store=built)

    (root,) = result["tree"]
    assert root["name"] == "Object"
    assert root["kind"] == "Unknown"
    (actor,) = root["children"]
    assert actor["name"] == "Actor"
    assert [c["name"] for c in actor["children"]] == ["Pawn"]


def test_get_class_tree_rooted(built):
    result = get_class_tree(root="Actor", store=built)

    assert [n["name"] for n in result["tree"]] == ["Actor"]
    assert "error" in get_class_tree(root="Nope", store=built)


def test_list_unresolved(built):
    result = list_unresolved(store=built)

    assert result["count"] == 3
    names = [u["name"] for u in result["unresolved"]]
    assert names == ["Vector", "Baz", "Object"]
    assert result["unresolved"][0]["ref_count"] == 2


def test_get_references(built):
    result = get_references("Vector", store=built)

    assert result["kind"] == "Unknown"
    assert result["ref_count"] == 2
    refs = {(r["kind"], r["name"], r["owner"]) for r in result["references"]}
    assert refs == {("parameter", "Move", "Actor"), ("property", "Speed", "Pawn")}


def test_get_references_by_id(built):
    actor_id = search_symbols("Actor", store=built)["results"][0]["id"]
    result = get_references(actor_id, store=built)

    assert result["name"] == "Actor"
    assert result["references"] == []
    assert "error" in get_references("Nope", store=built)


def test_get_file_outline_function_has_no_children(tmp_path, store):
    path = tmp_path / "Util.lua"
    path.write_text("---Clamps a value.\n---@param x number\n---@return number\nfunction clamp(x) end\n")
    build_database([str(path)], store=store)

    (entry,) = get_file_outline("Util.lua", store=store)["symbols"]

    assert entry["name"] == "clamp"
    assert entry["summary"] == "Clamps a value."
    assert "children" not in entry
