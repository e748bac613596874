"""Tests for storage module."""

import json

from luatypes_mcp.parser import build_database
from luatypes_mcp.storage import DatabaseStore, get_default_store, symbol_to_dict


SOURCE = """\
---@class Door
---@field Locked boolean
---@field Key Key?

---@param by Player
---@return boolean
function Door:Open(by) end

---@alias DoorState "open" | "closed"
"""


def test_save_and_load_database():
    store = DatabaseStore()
    database = build_database([SOURCE])

    stored = store.save_database("doors", ["/tmp/Door.lua"], database)

    assert store.load_database("doors") is stored
    assert stored.sources == ("/tmp/Door.lua",)
    assert stored.source_name(0) == "/tmp/Door.lua"
    assert stored.source_name(3) == "3"
    assert store.load_database("other") is None


def test_list_and_delete():
    store = DatabaseStore()
    store.save_database("a", [], build_database([]))
    store.save_database("b", [], build_database([SOURCE]))

    assert [d["name"] for d in store.list_databases()] == ["a", "b"]
    assert store.delete_database("a") is True
    assert store.delete_database("a") is False
    assert [d["name"] for d in store.list_databases()] == ["b"]


def test_default_store_is_shared():
    assert get_default_store() is get_default_store()


def test_symbol_to_dict_is_json_serializable():
    database = build_database([SOURCE])
    door = symbol_to_dict(database.find("Door"))

    json.dumps(door)
    assert door["kind"] == "Class"
    assert door["properties"][1]["signature"]["kind"] == "optional"
    assert door["properties"][1]["signature"]["optional"] is True
    method = door["methods"][0]
    assert method["params"][0]["type"] == "Player"
    assert method["returns"]["name"] == "boolean"
    assert method["extra_returns"] == []

    alias = symbol_to_dict(database.find("DoorState"))
    assert alias["values"] == ['"open" | "closed"']
    assert alias["signatures"][0]["kind"] == "union"


def test_symbol_to_dict_header_only():
    database = build_database([SOURCE])
    door = symbol_to_dict(database.find("Door"), members=False)

    assert "properties" not in door
    assert door["ref_count"] == 0
