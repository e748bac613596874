"""Tests for summarizer module."""

from luatypes_mcp.parser import build_database
from luatypes_mcp.summarizer import (
    extract_summary_from_description,
    signature_fallback,
    summarize,
    summarize_symbols,
)


SOURCE = """\
---@class Widget : Panel
---@field Title string

---Shows the widget. Does nothing when hidden.
---@param animate boolean
function Widget:Show(animate) end

---@enum Align
Align = { Left = 0, Right = 1 }

---@alias Size "small" | "large"

function layout(a, b) end
"""


def test_extract_summary_from_description():
    """Test first sentence extraction."""
    assert extract_summary_from_description("Shows the widget. More text.") == "Shows the widget."
    assert extract_summary_from_description("Single line") == "Single line"
    assert extract_summary_from_description("First line\nSecond line") == "First line"
    assert extract_summary_from_description("") == ""


def test_signature_fallback():
    db = build_database([SOURCE])

    assert signature_fallback(db.find("Widget")) == "Class Widget (1 properties, 1 methods, has parent)"
    assert signature_fallback(db.find("Align")) == "Enum Align (2 values)"
    assert signature_fallback(db.find("Size")) == 'Alias Size = "small" | "large"'
    assert signature_fallback(db.find("layout")) == "function layout(a, b) end"
    assert signature_fallback(db.unresolved[0]) == "Undeclared type Panel"


def test_summarize_prefers_description():
    db = build_database([SOURCE])
    show = db.find("Widget").methods[0]

    assert summarize(show) == "Shows the widget."
    assert summarize(db.find("layout")) == "function layout(a, b) end"


def test_summarize_symbols():
    db = build_database([SOURCE])
    summaries = summarize_symbols(list(db.symbols))

    assert set(summaries) == {s.id for s in db.symbols}
    assert summaries[db.find("Align").id] == "Enum Align (2 values)"


def test_summarize_symbols_without_descriptions():
    db = build_database([SOURCE])

    assert summarize(db.find("Size")) == 'Alias Size = "small" | "large"'
    assert summarize(db.find("Widget")) == "Class Widget (1 properties, 1 methods, has parent)"
    assert summarize(db.unresolved[0]) == "Undeclared type Panel"
