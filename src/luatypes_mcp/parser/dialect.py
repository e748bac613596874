"""Annotation dialect definitions: marker patterns and type vocabulary."""

import re
from dataclasses import dataclass, field
from typing import Optional


NAME = r"[A-Za-z_][A-Za-z0-9_]*"


@dataclass
class DialectSpec:
    """Specification of a comment-annotation dialect."""
    # Top-level markers in priority order: first match wins.
    # Each pattern exposes the named groups its block parser needs.
    markers: list[tuple[str, re.Pattern]]

    # Markers only recognized inside a block parser's own sub-scan
    field_pattern: re.Pattern
    param_pattern: re.Pattern
    return_pattern: re.Pattern
    alias_option_pattern: re.Pattern
    enum_value_pattern: re.Pattern

    # Lines the backward parameter/return scan walks through without stopping
    doc_comment_pattern: re.Pattern
    modifier_pattern: re.Pattern

    # Type vocabulary
    primitive_types: frozenset[str]
    array_containers: frozenset[str]
    map_containers: frozenset[str]
    set_containers: frozenset[str]
    function_prefix: str = "fun("
    void_type: str = "void"
    nil_type: str = "nil"

    # Names that never count as method parameters (e.g. implicit self)
    implicit_params: frozenset[str] = field(default_factory=frozenset)

    def classify_line(self, line: str) -> Optional[tuple[str, re.Match]]:
        """Return (marker name, match) for the first top-level marker matching `line`."""
        for name, pattern in self.markers:
            match = pattern.match(line)
            if match:
                return name, match
        return None

    def is_top_level(self, line: str) -> bool:
        return self.classify_line(line) is not None


CLASS_MARKER = "class"
ENUM_MARKER = "enum"
ALIAS_MARKER = "alias"
METHOD_MARKER = "method"
FUNCTION_MARKER = "function"

# Markers that close a class or complex alias block
BLOCK_TERMINATORS = frozenset({CLASS_MARKER, ENUM_MARKER, ALIAS_MARKER, FUNCTION_MARKER})


PRIMITIVE_TYPES = frozenset({
    # Lua / LuaLS builtins
    "any", "nil", "boolean", "bool", "number", "integer", "string",
    "table", "function", "thread", "userdata", "lightuserdata", "unknown",
    "self", "void",

    # Sized numeric types
    "int", "int8", "int16", "int32", "int64",
    "uint8", "uint16", "uint32", "uint64",
    "int8_t", "int16_t", "int32_t", "int64_t",
    "uint8_t", "uint16_t", "uint32_t", "uint64_t",
    "size_t", "ssize_t", "byte", "float", "double", "char", "wchar",

    # Unreal Engine string types
    "FName", "FText", "FString",
})


LUA_ANNOTATIONS = DialectSpec(
    markers=[
        (CLASS_MARKER, re.compile(
            rf"^---@class\s+(?:\([a-z]+\)\s*)?(?P<name>{NAME}(?:\.{NAME})*)"
            rf"(?:\s*:\s*(?P<parent>{NAME}(?:\.{NAME})*))?"
        )),
        (ENUM_MARKER, re.compile(
            rf"^---@enum\s+(?:\([a-z]+\)\s*)?(?P<name>{NAME}(?:\.{NAME})*)"
        )),
        (ALIAS_MARKER, re.compile(
            rf"^---@alias\s+(?P<name>{NAME}(?:\.{NAME})*)(?:\s+(?P<type>\S.*?))?\s*$"
        )),
        (METHOD_MARKER, re.compile(
            rf"^\s*function\s+(?P<owner>{NAME}(?:\.{NAME})*)(?P<sep>[:.])(?P<name>{NAME})"
            r"\s*\((?P<args>[^)]*)\)"
        )),
        (FUNCTION_MARKER, re.compile(
            rf"^\s*function\s+(?P<name>{NAME})\s*\((?P<args>[^)]*)\)"
        )),
    ],
    field_pattern=re.compile(
        rf"^---@field\s+(?:(?:public|private|protected|package)\s+)?"
        rf"(?P<name>{NAME})(?P<optional>\?)?(?:\s+|$)"
    ),
    param_pattern=re.compile(
        rf"^\s*---@param\s+(?P<name>{NAME}|\.\.\.)(?P<optional>\?)?(?:\s+|$)"
    ),
    return_pattern=re.compile(r"^\s*---@return(?:\s+|$)"),
    alias_option_pattern=re.compile(r"^---\|[>+]?\s*(?P<option>.*?)\s*(?:#.*)?$"),
    enum_value_pattern=re.compile(
        rf"^\s*(?:\[\s*[\"'](?P<qname>[^\"']+)[\"']\s*\]|(?P<name>{NAME}))\s*=\s*"
        r"(?P<value>[^,{}]+?)\s*,?\s*(?:--.*)?$"
    ),
    doc_comment_pattern=re.compile(r"^\s*---(?!@|\|)(?P<text>.*)$"),
    modifier_pattern=re.compile(
        r"^\s*---@(?:nodiscard|deprecated|async|overload|see|generic)\b"
    ),
    primitive_types=PRIMITIVE_TYPES,
    array_containers=frozenset({"TArray", "Array", "array", "List", "list"}),
    map_containers=frozenset({"TMap", "Map", "map", "table", "Dictionary"}),
    set_containers=frozenset({"TSet", "Set", "set"}),
    implicit_params=frozenset({"self"}),
)


DIALECT_REGISTRY = {
    "lua": LUA_ANNOTATIONS,
}
