"""Parser package for building symbol databases from annotation files."""

from .symbols import (
    AliasSymbol,
    ClassSymbol,
    Diagnostic,
    EdgeKind,
    EnumSymbol,
    FunctionSymbol,
    Member,
    MemberKind,
    Method,
    NameEntry,
    ReferenceEdge,
    SignatureKind,
    Symbol,
    SymbolKind,
    TypeSignature,
)
from .dialect import DialectSpec, DIALECT_REGISTRY, LUA_ANNOTATIONS
from .registry import DiagnosticLog, SymbolRegistry
from .references import ReferenceTracker
from .signatures import SignatureParser, extract_type, split_return_values, split_top_level
from .database import SearchResult, SymbolDatabase, assemble_database
from .extractor import TypeExtractor, build_database, split_lines
from .hierarchy import SymbolNode, build_symbol_tree, flatten_tree, ancestors

__all__ = [
    "AliasSymbol",
    "ClassSymbol",
    "Diagnostic",
    "EdgeKind",
    "EnumSymbol",
    "FunctionSymbol",
    "Member",
    "MemberKind",
    "Method",
    "NameEntry",
    "ReferenceEdge",
    "SignatureKind",
    "Symbol",
    "SymbolKind",
    "TypeSignature",
    "DialectSpec",
    "DIALECT_REGISTRY",
    "LUA_ANNOTATIONS",
    "DiagnosticLog",
    "SymbolRegistry",
    "ReferenceTracker",
    "SignatureParser",
    "extract_type",
    "split_return_values",
    "split_top_level",
    "SearchResult",
    "SymbolDatabase",
    "assemble_database",
    "TypeExtractor",
    "build_database",
    "split_lines",
    "SymbolNode",
    "build_symbol_tree",
    "flatten_tree",
    "ancestors",
]
