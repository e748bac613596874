"""In-process database store and JSON serialization of symbols."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..parser.database import SymbolDatabase
from ..parser.symbols import (
    AliasSymbol,
    ClassSymbol,
    Diagnostic,
    EnumSymbol,
    FunctionSymbol,
    Member,
    Method,
    Symbol,
    TypeSignature,
)


logger = logging.getLogger(__name__)

DEFAULT_DATABASE = "default"


@dataclass(frozen=True)
class StoredDatabase:
    """A built database and where it came from."""
    name: str
    built_at: str                # ISO timestamp
    sources: tuple[str, ...]     # File paths, indexed like Symbol.file
    database: SymbolDatabase

    def source_name(self, file: int) -> str:
        if 0 <= file < len(self.sources):
            return self.sources[file]
        return str(file)


class DatabaseStore:
    """Keeps built databases in memory, keyed by name.

    Databases are rebuilt from the declaration files on every
    `build_database` call; nothing is written to disk.
    """

    def __init__(self):
        self._databases: dict[str, StoredDatabase] = {}

    def save_database(self, name: str, sources: list[str], database: SymbolDatabase) -> StoredDatabase:
        stored = StoredDatabase(
            name=name,
            built_at=datetime.now().isoformat(),
            sources=tuple(sources),
            database=database,
        )
        self._databases[name] = stored
        logger.info("Stored database %r (%d files)", name, len(sources))
        return stored

    def load_database(self, name: str = DEFAULT_DATABASE) -> Optional[StoredDatabase]:
        return self._databases.get(name)

    def list_databases(self) -> list[dict]:
        databases = []
        for stored in self._databases.values():
            databases.append({
                "name": stored.name,
                "built_at": stored.built_at,
                "sources": list(stored.sources),
                "stats": stored.database.stats(),
            })
        return databases

    def delete_database(self, name: str) -> bool:
        return self._databases.pop(name, None) is not None


_default_store: Optional[DatabaseStore] = None


def get_default_store() -> DatabaseStore:
    """Process-wide store shared by the server's tool calls."""
    global _default_store
    if _default_store is None:
        _default_store = DatabaseStore()
    return _default_store


def signature_to_dict(signature: TypeSignature) -> dict:
    result = {
        "raw": signature.raw,
        "kind": signature.kind.value,
        "name": signature.name,
        "optional": signature.is_optional,
        "refs": dict(signature.refs),
    }
    if signature.subtypes:
        result["subtypes"] = [signature_to_dict(s) for s in signature.subtypes]
    return result


def member_to_dict(member: Member) -> dict:
    result = {
        "id": member.id,
        "kind": member.kind.value,
        "parent": member.parent,
        "name": member.name,
        "type": member.raw_type,
        "signature": signature_to_dict(member.signature),
        "file": member.file,
        "line": member.line,
    }
    if member.value is not None:
        result["value"] = member.value
    return result


def method_to_dict(method: Method) -> dict:
    return {
        "id": method.id,
        "parent": method.parent,
        "name": method.name,
        "signature": method.signature,
        "description": method.description,
        "params": [member_to_dict(p) for p in method.params],
        "returns": signature_to_dict(method.returns),
        "extra_returns": [signature_to_dict(s) for s in method.extra_returns],
        "file": method.file,
        "line": method.line,
    }


def diagnostic_to_dict(diagnostic: Diagnostic) -> dict:
    return {
        "code": diagnostic.code,
        "message": diagnostic.message,
        "file": diagnostic.file,
        "line": diagnostic.line,
    }


def symbol_to_dict(symbol: Symbol, members: bool = True) -> dict:
    """Convert a symbol to a JSON-able dict; `members=False` keeps only the header."""
    result = {
        "id": symbol.id,
        "name": symbol.name,
        "kind": symbol.kind.value,
        "file": symbol.file,
        "line_start": symbol.line_start,
        "line_end": symbol.line_end,
        "ref_count": symbol.ref_count,
    }

    if isinstance(symbol, ClassSymbol):
        result["parent"] = symbol.parent
        result["children"] = list(symbol.children)
        if members:
            result["properties"] = [member_to_dict(p) for p in symbol.properties]
            result["methods"] = [method_to_dict(m) for m in symbol.methods]
    elif isinstance(symbol, EnumSymbol):
        if members:
            result["values"] = [{"name": v.name, "value": v.value} for v in symbol.values]
    elif isinstance(symbol, AliasSymbol):
        result["values"] = list(symbol.values)
        if members:
            result["signatures"] = [signature_to_dict(s) for s in symbol.signatures]
    elif isinstance(symbol, FunctionSymbol):
        result["signature"] = symbol.signature
        result["description"] = symbol.description
        if members:
            result["params"] = [member_to_dict(p) for p in symbol.params]
            result["returns"] = signature_to_dict(symbol.returns) if symbol.returns else None
            result["extra_returns"] = [signature_to_dict(s) for s in symbol.extra_returns]

    return result
