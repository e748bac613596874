"""Get file outline - symbols declared in a specific file."""

from typing import Optional, Union

from ..parser import ClassSymbol, EnumSymbol
from ..storage import DEFAULT_DATABASE, DatabaseStore, get_default_store
from ..summarizer import summarize


def get_file_outline(
    file: Union[int, str],
    database: str = DEFAULT_DATABASE,
    store: Optional[DatabaseStore] = None
) -> dict:
    """Get symbols declared in a file, in line order, with their members.

    Args:
        file: File index or path as given to build_database
        database: Database name
        store: Database store

    Returns:
        Dict with symbols outline
    """
    store = store or get_default_store()
    stored = store.load_database(database)

    if not stored:
        return {"error": f"Database not built: {database}"}

    file_index = _resolve_file(stored.sources, file)
    if file_index is None:
        return {"error": f"File not in database: {file}"}

    file_symbols = [s for s in stored.database.symbols if s.file == file_index]
    file_symbols.sort(key=lambda s: (s.line_start, s.id))

    return {
        "database": database,
        "file": stored.source_name(file_index),
        "file_index": file_index,
        "symbols": [_outline_entry(s) for s in file_symbols]
    }


def _resolve_file(sources: tuple[str, ...], file: Union[int, str]) -> Optional[int]:
    """Map a file index, exact path or path suffix to a file index."""
    if isinstance(file, int) or (isinstance(file, str) and file.isdigit()):
        index = int(file)
        return index if 0 <= index < len(sources) else None

    for i, source in enumerate(sources):
        if source == file:
            return i
    for i, source in enumerate(sources):
        if source.endswith("/" + file) or source.endswith("\\" + file):
            return i
    return None


def _outline_entry(symbol) -> dict:
    """Convert a symbol to an outline node with member children."""
    result = {
        "id": symbol.id,
        "kind": symbol.kind.value,
        "name": symbol.name,
        "summary": summarize(symbol),
        "line": symbol.line_start,
        "end_line": symbol.line_end,
    }

    children = []
    if isinstance(symbol, ClassSymbol):
        for prop in symbol.properties:
            children.append({"id": prop.id, "kind": "property", "name": prop.name, "type": prop.raw_type, "line": prop.line})
        for method in symbol.methods:
            children.append({"id": method.id, "kind": "method", "name": method.name, "summary": summarize(method), "line": method.line})
    if isinstance(symbol, EnumSymbol):
        for value in symbol.values:
            children.append({"id": value.id, "kind": "enum-value", "name": value.name, "value": value.value, "line": value.line})

    if children:
        result["children"] = children

    return result
