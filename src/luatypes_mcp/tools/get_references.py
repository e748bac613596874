"""Find where a symbol is referenced."""

from typing import Optional, Union

from ..parser import Member, Method, SymbolKind
from ..storage import DEFAULT_DATABASE, DatabaseStore, get_default_store


def get_references(
    symbol: Union[int, str],
    database: str = DEFAULT_DATABASE,
    store: Optional[DatabaseStore] = None
) -> dict:
    """List the properties, parameters, methods and functions that reference a symbol.

    Args:
        symbol: Symbol ID or exact name
        database: Database name
        store: Database store

    Returns:
        Dict with the symbol and its referencers
    """
    store = store or get_default_store()
    stored = store.load_database(database)

    if not stored:
        return {"error": f"Database not built: {database}"}

    db = stored.database
    if isinstance(symbol, int):
        target = db.get(symbol)
    else:
        target = db.find(symbol) or db.find(symbol, SymbolKind.UNKNOWN)

    if target is None:
        return {"error": f"Symbol not found: {symbol}"}

    references = []
    for edge, referencer in db.referencers(target.id):
        entry = {
            "kind": edge.kind.value,
            "referencer_id": edge.referencer_id,
            "name": referencer.name,
        }
        if isinstance(referencer, (Member, Method)):
            owner = db.get(referencer.parent) or db.method_map.get(referencer.parent)
            entry["owner"] = owner.name if owner is not None else None
            entry["file"] = stored.source_name(referencer.file)
            entry["line"] = referencer.line
        else:
            entry["file"] = stored.source_name(referencer.file)
            entry["line"] = referencer.line_start
        references.append(entry)

    return {
        "database": database,
        "id": target.id,
        "name": target.name,
        "kind": target.kind.value,
        "ref_count": target.ref_count,
        "references": references
    }