"""Get symbol details and declaration source."""

from typing import Optional

from ..storage import DEFAULT_DATABASE, DatabaseStore, StoredDatabase, get_default_store, symbol_to_dict
from ..summarizer import summarize


def get_symbol(
    symbol_id: int,
    database: str = DEFAULT_DATABASE,
    store: Optional[DatabaseStore] = None
) -> dict:
    """Get a symbol with its members and the lines it was declared on.

    Args:
        symbol_id: Symbol ID from search_symbols or get_file_outline
        database: Database name
        store: Database store

    Returns:
        Dict with symbol details and declaration source
    """
    store = store or get_default_store()
    stored = store.load_database(database)

    if not stored:
        return {"error": f"Database not built: {database}"}

    symbol = stored.database.get(symbol_id)

    if not symbol:
        return {"error": f"Symbol not found: {symbol_id}"}

    return _symbol_details(stored, symbol)


def get_symbols(
    symbol_ids: list[int],
    database: str = DEFAULT_DATABASE,
    store: Optional[DatabaseStore] = None
) -> dict:
    """Get details of multiple symbols.

    Args:
        symbol_ids: List of symbol IDs
        database: Database name
        store: Database store

    Returns:
        Dict with symbols list and any errors
    """
    store = store or get_default_store()
    stored = store.load_database(database)

    if not stored:
        return {"error": f"Database not built: {database}"}

    symbols = []
    errors = []

    for symbol_id in symbol_ids:
        symbol = stored.database.get(symbol_id)

        if not symbol:
            errors.append({"id": symbol_id, "error": f"Symbol not found: {symbol_id}"})
            continue

        symbols.append(_symbol_details(stored, symbol))

    return {
        "symbols": symbols,
        "errors": errors
    }


def _symbol_details(stored: StoredDatabase, symbol) -> dict:
    result = symbol_to_dict(symbol)
    result["source_file"] = stored.source_name(symbol.file)
    result["summary"] = summarize(symbol)
    result["source"] = "\n".join(
        stored.database.lines_of(symbol.file, symbol.line_start, symbol.line_end)
    )
    return result
