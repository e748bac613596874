"""Search symbols across a built database."""

from typing import Optional

from ..parser import SymbolKind
from ..storage import DEFAULT_DATABASE, DatabaseStore, get_default_store
from ..summarizer import summarize


KIND_NAMES = {kind.value: kind for kind in SymbolKind}


def search_symbols(
    query: str,
    database: str = DEFAULT_DATABASE,
    kind: Optional[str] = None,
    regex: bool = False,
    include_members: bool = False,
    max_results: int = 20,
    store: Optional[DatabaseStore] = None
) -> dict:
    """Search for symbols (and optionally members) whose names match a query.

    Args:
        query: Substring (case-insensitive) or regular expression
        database: Database name
        kind: Optional filter by symbol kind ("Class", "Enum", "Alias", "GlobalFunction", "Unknown")
        regex: Treat query as a regular expression
        include_members: Also search properties, methods and parameters
        max_results: Maximum results per category
        store: Database store

    Returns:
        Dict with search results
    """
    store = store or get_default_store()
    stored = store.load_database(database)

    if not stored:
        return {"error": f"Database not built: {database}"}

    kinds = None
    if kind:
        if kind not in KIND_NAMES:
            return {"error": f"Unknown symbol kind: {kind}"}
        kinds = [KIND_NAMES[kind]]

    try:
        found = stored.database.search(query, kinds=kinds, regex=regex, include_members=include_members)
    except ValueError as e:
        return {"error": str(e)}

    query_lower = query.lower()
    ranked = sorted(
        found.symbols,
        key=lambda s: (-_calculate_score(s.name, query_lower, regex), s.name.lower(), s.id),
    )

    results = []
    for sym in ranked[:max_results]:
        results.append({
            "id": sym.id,
            "kind": sym.kind.value,
            "name": sym.name,
            "file": stored.source_name(sym.file),
            "line": sym.line_start,
            "summary": summarize(sym),
            "score": _calculate_score(sym.name, query_lower, regex),
        })

    response = {
        "database": database,
        "query": query,
        "result_count": len(results),
        "results": results
    }

    if include_members:
        response["properties"] = [
            {"id": p.id, "parent": p.parent, "name": p.name, "type": p.raw_type}
            for p in found.properties[:max_results]
        ]
        response["methods"] = [
            {"id": m.id, "parent": m.parent, "name": m.name, "summary": summarize(m)}
            for m in found.methods[:max_results]
        ]
        response["parameters"] = [
            {"id": p.id, "parent": p.parent, "name": p.name, "type": p.raw_type}
            for p in found.parameters[:max_results]
        ]

    return response


def _calculate_score(name: str, query_lower: str, regex: bool) -> int:
    """Calculate search score for a symbol name."""
    if regex:
        return 1

    name_lower = name.lower()

    # Exact name match (highest weight)
    if query_lower == name_lower:
        return 20

    # Prefix match
    if name_lower.startswith(query_lower):
        return 15

    return 10
