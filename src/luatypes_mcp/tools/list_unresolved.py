"""List names that were referenced but never declared."""

from typing import Optional

from ..storage import DEFAULT_DATABASE, DatabaseStore, get_default_store


def list_unresolved(
    database: str = DEFAULT_DATABASE,
    store: Optional[DatabaseStore] = None
) -> dict:
    """List unresolved type names, most referenced first.

    Args:
        database: Database name
        store: Database store

    Returns:
        Dict with count and unresolved names with their reference counts
    """
    store = store or get_default_store()
    stored = store.load_database(database)

    if not stored:
        return {"error": f"Database not built: {database}"}

    unresolved = sorted(stored.database.unresolved, key=lambda s: (-s.ref_count, s.name))

    return {
        "database": database,
        "count": len(unresolved),
        "unresolved": [
            {
                "id": s.id,
                "name": s.name,
                "ref_count": s.ref_count,
                "first_seen": f"{stored.source_name(s.file)}:{s.line_start}",
            }
            for s in unresolved
        ]
    }
