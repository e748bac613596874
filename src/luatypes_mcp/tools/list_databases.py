"""List built databases."""

from typing import Optional

from ..storage import DatabaseStore, get_default_store


def list_databases(store: Optional[DatabaseStore] = None) -> dict:
    """List all databases built in this process.

    Returns:
        Dict with count and list of databases
    """
    store = store or get_default_store()
    databases = store.list_databases()

    return {
        "count": len(databases),
        "databases": databases
    }
