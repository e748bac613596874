"""Get the class inheritance tree of a database."""

from typing import Optional

from ..parser import SymbolNode, build_symbol_tree, flatten_tree
from ..storage import DEFAULT_DATABASE, DatabaseStore, StoredDatabase, get_default_store
from ..summarizer import summarize_symbols


def get_class_tree(
    database: str = DEFAULT_DATABASE,
    root: Optional[str] = None,
    store: Optional[DatabaseStore] = None
) -> dict:
    """Get class inheritance tree, optionally rooted at one class.

    Args:
        database: Database name
        root: Optional class name to use as the tree root
        store: Database store

    Returns:
        Dict with hierarchical tree structure
    """
    store = store or get_default_store()
    stored = store.load_database(database)

    if not stored:
        return {"error": f"Database not built: {database}"}

    root_id = None
    if root:
        symbol = stored.database.find(root)
        if symbol is None:
            return {"error": f"Class not found: {root}"}
        root_id = symbol.id

    nodes = build_symbol_tree(stored.database, root_id=root_id)
    summaries = summarize_symbols([s for s, _ in flatten_tree(nodes)])

    return {
        "database": database,
        "root": root,
        "tree": _nodes_to_list(nodes, stored, summaries, set())
    }


def _nodes_to_list(nodes: list[SymbolNode], stored: StoredDatabase, summaries: dict[int, str], seen: set) -> list[dict]:
    """Convert symbol nodes to nested dicts, skipping repeats on cycles."""
    result = []

    for node in nodes:
        if node.symbol.id in seen:
            continue
        seen.add(node.symbol.id)

        entry = {
            "id": node.symbol.id,
            "name": node.symbol.name,
            "kind": node.symbol.kind.value,
            "file": stored.source_name(node.symbol.file),
            "line": node.symbol.line_start,
            "summary": summaries.get(node.symbol.id, ""),
        }
        children = _nodes_to_list(node.children, stored, summaries, seen)
        if children:
            entry["children"] = children
        result.append(entry)

    return result
