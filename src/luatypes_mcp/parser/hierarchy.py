"""Build class inheritance trees from a symbol database."""

from dataclasses import dataclass, field
from typing import Optional

from .database import SymbolDatabase
from .symbols import Symbol, SymbolKind


@dataclass
class SymbolNode:
    """A node in the inheritance tree with its subclasses."""
    symbol: Symbol
    children: list["SymbolNode"] = field(default_factory=list)


def build_symbol_tree(database: SymbolDatabase, root_id: Optional[int] = None) -> list[SymbolNode]:
    """Build the class inheritance forest.

    Roots are classes without a parent plus any parent that is not a
    declared class (e.g. an unresolved name), so every class appears once.
    With `root_id`, only the subtree under that symbol is returned.
    """
    node_map = {}
    for cls in database.classes:
        node_map[cls.id] = SymbolNode(symbol=cls)

    roots = []
    for cls in database.classes:
        node = node_map[cls.id]
        if cls.parent is None:
            roots.append(node)
            continue
        if cls.parent not in node_map:
            parent = database.get(cls.parent)
            if parent is None:
                roots.append(node)
                continue
            node_map[cls.parent] = SymbolNode(symbol=parent)
            roots.append(node_map[cls.parent])
        node_map[cls.parent].children.append(node)

    if root_id is not None:
        return [node_map[root_id]] if root_id in node_map else []

    # Classes on a parent cycle are unreachable from any root
    reached = {s.id for s, _ in flatten_tree(roots)}
    for cls in database.classes:
        if cls.id not in reached:
            roots.append(node_map[cls.id])
            reached.update(s.id for s, _ in flatten_tree([node_map[cls.id]]))
    return roots


def flatten_tree(nodes: list[SymbolNode], depth: int = 0, seen: Optional[set] = None) -> list[tuple[Symbol, int]]:
    """Flatten symbol tree with depth information.

    Returns list of (symbol, depth) tuples for indentation.
    """
    if seen is None:
        seen = set()
    result = []
    for node in nodes:
        if node.symbol.id in seen:
            continue
        seen.add(node.symbol.id)
        result.append((node.symbol, depth))
        result.extend(flatten_tree(node.children, depth + 1, seen))
    return result


def ancestors(database: SymbolDatabase, class_id: int) -> list[Symbol]:
    """Parent chain of a class, nearest first; stops on cycles."""
    chain = []
    seen = {class_id}
    symbol = database.get(class_id)
    while symbol is not None and symbol.kind == SymbolKind.CLASS and symbol.parent is not None:
        if symbol.parent in seen:
            break
        seen.add(symbol.parent)
        symbol = database.get(symbol.parent)
        if symbol is None:
            break
        chain.append(symbol)
    return chain
