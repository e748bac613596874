"""Reference edges between declarations and the symbols their types mention."""

from .registry import SymbolRegistry
from .symbols import EdgeKind, ReferenceEdge, TypeSignature


class ReferenceTracker:
    """Records referencer -> symbol edges on the registry's symbols."""

    def __init__(self, registry: SymbolRegistry):
        self.registry = registry
        self.edge_count = 0

    def track(self, kind: EdgeKind, referencer_id: int, signature: TypeSignature) -> int:
        """Add an edge to every symbol in the signature's token map.

        Nested container arguments are already merged into `signature.refs`.
        Returns the number of edges that were new.
        """
        edge = ReferenceEdge(referencer_id=referencer_id, kind=kind)
        added = 0
        for symbol_id in dict.fromkeys(signature.refs.values()):
            entry = self.registry.get(symbol_id)
            if entry is not None and entry.add_reference(edge):
                added += 1
        self.edge_count += added
        return added
