from haiku.knowledge.store.base import NodeStore
from haiku.knowledge.store.models import Document, Empty, Heading


class InMemoryNodeStore(NodeStore):
    """Dict-backed node store, used for tests and throwaway trees."""

    def __init__(
        self,
        nodes: dict[int, Document | Heading] | None = None,
        next_id: int | None = None,
    ) -> None:
        self._nodes: dict[int, Document | Heading] = {
            node_id: node.model_copy(deep=True)
            for node_id, node in (nodes or {}).items()
        }
        # Seeded ids must never be handed out again
        if next_id is None:
            next_id = max(self._nodes, default=0) + 1
        self._next_id = next_id

    async def generate_id(self) -> int:
        node_id = self._next_id
        self._next_id += 1
        return node_id

    async def get(self, node_id: int) -> Document | Heading | Empty:
        node = self._nodes.get(node_id)
        if node is None:
            return Empty(id=node_id)
        return node.model_copy(deep=True)

    async def set(self, node: Document | Heading | Empty) -> None:
        if isinstance(node, Empty):
            self._nodes.pop(node.id, None)
            return
        self._nodes[node.id] = node.model_copy(deep=True)

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes
