from abc import ABC, abstractmethod

from haiku.knowledge.store.models import Document, Empty, Heading


class NodeStore(ABC):
    """Key-addressed persistence for tree nodes.

    Absent ids read back as ``Empty`` nodes and writing an ``Empty`` node
    deletes. Batched operations apply each item independently; there is no
    atomicity across items.
    """

    @abstractmethod
    async def generate_id(self) -> int:
        """Return a fresh id, greater than every id issued before."""

    @abstractmethod
    async def get(self, node_id: int) -> Document | Heading | Empty:
        """Return the node stored under ``node_id`` or an ``Empty`` node."""

    @abstractmethod
    async def set(self, node: Document | Heading | Empty) -> None:
        """Upsert ``node``; an ``Empty`` node deletes its id."""

    async def get_many(self, node_ids: list[int]) -> list[Document | Heading | Empty]:
        return [await self.get(node_id) for node_id in node_ids]

    async def set_many(self, nodes: list[Document | Heading | Empty]) -> None:
        for node in nodes:
            await self.set(node)

    def close(self) -> None:  # noqa: B027
        """Release backend resources."""
