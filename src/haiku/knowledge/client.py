import logging
from collections.abc import AsyncIterator
from pathlib import Path

from haiku.knowledge.config import AppConfig, Config
from haiku.knowledge.oracle import Oracle
from haiku.knowledge.store.base import NodeStore
from haiku.knowledge.store.factory import create_store
from haiku.knowledge.store.models import Document, Empty, Heading
from haiku.knowledge.tree.engine import KnowledgeTree
from haiku.knowledge.tree.models import TreeEntry

logger = logging.getLogger(__name__)


class HaikuKnowledge:
    """High-level haiku.knowledge client."""

    def __init__(
        self,
        db_path: Path | None = None,
        config: AppConfig = Config,
        store: NodeStore | None = None,
        oracle: Oracle | None = None,
        create: bool = False,
        read_only: bool = False,
    ):
        """Initialize the client.

        Args:
            db_path: Path to the database. If None, uses config.storage.data_dir.
            config: Configuration to use. Defaults to global Config.
            store: Node store to use instead of the one selected by config.
            oracle: Oracle to use instead of one built from config.oracle.
            create: Whether to create the database if it doesn't exist.
            read_only: Whether to open the database read-only.
        """
        self._config = config
        if store is None:
            store = create_store(
                config, db_path=db_path, create=create, read_only=read_only
            )
        self.store = store
        self.oracle = oracle if oracle is not None else Oracle(app_config=config)
        self.tree = KnowledgeTree(self.store, self.oracle, config.tree)

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):  # noqa: ARG002
        """Async context manager exit."""
        self.close()
        return False

    async def find(self, query: str) -> Document | None:
        """Find the document most likely to answer ``query``."""
        return await self.tree.find(query)

    async def update(self, query: str) -> str:
        """Add, remove or edit knowledge as described by ``query``.

        Returns:
            Short description of the change.
        """
        description = await self.tree.update(query)
        logger.debug(f"Update applied: {description}")
        return description

    async def get_node(self, node_id: int) -> Document | Heading | Empty:
        return await self.store.get(node_id)

    async def walk(self) -> AsyncIterator[TreeEntry]:
        async for entry in self.tree.walk():
            yield entry

    def close(self):
        """Close the underlying store."""
        self.store.close()
