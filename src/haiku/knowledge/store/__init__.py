from haiku.knowledge.store.base import NodeStore
from haiku.knowledge.store.exceptions import ReadOnlyError
from haiku.knowledge.store.factory import create_store
from haiku.knowledge.store.memory import InMemoryNodeStore

__all__ = ["InMemoryNodeStore", "NodeStore", "ReadOnlyError", "create_store"]
