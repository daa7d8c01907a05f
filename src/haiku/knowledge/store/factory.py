from pathlib import Path

from haiku.knowledge.config import AppConfig, Config
from haiku.knowledge.store.base import NodeStore
from haiku.knowledge.store.memory import InMemoryNodeStore


def create_store(
    config: AppConfig = Config,
    db_path: Path | None = None,
    create: bool = False,
    read_only: bool = False,
) -> NodeStore:
    """Create the node store selected by ``config.storage.backend``."""
    if config.storage.backend == "memory":
        return InMemoryNodeStore()

    from haiku.knowledge.store.engine import LanceNodeStore

    if db_path is None:
        db_path = config.storage.data_dir / "haiku.knowledge.lancedb"
    return LanceNodeStore(db_path, create=create, read_only=read_only)
