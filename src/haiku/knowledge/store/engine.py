import json
import logging
from pathlib import Path

import lancedb
from lancedb.pydantic import LanceModel
from pydantic import Field

from haiku.knowledge.store.base import NodeStore
from haiku.knowledge.store.exceptions import ReadOnlyError
from haiku.knowledge.store.models import Document, Empty, Heading, HeadingRef

logger = logging.getLogger(__name__)


class NodeRecord(LanceModel):
    id: int
    kind: str
    parent_id: int | None = None
    content: str = Field(default="")
    refs: str = Field(default="[]")


class SettingsRecord(LanceModel):
    id: str = Field(default="settings")
    settings: str = Field(default="{}")


def _to_record(node: Document | Heading) -> NodeRecord:
    if isinstance(node, Document):
        return NodeRecord(
            id=node.id,
            kind=node.kind,
            parent_id=node.parent_id,
            content=node.content,
        )
    return NodeRecord(
        id=node.id,
        kind=node.kind,
        parent_id=node.parent_id,
        refs=json.dumps([ref.model_dump() for ref in node.refs]),
    )


def _from_record(record: NodeRecord) -> Document | Heading:
    if record.kind == "document":
        return Document(
            id=record.id, content=record.content, parent_id=record.parent_id
        )
    if record.kind == "heading":
        return Heading(
            id=record.id,
            refs=[HeadingRef.model_validate(ref) for ref in json.loads(record.refs)],
            parent_id=record.parent_id,
        )
    raise ValueError(f"Unknown node kind '{record.kind}' for node {record.id}")


class LanceNodeStore(NodeStore):
    """Node store persisted in a LanceDB database.

    Nodes live in the ``nodes`` table, one row per id. The id allocator is kept
    in the ``settings`` table so ids are never reused across restarts.
    """

    def __init__(
        self,
        db_path: Path,
        create: bool = False,
        read_only: bool = False,
    ):
        self.db_path: Path = db_path
        self._read_only = read_only

        if not db_path.exists() and not create:
            raise FileNotFoundError(
                f"Database {db_path} does not exist. Use create=True to create it."
            )
        if read_only and create:
            raise ValueError("Cannot create a database in read-only mode")

        self.db = lancedb.connect(db_path)
        self.create_or_update_db()

    @property
    def is_read_only(self) -> bool:
        return self._read_only

    def _assert_writable(self) -> None:
        if self._read_only:
            raise ReadOnlyError("Cannot modify database in read-only mode")

    def _table_names(self) -> list[str]:
        return list(self.db.list_tables().tables)

    def create_or_update_db(self):
        """Open the tables, creating them when missing."""
        existing_tables = self._table_names()

        if "nodes" in existing_tables:
            self.nodes_table = self.db.open_table("nodes")
        else:
            self._assert_writable()
            self.nodes_table = self.db.create_table("nodes", schema=NodeRecord)

        if "settings" in existing_tables:
            self.settings_table = self.db.open_table("settings")
        else:
            self._assert_writable()
            self.settings_table = self.db.create_table(
                "settings", schema=SettingsRecord
            )
            self.settings_table.add(
                [SettingsRecord(settings=json.dumps({"next_id": 1}))]
            )

    def _get_settings(self) -> dict | None:
        results = list(
            self.settings_table.search()
            .where("id = 'settings'")
            .limit(1)
            .to_pydantic(SettingsRecord)
        )
        if not results:
            return None
        return json.loads(results[0].settings) if results[0].settings else {}

    def _restore_settings(self) -> dict:
        # Resume after the highest stored id so no id is handed out twice
        ids = self.nodes_table.to_arrow().column("id").to_pylist()
        settings = {"next_id": max(ids, default=0) + 1}
        self.settings_table.add([SettingsRecord(settings=json.dumps(settings))])
        logger.warning(
            f"Settings row was missing, restored id counter at {settings['next_id']}"
        )
        return settings

    async def generate_id(self) -> int:
        self._assert_writable()
        settings = self._get_settings()
        if settings is None:
            settings = self._restore_settings()
        node_id = settings.get("next_id", 1)
        settings["next_id"] = node_id + 1
        self.settings_table.update(
            where="id = 'settings'", values={"settings": json.dumps(settings)}
        )
        return node_id

    async def get(self, node_id: int) -> Document | Heading | Empty:
        results = list(
            self.nodes_table.search()
            .where(f"id = {int(node_id)}")
            .limit(1)
            .to_pydantic(NodeRecord)
        )
        if not results:
            return Empty(id=node_id)
        return _from_record(results[0])

    async def get_many(self, node_ids: list[int]) -> list[Document | Heading | Empty]:
        if not node_ids:
            return []

        id_list = ", ".join(str(int(node_id)) for node_id in node_ids)
        results = list(
            self.nodes_table.search()
            .where(f"id IN ({id_list})")
            .limit(len(node_ids))
            .to_pydantic(NodeRecord)
        )
        found = {record.id: _from_record(record) for record in results}
        return [found.get(node_id, Empty(id=node_id)) for node_id in node_ids]

    async def set(self, node: Document | Heading | Empty) -> None:
        self._assert_writable()
        self.nodes_table.delete(f"id = {int(node.id)}")
        if isinstance(node, Empty):
            logger.debug(f"Deleted node {node.id}")
            return
        self.nodes_table.add([_to_record(node)])

    def close(self) -> None:
        """Close the database connection."""
        if hasattr(self, "nodes_table"):
            del self.nodes_table
        if hasattr(self, "settings_table"):
            del self.settings_table
        if hasattr(self, "db"):
            del self.db
