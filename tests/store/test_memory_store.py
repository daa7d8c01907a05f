import pytest

from haiku.knowledge.store import InMemoryNodeStore, NodeStore
from haiku.knowledge.store.models import Document, Empty, Heading, HeadingRef


@pytest.mark.asyncio
class TestInMemoryNodeStore:
    async def test_is_node_store(self):
        assert isinstance(InMemoryNodeStore(), NodeStore)

    async def test_get_missing_returns_empty(self):
        store = InMemoryNodeStore()
        node = await store.get(42)
        assert node == Empty(id=42)

    async def test_set_and_get_document(self):
        store = InMemoryNodeStore()
        doc = Document(id=1, content="Test document", parent_id=0)

        await store.set(doc)
        retrieved = await store.get(1)

        assert retrieved == doc

    async def test_set_and_get_heading(self):
        store = InMemoryNodeStore()
        heading = Heading(
            id=0,
            refs=[HeadingRef(id=1, short="Pets"), HeadingRef(id=2, short="Farm")],
        )

        await store.set(heading)
        retrieved = await store.get(0)

        assert isinstance(retrieved, Heading)
        assert [ref.id for ref in retrieved.refs] == [1, 2]
        assert retrieved.parent_id is None

    async def test_set_empty_deletes(self):
        store = InMemoryNodeStore()
        await store.set(Document(id=3, content="x"))
        assert 3 in store

        await store.set(Empty(id=3))

        assert 3 not in store
        assert isinstance(await store.get(3), Empty)

    async def test_set_empty_for_missing_id_is_noop(self):
        store = InMemoryNodeStore()
        await store.set(Empty(id=7))
        assert len(store) == 0

    async def test_stored_nodes_are_isolated_from_callers(self):
        store = InMemoryNodeStore()
        doc = Document(id=1, content="original")
        await store.set(doc)

        doc.content = "changed outside"
        retrieved = await store.get(1)
        assert retrieved.content == "original"

        retrieved.content = "changed again"
        assert (await store.get(1)).content == "original"

    async def test_generate_id_is_strictly_increasing(self):
        store = InMemoryNodeStore()
        ids = [await store.generate_id() for _ in range(5)]
        assert ids == [1, 2, 3, 4, 5]

    async def test_generate_id_skips_seeded_ids(self):
        store = InMemoryNodeStore(
            {
                0: Heading(
                    id=0, refs=[HeadingRef(id=1, short="a"), HeadingRef(id=5, short="b")]
                ),
                1: Document(id=1, content="a", parent_id=0),
                5: Document(id=5, content="b", parent_id=0),
            }
        )
        assert await store.generate_id() == 6

    async def test_generate_id_never_reuses_deleted_ids(self):
        store = InMemoryNodeStore()
        node_id = await store.generate_id()
        await store.set(Document(id=node_id, content="x"))
        await store.set(Empty(id=node_id))

        assert await store.generate_id() > node_id

    async def test_get_many_preserves_order_and_reports_missing(self):
        store = InMemoryNodeStore()
        await store.set_many(
            [Document(id=1, content="one"), Document(id=2, content="two")]
        )

        nodes = await store.get_many([2, 9, 1])

        assert [node.id for node in nodes] == [2, 9, 1]
        assert isinstance(nodes[0], Document)
        assert isinstance(nodes[1], Empty)
        assert nodes[2].content == "one"

    async def test_set_many_applies_each_item(self):
        store = InMemoryNodeStore({1: Document(id=1, content="old")})

        await store.set_many([Empty(id=1), Document(id=2, content="new")])

        assert 1 not in store
        assert (await store.get(2)).content == "new"
