import logging
from collections.abc import AsyncIterator
from typing import TypeVar

from pydantic import BaseModel
from pydantic_ai import ModelRetry

from haiku.knowledge.config import Config
from haiku.knowledge.config.models import TreeConfig
from haiku.knowledge.exceptions import OracleError, TaxonomyViolationError
from haiku.knowledge.oracle import Oracle, OracleTool
from haiku.knowledge.store.base import NodeStore
from haiku.knowledge.store.models import (
    ROOT_ID,
    Document,
    Empty,
    Heading,
    HeadingRef,
)
from haiku.knowledge.tree.formatting import (
    format_descriptions,
    format_document,
    quoted_block,
)
from haiku.knowledge.tree.models import (
    NOT_FOUND_ID,
    DocumentUpdate,
    MergedDocument,
    RootDocument,
    SelectedDocument,
    SplitDocuments,
    TreeEntry,
)
from haiku.knowledge.tree.prompts import (
    CREATE_ROOT_PROMPT,
    FIND_ROUTING_PROMPT,
    MERGE_DOCUMENTS_PROMPT,
    SPLIT_DOCUMENT_PROMPT,
    UPDATE_DOCUMENT_PROMPT,
    UPDATE_ROUTING_PROMPT,
)

logger = logging.getLogger(__name__)

BOOTSTRAP_MESSAGE = "Initialized the knowledge base"

OutputT = TypeVar("OutputT", bound=BaseModel)


def _required(answer: OutputT | None, tool: OracleTool[OutputT]) -> OutputT:
    # A mutating round cannot proceed without an answer
    if answer is None:
        raise OracleError(tool.name, "no answer was produced")
    return answer


class KnowledgeTree:
    """Self-organizing knowledge tree.

    Works like a B-tree whose comparisons are made by an oracle: headings are
    descended by asking the oracle which child holds the information, leaves
    that outgrow ``max_document_size_chars`` are split into ``k`` documents and
    sibling leaves that shrink below half of it are merged back into one.
    """

    def __init__(
        self,
        store: NodeStore,
        oracle: Oracle,
        config: TreeConfig | None = None,
    ):
        self._store = store
        self._oracle = oracle
        self._config = config if config is not None else Config.tree

    @property
    def k(self) -> int:
        return self._config.k

    @property
    def max_document_size_chars(self) -> int:
        return self._config.max_document_size_chars

    async def find(self, query: str) -> Document | None:
        """Descend from the root to the document most likely to answer ``query``.

        Returns:
            The document, or None when the tree is empty or the oracle finds no
            relevant branch.
        """
        node_id = ROOT_ID

        while True:
            node = await self._store.get(node_id)

            if isinstance(node, Document):
                return node
            if isinstance(node, Heading):
                selected = await self._route(node, query, allow_missing=True)
                if selected is None or selected == NOT_FOUND_ID:
                    logger.debug(f"No branch of heading {node.id} matches the query")
                    return None
                node_id = selected
            else:
                return None

    async def update(self, query: str) -> str:
        """Apply a natural language change request to the tree.

        Locates the document the request is about, has the oracle edit it and
        then rebalances: the document is split when too large and its siblings
        are merged when they are collectively too small.

        Returns:
            Short description of the change, or a fixed message when the
            request initialized an empty tree.

        Raises:
            TaxonomyViolationError: If routing reached an empty node.
        """
        root = await self._store.get(ROOT_ID)

        if isinstance(root, Empty):
            await self._create_root(query)
            return BOOTSTRAP_MESSAGE

        document, parent = await self._locate(root, query)
        description = await self._edit(document, query)
        await self._rebalance(document.id, parent)
        return description

    async def walk(self) -> AsyncIterator[TreeEntry]:
        """Yield every node reachable from the root, depth first, in ref order."""
        stack: list[tuple[int, int, str | None]] = [(ROOT_ID, 0, None)]

        while stack:
            node_id, depth, short = stack.pop()
            node = await self._store.get(node_id)
            if isinstance(node, Empty) and node_id == ROOT_ID:
                return

            yield TreeEntry(depth=depth, short=short, node=node)

            if isinstance(node, Heading):
                for ref in reversed(node.refs):
                    stack.append((ref.id, depth + 1, ref.short))

    async def _route(
        self, heading: Heading, query: str, allow_missing: bool
    ) -> int | None:
        offered = {ref.id for ref in heading.refs}

        def validate(output: SelectedDocument) -> SelectedDocument:
            if allow_missing and output.id == NOT_FOUND_ID:
                return output
            if output.id not in offered:
                raise ModelRetry(
                    f"Document id {output.id} is not one of the listed ids "
                    f"{sorted(offered)}."
                )
            return output

        tool = OracleTool(
            name="select_document",
            description="Selects the document suitable for the query",
            output_type=SelectedDocument,
            validator=validate,
        )
        answer = await self._oracle.respond(
            tool,
            FIND_ROUTING_PROMPT if allow_missing else UPDATE_ROUTING_PROMPT,
            [
                quoted_block("DOCUMENT DESCRIPTIONS", format_descriptions(heading)),
                quoted_block("THE QUERY", query),
            ],
        )
        if answer is None:
            return None

        logger.debug(f"Routed from heading {heading.id} to node {answer.id}")
        return answer.id

    async def _create_root(self, query: str) -> None:
        tool = OracleTool(
            name="create_root",
            description="Creates the first document of the knowledge base",
            output_type=RootDocument,
        )
        answer = await self._oracle.respond(
            tool, CREATE_ROOT_PROMPT, [quoted_block("THE INFORMATION", query)]
        )
        answer = _required(answer, tool)

        await self._store.set(Document(id=ROOT_ID, content=answer.content))
        logger.debug("Created root document")

    async def _locate(
        self, root: Document | Heading, query: str
    ) -> tuple[Document, Heading | None]:
        node: Document | Heading | Empty = root
        parent: Heading | None = None

        while True:
            if isinstance(node, Document):
                return node, parent
            if isinstance(node, Heading):
                selected = await self._route(node, query, allow_missing=False)
                if selected is None:
                    raise OracleError("select_document", "no answer was produced")
                parent = node
                node = await self._store.get(selected)
            else:
                raise TaxonomyViolationError(node.id, query)

    async def _edit(self, document: Document, query: str) -> str:
        tool = OracleTool(
            name="update_document",
            description="Replaces the document with its updated version",
            output_type=DocumentUpdate,
        )
        answer = await self._oracle.respond(
            tool,
            UPDATE_DOCUMENT_PROMPT,
            [
                quoted_block("THE DOCUMENT", format_document(document)),
                quoted_block("THE REQUEST", query),
            ],
        )
        answer = _required(answer, tool)

        await self._store.set(
            Document(
                id=document.id,
                content=answer.new_document,
                parent_id=document.parent_id,
            )
        )
        logger.debug(
            f"Updated document {document.id}: {answer.short_update_description}"
        )
        return answer.short_update_description

    async def _rebalance(self, node_id: int, parent: Heading | None) -> None:
        node = await self._store.get(node_id)
        if (
            isinstance(node, Document)
            and len(node.content) > self.max_document_size_chars
        ):
            await self._split(node)

        if parent is None:
            return

        heading = await self._store.get(parent.id)
        if isinstance(heading, Heading):
            await self._merge(heading)

    async def _split(self, document: Document) -> None:
        """Replace ``document`` in place with a heading over smaller documents."""
        k = self.k

        def validate(output: SplitDocuments) -> SplitDocuments:
            if len(output.documents) > k:
                raise ModelRetry(
                    f"Split into {len(output.documents)} documents, "
                    f"expected at most {k}."
                )
            return output

        tool = OracleTool(
            name="split_document",
            description="Splits the document into smaller documents",
            output_type=SplitDocuments,
            validator=validate,
        )
        answer = await self._oracle.respond(
            tool,
            SPLIT_DOCUMENT_PROMPT.format(k=k),
            [
                quoted_block(
                    "THE DOCUMENT",
                    format_document(document, size=str(len(document.content))),
                )
            ],
        )
        answer = _required(answer, tool)

        children: list[Document] = []
        refs: list[HeadingRef] = []
        for part in answer.documents:
            child_id = await self._store.generate_id()
            children.append(
                Document(id=child_id, content=part.content, parent_id=document.id)
            )
            refs.append(HeadingRef(id=child_id, short=part.short_description))

        # Reusing the id keeps every ancestor reference valid
        heading = Heading(id=document.id, refs=refs, parent_id=document.parent_id)
        await self._store.set_many([*children, heading])
        logger.debug(
            f"Split document {document.id} into {[c.id for c in children]}"
        )

    async def _merge(self, heading: Heading) -> None:
        """Collapse ``heading`` in place into one document if its leaves are small."""
        children = await self._store.get_many([ref.id for ref in heading.refs])

        # Collapsing a heading with a heading child would orphan that subtree.
        # This also keeps the parent of a just-split document from collapsing.
        if any(isinstance(child, Heading) for child in children):
            logger.debug(f"Heading {heading.id} has heading children, not merging")
            return

        documents = [child for child in children if isinstance(child, Document)]
        if not documents:
            return

        total = sum(len(document.content) for document in documents)
        if total >= self.max_document_size_chars / 2:
            return

        tool = OracleTool(
            name="merge_documents",
            description="Merges the documents into one",
            output_type=MergedDocument,
        )
        answer = await self._oracle.respond(
            tool,
            MERGE_DOCUMENTS_PROMPT,
            [
                quoted_block(
                    "THE DOCUMENTS",
                    "\n".join(format_document(document) for document in documents),
                )
            ],
        )
        answer = _required(answer, tool)

        await self._store.set(
            Document(
                id=heading.id, content=answer.content, parent_id=heading.parent_id
            )
        )
        logger.debug(
            f"Merged {[d.id for d in documents]} into document {heading.id}"
        )

        if heading.parent_id is None:
            return

        grandparent = await self._store.get(heading.parent_id)
        if isinstance(grandparent, Heading):
            refs = [
                HeadingRef(id=ref.id, short=answer.short_description)
                if ref.id == heading.id
                else ref
                for ref in grandparent.refs
            ]
            await self._store.set(grandparent.model_copy(update={"refs": refs}))
