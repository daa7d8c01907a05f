from pydantic import BaseModel, Field

from haiku.knowledge.store.models import Node

NOT_FOUND_ID = -1


class SelectedDocument(BaseModel):
    id: int = Field(
        description="Id of the document that most likely holds the information for the query"
    )


class RootDocument(BaseModel):
    content: str = Field(description="The information rewritten as question-answer pairs")


class DocumentUpdate(BaseModel):
    new_document: str = Field(description="The complete updated document")
    short_update_description: str = Field(
        description="Short description of what was added, removed or changed"
    )


class DocumentPart(BaseModel):
    content: str = Field(description="Question-answer pairs of this part")
    short_description: str = Field(
        description="Short description of the questions this part answers"
    )


class SplitDocuments(BaseModel):
    documents: list[DocumentPart] = Field(
        min_length=2, description="The smaller documents the original is split into"
    )


class MergedDocument(BaseModel):
    content: str = Field(description="All question-answer pairs of the merged documents")
    short_description: str = Field(
        description="Short description of the questions the merged document answers"
    )


class TreeEntry(BaseModel):
    """A node reached while walking the tree.

    Attributes:
        depth: Distance from the root
        short: Description the parent heading holds for this node, None for root
        node: The node itself, ``Empty`` for dangling references
    """

    depth: int
    short: str | None = None
    node: Node
