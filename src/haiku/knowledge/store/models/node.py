from typing import Annotated, Literal

from pydantic import BaseModel, Field

ROOT_ID = 0


class HeadingRef(BaseModel):
    """Reference from a heading to one of its children.

    Attributes:
        id: Id of the child node
        short: Short description the oracle routes on
    """

    id: int
    short: str


class Document(BaseModel):
    """Leaf node holding a serialized list of fact pairs."""

    id: int
    kind: Literal["document"] = "document"
    content: str
    parent_id: int | None = None


class Heading(BaseModel):
    """Internal node routing to its children by their short descriptions."""

    id: int
    kind: Literal["heading"] = "heading"
    refs: list[HeadingRef]
    parent_id: int | None = None


class Empty(BaseModel):
    """Marker for an id that holds no node. Never persisted."""

    id: int
    kind: Literal["empty"] = "empty"


Node = Annotated[Document | Heading | Empty, Field(discriminator="kind")]
