from .node import ROOT_ID, Document, Empty, Heading, HeadingRef, Node

__all__ = [
    "ROOT_ID",
    "Document",
    "Empty",
    "Heading",
    "HeadingRef",
    "Node",
]
