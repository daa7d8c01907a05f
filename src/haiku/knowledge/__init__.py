from haiku.knowledge.client import HaikuKnowledge
from haiku.knowledge.exceptions import (
    KnowledgeTreeError,
    OracleError,
    TaxonomyViolationError,
)
from haiku.knowledge.oracle import Oracle, OracleTool, ResolutionStrategy
from haiku.knowledge.store import InMemoryNodeStore, NodeStore
from haiku.knowledge.store.models import ROOT_ID, Document, Empty, Heading, HeadingRef
from haiku.knowledge.tree import BOOTSTRAP_MESSAGE, KnowledgeTree, TreeEntry

__all__ = [
    "BOOTSTRAP_MESSAGE",
    "ROOT_ID",
    "Document",
    "Empty",
    "HaikuKnowledge",
    "Heading",
    "HeadingRef",
    "InMemoryNodeStore",
    "KnowledgeTree",
    "KnowledgeTreeError",
    "NodeStore",
    "Oracle",
    "OracleError",
    "OracleTool",
    "ResolutionStrategy",
    "TaxonomyViolationError",
    "TreeEntry",
]
