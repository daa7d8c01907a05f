from haiku.knowledge.tree.engine import BOOTSTRAP_MESSAGE, KnowledgeTree
from haiku.knowledge.tree.models import TreeEntry

__all__ = ["BOOTSTRAP_MESSAGE", "KnowledgeTree", "TreeEntry"]
