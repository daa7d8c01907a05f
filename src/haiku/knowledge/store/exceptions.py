from haiku.knowledge.exceptions import KnowledgeTreeError


class ReadOnlyError(KnowledgeTreeError):
    """Raised when a write is attempted on a store opened read-only."""
