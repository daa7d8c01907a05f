class KnowledgeTreeError(Exception):
    """Base class for errors raised by haiku.knowledge."""


class TaxonomyViolationError(KnowledgeTreeError):
    """Raised when a traversal reaches a node kind its operation forbids.

    During an update the oracle must always route to an existing child, so
    reaching an empty node means it broke that contract.
    """

    def __init__(self, node_id: int, query: str):
        self.node_id = node_id
        self.query = query
        super().__init__(
            f"Taxonomy violation: traversal for update reached empty node {node_id}"
        )


class OracleError(KnowledgeTreeError):
    """Raised when the oracle fails to answer a round with a valid tool call."""

    def __init__(self, tool_name: str, message: str):
        self.tool_name = tool_name
        super().__init__(f"Oracle failed to answer '{tool_name}': {message}")
