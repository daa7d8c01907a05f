from haiku.knowledge.oracle.agent import Oracle, OracleTool, ResolutionStrategy

__all__ = ["Oracle", "OracleTool", "ResolutionStrategy"]
