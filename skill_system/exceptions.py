"""Errors raised by the skill tree engine."""


class SkillTreeError(Exception):
    """Base exception for skill tree operations."""
    pass


class UnknownTrickError(SkillTreeError):
    """Raised when an operation names a trick that is not in the current tree."""
    def __init__(self, trick_id: str):
        self.trick_id = trick_id
        super().__init__(f"Trick '{trick_id}' is not part of the current skill tree")


class InvalidGraphError(SkillTreeError):
    """Raised when an edge points at a node that was never supplied to the layout."""
    def __init__(self, source_id: str, target_id: str):
        self.source_id = source_id
        self.target_id = target_id
        super().__init__(
            f"Edge '{source_id}' -> '{target_id}' references a node that is not in the graph"
        )
