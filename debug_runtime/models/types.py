"""
TypedDict definitions for dictionary-shaped data exchanged by the engine.
"""

from typing_extensions import TypedDict


class CommandSummary(TypedDict):
    """Type and description of one batch member, as kept in batch history"""

    type: str
    description: str


class RollbackFailureInfo(TypedDict):
    index: int
    type: str
    error: str
