from dataclasses import dataclass, field
from typing import Any, Iterable, List, Set, Union
import logging

from debug_runtime.commands.interfaces.command import (
    can_undo_now,
    command_type,
    describe,
    is_reversible,
    reports_executed,
)
from debug_runtime.config.constants import BATCH_HISTORY_KIND
from debug_runtime.models.responses import StackEntrySummary


logger = logging.getLogger(__name__)


@dataclass
class BatchRecord:
    """A successfully executed batch, reversed and replayed as one unit"""

    batch_id: str
    commands: List[Any] = field(default_factory=list)
    timestamp: float = 0.0

    # Members reversed by undo and not yet replayed by redo
    reversed_indices: Set[int] = field(default_factory=set)

    def get_description(self) -> str:
        return f"Batch {self.batch_id} ({len(self.commands)} commands)"

    def can_undo(self) -> bool:
        """A batch can be undone while any reversible member is still executed"""
        return any(
            is_reversible(command) and reports_executed(command)
            for command in self.commands
        )

    def mark_reversed(self, indices: Iterable[int]) -> None:
        self.reversed_indices.update(indices)

    def mark_replayed(self, indices: Iterable[int]) -> None:
        self.reversed_indices.difference_update(indices)

    def replay_indices(self) -> List[int]:
        """Members redo must re-execute, in batch order"""
        return sorted(self.reversed_indices)


# An entry on either stack: a single command or a whole batch
StackUnit = Union[BatchRecord, Any]


def summarize(unit: StackUnit) -> StackEntrySummary:
    """Describe a stack unit without exposing the live command"""
    if isinstance(unit, BatchRecord):
        return StackEntrySummary(
            kind=BATCH_HISTORY_KIND,
            description=unit.get_description(),
            timestamp=unit.timestamp,
            can_undo_now=unit.can_undo(),
            batch_id=unit.batch_id,
            command_count=len(unit.commands),
        )

    timestamp = unit.get_timestamp() if callable(getattr(unit, "get_timestamp", None)) else None
    return StackEntrySummary(
        kind=command_type(unit),
        description=describe(unit),
        timestamp=timestamp,
        can_undo_now=can_undo_now(unit),
    )


class UndoRedoStacks:
    """
    The undo and redo stacks, most recent last.

    Rules:
    - push_executed() records fresh history and always empties the redo
      stack.
    - A unit popped for undo/redo must be handed back with restore_undo()
      or restore_redo() if the operation fails, leaving both stacks as they
      were before the attempt.
    """

    def __init__(self) -> None:
        self._undo: List[StackUnit] = []
        self._redo: List[StackUnit] = []

    def can_undo(self) -> bool:
        return len(self._undo) > 0

    def can_redo(self) -> bool:
        return len(self._redo) > 0

    def push_executed(self, unit: StackUnit) -> None:
        """Record a newly executed unit and invalidate the redo timeline"""
        self._undo.append(unit)
        self.invalidate_redo()

    def invalidate_redo(self) -> None:
        """Discard the redo timeline"""
        if self._redo:
            logger.debug(f"Discarding {len(self._redo)} redo entries")
        self._redo.clear()

    def pop_undo(self) -> StackUnit:
        return self._undo.pop()

    def pop_redo(self) -> StackUnit:
        return self._redo.pop()

    def push_undone(self, unit: StackUnit) -> None:
        """Move a successfully undone unit onto the redo stack"""
        self._redo.append(unit)

    def push_redone(self, unit: StackUnit) -> None:
        """Move a successfully redone unit back onto the undo stack"""
        self._undo.append(unit)

    def restore_undo(self, unit: StackUnit) -> None:
        self._undo.append(unit)

    def restore_redo(self, unit: StackUnit) -> None:
        self._redo.append(unit)

    def undo_summaries(self) -> List[StackEntrySummary]:
        return [summarize(unit) for unit in self._undo]

    def redo_summaries(self) -> List[StackEntrySummary]:
        return [summarize(unit) for unit in self._redo]

    def clear(self) -> None:
        self._undo.clear()
        self._redo.clear()

    def __repr__(self) -> str:
        return f"UndoRedoStacks(undo={len(self._undo)}, redo={len(self._redo)})"
