from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, List, Optional, Union
import logging

from debug_runtime.commands.interfaces.command import command_type
from debug_runtime.config.constants import (
    BATCH_HISTORY_KIND,
    COMMAND_HISTORY_KIND,
    DEFAULT_MAX_HISTORY_SIZE,
)
from debug_runtime.models.requests import HistorySearchCriteria
from debug_runtime.models.types import CommandSummary


logger = logging.getLogger(__name__)


@dataclass
class CommandHistoryEntry:
    """One top-level command execution"""

    command: Any
    result: Any
    timestamp: float
    duration_ms: float
    success: bool = True
    kind: str = COMMAND_HISTORY_KIND

    @property
    def command_type(self) -> str:
        return command_type(self.command)


@dataclass
class BatchHistoryEntry:
    """One batch execution, summarised as a single entry"""

    batch_id: str
    command_summaries: List[CommandSummary]
    result: Any
    timestamp: float
    duration_ms: float
    success: bool = True
    kind: str = BATCH_HISTORY_KIND

    @property
    def command_type(self) -> str:
        return BATCH_HISTORY_KIND


HistoryEntry = Union[CommandHistoryEntry, BatchHistoryEntry]


class HistoryLedger:
    """
    Size-bounded, append-only record of past executions.

    Once the ledger holds `max_size` entries each append evicts the oldest
    entry, so len(ledger) <= max_size after every mutation.
    """

    def __init__(self, max_size: int = DEFAULT_MAX_HISTORY_SIZE):
        if isinstance(max_size, bool) or not isinstance(max_size, int) or max_size <= 0:
            raise ValueError(f"max_size must be a positive integer, got {max_size!r}")

        self._max_size = max_size
        self._entries: Deque[HistoryEntry] = deque()

    @property
    def max_size(self) -> int:
        return self._max_size

    def __len__(self) -> int:
        return len(self._entries)

    def append(self, entry: HistoryEntry) -> None:
        self._entries.append(entry)

        while len(self._entries) > self._max_size:
            removed = self._entries.popleft()
            logger.debug(
                f"Removed oldest history entry ({removed.command_type}) "
                f"from {removed.timestamp}"
            )

        logger.debug(
            f"Added {entry.kind} entry to history (size: {len(self._entries)})"
        )

    def entries(self, limit: Optional[int] = None) -> List[HistoryEntry]:
        """
        Get history entries, oldest first.

        Args:
            limit: If given, only the `limit` most recent entries

        Returns:
            A new list; mutating it does not affect the ledger
        """
        history = list(self._entries)
        if limit:
            return history[-limit:]
        return history

    def search(self, criteria: HistorySearchCriteria) -> List[HistoryEntry]:
        """Entries matching every set field of `criteria`, oldest first"""
        matches = []
        for entry in self._entries:
            if criteria.command_type and entry.command_type != criteria.command_type:
                continue
            if criteria.since is not None and entry.timestamp < criteria.since:
                continue
            if criteria.success_only and not entry.success:
                continue
            matches.append(entry)
        return matches

    def clear(self) -> None:
        self._entries.clear()
