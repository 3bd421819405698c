"""
Rolling history of executed commands and batches.
"""

from .history_ledger import (
    BatchHistoryEntry,
    CommandHistoryEntry,
    HistoryEntry,
    HistoryLedger,
)

__all__ = [
    "BatchHistoryEntry",
    "CommandHistoryEntry",
    "HistoryEntry",
    "HistoryLedger",
]
