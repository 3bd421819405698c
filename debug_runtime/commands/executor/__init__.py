"""
Command executor for running debug commands with history, undo/redo,
atomic batches, metrics and notifications.
"""

from .batch_manager import BatchTransactionManager, RollbackFailure, RollbackReport
from .command_executor import CommandExecutor
from .errors import (
    BatchError,
    CommandEngineError,
    EmptyStackError,
    ExecutionError,
    IneligibleError,
    UnsupportedReversalError,
    ValidationError,
)
from .metrics import MetricsCollector
from .undo_redo import BatchRecord, UndoRedoStacks

__all__ = [
    "BatchError",
    "BatchRecord",
    "BatchTransactionManager",
    "CommandEngineError",
    "CommandExecutor",
    "EmptyStackError",
    "ExecutionError",
    "IneligibleError",
    "MetricsCollector",
    "RollbackFailure",
    "RollbackReport",
    "UndoRedoStacks",
    "UnsupportedReversalError",
    "ValidationError",
]
