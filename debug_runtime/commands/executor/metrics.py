import logging
from debug_runtime.models.responses import ExecutionMetrics


logger = logging.getLogger(__name__)


class MetricsCollector:
    """
    Running aggregate counters for an executor.

    Owned by a single CommandExecutor; nothing else should call the record_*
    methods.
    """

    def __init__(self) -> None:
        self.reset()

    def record_execution(self, duration_ms: float, success: bool) -> None:
        self._total_executions += 1
        self._total_execution_time_ms += duration_ms
        if not success:
            self._failed_executions += 1

    def record_undo(self) -> None:
        self._undo_operations += 1

    def record_redo(self) -> None:
        self._redo_operations += 1

    def record_batch(self) -> None:
        self._batch_operations += 1

    def snapshot(self) -> ExecutionMetrics:
        """
        Get a copy of the current metrics.

        Returns:
            ExecutionMetrics detached from the collector
        """
        average = (
            self._total_execution_time_ms / self._total_executions
            if self._total_executions > 0
            else 0.0
        )
        return ExecutionMetrics(
            total_executions=self._total_executions,
            total_execution_time_ms=self._total_execution_time_ms,
            average_execution_time_ms=average,
            failed_executions=self._failed_executions,
            undo_operations=self._undo_operations,
            redo_operations=self._redo_operations,
            batch_operations=self._batch_operations,
        )

    def reset(self) -> None:
        """Reset all counters (explicit caller action only)"""
        self._total_executions = 0
        self._total_execution_time_ms = 0.0
        self._failed_executions = 0
        self._undo_operations = 0
        self._redo_operations = 0
        self._batch_operations = 0
        logger.debug("Execution metrics reset")
