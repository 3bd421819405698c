from typing import Any, Dict, List, Optional, Sequence, Union
import inspect
import logging

from debug_runtime.commands.events.notifier import CommandEvent, EventNotifier
from debug_runtime.commands.history.history_ledger import (
    BatchHistoryEntry,
    CommandHistoryEntry,
    HistoryEntry,
    HistoryLedger,
)
from debug_runtime.commands.interfaces.command import (
    Command,
    command_type,
    describe,
    has_undo_query,
    is_reversible,
    missing_capabilities,
)
from debug_runtime.commands.interfaces.command_context import CommandContext
from debug_runtime.config import constants
from debug_runtime.models.requests import HistorySearchCriteria
from debug_runtime.models.responses import (
    BatchResult,
    ExecutionMetrics,
    StackEntrySummary,
)
from debug_runtime.util.async_utils import maybe_await
from debug_runtime.util.clock import (
    BatchIdFactory,
    Clock,
    elapsed_ms,
    monotonic_clock,
    new_batch_id,
    system_clock,
)
from .batch_manager import BatchTransactionManager, RollbackReport
from .errors import (
    BatchError,
    EmptyStackError,
    ExecutionError,
    IneligibleError,
    UnsupportedReversalError,
    ValidationError,
)
from .metrics import MetricsCollector
from .undo_redo import BatchRecord, StackUnit, UndoRedoStacks


class CommandExecutor:
    """
    Executes debug commands with history, undo/redo, batches and metrics.

    The executor is agnostic to what a command does. It validates the
    command contract, runs the command, and keeps enough bookkeeping to
    reverse it later.

    Features:
    - Rolling history of top-level executions (oldest evicted first)
    - Independent undo/redo stacks; new executions invalidate the redo stack
    - Atomic batches with reverse-order, best-effort rollback on failure
    - Aggregate metrics and per-operation notifications

    Public operations are coroutines. The executor holds no lock: callers
    must not overlap mutating calls (execute, execute_batch, undo, redo) on
    the same executor.
    """

    def __init__(
        self,
        max_history_size: int = constants.DEFAULT_MAX_HISTORY_SIZE,
        logger: Optional[logging.Logger] = None,
        clock: Clock = system_clock,
        batch_id_factory: BatchIdFactory = new_batch_id,
        notifier: Optional[EventNotifier] = None,
        timer: Clock = monotonic_clock,
    ):
        """
        Initialize the executor.

        Args:
            max_history_size: Capacity of the rolling history (positive integer)
            logger: Logger to use instead of the module logger
            clock: Source of epoch-second timestamps
            batch_id_factory: Produces batch identifiers
            notifier: Notification channel (a new one is created if omitted)
            timer: Monotonic source used to measure durations
        """
        self._logger = logger if logger is not None else logging.getLogger(__name__)
        self._clock = clock
        self._timer = timer
        self._batch_id_factory = batch_id_factory

        self._history = HistoryLedger(max_history_size)
        self._stacks = UndoRedoStacks()
        self._metrics = MetricsCollector()
        self._batches = BatchTransactionManager(self._logger)
        self.events = notifier or EventNotifier()

        # Id of the batch whose members are executing, None outside batches
        self._current_batch: Optional[str] = None

        self._logger.info(
            f"CommandExecutor initialized (max_history_size={max_history_size})"
        )

    @property
    def max_history_size(self) -> int:
        return self._history.max_size

    @property
    def current_batch(self) -> Optional[str]:
        return self._current_batch

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate_command(self, command: Any) -> None:
        """
        Check that `command` satisfies the command contract.

        Raises:
            ValidationError: Naming the first missing capability
        """
        if command is None:
            raise ValidationError("Command is required")

        missing = missing_capabilities(command)
        if missing:
            raise ValidationError(
                f"Command {command_type(command)} must implement {missing[0]}() method",
                capability=missing[0],
            )

        # can_undo() is also evaluated by the synchronous stack queries
        if inspect.iscoroutinefunction(getattr(command, "can_undo", None)):
            raise ValidationError(
                f"Command {command_type(command)} can_undo() must be synchronous",
                capability="can_undo",
            )

        if callable(getattr(command, "undo", None)) and not has_undo_query(command):
            self._logger.warning(
                f"Command {command_type(command)} implements undo() but not "
                f"can_undo(); undo will always be attempted"
            )

        self._logger.debug(f"Command validation passed for {command_type(command)}")

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    async def execute(
        self, command: Any, context: Optional[CommandContext] = None
    ) -> Any:
        """
        Execute a single command.

        Outside a batch, a successful execution is added to history; a
        reversible command is pushed on the undo stack, and the redo stack
        is cleared.

        Args:
            command: Command to execute
            context: Passed through to the command

        Returns:
            The command's result

        Raises:
            ValidationError: Command contract not satisfied
            IneligibleError: can_execute() returned False or raised
            ExecutionError: execute() raised
        """
        return await self._execute(command, context or CommandContext(), validate=True)

    async def _execute_member(self, command: Any, context: CommandContext) -> Any:
        """Batch member path; members were validated before the batch started"""
        return await self._execute(command, context, validate=False)

    async def _execute(
        self, command: Any, context: CommandContext, validate: bool
    ) -> Any:
        start_time = self._timer()

        try:
            if validate:
                self.validate_command(command)
            self._logger.debug(
                f"Executing command {command_type(command)}: {describe(command)}"
            )
            result = await self._run_command(command, context)
        except Exception as e:
            execution_time = elapsed_ms(self._timer, start_time)
            self._metrics.record_execution(execution_time, success=False)

            self._logger.error(
                f"Command {command_type(command)} failed in {execution_time:.2f}ms: {str(e)}"
            )
            self._emit(
                constants.EXECUTION_FAILED,
                execution_time,
                command=command,
                error=e,
                batch_id=self._current_batch,
            )
            raise

        execution_time = elapsed_ms(self._timer, start_time)

        if self._current_batch is None:
            self._history.append(
                CommandHistoryEntry(
                    command=command,
                    result=result,
                    timestamp=self._clock(),
                    duration_ms=execution_time,
                )
            )
            if is_reversible(command):
                self._stacks.push_executed(command)
            else:
                self._stacks.invalidate_redo()

        self._metrics.record_execution(execution_time, success=True)

        self._emit(
            constants.EXECUTION_COMPLETED,
            execution_time,
            command=command,
            result=result,
            batch_id=self._current_batch,
        )
        self._logger.info(
            f"Command {command_type(command)} executed successfully in {execution_time:.2f}ms"
        )
        return result

    async def execute_batch(
        self, commands: Sequence[Any], context: Optional[CommandContext] = None
    ) -> BatchResult:
        """
        Execute commands as one atomic unit.

        Every member is validated before any of them runs. If a member fails,
        the members executed before it are undone in reverse order and a
        BatchError is raised; nothing is added to history or the stacks. A
        successful batch goes on the undo stack only if it has a reversible
        member.

        Args:
            commands: Non-empty list of commands, executed in order
            context: Passed through to every member

        Returns:
            BatchResult with the member results

        Raises:
            ValidationError: Empty/non-list input or a malformed member
            BatchError: A member failed (raised after rollback)
        """
        if not isinstance(commands, (list, tuple)) or len(commands) == 0:
            raise ValidationError("Commands list is required and must not be empty")

        context = context or CommandContext()
        batch_id = self._batch_id_factory()
        start_time = self._timer()

        outer_batch = self._current_batch
        self._current_batch = batch_id

        try:
            self._logger.info(
                f"Starting batch {batch_id} with {len(commands)} commands"
            )

            for index, command in enumerate(commands):
                try:
                    self.validate_command(command)
                except ValidationError as e:
                    raise ValidationError(
                        f"Batch command {index}: {str(e)}", capability=e.capability
                    ) from e

            results = await self._batches.run(
                batch_id, commands, self._execute_member, self._reverse_command, context
            )

        except Exception as e:
            execution_time = elapsed_ms(self._timer, start_time)
            details: Dict[str, Any] = {
                "command_count": len(commands),
                "executed_count": 0,
                "error": str(e),
            }
            if isinstance(e, BatchError):
                details["executed_count"] = e.executed_count
                details["failed_index"] = e.failed_index
                if e.rollback_report is not None:
                    details["rollback_failures"] = e.rollback_report.failure_info()

            self._emit(
                constants.BATCH_FAILED,
                execution_time,
                error=e,
                batch_id=batch_id,
                details=details,
            )
            raise

        finally:
            self._current_batch = outer_batch

        execution_time = elapsed_ms(self._timer, start_time)
        timestamp = self._clock()

        batch_result = BatchResult(
            success=True,
            batch_id=batch_id,
            command_count=len(commands),
            results=results,
            execution_time_ms=execution_time,
            timestamp=timestamp,
        )

        if outer_batch is None:
            self._history.append(
                BatchHistoryEntry(
                    batch_id=batch_id,
                    command_summaries=[
                        {"type": command_type(c), "description": describe(c)}
                        for c in commands
                    ],
                    result=batch_result,
                    timestamp=timestamp,
                    duration_ms=execution_time,
                )
            )
            if any(is_reversible(c) for c in commands):
                self._stacks.push_executed(
                    BatchRecord(
                        batch_id=batch_id, commands=list(commands), timestamp=timestamp
                    )
                )
            else:
                self._stacks.invalidate_redo()

        self._metrics.record_batch()

        self._emit(
            constants.BATCH_COMPLETED,
            execution_time,
            result=batch_result,
            batch_id=batch_id,
            details={"command_count": len(commands)},
        )
        self._logger.info(
            f"Batch {batch_id} completed successfully in {execution_time:.2f}ms"
        )
        return batch_result

    # ------------------------------------------------------------------
    # Undo / redo
    # ------------------------------------------------------------------

    def can_undo(self) -> bool:
        return self._stacks.can_undo()

    def can_redo(self) -> bool:
        return self._stacks.can_redo()

    async def undo(self, context: Optional[CommandContext] = None) -> Any:
        """
        Undo the most recent command or batch.

        On failure the unit is put back on the undo stack unchanged.

        Returns:
            The command's undo result, or a RollbackReport for a batch

        Raises:
            EmptyStackError: Nothing to undo
            UnsupportedReversalError: Command is not reversible right now
            ExecutionError: The command's undo() raised
            BatchError: Some batch members could not be reversed
        """
        if not self._stacks.can_undo():
            raise EmptyStackError("undo")

        context = context or CommandContext()
        unit = self._stacks.pop_undo()
        start_time = self._timer()

        try:
            self._logger.debug(f"Undoing {self._unit_label(unit)}")
            if isinstance(unit, BatchRecord):
                result = await self._undo_batch(unit, context)
            else:
                result = await self._undo_command(unit, context)
        except Exception as e:
            self._stacks.restore_undo(unit)
            execution_time = elapsed_ms(self._timer, start_time)

            self._logger.error(
                f"Undo of {self._unit_label(unit)} failed in {execution_time:.2f}ms: {str(e)}"
            )
            self._emit(
                constants.UNDO_FAILED,
                execution_time,
                command=unit,
                error=e,
                batch_id=self._batch_id_of(unit),
            )
            raise

        self._stacks.push_undone(unit)
        self._metrics.record_undo()
        execution_time = elapsed_ms(self._timer, start_time)

        self._emit(
            constants.UNDO_COMPLETED,
            execution_time,
            command=unit,
            result=result,
            batch_id=self._batch_id_of(unit),
        )
        self._logger.info(
            f"Undid {self._unit_label(unit)} in {execution_time:.2f}ms"
        )
        return result

    async def redo(self, context: Optional[CommandContext] = None) -> Any:
        """
        Re-apply the most recently undone command or batch.

        Members go through the eligibility check again before executing. For
        a batch only the members that the undo reversed are replayed. On
        failure the unit is put back on the redo stack; batch members that
        were re-executed before the failure are reversed first.

        Returns:
            The command's result, or the results of the replayed batch members

        Raises:
            EmptyStackError: Nothing to redo
            IneligibleError: A command's precondition no longer holds
            ExecutionError: A command's execute() raised
            BatchError: A batch member failed
        """
        if not self._stacks.can_redo():
            raise EmptyStackError("redo")

        context = context or CommandContext()
        unit = self._stacks.pop_redo()
        start_time = self._timer()

        try:
            self._logger.debug(f"Redoing {self._unit_label(unit)}")
            if isinstance(unit, BatchRecord):
                result = await self._redo_batch(unit, context)
            else:
                result = await self._run_command(unit, context)
        except Exception as e:
            self._stacks.restore_redo(unit)
            execution_time = elapsed_ms(self._timer, start_time)

            self._logger.error(
                f"Redo of {self._unit_label(unit)} failed in {execution_time:.2f}ms: {str(e)}"
            )
            self._emit(
                constants.REDO_FAILED,
                execution_time,
                command=unit,
                error=e,
                batch_id=self._batch_id_of(unit),
            )
            raise

        self._stacks.push_redone(unit)
        self._metrics.record_redo()
        execution_time = elapsed_ms(self._timer, start_time)

        self._emit(
            constants.REDO_COMPLETED,
            execution_time,
            command=unit,
            result=result,
            batch_id=self._batch_id_of(unit),
        )
        self._logger.info(
            f"Redid {self._unit_label(unit)} in {execution_time:.2f}ms"
        )
        return result

    def get_undo_stack(self) -> List[StackEntrySummary]:
        return self._stacks.undo_summaries()

    def get_redo_stack(self) -> List[StackEntrySummary]:
        return self._stacks.redo_summaries()

    def clear_undo_redo_stacks(self) -> None:
        self._stacks.clear()
        self._logger.info("Undo/redo stacks cleared")

    # ------------------------------------------------------------------
    # History and metrics
    # ------------------------------------------------------------------

    def get_history(self, limit: Optional[int] = None) -> List[HistoryEntry]:
        """History entries, oldest first; `limit` keeps only the most recent"""
        return self._history.entries(limit)

    def search_history(
        self,
        criteria: Union[HistorySearchCriteria, Dict[str, Any], None] = None,
    ) -> List[HistoryEntry]:
        """
        Search history.

        Args:
            criteria: HistorySearchCriteria, or a dict with any of
                'command_type', 'since', 'success_only'

        Returns:
            Matching entries, oldest first
        """
        if criteria is None:
            criteria = HistorySearchCriteria()
        elif isinstance(criteria, dict):
            criteria = HistorySearchCriteria(**criteria)
        return self._history.search(criteria)

    def clear_history(self) -> None:
        self._history.clear()
        self._logger.info("Command history cleared")

    def get_metrics(self) -> ExecutionMetrics:
        return self._metrics.snapshot()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _run_command(self, command: Any, context: CommandContext) -> Any:
        """Eligibility check, then execute; marks the command executed"""
        name = command_type(command)

        try:
            eligible = await maybe_await(command.can_execute())
        except Exception as e:
            raise IneligibleError(name, e) from e
        if not eligible:
            raise IneligibleError(name)

        try:
            result = await maybe_await(command.execute(context))
        except Exception as e:
            raise ExecutionError(name, e) from e

        if isinstance(command, Command):
            command.mark_executed(result, self._clock())
        return result

    async def _reverse_command(self, command: Any, context: CommandContext) -> Any:
        """Invoke the command's undo; marks the command not executed"""
        try:
            result = await maybe_await(command.undo(context))
        except Exception as e:
            raise ExecutionError(command_type(command), e, operation="undo") from e

        if isinstance(command, Command):
            command.mark_undone(result)
        elif hasattr(command, "executed"):
            command.executed = False
        return result

    async def _undo_command(self, command: Any, context: CommandContext) -> Any:
        name = command_type(command)
        if not is_reversible(command):
            raise UnsupportedReversalError(name, "does not support undo")
        if has_undo_query(command) and not command.can_undo():
            raise UnsupportedReversalError(name, "cannot be undone in current state")
        return await self._reverse_command(command, context)

    async def _undo_batch(self, record: BatchRecord, context: CommandContext) -> RollbackReport:
        report = await self._batches.rollback(
            record.batch_id, record.commands, self._reverse_command, context
        )
        record.mark_reversed(report.reversed_indices)
        if not report.is_complete:
            first = report.failures[0]
            raise BatchError(
                record.batch_id,
                f"Undo of batch {record.batch_id} failed for "
                f"{len(report.failures)} command(s), first at command "
                f"{first.index} ({first.command_type}): {str(first.error)}",
                failed_index=first.index,
                command_type=first.command_type,
                original_error=first.error,
                rollback_report=report,
            )
        return report

    async def _redo_batch(self, record: BatchRecord, context: CommandContext) -> List[Any]:
        """Replay only the members the undo reversed"""
        indices = record.replay_indices()
        try:
            results = await self._batches.replay(
                record.batch_id,
                record.commands,
                indices,
                self._run_command,
                self._reverse_command,
                context,
            )
        except BatchError as e:
            # Members whose compensation failed are applied again
            if e.rollback_report is not None:
                record.mark_replayed(f.index for f in e.rollback_report.failures)
            raise
        record.mark_replayed(indices)
        return results

    def _emit(self, event_type: str, duration_ms: float, **fields: Any) -> None:
        self.events.emit(
            CommandEvent(
                event_type=event_type,
                timestamp=self._clock(),
                duration_ms=duration_ms,
                **fields,
            )
        )

    @staticmethod
    def _batch_id_of(unit: StackUnit) -> Optional[str]:
        return unit.batch_id if isinstance(unit, BatchRecord) else None

    @staticmethod
    def _unit_label(unit: StackUnit) -> str:
        if isinstance(unit, BatchRecord):
            return unit.get_description()
        return f"command {command_type(unit)}"
