from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, List, Optional, Sequence
import logging

from debug_runtime.commands.interfaces.command import (
    command_type,
    is_reversible,
    reports_executed,
)
from debug_runtime.commands.interfaces.command_context import CommandContext
from debug_runtime.models.types import RollbackFailureInfo
from .errors import BatchError


logger = logging.getLogger(__name__)

# Runs one member through the executor's single-command path
MemberOperation = Callable[[Any, CommandContext], Awaitable[Any]]


@dataclass
class RollbackFailure:
    index: int
    command_type: str
    error: Exception


@dataclass
class RollbackReport:
    """
    Outcome of reversing a batch's members.

    Reversal is best-effort: a member that fails to reverse is recorded here
    and the remaining members are still reversed.
    """

    batch_id: str
    reversed_indices: List[int] = field(default_factory=list)
    skipped_indices: List[int] = field(default_factory=list)
    failures: List[RollbackFailure] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return not self.failures

    def failure_info(self) -> List[RollbackFailureInfo]:
        return [
            {"index": f.index, "type": f.command_type, "error": str(f.error)}
            for f in self.failures
        ]


class BatchTransactionManager:
    """
    Runs a list of commands as one logical unit.

    Members execute strictly in order. The first failure stops the batch and
    every member executed so far is reversed, newest first, before a
    BatchError is raised. The manager holds no state between calls; history
    and stack bookkeeping stay with the executor.
    """

    def __init__(self, batch_logger: Optional[logging.Logger] = None):
        self._logger = batch_logger or logger

    async def run(
        self,
        batch_id: str,
        commands: Sequence[Any],
        execute_member: MemberOperation,
        reverse_member: MemberOperation,
        context: CommandContext,
    ) -> List[Any]:
        """
        Execute members in order, rolling back on the first failure.

        Args:
            batch_id: Identifier used in logs and errors
            commands: Members, already structurally validated
            execute_member: Single-command execution path
            reverse_member: Single-command reversal used for rollback
            context: Passed through to each member

        Returns:
            Member results in execution order

        Raises:
            BatchError: After rollback, identifying the failing member
        """
        return await self._run_forward(
            batch_id,
            commands,
            range(len(commands)),
            execute_member,
            reverse_member,
            context,
            "execution",
        )

    async def replay(
        self,
        batch_id: str,
        commands: Sequence[Any],
        indices: Sequence[int],
        replay_member: MemberOperation,
        reverse_member: MemberOperation,
        context: CommandContext,
    ) -> List[Any]:
        """
        Re-execute the members of an undone batch.

        Only the members at `indices` (those the undo actually reversed) are
        replayed, in their original order.

        Returns:
            Results of the replayed members
        """
        return await self._run_forward(
            batch_id,
            commands,
            sorted(indices),
            replay_member,
            reverse_member,
            context,
            "redo",
        )

    async def rollback(
        self,
        batch_id: str,
        commands: Sequence[Any],
        reverse_member: MemberOperation,
        context: CommandContext,
        indices: Optional[Sequence[int]] = None,
    ) -> RollbackReport:
        """
        Reverse members in reverse order, best-effort.

        Members that are not reversible, or that no longer report themselves
        executed, are skipped.

        Args:
            indices: Positions in `commands` to consider; all when omitted

        Returns:
            RollbackReport listing reversed, skipped and failed members
        """
        report = RollbackReport(batch_id=batch_id)
        positions = list(range(len(commands)) if indices is None else indices)
        self._logger.info(
            f"Rolling back batch {batch_id} ({len(positions)} commands)"
        )

        for index in reversed(positions):
            command = commands[index]

            if not is_reversible(command) or not reports_executed(command):
                report.skipped_indices.append(index)
                continue

            try:
                await reverse_member(command, context)
                report.reversed_indices.append(index)
                self._logger.debug(
                    f"Rolled back batch {batch_id} command {index} ({command_type(command)})"
                )
            except Exception as e:
                report.failures.append(
                    RollbackFailure(
                        index=index, command_type=command_type(command), error=e
                    )
                )
                self._logger.error(
                    f"Failed to roll back batch {batch_id} command {index} "
                    f"({command_type(command)}): {str(e)}"
                )

        self._logger.info(
            f"Batch {batch_id} rollback completed: "
            f"{len(report.reversed_indices)} reversed, "
            f"{len(report.skipped_indices)} skipped, "
            f"{len(report.failures)} failed"
        )
        return report

    async def _run_forward(
        self,
        batch_id: str,
        commands: Sequence[Any],
        indices: Sequence[int],
        member_operation: MemberOperation,
        reverse_member: MemberOperation,
        context: CommandContext,
        phase: str,
    ) -> List[Any]:
        results: List[Any] = []
        completed: List[int] = []

        for index in indices:
            command = commands[index]
            self._logger.debug(
                f"Batch {batch_id} {phase}: command {index + 1}/{len(commands)} "
                f"({command_type(command)})"
            )

            try:
                result = await member_operation(command, context)
            except Exception as e:
                self._logger.error(
                    f"Batch {batch_id} command {index} ({command_type(command)}) "
                    f"failed during {phase}, rolling back: {str(e)}"
                )
                report = await self.rollback(
                    batch_id, commands, reverse_member, context, completed
                )
                raise BatchError(
                    batch_id,
                    f"Batch {phase} failed at command {index} "
                    f"({command_type(command)}): {str(e)}",
                    failed_index=index,
                    command_type=command_type(command),
                    original_error=e,
                    executed_count=len(completed),
                    rollback_report=report,
                ) from e

            results.append(result)
            completed.append(index)

        return results
