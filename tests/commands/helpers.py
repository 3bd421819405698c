"""Fake commands used across the command engine tests."""

from typing import Any, Dict, List, Optional

from debug_runtime.commands.interfaces.command import Command, ReversibleCommand
from debug_runtime.commands.interfaces.command_context import CommandContext
from debug_runtime.util.clock import ManualClock


class ProcessTable:
    """Minimal stand-in for the simulated process manager"""

    def __init__(self, processes: Dict[str, str]):
        self.processes = dict(processes)

    def snapshot(self) -> Dict[str, str]:
        return dict(self.processes)


class SetStatusCommand(ReversibleCommand):
    """Set a process status, remembering the previous one for undo"""

    def __init__(
        self,
        table: ProcessTable,
        pid: str,
        status: str,
        fail_on_execute: bool = False,
        fail_on_undo: bool = False,
        undo_allowed: bool = True,
        clock: Optional[ManualClock] = None,
        work_seconds: float = 0.0,
    ):
        super().__init__()
        self.table = table
        self.pid = pid
        self.status = status
        self.fail_on_execute = fail_on_execute
        self.fail_on_undo = fail_on_undo
        self.undo_allowed = undo_allowed
        self.clock = clock
        self.work_seconds = work_seconds
        self.previous: Optional[str] = None
        self.execute_calls = 0
        self.undo_calls = 0

    async def can_execute(self) -> bool:
        return self.pid in self.table.processes

    async def execute(self, context: CommandContext) -> Dict[str, Any]:
        self.execute_calls += 1
        if self.clock is not None:
            self.clock.advance(self.work_seconds)
        if self.fail_on_execute:
            raise RuntimeError(f"Process {self.pid} is locked")
        self.previous = self.table.processes[self.pid]
        self.table.processes[self.pid] = self.status
        return {"pid": self.pid, "status": self.status}

    async def undo(self, context: CommandContext) -> Dict[str, Any]:
        self.undo_calls += 1
        if self.fail_on_undo:
            raise RuntimeError(f"Process {self.pid} state was lost")
        self.table.processes[self.pid] = self.previous
        return {"pid": self.pid, "status": self.previous}

    def can_undo(self) -> bool:
        return self.executed and self.undo_allowed

    def get_description(self) -> str:
        return f"Set {self.pid} to {self.status}"


class KillProcessCommand(SetStatusCommand):
    command_name = "kill"

    def __init__(self, table: ProcessTable, pid: str, **kwargs: Any):
        super().__init__(table, pid, "terminated", **kwargs)

    def get_description(self) -> str:
        return f"Kill process {self.pid}"


class SuspendProcessCommand(SetStatusCommand):
    command_name = "suspend"

    def __init__(self, table: ProcessTable, pid: str, **kwargs: Any):
        super().__init__(table, pid, "suspended", **kwargs)


class LogMessageCommand(Command):
    """Append to a log; cannot be reversed"""

    command_name = "log"

    def __init__(self, log: List[str], message: str, fail: bool = False):
        super().__init__()
        self.log = log
        self.message = message
        self.fail = fail

    async def can_execute(self) -> bool:
        return True

    async def execute(self, context: CommandContext) -> str:
        if self.fail:
            raise RuntimeError("Log is full")
        self.log.append(self.message)
        return self.message

    def get_description(self) -> str:
        return f"Log '{self.message}'"


class BrokenPreconditionCommand(Command):
    async def can_execute(self) -> bool:
        raise RuntimeError("Precondition lookup failed")

    async def execute(self, context: CommandContext) -> None:
        return None

    def get_description(self) -> str:
        return "Always raises in can_execute"


class DuckCommand:
    """Satisfies the command contract without inheriting from Command"""

    def __init__(self, counter: Dict[str, int], with_undo: bool = True):
        self.counter = counter
        self.executed = False
        if with_undo:
            self.undo = self._undo

    def can_execute(self) -> bool:
        return True

    def execute(self, context: CommandContext) -> int:
        self.counter["value"] += 1
        self.executed = True
        return self.counter["value"]

    def _undo(self, context: CommandContext) -> int:
        self.counter["value"] -= 1
        return self.counter["value"]

    def get_description(self) -> str:
        return "Increment counter"


class MissingDescriptionCommand:
    def can_execute(self) -> bool:
        return True

    def execute(self, context: CommandContext) -> None:
        return None


class AsyncCanUndoCommand(DuckCommand):
    """Declares can_undo() as a coroutine function"""

    async def can_undo(self) -> bool:
        return False
