from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
import logging
from .command_context import CommandContext


REQUIRED_CAPABILITIES = ("execute", "can_execute", "get_description")


class Command(ABC):
    """
    Base interface for all debug commands.

    A command encapsulates one operation against the simulated state. The
    engine borrows the instance for the duration of execute/undo/redo calls
    and keeps a reference to it (never a copy) in its history and stacks.

    All commands must implement:
    - can_execute(): Whether the command may run in the current state
    - execute(): The operation itself
    - get_description(): Human-readable summary

    Commands that can be reversed should extend ReversibleCommand instead.

    The executor maintains `executed`, `result` and `timestamp` through
    mark_executed() and mark_undone(); command authors do not need to set
    them themselves.
    """

    # Name used by the CommandRegistry; defaults to the class name
    command_name: str = ""

    def __init__(self) -> None:
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.executed: bool = False
        self.result: Any = None
        self.timestamp: Optional[float] = None

    @abstractmethod
    async def can_execute(self) -> bool:
        """
        Check whether the command can run against the current state.

        Returns:
            True if eligible. Returning False or raising both make the
            executor reject the command without touching its state.
        """
        pass

    @abstractmethod
    async def execute(self, context: CommandContext) -> Any:
        """
        Perform the operation.

        Args:
            context: Opaque execution context supplied by the caller

        Returns:
            Operation result; stored as `result` and returned to the caller
        """
        pass

    @abstractmethod
    def get_description(self) -> str:
        """Return a human-readable description of what this command does"""
        pass

    def get_timestamp(self) -> Optional[float]:
        """Epoch seconds of the last successful execute, None if not executed"""
        return self.timestamp

    def get_command_name(self) -> str:
        return self.command_name or self.__class__.__name__

    def is_executed(self) -> bool:
        return self.executed

    def get_result(self) -> Any:
        return self.result

    def mark_executed(self, result: Any, timestamp: float) -> None:
        """Record a successful execute"""
        self.executed = True
        self.result = result
        self.timestamp = timestamp

    def mark_undone(self, result: Any) -> None:
        """Record a successful undo"""
        self.executed = False
        self.result = result
        self.timestamp = None

    def get_command_info(self) -> Dict[str, Any]:
        """Summary of the command's current state"""
        return {
            "type": self.get_command_name(),
            "description": self.get_description(),
            "executed": self.executed,
            "timestamp": self.timestamp,
            "reversible": is_reversible(self),
        }

    def __str__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.get_command_name()}')"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"name='{self.get_command_name()}', "
            f"executed={self.executed}, "
            f"timestamp={self.timestamp}"
            f")"
        )


class ReversibleCommand(Command):
    """
    Command that can be undone and redone.

    Implementations must snapshot whatever state they mutate during execute()
    so that undo() can restore it.
    """

    @abstractmethod
    async def undo(self, context: CommandContext) -> Any:
        """
        Reverse the effect of the last execute.

        Args:
            context: Opaque execution context supplied by the caller

        Returns:
            Result of the reversal
        """
        pass

    def can_undo(self) -> bool:
        """
        Whether reversal is currently permitted.

        Default: only an executed command can be undone.
        """
        return self.executed


def missing_capabilities(command: Any) -> List[str]:
    """Names of required capabilities `command` does not expose as callables"""
    return [
        name
        for name in REQUIRED_CAPABILITIES
        if not callable(getattr(command, name, None))
    ]


def is_reversible(command: Any) -> bool:
    """Whether `command` declares reversal capability"""
    if isinstance(command, ReversibleCommand):
        return True
    if isinstance(command, Command):
        return False
    return callable(getattr(command, "undo", None))


def has_undo_query(command: Any) -> bool:
    return callable(getattr(command, "can_undo", None))


def can_undo_now(command: Any) -> bool:
    """
    Evaluate the command's can-undo query.

    Reversible commands without a can-undo query are assumed always safe to
    reverse.
    """
    if not is_reversible(command):
        return False
    if not has_undo_query(command):
        return True
    return bool(command.can_undo())


def reports_executed(command: Any) -> bool:
    """Whether the command reports itself executed (assumed True if it has no flag)"""
    return bool(getattr(command, "executed", True))


def command_type(command: Any) -> str:
    return type(command).__name__


def describe(command: Any) -> str:
    """Description used in logs and summaries, falling back to the type name"""
    if callable(getattr(command, "get_description", None)):
        return str(command.get_description())
    return command_type(command)
