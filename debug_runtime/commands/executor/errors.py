from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .batch_manager import RollbackReport


class CommandEngineError(Exception):
    """Base class for all errors raised by the command execution engine"""


class ValidationError(CommandEngineError):
    """Raised when a value does not satisfy the command contract"""

    def __init__(self, message: str, capability: Optional[str] = None):
        self.capability = capability
        super().__init__(message)


class IneligibleError(CommandEngineError):
    """Raised when a command's own precondition rejects execution"""

    def __init__(self, command_name: str, reason: Optional[Exception] = None):
        self.command_name = command_name
        self.reason = reason
        detail = f": {reason}" if reason else ""
        super().__init__(
            f"Command '{command_name}' cannot be executed in current state{detail}"
        )


class ExecutionError(CommandEngineError):
    """Raised when a command's execute or undo operation fails"""

    def __init__(
        self, command_name: str, original_error: Exception, operation: str = "execute"
    ):
        self.command_name = command_name
        self.original_error = original_error
        self.operation = operation
        super().__init__(
            f"Command '{command_name}' {operation} failed: {str(original_error)}"
        )


class EmptyStackError(CommandEngineError):
    """Raised when undo/redo is requested with nothing to reverse"""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"No commands available to {operation}")


class UnsupportedReversalError(CommandEngineError):
    """Raised when undo targets a command that cannot be reversed right now"""

    def __init__(self, command_name: str, reason: str):
        self.command_name = command_name
        self.reason = reason
        super().__init__(f"Command '{command_name}' {reason}")


class BatchError(CommandEngineError):
    """
    Raised when a batch fails.

    During execution this is raised after the executed members have been
    rolled back; `failed_index`, `command_type` and `original_error` identify
    the member that triggered it. During undo it reports members that could
    not be reversed through `rollback_report`.
    """

    def __init__(
        self,
        batch_id: str,
        message: str,
        failed_index: Optional[int] = None,
        command_type: Optional[str] = None,
        original_error: Optional[Exception] = None,
        executed_count: int = 0,
        rollback_report: Optional["RollbackReport"] = None,
    ):
        self.batch_id = batch_id
        self.failed_index = failed_index
        self.command_type = command_type
        self.original_error = original_error
        self.executed_count = executed_count
        self.rollback_report = rollback_report
        super().__init__(message)
