from typing import Any, Callable, Optional

from debug_runtime.commands.interfaces.command import ReversibleCommand
from debug_runtime.commands.interfaces.command_context import CommandContext
from debug_runtime.util.async_utils import maybe_await


class CallableCommand(ReversibleCommand):
    """
    Reversible command assembled from plain callables.

    Lets the embedding application wrap an operation and its inverse
    without writing a command class:

        command = CallableCommand(
            "Set priority of proc_1001 to high",
            do=lambda ctx: set_priority("proc_1001", "high"),
            undo=lambda ctx: set_priority("proc_1001", previous),
        )

    `do`, `undo` and `precondition` may be sync functions or coroutine
    functions. `do` and `undo` receive the CommandContext.
    """

    command_name = "callable"

    def __init__(
        self,
        description: str,
        do: Callable[[CommandContext], Any],
        undo: Callable[[CommandContext], Any],
        precondition: Optional[Callable[[], Any]] = None,
    ):
        super().__init__()
        self._description = description
        self._do = do
        self._undo = undo
        self._precondition = precondition

    async def can_execute(self) -> bool:
        if self._precondition is None:
            return True
        return bool(await maybe_await(self._precondition()))

    async def execute(self, context: CommandContext) -> Any:
        self.logger.debug(f"Running '{self._description}'")
        return await maybe_await(self._do(context))

    async def undo(self, context: CommandContext) -> Any:
        if not self.executed:
            raise RuntimeError(
                f"Nothing to undo: '{self._description}' was not executed"
            )
        self.logger.debug(f"Reverting '{self._description}'")
        return await maybe_await(self._undo(context))

    def get_description(self) -> str:
        return self._description
