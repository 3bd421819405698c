from typing import Dict

import pytest

from debug_runtime.commands.executor.command_executor import CommandExecutor
from debug_runtime.commands.executor.errors import IneligibleError
from debug_runtime.commands.impl.callable_command import CallableCommand
from debug_runtime.commands.interfaces.command_context import CommandContext


@pytest.fixture
def priorities() -> Dict[str, str]:
    return {"proc_1001": "normal"}


def set_priority_command(priorities: Dict[str, str], value: str) -> CallableCommand:
    previous = priorities["proc_1001"]

    def do(context: CommandContext) -> str:
        priorities["proc_1001"] = value
        return value

    def undo(context: CommandContext) -> str:
        priorities["proc_1001"] = previous
        return previous

    return CallableCommand(f"Set priority of proc_1001 to {value}", do=do, undo=undo)


class TestCallableCommand:
    """Test commands assembled from callables"""

    @pytest.mark.asyncio
    async def test_sync_callables_round_trip(
        self, executor: CommandExecutor, priorities: Dict[str, str]
    ) -> None:
        command = set_priority_command(priorities, "high")

        assert await executor.execute(command) == "high"
        assert priorities["proc_1001"] == "high"

        assert await executor.undo() == "normal"
        assert priorities["proc_1001"] == "normal"

        await executor.redo()
        assert priorities["proc_1001"] == "high"

    @pytest.mark.asyncio
    async def test_async_callables(self, executor: CommandExecutor) -> None:
        calls = []

        async def do(context: CommandContext) -> str:
            calls.append("do")
            return "done"

        async def undo(context: CommandContext) -> str:
            calls.append("undo")
            return "undone"

        async def precondition() -> bool:
            return True

        command = CallableCommand("Async work", do=do, undo=undo, precondition=precondition)

        assert await executor.execute(command) == "done"
        assert await executor.undo() == "undone"
        assert calls == ["do", "undo"]

    @pytest.mark.asyncio
    async def test_precondition_rejects(self, executor: CommandExecutor) -> None:
        command = CallableCommand(
            "Never allowed",
            do=lambda ctx: "done",
            undo=lambda ctx: None,
            precondition=lambda: False,
        )

        with pytest.raises(IneligibleError):
            await executor.execute(command)

        assert command.executed is False

    @pytest.mark.asyncio
    async def test_undo_before_execute_raises(self) -> None:
        command = CallableCommand("Not run", do=lambda ctx: None, undo=lambda ctx: None)

        with pytest.raises(RuntimeError, match="was not executed"):
            await command.undo(CommandContext())

    def test_description_and_name(self) -> None:
        command = CallableCommand("Flush caches", do=lambda ctx: None, undo=lambda ctx: None)

        assert command.get_description() == "Flush caches"
        assert command.get_command_name() == "callable"
