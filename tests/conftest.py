from typing import List

import pytest

from debug_runtime.commands.events.notifier import CommandEvent
from debug_runtime.commands.executor.command_executor import CommandExecutor
from debug_runtime.config.constants import WILDCARD_EVENT
from debug_runtime.util.clock import ManualClock, SequentialBatchIdGenerator
from tests.commands.helpers import ProcessTable


@pytest.fixture
def clock() -> ManualClock:
    """Clock frozen at a fixed epoch time until advanced"""
    return ManualClock(start=1_700_000_000.0)


@pytest.fixture
def batch_ids() -> SequentialBatchIdGenerator:
    """Predictable batch ids: batch_1, batch_2, ..."""
    return SequentialBatchIdGenerator()


@pytest.fixture
def executor(clock: ManualClock, batch_ids: SequentialBatchIdGenerator) -> CommandExecutor:
    """Executor with a small history and deterministic time and ids"""
    return CommandExecutor(
        max_history_size=5, clock=clock, batch_id_factory=batch_ids, timer=clock
    )


@pytest.fixture
def process_table() -> ProcessTable:
    """Three running processes"""
    return ProcessTable(
        {
            "proc_1001": "running",
            "proc_1002": "running",
            "proc_1003": "running",
        }
    )


@pytest.fixture
def recorded_events(executor: CommandExecutor) -> List[CommandEvent]:
    """Every event the executor emits, in order"""
    events: List[CommandEvent] = []
    executor.events.subscribe(WILDCARD_EVENT, events.append)
    return events
