import itertools
import time
import uuid
from typing import Callable

from debug_runtime.config.constants import BATCH_ID_PREFIX

# Returns the current instant in seconds (epoch for timestamps, monotonic for durations)
Clock = Callable[[], float]

# Returns a fresh batch identifier
BatchIdFactory = Callable[[], str]


def system_clock() -> float:
    """Wall-clock time in epoch seconds"""
    return time.time()


def monotonic_clock() -> float:
    """Monotonic seconds for measuring durations; not related to epoch time"""
    return time.monotonic()


def new_batch_id() -> str:
    """Generate a random batch identifier (e.g. 'batch_3f2a9c1b7')"""
    return f"{BATCH_ID_PREFIX}_{uuid.uuid4().hex[:9]}"


def elapsed_ms(timer: Clock, start: float) -> float:
    """Milliseconds elapsed on `timer` since `start`"""
    return (timer() - start) * 1000


class SequentialBatchIdGenerator:
    """
    Deterministic batch id generator.

    Produces 'batch_1', 'batch_2', ... so that tests can predict batch ids.
    Instances are callable and can be passed wherever a BatchIdFactory is
    expected.
    """

    def __init__(self, prefix: str = BATCH_ID_PREFIX, start: int = 1):
        self._prefix = prefix
        self._counter = itertools.count(start)

    def __call__(self) -> str:
        return f"{self._prefix}_{next(self._counter)}"


class ManualClock:
    """
    Clock whose value only moves when told to.

    Useful for reproducible timestamps and durations in tests.
    """

    def __init__(self, start: float = 0.0, step: float = 0.0):
        self._now = start
        self._step = step

    def __call__(self) -> float:
        current = self._now
        self._now += self._step
        return current

    def advance(self, seconds: float) -> None:
        self._now += seconds

    @property
    def now(self) -> float:
        return self._now
