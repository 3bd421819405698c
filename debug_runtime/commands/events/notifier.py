from collections import deque
from dataclasses import dataclass, field
from typing import Any, Callable, Deque, Dict, List, Optional, Tuple
import logging
import uuid

from debug_runtime.config.constants import (
    ALL_EVENTS,
    DEFAULT_RECENT_EVENTS_SIZE,
    WILDCARD_EVENT,
)


logger = logging.getLogger(__name__)


@dataclass
class CommandEvent:
    """Payload delivered to notification listeners"""

    event_type: str
    timestamp: float
    duration_ms: float = 0.0
    command: Any = None
    result: Any = None
    error: Optional[Exception] = None
    batch_id: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)


Listener = Callable[[CommandEvent], Any]


class EventNotifier:
    """
    Synchronous publish/subscribe channel for engine notifications.

    Listeners are called in subscription order. A listener that raises is
    logged and skipped; it never fails the engine operation that emitted the
    event. Subscribing to '*' receives every event.
    """

    def __init__(self, recent_events_size: int = DEFAULT_RECENT_EVENTS_SIZE):
        self._subscribers: Dict[str, List[Tuple[str, Listener]]] = {}
        self._recent: Deque[CommandEvent] = deque(maxlen=recent_events_size)

    def subscribe(self, event_type: str, callback: Listener) -> str:
        """
        Register `callback` for `event_type`.

        Args:
            event_type: One of the engine's event names, or '*'
            callback: Called with the CommandEvent

        Returns:
            Subscription id for unsubscribe()

        Raises:
            ValueError: If the event name is unknown
            TypeError: If callback is not callable
        """
        if event_type != WILDCARD_EVENT and event_type not in ALL_EVENTS:
            raise ValueError(
                f"Unknown event '{event_type}'. Available events: {list(ALL_EVENTS)}"
            )
        if not callable(callback):
            raise TypeError("Event listener must be callable")

        sub_id = uuid.uuid4().hex
        self._subscribers.setdefault(event_type, []).append((sub_id, callback))
        return sub_id

    def unsubscribe(self, event_type: str, sub_id: str) -> bool:
        """Remove a subscription; returns False if it was not found"""
        subs = self._subscribers.get(event_type, [])
        remaining = [(sid, cb) for sid, cb in subs if sid != sub_id]
        self._subscribers[event_type] = remaining
        return len(remaining) != len(subs)

    def emit(self, event: CommandEvent) -> None:
        self._recent.append(event)

        listeners = self._subscribers.get(event.event_type, []) + self._subscribers.get(
            WILDCARD_EVENT, []
        )
        for sub_id, callback in listeners:
            try:
                callback(event)
            except Exception as e:
                logger.error(
                    f"Listener {sub_id} failed handling '{event.event_type}': {e}",
                    exc_info=True,
                )

    def listener_count(self, event_type: str) -> int:
        return len(self._subscribers.get(event_type, []))

    def get_recent_events(self, limit: Optional[int] = None) -> List[CommandEvent]:
        """Most recently emitted events, oldest first"""
        events = list(self._recent)
        return events[-limit:] if limit else events
