import logging
from typing import List
from unittest.mock import Mock

import pytest

from debug_runtime.commands.events.notifier import CommandEvent, EventNotifier
from debug_runtime.config import constants


def make_event(event_type: str = constants.EXECUTION_COMPLETED, timestamp: float = 1.0) -> CommandEvent:
    return CommandEvent(event_type=event_type, timestamp=timestamp)


class TestEventNotifier:
    """Test subscription and delivery of engine notifications"""

    def test_subscribe_and_emit(self) -> None:
        notifier = EventNotifier()
        listener = Mock()
        notifier.subscribe(constants.UNDO_COMPLETED, listener)

        event = make_event(constants.UNDO_COMPLETED)
        notifier.emit(event)
        notifier.emit(make_event(constants.REDO_COMPLETED))

        listener.assert_called_once_with(event)

    def test_unknown_event_rejected(self) -> None:
        notifier = EventNotifier()

        with pytest.raises(ValueError, match="Unknown event 'command-executed'"):
            notifier.subscribe("command-executed", Mock())

    def test_non_callable_rejected(self) -> None:
        notifier = EventNotifier()

        with pytest.raises(TypeError, match="must be callable"):
            notifier.subscribe(constants.UNDO_COMPLETED, "not a function")

    def test_wildcard_receives_everything(self) -> None:
        notifier = EventNotifier()
        received: List[str] = []
        notifier.subscribe(constants.WILDCARD_EVENT, lambda e: received.append(e.event_type))

        for event_type in constants.ALL_EVENTS:
            notifier.emit(make_event(event_type))

        assert received == list(constants.ALL_EVENTS)

    def test_listeners_called_in_subscription_order(self) -> None:
        notifier = EventNotifier()
        calls: List[str] = []
        notifier.subscribe(constants.WILDCARD_EVENT, lambda e: calls.append("wildcard"))
        notifier.subscribe(constants.BATCH_COMPLETED, lambda e: calls.append("first"))
        notifier.subscribe(constants.BATCH_COMPLETED, lambda e: calls.append("second"))

        notifier.emit(make_event(constants.BATCH_COMPLETED))

        assert calls == ["first", "second", "wildcard"]

    def test_unsubscribe(self) -> None:
        notifier = EventNotifier()
        listener = Mock()
        sub_id = notifier.subscribe(constants.BATCH_FAILED, listener)

        assert notifier.unsubscribe(constants.BATCH_FAILED, sub_id) is True
        assert notifier.unsubscribe(constants.BATCH_FAILED, sub_id) is False
        assert notifier.listener_count(constants.BATCH_FAILED) == 0

        notifier.emit(make_event(constants.BATCH_FAILED))
        listener.assert_not_called()

    def test_failing_listener_isolated(self, caplog: pytest.LogCaptureFixture) -> None:
        notifier = EventNotifier()
        healthy = Mock()
        notifier.subscribe(constants.EXECUTION_FAILED, Mock(side_effect=RuntimeError("boom")))
        notifier.subscribe(constants.EXECUTION_FAILED, healthy)

        with caplog.at_level(logging.ERROR):
            notifier.emit(make_event(constants.EXECUTION_FAILED))

        healthy.assert_called_once()
        assert "boom" in caplog.text

    def test_recent_events_bounded(self) -> None:
        notifier = EventNotifier(recent_events_size=2)

        for timestamp in (1.0, 2.0, 3.0):
            notifier.emit(make_event(timestamp=timestamp))

        assert [e.timestamp for e in notifier.get_recent_events()] == [2.0, 3.0]
        assert [e.timestamp for e in notifier.get_recent_events(limit=1)] == [3.0]
