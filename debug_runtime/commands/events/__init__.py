"""
Notifications raised by the command executor.
"""

from .notifier import CommandEvent, EventNotifier

__all__ = ["CommandEvent", "EventNotifier"]
