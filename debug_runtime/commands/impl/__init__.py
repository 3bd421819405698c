"""
Generic command implementations.

Domain commands (killing or restarting a simulated process, ...) live in the
embedding application; this package only holds commands that are useful
regardless of domain.
"""

from .callable_command import CallableCommand

__all__ = ["CallableCommand"]
