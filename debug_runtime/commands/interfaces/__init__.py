"""
Command pattern interfaces for the debug runtime.
"""

from .command import Command, ReversibleCommand
from .command_context import CommandContext

__all__ = ["Command", "ReversibleCommand", "CommandContext"]
