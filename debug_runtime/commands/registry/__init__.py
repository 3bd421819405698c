"""
Command registry for building commands from terminal command names.
"""

from .command_registry import CommandRegistry

__all__ = ["CommandRegistry"]
