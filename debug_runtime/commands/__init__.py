"""
Command pattern implementation for the debug runtime.

This module provides the command execution engine: the command contract,
an executor with rolling history, undo/redo and atomic batches, and the
registry used to build commands from terminal input.
"""
