"""Console input/output adapters."""

from .console import Console, ConsoleError, StreamConsole, TerminalConsole

__all__ = [
    "Console",
    "ConsoleError",
    "StreamConsole",
    "TerminalConsole",
]
