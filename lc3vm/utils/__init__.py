"""Utility helpers for the LC-3 virtual machine."""

from .debug import debug_enabled, debug_log, reset_debug_categories
from .trace import TraceEntry, TraceRecorder

__all__ = [
    "debug_enabled",
    "debug_log",
    "reset_debug_categories",
    "TraceEntry",
    "TraceRecorder",
]
