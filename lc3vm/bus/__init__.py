"""Bus-related helpers for the LC-3 virtual machine."""

from .keyboard import KBDR, KBSR, KeyboardDevice
from .memory import ADDRESS_SPACE, Addressable, Memory, MemoryError, MemorySystem, UnmappedMemory

__all__ = [
    "ADDRESS_SPACE",
    "Addressable",
    "KBDR",
    "KBSR",
    "KeyboardDevice",
    "Memory",
    "MemorySystem",
    "MemoryError",
    "UnmappedMemory",
]
