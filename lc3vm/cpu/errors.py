"""Fault types raised by the LC-3 executor."""

from __future__ import annotations


class CPUError(Exception):
    """Base error for CPU faults; records where the fault happened."""

    def __init__(self, message: str, *, address: int = 0, word: int = 0) -> None:
        super().__init__(message)
        self.address = address & 0xFFFF
        self.word = word & 0xFFFF


class IllegalInstructionError(CPUError):
    """Raised for the reserved opcode, RTI, or undefined operand bits."""


class IllegalTrapError(CPUError):
    """Raised when TRAP names a vector without a built-in routine."""
