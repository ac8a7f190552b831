"""Built-in trap service routines.

Trap vectors map directly onto native routines instead of indexing a trap
vector table in guest memory, so programs cannot install their own handlers.
"""

from __future__ import annotations

from typing import Callable, Dict

from lc3vm.bus import MemorySystem
from lc3vm.io import Console
from lc3vm.utils import debug_enabled, debug_log

from .errors import IllegalTrapError
from .opcodes import TrapVector
from .registers import RegisterFile

IN_PROMPT = "Enter a character: "
HALT_MESSAGE = "HALT\n"


class TrapDispatcher:
    def __init__(self, registers: RegisterFile, memory: MemorySystem, console: Console) -> None:
        self.registers = registers
        self.memory = memory
        self.console = console
        self._routines: Dict[TrapVector, Callable[[], bool]] = {
            TrapVector.GETC: self.trap_getc,
            TrapVector.OUT: self.trap_out,
            TrapVector.PUTS: self.trap_puts,
            TrapVector.IN: self.trap_in,
            TrapVector.PUTSP: self.trap_putsp,
            TrapVector.HALT: self.trap_halt,
        }

    def dispatch(self, vector: int, *, address: int = 0, word: int = 0) -> bool:
        """Run the routine for ``vector``; return True when the machine halts."""

        try:
            routine = self._routines[TrapVector(vector)]
        except ValueError:
            raise IllegalTrapError(
                f"illegal trap vector {vector:#04x} at {address:#06x}",
                address=address,
                word=word,
            ) from None
        if debug_enabled("trap"):
            debug_log("trap", "vector=%02x pc=%04x r0=%04x", vector, address, self.registers.get(0))
        return routine()

    # ------------------------------------------------------------------
    # Routines

    def trap_getc(self) -> bool:
        self.registers.set(0, self.console.read_char() & 0xFF)
        return False

    def trap_out(self) -> bool:
        self.console.write_char(self.registers.get(0) & 0xFF)
        self.console.flush()
        return False

    def trap_puts(self) -> bool:
        address = self.registers.get(0)
        cell = self.memory.read(address)
        while cell != 0:
            self.console.write_char(cell & 0xFF)
            address = (address + 1) & 0xFFFF
            cell = self.memory.read(address)
        self.console.flush()
        return False

    def trap_in(self) -> bool:
        self.console.write_text(IN_PROMPT)
        self.console.flush()
        char = self.console.read_char() & 0xFF
        self.console.write_char(char)
        self.console.flush()
        self.registers.set(0, char)
        return False

    def trap_putsp(self) -> bool:
        address = self.registers.get(0)
        while True:
            cell = self.memory.read(address)
            low = cell & 0xFF
            if low == 0:
                break
            self.console.write_char(low)
            high = (cell >> 8) & 0xFF
            if high == 0:
                break
            self.console.write_char(high)
            address = (address + 1) & 0xFFFF
        self.console.flush()
        return False

    def trap_halt(self) -> bool:
        self.console.write_text(HALT_MESSAGE)
        self.console.flush()
        return True
