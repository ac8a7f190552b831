"""Memory-mapped keyboard registers (KBSR/KBDR)."""

from __future__ import annotations

from array import array

from lc3vm.io import Console
from lc3vm.utils import debug_enabled, debug_log

from .memory import Addressable

KBSR = 0xFE00
KBDR = 0xFE02

KEYBOARD_READY = 0x8000


class KeyboardDevice(Addressable):
    """Keyboard status and data registers backed by a :class:`Console`.

    Reading KBSR polls the console without consuming input and reports
    readiness in bit 15. Reading KBDR blocks until a character is available and
    returns it zero-extended. Every write, and every access to the unused word
    between the two registers, is plain storage.
    """

    def __init__(self, console: Console, *, start: int = KBSR) -> None:
        self._console = console
        self._start = start
        self._status = start
        self._data_address = start + (KBDR - KBSR)
        self._cells = array("H", bytes(2 * (self._data_address - start + 1)))

    @property
    def console(self) -> Console:
        return self._console

    def get_start_address(self) -> int:
        return self._start

    def get_end_address(self) -> int:
        return self._data_address

    def load16(self, address: int) -> int:
        if address == self._status:
            ready = self._console.poll_ready()
            return KEYBOARD_READY if ready else 0x0000
        if address == self._data_address:
            char = self._console.read_char() & 0xFF
            if debug_enabled("memory"):
                debug_log("memory", "kbdr=%02x", char)
            return char
        return self._cells[address - self._start]

    def store16(self, address: int, value: int) -> None:
        self._cells[address - self._start] = value & 0xFFFF
