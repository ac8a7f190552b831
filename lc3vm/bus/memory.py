"""Word-addressed memory system for the LC-3 virtual machine.

The LC-3 has a flat 16-bit address space of 16-bit words. Plain storage and
memory-mapped devices are both :class:`Addressable` regions registered with a
:class:`MemorySystem`, which dispatches every read and write to the region that
owns the address. Devices therefore never leak into the CPU: the executor only
calls :meth:`MemorySystem.read` and :meth:`MemorySystem.write`.
"""

from __future__ import annotations

from array import array
from dataclasses import dataclass
from typing import Dict, Iterable, Sequence, Type, TypeVar

from lc3vm.utils import debug_enabled, debug_log

ADDRESS_SPACE = 0x10000


def _mask16(value: int) -> int:
    """Clamp ``value`` to the 16-bit address/word range of the LC-3."""

    return value & 0xFFFF


class MemoryError(Exception):
    """Raised when the memory system is misconfigured or used incorrectly."""


class Addressable:
    """Interface for objects mapped into the CPU address space."""

    def get_start_address(self) -> int:  # pragma: no cover - interface
        raise NotImplementedError

    def get_end_address(self) -> int:  # pragma: no cover - interface
        raise NotImplementedError

    def load16(self, address: int) -> int:  # pragma: no cover - interface
        raise NotImplementedError

    def store16(self, address: int, value: int) -> None:  # pragma: no cover - interface
        raise NotImplementedError


@dataclass
class Memory(Addressable):
    """Plain word-addressable storage region."""

    start: int
    length: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.length <= 0:
            raise MemoryError("memory region must have a positive length and non-negative start")
        self._data = array("H", bytes(2 * self.length))

    def get_start_address(self) -> int:
        return self.start

    def get_end_address(self) -> int:
        return self.start + self.length - 1

    def _offset(self, address: int) -> int:
        offset = address - self.start
        if not 0 <= offset < self.length:
            raise MemoryError(f"address {address:#06x} outside region {self.start:#06x}-{self.get_end_address():#06x}")
        return offset

    def load16(self, address: int) -> int:
        return self._data[self._offset(address)]

    def store16(self, address: int, value: int) -> None:
        self._data[self._offset(address)] = _mask16(value)

    def snapshot(self, start: int | None = None, length: int | None = None) -> tuple[int, ...]:
        begin = self._offset(self.start if start is None else start)
        count = self.length - begin if length is None else length
        return tuple(self._data[begin:begin + count])


class UnmappedMemory(Addressable):
    """Fallback region used for addresses without a mapped region."""

    def __init__(self, start: int, length: int) -> None:
        self._start = start
        self._length = length

    def get_start_address(self) -> int:
        return self._start

    def get_end_address(self) -> int:
        return self._start + self._length - 1

    def load16(self, address: int) -> int:
        return 0x0000

    def store16(self, address: int, value: int) -> None:  # noqa: D401 - intentionally empty
        """Ignore writes to unmapped memory."""


T_Addressable = TypeVar("T_Addressable", bound=Addressable)


class MemorySystem:
    """16-bit address map that dispatches word reads/writes to regions."""

    def __init__(self) -> None:
        self._space: list[Addressable] | None = None
        self._registry: Dict[Type[Addressable], Addressable] = {}

    def allocate_space(self, capacity: int = ADDRESS_SPACE) -> None:
        if capacity <= 0 or capacity > ADDRESS_SPACE:
            raise MemoryError(f"capacity {capacity} out of range (1-65536)")
        filler = UnmappedMemory(0, capacity)
        self._space = [filler] * capacity

    def register_memory(self, memory: Addressable) -> None:
        space = self._ensure_space()
        start = _mask16(memory.get_start_address())
        end = _mask16(memory.get_end_address())
        if end < start:
            raise MemoryError("memory end precedes start")
        if end >= len(space):
            raise MemoryError(f"memory region {start:#06x}-{end:#06x} exceeds allocated space")
        for address in range(start, end + 1):
            space[address] = memory
        self._registry[type(memory)] = memory
        if debug_enabled("memory"):
            debug_log("memory", "mapped %s at %04x-%04x", type(memory).__name__, start, end)

    def get_memory(self, cls: Type[T_Addressable]) -> T_Addressable | None:
        memory = self._registry.get(cls)
        if memory is None:
            return None
        return memory  # type: ignore[return-value]

    def get_memories(self) -> Iterable[Addressable]:
        return self._registry.values()

    def region_at(self, address: int) -> Addressable:
        return self._ensure_space()[_mask16(address)]

    def read(self, address: int) -> int:
        space = self._ensure_space()
        addr = _mask16(address)
        return _mask16(space[addr].load16(addr))

    def write(self, address: int, value: int) -> None:
        space = self._ensure_space()
        addr = _mask16(address)
        space[addr].store16(addr, _mask16(value))

    def load_words(self, origin: int, words: Sequence[int]) -> None:
        """Store ``words`` contiguously from ``origin``, wrapping at 0xFFFF."""

        for offset, word in enumerate(words):
            self.write(origin + offset, word)

    def _ensure_space(self) -> list[Addressable]:
        if self._space is None:
            raise MemoryError("memory space not allocated")
        return self._space
