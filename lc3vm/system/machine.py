"""LC-3 machine assembly and memory map."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from lc3vm.bus import ADDRESS_SPACE, KeyboardDevice, Memory, MemorySystem
from lc3vm.cpu import LC3
from lc3vm.cpu.registers import PC_START
from lc3vm.io import Console, TerminalConsole
from lc3vm.utils import TraceRecorder


@dataclass
class MachineConfig:
    """Runtime configuration for the LC-3 machine."""

    entry_point: int = PC_START
    strict_operands: bool = True
    console: Optional[Console] = None
    trace_capacity: Optional[int] = None


@dataclass
class Machine:
    """Aggregates the core components of the LC-3."""

    memory: MemorySystem
    cpu: LC3
    ram: Memory
    keyboard: KeyboardDevice
    console: Console
    trace: Optional[TraceRecorder] = None


class MainRam(Memory):
    """The full 64K-word RAM; devices are mapped on top of it."""


def create_machine(config: MachineConfig) -> Machine:
    """Instantiate an LC-3 machine with the requested configuration."""

    console = config.console if config.console is not None else TerminalConsole()

    memory = MemorySystem()
    memory.allocate_space(ADDRESS_SPACE)

    ram = MainRam(0x0000, ADDRESS_SPACE)
    memory.register_memory(ram)

    keyboard = KeyboardDevice(console)
    memory.register_memory(keyboard)

    trace = TraceRecorder(config.trace_capacity) if config.trace_capacity else None

    cpu = LC3(
        memory,
        console,
        strict_operands=config.strict_operands,
        trace=trace,
    )
    cpu.reset(config.entry_point)

    return Machine(
        memory=memory,
        cpu=cpu,
        ram=ram,
        keyboard=keyboard,
        console=console,
        trace=trace,
    )
