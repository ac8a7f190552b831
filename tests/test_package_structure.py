"""Baseline tests ensuring the package skeleton loads correctly."""

import lc3vm


def test_package_exports() -> None:
    for name in ("cpu", "bus", "io", "system", "loader", "ui", "utils"):
        assert hasattr(lc3vm, name), f"missing submodule: {name}"


def test_bus_exports() -> None:
    from lc3vm import bus

    for name in ("MemorySystem", "Memory", "UnmappedMemory", "Addressable", "KeyboardDevice"):
        assert hasattr(bus, name), f"bus missing symbol: {name}"


def test_cpu_exports() -> None:
    from lc3vm import cpu

    for name in ("LC3", "CPUError", "IllegalInstructionError", "IllegalTrapError", "TrapDispatcher"):
        assert hasattr(cpu, name), f"cpu missing symbol: {name}"
