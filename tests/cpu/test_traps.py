"""Tests for the built-in trap routines."""

from __future__ import annotations

from typing import Sequence

import pytest

from lc3vm.bus import Memory, MemorySystem
from lc3vm.cpu import IllegalTrapError, RegisterFile, TrapDispatcher, TrapVector
from lc3vm.io import ConsoleError, StreamConsole


def make_dispatcher(
    cells: Sequence[int] = (),
    *,
    at: int = 0x4000,
    input_data: bytes = b"",
) -> tuple[TrapDispatcher, StreamConsole]:
    console = StreamConsole(input_data)
    ms = MemorySystem()
    ms.allocate_space()
    ms.register_memory(Memory(0x0000, 0x10000))
    ms.load_words(at, cells)
    regs = RegisterFile()
    regs.set(0, at)
    return TrapDispatcher(regs, ms, console), console


def test_puts_stops_at_zero_cell() -> None:
    traps, console = make_dispatcher([0x0048, 0x0069, 0x0000, 0x0041])

    halt = traps.dispatch(TrapVector.PUTS)

    assert halt is False
    assert console.output_text() == "Hi"


def test_puts_writes_low_byte_only() -> None:
    traps, console = make_dispatcher([0x4148, 0x0000])

    traps.dispatch(TrapVector.PUTS)

    assert console.output_text() == "H"


def test_puts_wraps_at_end_of_memory() -> None:
    traps, console = make_dispatcher([0x0041], at=0xFFFF)

    traps.dispatch(TrapVector.PUTS)

    assert console.output_text() == "A"


def test_putsp_packs_low_then_high() -> None:
    traps, console = make_dispatcher([0x6948, 0x0000])

    traps.dispatch(TrapVector.PUTSP)

    assert console.output_text() == "Hi"


def test_putsp_odd_length_string() -> None:
    traps, console = make_dispatcher([0x6948, 0x0021, 0x4242])

    traps.dispatch(TrapVector.PUTSP)

    assert console.output_text() == "Hi!"


def test_putsp_zero_low_byte_terminates_before_high() -> None:
    traps, console = make_dispatcher([0x4100])

    traps.dispatch(TrapVector.PUTSP)

    assert console.output_text() == ""


def test_out_writes_low_byte_of_r0() -> None:
    traps, console = make_dispatcher()
    traps.registers.set(0, 0x1241)

    traps.dispatch(TrapVector.OUT)

    assert console.output_bytes() == b"A"


def test_getc_reads_without_echo() -> None:
    traps, console = make_dispatcher(input_data=b"z")
    traps.registers.set(0, 0xFFFF)

    traps.dispatch(TrapVector.GETC)

    assert traps.registers.get(0) == ord("z")
    assert console.output_bytes() == b""


def test_in_prompts_and_echoes() -> None:
    traps, console = make_dispatcher(input_data=b"x")

    traps.dispatch(TrapVector.IN)

    assert traps.registers.get(0) == 0x78
    assert console.output_text() == "Enter a character: x"


def test_high_bit_input_is_zero_extended() -> None:
    traps, _ = make_dispatcher(input_data=b"\xe9")

    traps.dispatch(TrapVector.GETC)

    assert traps.registers.get(0) == 0x00E9


def test_halt_prints_notice() -> None:
    traps, console = make_dispatcher()

    assert traps.dispatch(TrapVector.HALT) is True
    assert console.output_text() == "HALT\n"


def test_unknown_vector_raises_with_context() -> None:
    traps, _ = make_dispatcher()

    with pytest.raises(IllegalTrapError) as info:
        traps.dispatch(0x30, address=0x3010, word=0xF030)

    assert info.value.address == 0x3010
    assert info.value.word == 0xF030
    assert "0x30" in str(info.value)


def test_getc_on_closed_console_raises() -> None:
    traps, _ = make_dispatcher()

    with pytest.raises(ConsoleError):
        traps.dispatch(TrapVector.GETC)
