"""Tests for instruction field decoding and the opcode table."""

from __future__ import annotations

import pytest

from lc3vm.cpu import Opcode, sign_extend
from lc3vm.cpu.opcodes import (
    DEFAULT_INSTRUCTIONS,
    MNEMONICS,
    OPCODE_TABLE,
    Instruction,
    OpcodeTable,
    dr,
    imm5,
    nzp,
    offset9,
    offset11,
    opcode_of,
    sr1,
    sr2,
    trap_vector,
)


@pytest.mark.parametrize("bits", [5, 6, 9, 11])
def test_sign_extend_then_mask_is_identity(bits: int) -> None:
    mask = (1 << bits) - 1
    for value in range(1 << bits):
        assert sign_extend(value, bits) & mask == value


def test_sign_extend_fills_high_bits() -> None:
    assert sign_extend(0x1F, 5) == 0xFFFF
    assert sign_extend(0x10, 5) == 0xFFF0
    assert sign_extend(0x0F, 5) == 0x000F
    assert sign_extend(0x100, 9) == 0xFF00
    assert sign_extend(0x3FF, 11) == 0x03FF
    assert sign_extend(0x400, 11) == 0xFC00


def test_field_extraction() -> None:
    word = 0x1283  # ADD R1, R2, R3
    assert opcode_of(word) == Opcode.ADD
    assert dr(word) == 1
    assert sr1(word) == 2
    assert sr2(word) == 3

    assert imm5(0x127F) == 0xFFFF
    assert offset9(0xE1FD) == 0xFFFD
    assert offset11(0x4FFF) == 0xFFFF
    assert nzp(0x0A00) == 0b101
    assert trap_vector(0xF025) == 0x25


def test_table_leaves_rti_and_reserved_unregistered() -> None:
    assert len(OPCODE_TABLE) == 16
    assert OPCODE_TABLE[Opcode.RTI] is None
    assert OPCODE_TABLE[Opcode.RES] is None
    for instruction in DEFAULT_INSTRUCTIONS:
        assert OPCODE_TABLE[instruction.opcode] is instruction


def test_flag_setting_instructions() -> None:
    setters = {instruction.mnemonic for instruction in DEFAULT_INSTRUCTIONS if instruction.sets_flags}
    assert setters == {"ADD", "AND", "NOT", "LD", "LDI", "LDR", "LEA"}


def test_duplicate_registration_rejected() -> None:
    table = OpcodeTable()
    table.register(Instruction(Opcode.ADD, "ADD", "op_add"))

    with pytest.raises(ValueError):
        table.register(Instruction(Opcode.ADD, "ADD2", "op_add"))


def test_mnemonics_cover_all_opcodes() -> None:
    assert [MNEMONICS[index] for index in range(16)][:4] == ["BR", "ADD", "LD", "ST"]
    assert MNEMONICS[0b1101] == "RES"
