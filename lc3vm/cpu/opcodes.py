"""Opcode metadata and instruction field decoding for the LC-3."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Final, Iterable, List, Mapping, Sequence


class Opcode(IntEnum):
    """Values of bits [15:12] of an instruction word."""

    BR = 0b0000
    ADD = 0b0001
    LD = 0b0010
    ST = 0b0011
    JSR = 0b0100
    AND = 0b0101
    LDR = 0b0110
    STR = 0b0111
    RTI = 0b1000
    NOT = 0b1001
    LDI = 0b1010
    STI = 0b1011
    JMP = 0b1100
    RES = 0b1101
    LEA = 0b1110
    TRAP = 0b1111


class TrapVector(IntEnum):
    """Trap vectors served by the built-in routines."""

    GETC = 0x20
    OUT = 0x21
    PUTS = 0x22
    IN = 0x23
    PUTSP = 0x24
    HALT = 0x25


@dataclass(frozen=True)
class Instruction:
    """Metadata describing a single LC-3 opcode."""

    opcode: Opcode
    mnemonic: str
    handler: str
    sets_flags: bool = False

    def __post_init__(self) -> None:
        if not 0 <= self.opcode <= 0xF:
            raise ValueError(f"opcode out of range: {self.opcode}")


class OpcodeTable:
    """Mutable builder for the 16-entry instruction table."""

    _TABLE_SIZE: Final[int] = 0x10

    def __init__(self) -> None:
        self._table: List[Instruction | None] = [None] * self._TABLE_SIZE

    def register(self, instruction: Instruction) -> None:
        opcode = instruction.opcode
        existing = self._table[opcode]
        if existing is not None:
            raise ValueError(f"opcode {opcode:#03x} already registered as {existing.mnemonic}")
        self._table[opcode] = instruction

    def register_all(self, instructions: Iterable[Instruction]) -> None:
        for instruction in instructions:
            self.register(instruction)

    def freeze(self) -> Sequence[Instruction | None]:
        return tuple(self._table)


def build_instruction_table(instructions: Iterable[Instruction]) -> Sequence[Instruction | None]:
    """Build a 16-entry instruction lookup table."""

    table = OpcodeTable()
    table.register_all(instructions)
    return table.freeze()


# RTI and the reserved opcode are left unregistered: without a supervisor
# mode both decode as illegal instructions.
DEFAULT_INSTRUCTIONS: Sequence[Instruction] = (
    Instruction(Opcode.BR, "BR", "op_br"),
    Instruction(Opcode.ADD, "ADD", "op_add", sets_flags=True),
    Instruction(Opcode.LD, "LD", "op_ld", sets_flags=True),
    Instruction(Opcode.ST, "ST", "op_st"),
    Instruction(Opcode.JSR, "JSR", "op_jsr"),
    Instruction(Opcode.AND, "AND", "op_and", sets_flags=True),
    Instruction(Opcode.LDR, "LDR", "op_ldr", sets_flags=True),
    Instruction(Opcode.STR, "STR", "op_str"),
    Instruction(Opcode.NOT, "NOT", "op_not", sets_flags=True),
    Instruction(Opcode.LDI, "LDI", "op_ldi", sets_flags=True),
    Instruction(Opcode.STI, "STI", "op_sti"),
    Instruction(Opcode.JMP, "JMP", "op_jmp"),
    Instruction(Opcode.LEA, "LEA", "op_lea", sets_flags=True),
    Instruction(Opcode.TRAP, "TRAP", "op_trap"),
)

OPCODE_TABLE: Sequence[Instruction | None] = build_instruction_table(DEFAULT_INSTRUCTIONS)

MNEMONICS: Mapping[int, str] = {opcode.value: opcode.name for opcode in Opcode}


# ----------------------------------------------------------------------
# Field decoding


def sign_extend(value: int, bits: int) -> int:
    """Sign-extend the low ``bits`` of ``value`` to a 16-bit word."""

    value &= (1 << bits) - 1
    if value & (1 << (bits - 1)):
        value |= 0xFFFF << bits
    return value & 0xFFFF


def opcode_of(word: int) -> int:
    return (word >> 12) & 0xF


def bit(word: int, position: int) -> bool:
    return (word >> position) & 1 == 1


def dr(word: int) -> int:
    """Destination (or source for stores) register; bits [11:9]."""

    return (word >> 9) & 0x7


def sr1(word: int) -> int:
    """First source or base register; bits [8:6]."""

    return (word >> 6) & 0x7


def sr2(word: int) -> int:
    return word & 0x7


def nzp(word: int) -> int:
    return (word >> 9) & 0x7


def imm5(word: int) -> int:
    return sign_extend(word, 5)


def offset6(word: int) -> int:
    return sign_extend(word, 6)


def offset9(word: int) -> int:
    return sign_extend(word, 9)


def offset11(word: int) -> int:
    return sign_extend(word, 11)


def trap_vector(word: int) -> int:
    return word & 0xFF
