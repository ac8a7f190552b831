"""LC-3 register file: R0-R7, program counter and condition flag."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntFlag
from typing import List

REGISTER_COUNT = 8
R7 = 7
PC_START = 0x3000


class ConditionFlag(IntFlag):
    """One-hot condition codes laid out like the BR ``nzp`` field."""

    P = 0b001
    Z = 0b010
    N = 0b100

    @classmethod
    def from_value(cls, value: int) -> "ConditionFlag":
        value &= 0xFFFF
        if value == 0:
            return cls.Z
        if value & 0x8000:
            return cls.N
        return cls.P

    @property
    def label(self) -> str:
        return {ConditionFlag.N: "N", ConditionFlag.Z: "Z", ConditionFlag.P: "P"}.get(self, "?")


@dataclass(frozen=True)
class RegisterSnapshot:
    registers: tuple[int, ...]
    pc: int
    flag: ConditionFlag


@dataclass
class RegisterFile:
    """Snapshot-able LC-3 register state."""

    _registers: List[int] = field(default_factory=lambda: [0] * REGISTER_COUNT)
    pc: int = PC_START
    flag: ConditionFlag = ConditionFlag.Z

    def get(self, register: int) -> int:
        return self._registers[self._check(register)]

    def set(self, register: int, value: int) -> None:
        self._registers[self._check(register)] = value & 0xFFFF

    def get_pc(self) -> int:
        return self.pc

    def set_pc(self, value: int) -> None:
        self.pc = value & 0xFFFF

    def get_flags(self) -> ConditionFlag:
        return self.flag

    def update_flags(self, value: int) -> None:
        self.flag = ConditionFlag.from_value(value)

    def reset(self, pc: int = PC_START) -> None:
        self._registers[:] = [0] * REGISTER_COUNT
        self.pc = pc & 0xFFFF
        self.flag = ConditionFlag.Z

    def snapshot(self) -> RegisterSnapshot:
        return RegisterSnapshot(tuple(self._registers), self.pc, self.flag)

    @staticmethod
    def _check(register: int) -> int:
        if not 0 <= register < REGISTER_COUNT:
            raise ValueError(f"register index out of range: {register}")
        return register
