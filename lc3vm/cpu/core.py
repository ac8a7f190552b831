"""LC-3 fetch-decode-execute core."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional, Sequence

from lc3vm.bus import MemorySystem
from lc3vm.io import Console, ConsoleError
from lc3vm.utils import TraceRecorder, debug_enabled, debug_log

from . import opcodes
from .errors import CPUError, IllegalInstructionError
from .opcodes import MNEMONICS, OPCODE_TABLE, Instruction
from .registers import R7, PC_START, RegisterFile
from .traps import TrapDispatcher


class ExecutionState(Enum):
    RUNNING = auto()
    HALTED = auto()
    FAULTED = auto()


@dataclass
class LC3:
    """The LC-3 processor bound to a memory system and a console."""

    memory: MemorySystem
    console: Console
    instruction_table: Sequence[Instruction | None] = field(default=OPCODE_TABLE)
    strict_operands: bool = True
    registers: RegisterFile = field(default_factory=RegisterFile)
    trace: Optional[TraceRecorder] = None

    state: ExecutionState = ExecutionState.RUNNING
    fault: Optional[Exception] = None
    instruction_count: int = 0
    last_pc: int = 0
    last_word: int = 0

    def __post_init__(self) -> None:
        self.traps = TrapDispatcher(self.registers, self.memory, self.console)

    @property
    def halted(self) -> bool:
        return self.state is ExecutionState.HALTED

    @property
    def running(self) -> bool:
        return self.state is ExecutionState.RUNNING

    def reset(self, pc: int = PC_START) -> None:
        """Clear registers and faults and place ``pc`` at the entry point."""

        self.registers.reset(pc)
        self.state = ExecutionState.RUNNING
        self.fault = None
        self.instruction_count = 0

    def step(self) -> Instruction | None:
        """Execute a single instruction and return its metadata.

        Returns ``None`` without doing anything once the CPU has halted or
        faulted. Faults and console failures are recorded in :attr:`fault`
        and re-raised.
        """

        if self.state is not ExecutionState.RUNNING:
            return None

        regs = self.registers
        pc_before = regs.pc
        word = 0
        self.last_pc = pc_before
        try:
            word = self.memory.read(pc_before)
            self.last_word = word
            # PC-relative operands are relative to the incremented PC.
            regs.set_pc(pc_before + 1)
            if debug_enabled("cpu"):
                debug_log("cpu", "pc=%04x word=%04x %s", pc_before, word, MNEMONICS[opcodes.opcode_of(word)])
            instruction = self._decode(word)
            handler = getattr(self, instruction.handler)
            handler(word)
        except (CPUError, ConsoleError) as exc:
            self.state = ExecutionState.FAULTED
            self.fault = exc
            self._record(pc_before, word, note="fault")
            if debug_enabled("cpu"):
                debug_log("cpu", "fault %s", exc)
            raise

        self.instruction_count += 1
        self._record(pc_before, word)
        return instruction

    def run(self, max_steps: int | None = None) -> ExecutionState:
        """Run until HALT or a fault; ``max_steps`` bounds the loop if given."""

        steps = 0
        while self.state is ExecutionState.RUNNING:
            if max_steps is not None and steps >= max_steps:
                break
            self.step()
            steps += 1
        return self.state

    # ------------------------------------------------------------------
    # Operate instructions

    def op_add(self, word: int) -> None:
        regs = self.registers
        left = regs.get(opcodes.sr1(word))
        right = self._second_operand(word)
        self._set_result(opcodes.dr(word), left + right)

    def op_and(self, word: int) -> None:
        regs = self.registers
        left = regs.get(opcodes.sr1(word))
        right = self._second_operand(word)
        self._set_result(opcodes.dr(word), left & right)

    def op_not(self, word: int) -> None:
        if self.strict_operands and word & 0x3F != 0x3F:
            raise self._illegal("NOT requires bits [5:0] = 111111")
        value = self.registers.get(opcodes.sr1(word))
        self._set_result(opcodes.dr(word), ~value)

    # ------------------------------------------------------------------
    # Data movement

    def op_ld(self, word: int) -> None:
        address = self.registers.pc + opcodes.offset9(word)
        self._set_result(opcodes.dr(word), self._read(address))

    def op_ldi(self, word: int) -> None:
        pointer = self._read(self.registers.pc + opcodes.offset9(word))
        self._set_result(opcodes.dr(word), self._read(pointer))

    def op_ldr(self, word: int) -> None:
        address = self.registers.get(opcodes.sr1(word)) + opcodes.offset6(word)
        self._set_result(opcodes.dr(word), self._read(address))

    def op_lea(self, word: int) -> None:
        self._set_result(opcodes.dr(word), self.registers.pc + opcodes.offset9(word))

    def op_st(self, word: int) -> None:
        address = self.registers.pc + opcodes.offset9(word)
        self._write(address, self.registers.get(opcodes.dr(word)))

    def op_sti(self, word: int) -> None:
        pointer = self._read(self.registers.pc + opcodes.offset9(word))
        self._write(pointer, self.registers.get(opcodes.dr(word)))

    def op_str(self, word: int) -> None:
        address = self.registers.get(opcodes.sr1(word)) + opcodes.offset6(word)
        self._write(address, self.registers.get(opcodes.dr(word)))

    # ------------------------------------------------------------------
    # Control

    def op_br(self, word: int) -> None:
        if opcodes.nzp(word) & self.registers.flag:
            self.registers.set_pc(self.registers.pc + opcodes.offset9(word))

    def op_jmp(self, word: int) -> None:
        if self.strict_operands and word & 0x0E3F:
            raise self._illegal("JMP requires bits [11:9] and [5:0] to be zero")
        self.registers.set_pc(self.registers.get(opcodes.sr1(word)))

    def op_jsr(self, word: int) -> None:
        regs = self.registers
        return_address = regs.pc
        if opcodes.bit(word, 11):
            target = return_address + opcodes.offset11(word)
        else:
            if self.strict_operands and word & 0x063F:
                raise self._illegal("JSRR requires bits [10:9] and [5:0] to be zero")
            target = regs.get(opcodes.sr1(word))
        regs.set(R7, return_address)
        regs.set_pc(target)

    def op_trap(self, word: int) -> None:
        if self.strict_operands and word & 0x0F00:
            raise self._illegal("TRAP requires bits [11:8] to be zero")
        self.registers.set(R7, self.registers.pc)
        halt = self.traps.dispatch(opcodes.trap_vector(word), address=self.last_pc, word=word)
        if halt:
            self.state = ExecutionState.HALTED

    # ------------------------------------------------------------------
    # Helpers

    def _decode(self, word: int) -> Instruction:
        opcode = opcodes.opcode_of(word)
        instruction = self.instruction_table[opcode]
        if instruction is None:
            raise self._illegal(f"{MNEMONICS[opcode]} is not implemented")
        return instruction

    def _second_operand(self, word: int) -> int:
        if opcodes.bit(word, 5):
            return opcodes.imm5(word)
        if self.strict_operands and word & 0x18:
            raise self._illegal("register mode requires bits [4:3] to be zero")
        return self.registers.get(opcodes.sr2(word))

    def _set_result(self, register: int, value: int) -> None:
        value &= 0xFFFF
        self.registers.set(register, value)
        self.registers.update_flags(value)

    def _read(self, address: int) -> int:
        return self.memory.read(address & 0xFFFF)

    def _write(self, address: int, value: int) -> None:
        self.memory.write(address & 0xFFFF, value & 0xFFFF)

    def _illegal(self, reason: str) -> IllegalInstructionError:
        return IllegalInstructionError(
            f"illegal instruction {self.last_word:#06x} at {self.last_pc:#06x}: {reason}",
            address=self.last_pc,
            word=self.last_word,
        )

    def _record(self, pc: int, word: int, note: str = "") -> None:
        if self.trace is None:
            return
        snapshot = self.registers.snapshot()
        self.trace.record_step(
            pc,
            word,
            snapshot.registers,
            snapshot.flag.label,
            halted=self.halted,
            mnemonic=MNEMONICS[opcodes.opcode_of(word)],
            note=note,
        )
