"""CPU package for the LC-3 virtual machine."""

from .core import LC3, ExecutionState
from .errors import CPUError, IllegalInstructionError, IllegalTrapError
from .opcodes import Opcode, TrapVector, sign_extend
from .registers import ConditionFlag, RegisterFile
from .traps import TrapDispatcher
from . import opcodes

__all__ = [
    "LC3",
    "ExecutionState",
    "CPUError",
    "IllegalInstructionError",
    "IllegalTrapError",
    "ConditionFlag",
    "RegisterFile",
    "Opcode",
    "TrapVector",
    "TrapDispatcher",
    "sign_extend",
    "opcodes",
]
