"""CHIP-8 interpreter package."""

from .config import Settings
from .emulator import Chip8Emulator
from .errors import (
    Chip8Error,
    LoadError,
    ProgramTooLargeError,
    RomFileError,
    StackError,
    StackOverflowError,
    StackUnderflowError,
    UnknownOpcodeError,
)
from .instr import Op, decode
from .opcode import OpCode
from .state import MachineState, Registers

__all__ = [
    "Chip8Emulator",
    "Settings",
    "MachineState",
    "Registers",
    "OpCode",
    "Op",
    "decode",
    "Chip8Error",
    "LoadError",
    "ProgramTooLargeError",
    "RomFileError",
    "UnknownOpcodeError",
    "StackError",
    "StackOverflowError",
    "StackUnderflowError",
]
