"""Exception hierarchy for the CHIP-8 interpreter."""

from __future__ import annotations

from typing import Optional


class Chip8Error(Exception):
    """Base class for every error raised by the interpreter."""


class LoadError(Chip8Error, ValueError):
    """A program could not be loaded; machine state is unchanged."""


class ProgramTooLargeError(LoadError):
    """The program does not fit into the loadable region."""

    def __init__(self, size: int, capacity: int):
        super().__init__(
            f"Program is {size} bytes, the program region holds {capacity}"
        )
        self.size = size
        self.capacity = capacity


class RomFileError(LoadError):
    """The ROM path does not resolve to a readable file."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Cannot read ROM {path!r}: {reason}")
        self.path = path


class UnknownOpcodeError(Chip8Error, RuntimeError):
    """An instruction word matched no entry of the instruction table.

    Emulation must stop: continuing would silently desynchronise the
    machine from real hardware.
    """

    def __init__(self, opcode: int, address: Optional[int] = None):
        where = f" at 0x{address:03X}" if address is not None else ""
        super().__init__(f"Unknown opcode 0x{opcode:04X}{where}")
        self.opcode = opcode
        self.address = address


class StackError(Chip8Error, RuntimeError):
    """Base class for call stack faults."""


class StackOverflowError(StackError):
    """CALL with all 16 stack slots in use."""


class StackUnderflowError(StackError):
    """RET with an empty stack."""
