"""Mutable machine state shared by every instruction handler."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from .config import Settings
from .constants import (
    ADDRESS_MASK,
    BYTE_MASK,
    FONT_BASE,
    FONTSET,
    MEMORY_SIZE,
    NUM_REGISTERS,
    STACK_DEPTH,
    START_ADDR,
    WORD_MASK,
)
from .display import Framebuffer
from .errors import StackOverflowError, StackUnderflowError
from .keypad import Keypad


def _fresh_memory() -> bytearray:
    memory = bytearray(MEMORY_SIZE)
    memory[FONT_BASE : FONT_BASE + len(FONTSET)] = FONTSET
    return memory


@dataclass
class Registers:
    """CPU register file: V0..VF, I, PC, SP and the two timers."""

    v: List[int] = field(default_factory=lambda: [0] * NUM_REGISTERS)
    i: int = 0
    pc: int = START_ADDR
    sp: int = 0
    delay: int = 0
    sound: int = 0

    def set_v(self, index: int, value: int) -> None:
        self.v[index] = value & BYTE_MASK

    def set_i(self, value: int) -> None:
        self.i = value & WORD_MASK

    def set_pc(self, value: int) -> None:
        self.pc = value & WORD_MASK

    def as_dict(self) -> dict:
        regs = {f"v{idx:x}": value for idx, value in enumerate(self.v)}
        regs.update(
            i=self.i, pc=self.pc, sp=self.sp, delay=self.delay, sound=self.sound
        )
        return regs


@dataclass
class MachineState:
    """Everything an instruction can read or mutate.

    Handlers receive the state for the duration of one call and keep no
    reference to it afterwards.
    """

    settings: Settings = field(default_factory=Settings)
    rng: np.random.Generator = field(default_factory=np.random.default_rng)
    memory: bytearray = field(default_factory=_fresh_memory)
    registers: Registers = field(default_factory=Registers)
    stack: List[int] = field(default_factory=lambda: [0] * STACK_DEPTH)
    display: Framebuffer = field(default_factory=Framebuffer)
    keypad: Keypad = field(default_factory=Keypad)
    await_key: bool = False

    def reset(self) -> None:
        """Power-on state. Settings and the random source are kept."""
        self.memory[:] = _fresh_memory()
        self.registers = Registers()
        self.stack = [0] * STACK_DEPTH
        self.display.clear()
        self.keypad.clear()
        self.await_key = False

    def read_byte(self, address: int) -> int:
        return self.memory[address & ADDRESS_MASK]

    def write_byte(self, address: int, value: int) -> None:
        self.memory[address & ADDRESS_MASK] = value & BYTE_MASK

    def push(self, address: int) -> None:
        sp = self.registers.sp
        if sp >= STACK_DEPTH:
            raise StackOverflowError(
                f"Call stack full ({STACK_DEPTH} entries) at PC=0x{self.registers.pc:03X}"
            )
        self.stack[sp] = address & WORD_MASK
        self.registers.sp = sp + 1

    def pop(self) -> int:
        if self.registers.sp == 0:
            raise StackUnderflowError(
                f"Return with empty call stack at PC=0x{self.registers.pc:03X}"
            )
        self.registers.sp -= 1
        return self.stack[self.registers.sp]

    def stack_frames(self) -> List[int]:
        return self.stack[: self.registers.sp]

    def seed(self, seed: Optional[int]) -> None:
        self.rng = np.random.default_rng(seed)
