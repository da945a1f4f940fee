"""CHIP-8 execution engine: program loading, fetch/decode/execute and timers."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

import numpy as np

from .config import Settings
from .constants import (
    PROGRAM_CAPACITY,
    START_ADDR,
)
from .display import Framebuffer
from .errors import ProgramTooLargeError, RomFileError
from .instr import INSTRUCTION_TABLE, Op, decode
from .keypad import KeyRef
from .opcode import OpCode
from .state import MachineState, Registers

logger = logging.getLogger(__name__)


class Chip8Emulator:
    """Interpreter driven by an external 60 Hz ``tick()`` call.

    The host follows a strict protocol between ticks: update the keypad,
    call ``tick()``, then read the display. Nothing here is thread safe.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        if rng is None:
            rng = np.random.default_rng(seed)
        self.state = MachineState(settings=settings or Settings(), rng=rng)
        self.cycle_count = 0
        self.tick_count = 0

    # ------------------------------------------------------------------ #
    # Program loading
    # ------------------------------------------------------------------ #

    def load_rom(self, data: bytes) -> None:
        """Copy a program into memory at 0x200.

        Raises:
            ProgramTooLargeError: the program exceeds the program region;
                memory is left untouched.
        """
        if len(data) > PROGRAM_CAPACITY:
            logger.error(
                "ROM size too large: %d bytes (limit %d)", len(data), PROGRAM_CAPACITY
            )
            raise ProgramTooLargeError(len(data), PROGRAM_CAPACITY)
        self.state.memory[START_ADDR : START_ADDR + len(data)] = data
        logger.info("Loaded %d byte program at 0x%03X", len(data), START_ADDR)

    def load_rom_file(self, path: Union[str, Path]) -> None:
        """Load a program from a file.

        Raises:
            RomFileError: the path is not a readable file.
            ProgramTooLargeError: see ``load_rom``.
        """
        rom_path = Path(path)
        if not rom_path.is_file():
            logger.error("Rom %s not found", rom_path)
            raise RomFileError(str(rom_path), "not found")
        try:
            data = rom_path.read_bytes()
        except OSError as exc:
            logger.error("Rom %s unreadable: %s", rom_path, exc)
            raise RomFileError(str(rom_path), exc.strerror or str(exc)) from exc
        self.load_rom(data)

    # ------------------------------------------------------------------ #
    # Execution
    # ------------------------------------------------------------------ #

    def fetch(self) -> OpCode:
        return OpCode.fetch(self.state.memory, self.state.registers.pc)

    def execute_cycle(self) -> Op:
        """Run a single instruction and return its category.

        ``UnknownOpcodeError`` and stack faults propagate with PC still
        pointing at the faulting instruction.
        """
        opcode = self.fetch()
        op = decode(opcode)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "PC=0x%03X %s %s", self.state.registers.pc, opcode, op.pattern
            )
        advance = INSTRUCTION_TABLE[op](self.state, opcode)
        regs = self.state.registers
        regs.set_pc(regs.pc + advance)
        self.cycle_count += 1
        return op

    def tick(self) -> None:
        """Run ``settings.cycles`` instructions, then step both timers once."""
        for _ in range(self.state.settings.cycles):
            self.execute_cycle()

        regs = self.state.registers
        if regs.delay > 0:
            regs.delay -= 1
        if regs.sound > 0:
            regs.sound -= 1
        self.tick_count += 1

    def run(self, ticks: int) -> None:
        for _ in range(ticks):
            self.tick()

    def reset(self) -> None:
        """Return to power-on state. Settings and the random source survive."""
        self.state.reset()
        self.cycle_count = 0
        self.tick_count = 0

    # ------------------------------------------------------------------ #
    # Host surfaces
    # ------------------------------------------------------------------ #

    @property
    def settings(self) -> Settings:
        return self.state.settings

    @property
    def registers(self) -> Registers:
        return self.state.registers

    @property
    def display(self) -> Framebuffer:
        return self.state.display

    @property
    def memory(self) -> bytes:
        return bytes(self.state.memory)

    @property
    def blocked(self) -> bool:
        """True while an FX0A instruction waits for a key press."""
        return self.state.await_key

    @property
    def sound_active(self) -> bool:
        return self.state.registers.sound > 0

    def press_key(self, key: KeyRef) -> None:
        self.state.keypad.press(key)

    def release_key(self, key: KeyRef) -> None:
        self.state.keypad.release(key)

    def dump_state(self) -> str:
        """Human-readable display and register dump."""
        regs = self.state.registers
        lines = [self.state.display.render_text(), ""]
        lines.append("+" + "[Register]".center(self.state.display.width, "-") + "+")
        for row in range(0, len(regs.v), 4):
            lines.append(
                "  ".join(
                    f"[V{idx:X}]: {regs.v[idx]:02x}" for idx in range(row, row + 4)
                )
            )
        lines.append(f"[I]: {regs.i:04x}")
        lines.append(f"[PC]: {regs.pc:04x}")
        lines.append(f"[SP]: {regs.sp:04x}")
        frames = " ".join(f"{addr:04x}" for addr in self.state.stack_frames())
        lines.append(f"[Stack]: {frames or '-'}")
        lines.append("")
        lines.append(f"[Timer delay]: {regs.delay:02x}  [Timer sound]: {regs.sound:02x}")
        lines.append("+" + "-" * self.state.display.width + "+")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.dump_state()
