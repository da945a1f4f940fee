"""Shared fixtures for the CHIP-8 interpreter tests."""

from __future__ import annotations

import pytest

from chip8 import Chip8Emulator, Settings
from chip8.opcode import assemble


@pytest.fixture
def emu() -> Chip8Emulator:
    return Chip8Emulator(Settings(cycles=1), seed=1234)


@pytest.fixture
def make_emu():
    """Build an emulator with a program and optional settings overrides."""

    def _make(*words: int, **settings) -> Chip8Emulator:
        settings.setdefault("cycles", 1)
        emulator = Chip8Emulator(Settings(**settings), seed=1234)
        emulator.load_rom(assemble(words))
        return emulator

    return _make
