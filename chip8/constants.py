"""Shared architecture constants for the CHIP-8 interpreter.

Memory map::

    0x000 +------------------+
          | reserved         |  font glyphs live at FONT_BASE
    0x200 +------------------+  START_ADDR, programs load here
          | program / data   |
    0xE8F +------------------+  END_ADDR, end of the loadable region
          | stack/variables  |  (historically used by the interpreter)
    0xFFF +------------------+
"""

# Total addressable memory.
MEMORY_SIZE = 0x1000
ADDRESS_MASK = MEMORY_SIZE - 1

# Program region. Anything larger than END_ADDR - START_ADDR is rejected.
START_ADDR = 0x200
END_ADDR = 0xE8F
PROGRAM_CAPACITY = END_ADDR - START_ADDR

# Built-in hexadecimal font (16 glyphs, 5 rows each).
FONT_BASE = 0x050
GLYPH_HEIGHT = 5
GLYPH_COUNT = 16

# Display geometry.
DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32
SPRITE_WIDTH = 8

NUM_REGISTERS = 16
NUM_KEYS = 16
STACK_DEPTH = 16

# VF doubles as carry/borrow/collision flag.
CARRY_REGISTER = 0xF

WORD_MASK = 0xFFFF
BYTE_MASK = 0xFF

# Timers and default speed. The host calls tick() at TICK_RATE_HZ.
TICK_RATE_HZ = 60
DEFAULT_SPEED_HZ = 500

FONTSET = bytes(
    [
        0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
        0x20, 0x60, 0x20, 0x20, 0x70,  # 1
        0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
        0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
        0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
        0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
        0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
        0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
        0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
        0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
        0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
        0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
        0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
        0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
        0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
        0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
    ]
)


def glyph_address(digit: int) -> int:
    """Return the memory address of the glyph for the low nibble of ``digit``."""
    return FONT_BASE + (digit & 0xF) * GLYPH_HEIGHT
