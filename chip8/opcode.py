"""Field accessors for a 16-bit CHIP-8 instruction word."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from .constants import ADDRESS_MASK, WORD_MASK


@dataclass(frozen=True)
class OpCode:
    """Immutable view over an instruction word laid out as ``CXYN``.

    ``cmd`` is the command group, ``x``/``y`` select registers, ``n``, ``nn``
    and ``nnn`` are the low 4, 8 and 12 bits.
    """

    data: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", self.data & WORD_MASK)

    @classmethod
    def fetch(cls, memory: Sequence[int], address: int) -> "OpCode":
        """Read a big-endian word from two consecutive memory cells."""
        hi = memory[address & ADDRESS_MASK]
        lo = memory[(address + 1) & ADDRESS_MASK]
        return cls((hi << 8) | lo)

    @property
    def cmd(self) -> int:
        return (self.data & 0xF000) >> 12

    @property
    def n(self) -> int:
        return self.data & 0x000F

    @property
    def nn(self) -> int:
        return self.data & 0x00FF

    @property
    def nnn(self) -> int:
        return self.data & 0x0FFF

    @property
    def x(self) -> int:
        return (self.data & 0x0F00) >> 8

    @property
    def y(self) -> int:
        return (self.data & 0x00F0) >> 4

    def to_bytes(self) -> bytes:
        return self.data.to_bytes(2, "big")

    def __str__(self) -> str:
        return f"0x{self.data:04X}"


def assemble(words: Iterable[int]) -> bytes:
    """Pack 16-bit instruction words into a big-endian program image."""
    return b"".join(OpCode(word).to_bytes() for word in words)
