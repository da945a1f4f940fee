"""CHIP-8 instruction decoding and execution."""

from .opcodes import VALID_OPS, Op, decode
from .instructions import INSTRUCTION_TABLE, Handler, execute

__all__ = ["INSTRUCTION_TABLE", "Handler", "Op", "VALID_OPS", "decode", "execute"]
