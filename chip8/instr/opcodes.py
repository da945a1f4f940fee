"""CHIP-8 opcode categories and the pure decode mapping."""

from __future__ import annotations

import enum
from typing import Union

from ..opcode import OpCode


class Op(enum.Enum):
    """Instruction categories, valued by their canonical pattern."""

    CLS = "00E0"
    RET = "00EE"
    JP = "1NNN"
    CALL = "2NNN"
    SE_VX_NN = "3XNN"
    SNE_VX_NN = "4XNN"
    SE_VX_VY = "5XY0"
    LD_VX_NN = "6XNN"
    ADD_VX_NN = "7XNN"
    LD_VX_VY = "8XY0"
    OR = "8XY1"
    AND = "8XY2"
    XOR = "8XY3"
    ADD_VX_VY = "8XY4"
    SUB = "8XY5"
    SHR = "8XY6"
    SUBN = "8XY7"
    SHL = "8XYE"
    SNE_VX_VY = "9XY0"
    LD_I = "ANNN"
    JP_V0 = "BNNN"
    RND = "CXNN"
    DRW = "DXYN"
    SKP = "EX9E"
    SKNP = "EXA1"
    LD_VX_DT = "FX07"
    LD_VX_K = "FX0A"
    LD_DT = "FX15"
    LD_ST = "FX18"
    ADD_I = "FX1E"
    LD_F = "FX29"
    LD_B = "FX33"
    LD_I_VX = "FX55"
    LD_VX_I = "FX65"
    UNKNOWN = "????"

    @property
    def pattern(self) -> str:
        return self.value


# Second-level tables for the ambiguous command groups.
_GROUP_0 = {0xE0: Op.CLS, 0xEE: Op.RET}
_GROUP_8 = {
    0x0: Op.LD_VX_VY,
    0x1: Op.OR,
    0x2: Op.AND,
    0x3: Op.XOR,
    0x4: Op.ADD_VX_VY,
    0x5: Op.SUB,
    0x6: Op.SHR,
    0x7: Op.SUBN,
    0xE: Op.SHL,
}
_GROUP_E = {0x9E: Op.SKP, 0xA1: Op.SKNP}
_GROUP_F = {
    0x07: Op.LD_VX_DT,
    0x0A: Op.LD_VX_K,
    0x15: Op.LD_DT,
    0x18: Op.LD_ST,
    0x1E: Op.ADD_I,
    0x29: Op.LD_F,
    0x33: Op.LD_B,
    0x55: Op.LD_I_VX,
    0x65: Op.LD_VX_I,
}
_SIMPLE = {
    0x1: Op.JP,
    0x2: Op.CALL,
    0x3: Op.SE_VX_NN,
    0x4: Op.SNE_VX_NN,
    0x5: Op.SE_VX_VY,
    0x6: Op.LD_VX_NN,
    0x7: Op.ADD_VX_NN,
    0x9: Op.SNE_VX_VY,
    0xA: Op.LD_I,
    0xB: Op.JP_V0,
    0xC: Op.RND,
    0xD: Op.DRW,
}


def decode(opcode: Union[OpCode, int]) -> Op:
    """Classify an instruction word. Never raises; unmatched words are UNKNOWN."""
    if not isinstance(opcode, OpCode):
        opcode = OpCode(opcode)

    cmd = opcode.cmd
    if cmd in _SIMPLE:
        return _SIMPLE[cmd]
    if cmd == 0x0:
        return _GROUP_0.get(opcode.nn, Op.UNKNOWN)
    if cmd == 0x8:
        return _GROUP_8.get(opcode.n, Op.UNKNOWN)
    if cmd == 0xE:
        return _GROUP_E.get(opcode.nn, Op.UNKNOWN)
    if cmd == 0xF:
        return _GROUP_F.get(opcode.nn, Op.UNKNOWN)
    return Op.UNKNOWN


VALID_OPS = tuple(op for op in Op if op is not Op.UNKNOWN)
