"""Instruction handlers and the dispatch table.

Every handler takes the machine state and the decoded word and returns the
number of bytes the program counter advances:

- 0: the handler set PC itself (jumps, calls, blocked key wait)
- 2: normal step
- 4: skip the following instruction
"""

from __future__ import annotations

from typing import Callable, Dict

from ..constants import (
    BYTE_MASK,
    CARRY_REGISTER,
    WORD_MASK,
    glyph_address,
)
from ..errors import UnknownOpcodeError
from ..opcode import OpCode
from ..state import MachineState
from .opcodes import Op, decode

Handler = Callable[[MachineState, OpCode], int]

STEP = 2
SKIP = 4


def _skip_if(condition: bool) -> int:
    return SKIP if condition else STEP


def _set_flag(state: MachineState, value: bool) -> None:
    state.registers.v[CARRY_REGISTER] = int(value)


# --------------------------------------------------------------------------- #
# Flow control
# --------------------------------------------------------------------------- #


def op_cls(state: MachineState, op: OpCode) -> int:
    state.display.clear()
    return STEP


def op_ret(state: MachineState, op: OpCode) -> int:
    # The stack holds the address of the CALL itself; step past it.
    state.registers.set_pc(state.pop())
    return STEP


def op_jp(state: MachineState, op: OpCode) -> int:
    state.registers.set_pc(op.nnn)
    return 0


def op_call(state: MachineState, op: OpCode) -> int:
    state.push(state.registers.pc)
    state.registers.set_pc(op.nnn)
    return 0


def op_jp_v0(state: MachineState, op: OpCode) -> int:
    # BXNN with the jumping quirk, BNNN otherwise.
    index = op.x if state.settings.jumping else 0
    state.registers.set_pc(state.registers.v[index] + op.nnn)
    return 0


# --------------------------------------------------------------------------- #
# Conditional skips
# --------------------------------------------------------------------------- #


def op_se_vx_nn(state: MachineState, op: OpCode) -> int:
    return _skip_if(state.registers.v[op.x] == op.nn)


def op_sne_vx_nn(state: MachineState, op: OpCode) -> int:
    return _skip_if(state.registers.v[op.x] != op.nn)


def op_se_vx_vy(state: MachineState, op: OpCode) -> int:
    v = state.registers.v
    return _skip_if(v[op.x] == v[op.y])


def op_sne_vx_vy(state: MachineState, op: OpCode) -> int:
    v = state.registers.v
    return _skip_if(v[op.x] != v[op.y])


def op_skp(state: MachineState, op: OpCode) -> int:
    return _skip_if(state.keypad.is_pressed(state.registers.v[op.x]))


def op_sknp(state: MachineState, op: OpCode) -> int:
    return _skip_if(not state.keypad.is_pressed(state.registers.v[op.x]))


# --------------------------------------------------------------------------- #
# Register arithmetic and logic
# --------------------------------------------------------------------------- #


def op_ld_vx_nn(state: MachineState, op: OpCode) -> int:
    state.registers.set_v(op.x, op.nn)
    return STEP


def op_add_vx_nn(state: MachineState, op: OpCode) -> int:
    # No carry for the immediate form.
    state.registers.set_v(op.x, state.registers.v[op.x] + op.nn)
    return STEP


def op_ld_vx_vy(state: MachineState, op: OpCode) -> int:
    state.registers.set_v(op.x, state.registers.v[op.y])
    return STEP


def op_or(state: MachineState, op: OpCode) -> int:
    regs = state.registers
    regs.set_v(op.x, regs.v[op.x] | regs.v[op.y])
    if state.settings.vf_reset:
        _set_flag(state, False)
    return STEP


def op_and(state: MachineState, op: OpCode) -> int:
    regs = state.registers
    regs.set_v(op.x, regs.v[op.x] & regs.v[op.y])
    if state.settings.vf_reset:
        _set_flag(state, False)
    return STEP


def op_xor(state: MachineState, op: OpCode) -> int:
    regs = state.registers
    regs.set_v(op.x, regs.v[op.x] ^ regs.v[op.y])
    if state.settings.vf_reset:
        _set_flag(state, False)
    return STEP


def op_add_vx_vy(state: MachineState, op: OpCode) -> int:
    regs = state.registers
    total = regs.v[op.x] + regs.v[op.y]
    regs.set_v(op.x, total)
    _set_flag(state, total > BYTE_MASK)
    return STEP


def op_sub(state: MachineState, op: OpCode) -> int:
    regs = state.registers
    vx, vy = regs.v[op.x], regs.v[op.y]
    regs.set_v(op.x, vx - vy)
    _set_flag(state, vx >= vy)
    return STEP


def op_subn(state: MachineState, op: OpCode) -> int:
    regs = state.registers
    vx, vy = regs.v[op.x], regs.v[op.y]
    regs.set_v(op.x, vy - vx)
    _set_flag(state, vy >= vx)
    return STEP


def op_shr(state: MachineState, op: OpCode) -> int:
    regs = state.registers
    source = regs.v[op.x] if state.settings.shifting else regs.v[op.y]
    regs.set_v(op.x, source >> 1)
    _set_flag(state, source & 0x1)
    return STEP


def op_shl(state: MachineState, op: OpCode) -> int:
    regs = state.registers
    source = regs.v[op.x] if state.settings.shifting else regs.v[op.y]
    regs.set_v(op.x, source << 1)
    _set_flag(state, source >> 7)
    return STEP


def op_rnd(state: MachineState, op: OpCode) -> int:
    value = int(state.rng.integers(0, BYTE_MASK + 1))
    state.registers.set_v(op.x, value & op.nn)
    return STEP


# --------------------------------------------------------------------------- #
# Index register, memory and graphics
# --------------------------------------------------------------------------- #


def op_ld_i(state: MachineState, op: OpCode) -> int:
    state.registers.set_i(op.nnn)
    return STEP


def op_add_i(state: MachineState, op: OpCode) -> int:
    regs = state.registers
    total = regs.i + regs.v[op.x]
    regs.set_i(total)
    if state.settings.index_overflow:
        _set_flag(state, total > WORD_MASK)
    return STEP


def op_ld_f(state: MachineState, op: OpCode) -> int:
    state.registers.set_i(glyph_address(state.registers.v[op.x]))
    return STEP


def op_ld_b(state: MachineState, op: OpCode) -> int:
    value = state.registers.v[op.x]
    base = state.registers.i
    state.write_byte(base, value // 100)
    state.write_byte(base + 1, (value // 10) % 10)
    state.write_byte(base + 2, value % 10)
    return STEP


def op_ld_i_vx(state: MachineState, op: OpCode) -> int:
    regs = state.registers
    for index in range(op.x + 1):
        state.write_byte(regs.i + index, regs.v[index])
    if state.settings.memory:
        regs.set_i(regs.i + op.x + 1)
    return STEP


def op_ld_vx_i(state: MachineState, op: OpCode) -> int:
    regs = state.registers
    for index in range(op.x + 1):
        regs.set_v(index, state.read_byte(regs.i + index))
    if state.settings.memory:
        regs.set_i(regs.i + op.x + 1)
    return STEP


def op_drw(state: MachineState, op: OpCode) -> int:
    regs = state.registers
    rows = [state.read_byte(regs.i + row) for row in range(op.n)]
    collision = state.display.draw_sprite(regs.v[op.x], regs.v[op.y], rows)
    _set_flag(state, collision)
    return STEP


# --------------------------------------------------------------------------- #
# Timers and keypad
# --------------------------------------------------------------------------- #


def op_ld_vx_dt(state: MachineState, op: OpCode) -> int:
    state.registers.set_v(op.x, state.registers.delay)
    return STEP


def op_ld_dt(state: MachineState, op: OpCode) -> int:
    state.registers.delay = state.registers.v[op.x]
    return STEP


def op_ld_st(state: MachineState, op: OpCode) -> int:
    state.registers.sound = state.registers.v[op.x]
    return STEP


def op_ld_vx_k(state: MachineState, op: OpCode) -> int:
    key = state.keypad.first_pressed()
    if key is None:
        # PC stays put; the same word is fetched again next cycle.
        state.await_key = True
        return 0
    state.registers.set_v(op.x, key)
    state.await_key = False
    return STEP


def op_unknown(state: MachineState, op: OpCode) -> int:
    raise UnknownOpcodeError(op.data, state.registers.pc)


INSTRUCTION_TABLE: Dict[Op, Handler] = {
    Op.CLS: op_cls,
    Op.RET: op_ret,
    Op.JP: op_jp,
    Op.CALL: op_call,
    Op.SE_VX_NN: op_se_vx_nn,
    Op.SNE_VX_NN: op_sne_vx_nn,
    Op.SE_VX_VY: op_se_vx_vy,
    Op.LD_VX_NN: op_ld_vx_nn,
    Op.ADD_VX_NN: op_add_vx_nn,
    Op.LD_VX_VY: op_ld_vx_vy,
    Op.OR: op_or,
    Op.AND: op_and,
    Op.XOR: op_xor,
    Op.ADD_VX_VY: op_add_vx_vy,
    Op.SUB: op_sub,
    Op.SHR: op_shr,
    Op.SUBN: op_subn,
    Op.SHL: op_shl,
    Op.SNE_VX_VY: op_sne_vx_vy,
    Op.LD_I: op_ld_i,
    Op.JP_V0: op_jp_v0,
    Op.RND: op_rnd,
    Op.DRW: op_drw,
    Op.SKP: op_skp,
    Op.SKNP: op_sknp,
    Op.LD_VX_DT: op_ld_vx_dt,
    Op.LD_VX_K: op_ld_vx_k,
    Op.LD_DT: op_ld_dt,
    Op.LD_ST: op_ld_st,
    Op.ADD_I: op_add_i,
    Op.LD_F: op_ld_f,
    Op.LD_B: op_ld_b,
    Op.LD_I_VX: op_ld_i_vx,
    Op.LD_VX_I: op_ld_vx_i,
    Op.UNKNOWN: op_unknown,
}

def execute(state: MachineState, opcode: OpCode) -> int:
    """Decode and run one instruction, returning the PC advance."""
    return INSTRUCTION_TABLE[decode(opcode)](state, opcode)
