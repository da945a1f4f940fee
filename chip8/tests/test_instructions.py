"""Per-instruction semantics, exercised directly against a machine state."""

from __future__ import annotations

import numpy as np
import pytest

from chip8.config import Settings
from chip8.constants import FONT_BASE, FONTSET
from chip8.errors import StackOverflowError, StackUnderflowError, UnknownOpcodeError
from chip8.instr import execute
from chip8.opcode import OpCode
from chip8.state import MachineState


def _state(**settings) -> MachineState:
    return MachineState(settings=Settings(**settings), rng=np.random.default_rng(7))


def _run(state: MachineState, word: int) -> int:
    return execute(state, OpCode(word))


class TestFlowControl:
    def test_jump_sets_pc_and_returns_zero(self) -> None:
        state = _state()
        assert _run(state, 0x1ABC) == 0
        assert state.registers.pc == 0xABC

    def test_call_pushes_current_pc(self) -> None:
        state = _state()
        state.registers.pc = 0x204
        assert _run(state, 0x2300) == 0
        assert state.registers.pc == 0x300
        assert state.registers.sp == 1
        assert state.stack[0] == 0x204
        assert state.stack_frames() == [0x204]

    def test_return_resumes_after_call(self) -> None:
        state = _state()
        state.registers.pc = 0x204
        _run(state, 0x2300)
        advance = _run(state, 0x00EE)
        assert state.registers.sp == 0
        assert state.registers.pc + advance == 0x206

    def test_return_with_empty_stack_raises(self) -> None:
        state = _state()
        with pytest.raises(StackUnderflowError):
            _run(state, 0x00EE)
        assert state.registers.sp == 0

    def test_seventeenth_call_raises(self) -> None:
        state = _state()
        for _ in range(16):
            _run(state, 0x2300)
        with pytest.raises(StackOverflowError):
            _run(state, 0x2300)
        assert state.registers.sp == 16

    def test_jump_with_offset_uses_v0(self) -> None:
        state = _state()
        state.registers.v[0] = 0x10
        state.registers.v[3] = 0x40
        assert _run(state, 0xB300) == 0
        assert state.registers.pc == 0x310

    def test_jump_with_offset_jumping_quirk_uses_vx(self) -> None:
        state = _state(jumping=True)
        state.registers.v[0] = 0x10
        state.registers.v[3] = 0x40
        assert _run(state, 0xB300) == 0
        assert state.registers.pc == 0x340

    def test_unknown_raises(self) -> None:
        state = _state()
        with pytest.raises(UnknownOpcodeError) as info:
            _run(state, 0xF0FF)
        assert info.value.opcode == 0xF0FF
        assert info.value.address == 0x200


class TestSkips:
    @pytest.mark.parametrize(
        "word, vx, expected",
        [
            (0x3142, 0x42, 4),
            (0x3142, 0x41, 2),
            (0x4142, 0x42, 2),
            (0x4142, 0x41, 4),
        ],
    )
    def test_immediate_compare(self, word: int, vx: int, expected: int) -> None:
        state = _state()
        state.registers.v[1] = vx
        assert _run(state, word) == expected

    @pytest.mark.parametrize(
        "word, vx, vy, expected",
        [
            (0x5120, 7, 7, 4),
            (0x5120, 7, 8, 2),
            (0x9120, 7, 7, 2),
            (0x9120, 7, 8, 4),
        ],
    )
    def test_register_compare(self, word: int, vx: int, vy: int, expected: int) -> None:
        state = _state()
        state.registers.v[1] = vx
        state.registers.v[2] = vy
        assert _run(state, word) == expected

    def test_key_pressed_skip(self) -> None:
        state = _state()
        state.registers.v[4] = 0xA
        assert _run(state, 0xE49E) == 2
        assert _run(state, 0xE4A1) == 4
        state.keypad.press(0xA)
        assert _run(state, 0xE49E) == 4
        assert _run(state, 0xE4A1) == 2


class TestArithmetic:
    def test_load_and_add_immediate_wraps_without_flag(self) -> None:
        state = _state()
        state.registers.v[0xF] = 0x55
        _run(state, 0x63F0)
        assert _run(state, 0x7320) == 2
        assert state.registers.v[3] == 0x10
        assert state.registers.v[0xF] == 0x55

    def test_copy_register(self) -> None:
        state = _state()
        state.registers.v[2] = 0x99
        _run(state, 0x8120)
        assert state.registers.v[1] == 0x99

    @pytest.mark.parametrize(
        "word, expected",
        [(0x8121, 0b1110), (0x8122, 0b1000), (0x8123, 0b0110)],
    )
    @pytest.mark.parametrize("vf_reset", [False, True])
    def test_logic_ops(self, word: int, expected: int, vf_reset: bool) -> None:
        state = _state(vf_reset=vf_reset)
        state.registers.v[1] = 0b1100
        state.registers.v[2] = 0b1010
        state.registers.v[0xF] = 0x77
        assert _run(state, word) == 2
        assert state.registers.v[1] == expected
        assert state.registers.v[0xF] == (0 if vf_reset else 0x77)

    @pytest.mark.parametrize(
        "vx, vy, result, carry",
        [(0xFF, 0x01, 0x00, 1), (0x10, 0x20, 0x30, 0), (0x80, 0x80, 0x00, 1), (0xFF, 0x00, 0xFF, 0)],
    )
    def test_add_with_carry(self, vx: int, vy: int, result: int, carry: int) -> None:
        state = _state()
        state.registers.v[1] = vx
        state.registers.v[2] = vy
        _run(state, 0x8124)
        assert state.registers.v[1] == result
        assert state.registers.v[0xF] == carry

    @pytest.mark.parametrize(
        "vx, vy, result, flag",
        [(0x30, 0x10, 0x20, 1), (0x10, 0x30, 0xE0, 0), (0x42, 0x42, 0x00, 1)],
    )
    def test_subtract(self, vx: int, vy: int, result: int, flag: int) -> None:
        state = _state()
        state.registers.v[1] = vx
        state.registers.v[2] = vy
        _run(state, 0x8125)
        assert state.registers.v[1] == result
        assert state.registers.v[0xF] == flag

    @pytest.mark.parametrize(
        "vx, vy, result, flag",
        [(0x10, 0x30, 0x20, 1), (0x30, 0x10, 0xE0, 0), (0x42, 0x42, 0x00, 1)],
    )
    def test_subtract_reversed(self, vx: int, vy: int, result: int, flag: int) -> None:
        state = _state()
        state.registers.v[1] = vx
        state.registers.v[2] = vy
        _run(state, 0x8127)
        assert state.registers.v[1] == result
        assert state.registers.v[0xF] == flag

    def test_flag_wins_when_destination_is_vf(self) -> None:
        state = _state()
        state.registers.v[0xF] = 0xFF
        state.registers.v[1] = 0x01
        _run(state, 0x8F14)
        assert state.registers.v[0xF] == 1

    def test_shift_right_reads_vy_without_quirk(self) -> None:
        state = _state()
        state.registers.v[1] = 0x10
        state.registers.v[2] = 0x05
        _run(state, 0x8126)
        assert state.registers.v[1] == 0x02
        assert state.registers.v[0xF] == 1

    def test_shift_right_in_place_with_quirk(self) -> None:
        state = _state(shifting=True)
        state.registers.v[1] = 0x10
        state.registers.v[2] = 0x05
        _run(state, 0x8126)
        assert state.registers.v[1] == 0x08
        assert state.registers.v[0xF] == 0
        assert state.registers.v[2] == 0x05

    def test_shift_left_reads_vy_without_quirk(self) -> None:
        state = _state()
        state.registers.v[1] = 0x01
        state.registers.v[2] = 0x81
        _run(state, 0x812E)
        assert state.registers.v[1] == 0x02
        assert state.registers.v[0xF] == 1

    def test_shift_left_in_place_with_quirk(self) -> None:
        state = _state(shifting=True)
        state.registers.v[1] = 0x41
        state.registers.v[2] = 0x81
        _run(state, 0x812E)
        assert state.registers.v[1] == 0x82
        assert state.registers.v[0xF] == 0

    def test_random_is_masked_and_reproducible(self) -> None:
        first = _state()
        second = _state()
        values = []
        for _ in range(32):
            _run(first, 0xC10F)
            _run(second, 0xC10F)
            assert first.registers.v[1] == second.registers.v[1]
            assert first.registers.v[1] & 0xF0 == 0
            values.append(first.registers.v[1])
        assert len(set(values)) > 1

    def test_random_with_zero_mask_is_zero(self) -> None:
        state = _state()
        state.registers.v[1] = 0xAA
        _run(state, 0xC100)
        assert state.registers.v[1] == 0


class TestIndexAndMemory:
    def test_load_index(self) -> None:
        state = _state()
        _run(state, 0xA123)
        assert state.registers.i == 0x123

    def test_add_index_leaves_vf_alone(self) -> None:
        state = _state()
        state.registers.i = 0xFFF
        state.registers.v[1] = 0x02
        state.registers.v[0xF] = 0x33
        _run(state, 0xF11E)
        assert state.registers.i == 0x1001
        assert state.registers.v[0xF] == 0x33

    def test_add_index_overflow_flags_16_bit_carry(self) -> None:
        state = _state(index_overflow=True)
        state.registers.i = 0xFFFF
        state.registers.v[1] = 0x02
        _run(state, 0xF11E)
        assert state.registers.i == 0x0001
        assert state.registers.v[0xF] == 1
        state.registers.i = 0x100
        _run(state, 0xF11E)
        assert state.registers.v[0xF] == 0

    def test_add_index_overflow_ignores_12_bit_boundary(self) -> None:
        state = _state(index_overflow=True)
        state.registers.i = 0xFFF
        state.registers.v[0] = 0x01
        _run(state, 0xF01E)
        assert state.registers.i == 0x1000
        assert state.registers.v[0xF] == 0

    def test_add_index_wraps_at_16_bits(self) -> None:
        state = _state()
        state.registers.i = 0xFFFF
        state.registers.v[1] = 0x01
        _run(state, 0xF11E)
        assert state.registers.i == 0x0000

    @pytest.mark.parametrize("digit", range(16))
    def test_font_address(self, digit: int) -> None:
        state = _state()
        state.registers.v[5] = 0x30 | digit  # only the low nibble counts
        _run(state, 0xF529)
        assert state.registers.i == FONT_BASE + 5 * digit
        glyph = state.memory[state.registers.i : state.registers.i + 5]
        assert bytes(glyph) == FONTSET[digit * 5 : digit * 5 + 5]

    @pytest.mark.parametrize("value, digits", [(0, (0, 0, 0)), (5, (0, 0, 5)), (137, (1, 3, 7)), (255, (2, 5, 5))])
    def test_bcd(self, value: int, digits) -> None:
        state = _state()
        state.registers.v[3] = value
        state.registers.i = 0x300
        _run(state, 0xF333)
        assert tuple(state.memory[0x300:0x303]) == digits
        assert state.registers.i == 0x300

    def test_store_registers(self) -> None:
        state = _state()
        state.registers.v[:] = list(range(0x10, 0x20))
        state.registers.i = 0x400
        _run(state, 0xF355)
        assert list(state.memory[0x400:0x404]) == [0x10, 0x11, 0x12, 0x13]
        assert state.memory[0x404] == 0
        assert state.registers.i == 0x400

    def test_load_registers(self) -> None:
        state = _state()
        state.memory[0x400:0x404] = bytes([9, 8, 7, 6])
        state.registers.v[4] = 0xEE
        state.registers.i = 0x400
        _run(state, 0xF365)
        assert state.registers.v[:5] == [9, 8, 7, 6, 0xEE]

    def test_memory_quirk_advances_index(self) -> None:
        state = _state(memory=True)
        state.registers.i = 0x400
        _run(state, 0xF255)
        assert state.registers.i == 0x403
        _run(state, 0xF065)
        assert state.registers.i == 0x404

    def test_store_wraps_at_end_of_memory(self) -> None:
        state = _state()
        state.registers.v[0] = 0xAB
        state.registers.v[1] = 0xCD
        state.registers.i = 0xFFF
        _run(state, 0xF155)
        assert state.memory[0xFFF] == 0xAB
        assert state.memory[0x000] == 0xCD


class TestDisplay:
    def test_clear(self) -> None:
        state = _state()
        state.display.draw_sprite(0, 0, [0xFF])
        assert _run(state, 0x00E0) == 2
        assert state.display.lit_count() == 0

    def test_draw_glyph_and_collision(self) -> None:
        state = _state()
        state.registers.i = FONT_BASE  # glyph "0"
        state.registers.v[0] = 10
        state.registers.v[1] = 5
        assert _run(state, 0xD015) == 2
        assert state.registers.v[0xF] == 0
        assert state.display.pixel(10, 5)
        assert not state.display.pixel(11, 6)
        lit = state.display.lit_count()
        assert lit == 14

        _run(state, 0xD015)
        assert state.registers.v[0xF] == 1
        assert state.display.lit_count() == 0

    def test_draw_start_wraps_coordinates(self) -> None:
        state = _state()
        state.memory[0x300] = 0x80
        state.registers.i = 0x300
        state.registers.v[0] = 64 + 3
        state.registers.v[1] = 32 + 2
        _run(state, 0xD011)
        assert state.display.pixel(3, 2)

    def test_draw_zero_height_clears_flag(self) -> None:
        state = _state()
        state.registers.v[0xF] = 1
        _run(state, 0xD010)
        assert state.registers.v[0xF] == 0
        assert state.display.lit_count() == 0


class TestTimersAndKeys:
    def test_timer_transfers(self) -> None:
        state = _state()
        state.registers.v[2] = 0x3C
        _run(state, 0xF215)
        _run(state, 0xF218)
        assert state.registers.delay == 0x3C
        assert state.registers.sound == 0x3C
        state.registers.delay = 0x12
        _run(state, 0xF307)
        assert state.registers.v[3] == 0x12

    def test_wait_for_key_blocks(self) -> None:
        state = _state()
        assert _run(state, 0xF50A) == 0
        assert state.await_key

    def test_wait_for_key_takes_lowest_pressed(self) -> None:
        state = _state()
        state.keypad.press(0xC)
        state.keypad.press(0x3)
        assert _run(state, 0xF50A) == 2
        assert state.registers.v[5] == 0x3
        assert not state.await_key
