"""Tests for fetch, step, batched runs, timers and program loading."""

import jax.numpy as jnp
import pytest
from chip8vm import (
    fetch, step, run_instructions, tick_timers, check_instruction, load_program, load_rom,
    ProgramTooLargeError, MAX_PROGRAM_SIZE, MEMORY_SIZE, STATUS_OK, STATUS_FETCH_OUT_OF_BOUNDS,
    STATUS_UNKNOWN_INSTRUCTION, STATUS_STACK_OVERFLOW, STATUS_STACK_UNDERFLOW
)
from conftest import program


class TestFetch:

    def test_fetch_big_endian(self, fresh_state):
        state = load_program(fresh_state, b"\xAB\xCD")

        state, instruction = fetch(state)

        assert instruction == 0xABCD
        assert state.pc == 0x202

    def test_step_executes_one_instruction(self, fresh_state):
        state = load_program(fresh_state, program(0x6A42, 0x6B43))

        state, status, instruction = step(state)

        assert status == STATUS_OK
        assert instruction == 0x6A42
        assert state.V[0xA] == 0x42
        assert state.V[0xB] == 0
        assert state.pc == 0x202

    def test_step_at_last_byte_is_out_of_bounds(self, fresh_state):
        state = fresh_state.replace(pc=jnp.asarray(MEMORY_SIZE - 1, dtype=jnp.uint16))

        new_state, status, _ = step(state)

        assert status == STATUS_FETCH_OUT_OF_BOUNDS
        assert new_state.pc == MEMORY_SIZE - 1

    def test_step_at_last_word_is_fine(self, fresh_state):
        state = fresh_state.replace(pc=jnp.asarray(MEMORY_SIZE - 2, dtype=jnp.uint16))

        state, status, _ = step(state)

        assert status == STATUS_OK
        assert state.pc == MEMORY_SIZE


class TestCheckInstruction:

    def test_unknown(self, fresh_state):
        assert check_instruction(fresh_state, 0x5121) == STATUS_UNKNOWN_INSTRUCTION

    def test_underflow(self, fresh_state):
        assert check_instruction(fresh_state, 0x00EE) == STATUS_STACK_UNDERFLOW

    def test_overflow(self, fresh_state):
        stack = fresh_state.stack.replace(pointer=jnp.asarray(16, dtype=jnp.int32))
        assert check_instruction(fresh_state.replace(stack=stack), 0x2300) == STATUS_STACK_OVERFLOW

    def test_ok(self, fresh_state):
        assert check_instruction(fresh_state, 0x2300) == STATUS_OK

    def test_failed_step_leaves_state(self, fresh_state):
        state = load_program(fresh_state, program(0xF0FF))

        new_state, status, instruction = step(state)

        assert status == STATUS_UNKNOWN_INSTRUCTION
        assert instruction == 0xF0FF
        assert new_state.pc == 0x200


class TestRunInstructions:

    def test_runs_n_instructions(self, fresh_state):
        # V0 += 1 forever
        state = load_program(fresh_state, program(0x7001, 0x1200))

        state, status, _, executed = run_instructions(state, 10)

        assert status == STATUS_OK
        assert executed == 10
        assert state.V[0] == 5

    def test_stops_before_failure(self, fresh_state):
        state = load_program(fresh_state, program(0x6001, 0x6102, 0x5121, 0x6203))

        state, status, instruction, executed = run_instructions(state, 10)

        assert status == STATUS_UNKNOWN_INSTRUCTION
        assert instruction == 0x5121
        assert executed == 2
        assert state.pc == 0x204
        assert state.V[2] == 0


class TestTimers:

    def test_tick_timers_decrements(self, fresh_state):
        state = fresh_state.replace(
            delay_timer=jnp.asarray(3, dtype=jnp.uint8), sound_timer=jnp.asarray(5, dtype=jnp.uint8)
        )

        state, beep = tick_timers(state)

        assert state.delay_timer == 2
        assert state.sound_timer == 4
        assert not beep

    def test_timer_floor(self, fresh_state):
        state = fresh_state.replace(
            delay_timer=jnp.asarray(1, dtype=jnp.uint8), sound_timer=jnp.asarray(2, dtype=jnp.uint8)
        )
        for _ in range(10):
            state, _ = tick_timers(state)

        assert state.delay_timer == 0
        assert state.sound_timer == 0

    def test_beep_on_last_sound_frame(self, fresh_state):
        state = fresh_state.replace(sound_timer=jnp.asarray(2, dtype=jnp.uint8))
        beeps = []
        for _ in range(4):
            state, beep = tick_timers(state)
            beeps.append(bool(beep))

        assert beeps == [False, True, False, False]


class TestLoading:

    def test_load_program_writes_only_program_range(self, fresh_state):
        state = load_program(fresh_state, bytes([1, 2, 3]))

        assert [int(b) for b in state.memory[0x200:0x203]] == [1, 2, 3]
        assert state.memory[0x203] == 0
        assert jnp.array_equal(state.memory[:0x200], fresh_state.memory[:0x200])

    def test_load_empty_program(self, fresh_state):
        state = load_program(fresh_state, b"")

        assert jnp.array_equal(state.memory, fresh_state.memory)

    def test_load_max_size(self, fresh_state):
        state = load_program(fresh_state, b"\x11" * MAX_PROGRAM_SIZE)

        assert state.memory[MEMORY_SIZE - 1] == 0x11

    def test_load_too_large(self, fresh_state):
        with pytest.raises(ProgramTooLargeError):
            load_program(fresh_state, b"\x00" * (MAX_PROGRAM_SIZE + 1))

    def test_load_rom(self, fresh_state, tmp_path):
        rom = tmp_path / "test.ch8"
        rom.write_bytes(program(0x00E0, 0x1200))

        state = load_rom(fresh_state, rom)

        assert [int(b) for b in state.memory[0x200:0x204]] == [0x00, 0xE0, 0x12, 0x00]

    def test_load_rom_too_large(self, fresh_state, tmp_path):
        rom = tmp_path / "big.ch8"
        rom.write_bytes(b"\x00" * 4000)

        with pytest.raises(ProgramTooLargeError):
            load_rom(fresh_state, rom)

    def test_load_rom_missing(self, fresh_state, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_rom(fresh_state, tmp_path / "missing.ch8")
