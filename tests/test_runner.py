"""Tests for the frame driver."""

import pytest
from chip8vm import UnknownInstructionError, INSTRUCTIONS_PER_FRAME
from chip8vm.runner import run_frame, run_headless
from conftest import program


def test_run_frame_runs_fixed_instruction_count(machine):
    # V0 += 1, loop
    machine.load(program(0x7001, 0x1200))

    executed, beep = run_frame(machine)

    assert executed == INSTRUCTIONS_PER_FRAME
    assert beep is False
    assert machine.registers[0] == INSTRUCTIONS_PER_FRAME // 2


def test_run_frame_ticks_timers_once(machine):
    machine.load(program(0x6005, 0xF015, 0x1204))

    run_frame(machine)

    assert machine.delay_timer == 4


def test_run_headless_counts_beeps(machine, quiet_logger):
    # ST = 3 then spin
    machine.load(program(0x6003, 0xF018, 0x1204))

    stats = run_headless(machine, frames=10, progress=False, logger=quiet_logger)

    assert stats == {"frames": 10, "instructions": 10 * INSTRUCTIONS_PER_FRAME, "beeps": 1}
    assert machine.sound_timer == 0


def test_run_headless_propagates_errors(machine, quiet_logger):
    machine.load(program(0x1202) + program(0x5AB1))

    with pytest.raises(UnknownInstructionError):
        run_headless(machine, frames=3, progress=False, logger=quiet_logger)


def test_run_headless_sums_executed_instructions(machine, quiet_logger, monkeypatch):
    monkeypatch.setattr(machine, "run", lambda n: 3)

    stats = run_headless(machine, frames=4, progress=False, logger=quiet_logger)

    assert stats["instructions"] == 12
