"""CHIP-8 virtual machine package."""

from chip8vm.state import EmulatorState, StackState, create_state
from chip8vm.emulator import (
    execute, fetch, step, run_instructions, tick_timers, check_instruction, load_program, load_rom
)
from chip8vm.decode import DecodedInstruction, decode, is_known_instruction
from chip8vm.constants import *
from chip8vm.errors import (
    Chip8Error, FetchOutOfBoundsError, UnknownInstructionError, StackOverflowError,
    StackUnderflowError, ProgramTooLargeError
)
from chip8vm.machine import Machine

__all__ = [
    "EmulatorState",
    "StackState",
    "create_state",
    "fetch",
    "execute",
    "step",
    "run_instructions",
    "tick_timers",
    "check_instruction",
    "load_program",
    "load_rom",
    "DecodedInstruction",
    "decode",
    "is_known_instruction",
    "Machine",
    "Chip8Error",
    "FetchOutOfBoundsError",
    "UnknownInstructionError",
    "StackOverflowError",
    "StackUnderflowError",
    "ProgramTooLargeError",
    "MEMORY_SIZE",
    "PROGRAM_START",
    "MAX_PROGRAM_SIZE",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "INSTRUCTIONS_PER_FRAME",
]
