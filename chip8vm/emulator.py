"""Main CHIP-8 emulator execution engine."""

import os

import jax
import jax.lax
import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import decode, is_known_instruction
from chip8vm.constants import (
    MEMORY_SIZE, PROGRAM_START, MAX_PROGRAM_SIZE, STATUS_OK, STATUS_FETCH_OUT_OF_BOUNDS,
    STATUS_UNKNOWN_INSTRUCTION, STATUS_STACK_OVERFLOW, STATUS_STACK_UNDERFLOW
)
from chip8vm.errors import ProgramTooLargeError
from chip8vm.stack import is_full, is_empty
from chip8vm.instructions.system import execute_system_instruction
from chip8vm.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset, execute_skip_if_key
)
from chip8vm.instructions.alu import execute_alu_operation
from chip8vm.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chip8vm.instructions.display import execute_display
from chip8vm.instructions.misc import execute_misc_instruction


def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute single CHIP-8 instruction."""
    decoded_instruction = decode(instruction)

    return jax.lax.switch(
        decoded_instruction.opcode,
        [
            execute_system_instruction,
            execute_jump,
            execute_call,
            execute_skip_if_equal_immediate,
            execute_skip_if_not_equal_immediate,
            execute_skip_if_equal_register,
            execute_set,
            execute_add,
            execute_alu_operation,
            execute_skip_if_not_equal_register,
            execute_set_index,
            execute_jump_with_offset,
            execute_random,
            execute_display,
            execute_skip_if_key,
            execute_misc_instruction,
        ],
        state, decoded_instruction
    )


def check_instruction(state: EmulatorState, instruction: int) -> jnp.ndarray:
    """Status code for executing ``instruction`` on ``state``, STATUS_OK if it can run."""
    decoded = decode(instruction)
    status = jnp.select(
        [
            ~is_known_instruction(decoded),
            (decoded.opcode == 0x2) & is_full(state.stack),
            (decoded.raw == 0x00EE) & is_empty(state.stack),
        ],
        [STATUS_UNKNOWN_INSTRUCTION, STATUS_STACK_OVERFLOW, STATUS_STACK_UNDERFLOW],
        default=STATUS_OK,
    )
    return jnp.astype(status, jnp.int32)


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def can_fetch(state: EmulatorState) -> jnp.ndarray:
    """Whether both bytes at PC and PC+1 lie inside memory."""
    return jnp.astype(state.pc, jnp.int32) + 1 < MEMORY_SIZE


def fetch(state: EmulatorState) -> tuple[EmulatorState, jnp.uint16]:
    """Fetch next instruction from memory and advance PC by 2."""
    instruction = _pack_u16(state.memory[state.pc], state.memory[state.pc + 1])
    return state.replace(pc=state.pc + 2), instruction


@jax.jit
def step(state: EmulatorState) -> tuple[EmulatorState, jnp.ndarray, jnp.ndarray]:
    """Fetch and execute one instruction.

    Returns the new state, a status code and the fetched word. On any status
    other than STATUS_OK the input state is returned unchanged.
    """
    def _fetch_and_execute(state):
        fetched, instruction = fetch(state)
        status = check_instruction(fetched, instruction)
        new_state = jax.lax.cond(
            status == STATUS_OK,
            lambda s: execute(s, instruction),
            lambda s: state,
            fetched
        )
        return new_state, status, instruction

    def _out_of_bounds(state):
        return state, jnp.int32(STATUS_FETCH_OUT_OF_BOUNDS), jnp.zeros((), dtype=jnp.uint16)

    return jax.lax.cond(can_fetch(state), _fetch_and_execute, _out_of_bounds, state)


@jax.jit
def run_instructions(state: EmulatorState, n: int) -> tuple[EmulatorState, jnp.ndarray, jnp.ndarray, jnp.ndarray]:
    """Run up to ``n`` instructions, stopping before the first one that fails.

    Returns the final state, the status of the last step, the last fetched
    word and the number of instructions executed.
    """
    def cond_fn(carry):
        _, status, _, executed = carry
        return (status == STATUS_OK) & (executed < n)

    def body_fn(carry):
        state, _, _, executed = carry
        new_state, status, instruction = step(state)
        return new_state, status, instruction, executed + jnp.astype(status == STATUS_OK, jnp.int32)

    initial = (state, jnp.int32(STATUS_OK), jnp.zeros((), dtype=jnp.uint16), jnp.int32(0))
    return jax.lax.while_loop(cond_fn, body_fn, initial)


@jax.jit
def tick_timers(state: EmulatorState) -> tuple[EmulatorState, jnp.ndarray]:
    """Decrement delay and sound timers once, never below zero.

    Returns the new state and whether a tone sounds this frame (sound timer
    was exactly 1 before decrementing).
    """
    beep = state.sound_timer == 1
    return state.replace(
        delay_timer=jnp.where(state.delay_timer > 0, state.delay_timer - 1, state.delay_timer),
        sound_timer=jnp.where(state.sound_timer > 0, state.sound_timer - 1, state.sound_timer),
    ), beep


def load_program(state: EmulatorState, program: bytes) -> EmulatorState:
    """Copy program bytes into CHIP-8 memory starting at 0x200."""
    if len(program) > MAX_PROGRAM_SIZE:
        raise ProgramTooLargeError(len(program))
    if not program:
        return state
    program_array = jnp.array(list(program), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(program)].set(program_array)
    return state.replace(memory=new_memory)


def load_rom(state: EmulatorState, filename: str | os.PathLike) -> EmulatorState:
    """Load ROM data into CHIP-8 memory starting at 0x200."""
    size = os.path.getsize(filename)
    if size > MAX_PROGRAM_SIZE:
        raise ProgramTooLargeError(size)
    with open(filename, 'rb') as f:
        rom_data = f.read()
    return load_program(state, rom_data)
