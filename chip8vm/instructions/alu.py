"""CHIP-8 ALU operations (8xxx)."""

import jax
import jax.lax
import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction
from chip8vm.constants import FLAG_REGISTER

_NO_FLAG = jnp.zeros((), dtype=jnp.uint8)


def _u8(value) -> jnp.ndarray:
    return jnp.astype(value & 0xFF, jnp.uint8)


def alu_set(vx, vy):
    """8XY0 - Set: VX = VY."""
    return vy, _NO_FLAG


def alu_or(vx, vy):
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, _NO_FLAG


def alu_and(vx, vy):
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, _NO_FLAG


def alu_xor(vx, vy):
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, _NO_FLAG


def alu_add(vx, vy):
    """8XY4 - Add: VX += VY, VF = carry."""
    result = jnp.astype(vx, jnp.uint16) + vy
    carry = jnp.astype(result > 0xFF, jnp.uint8)
    return _u8(result), carry


def alu_sub_xy(vx, vy):
    """8XY5 - Subtract: VX -= VY, VF = not borrow."""
    no_borrow = jnp.astype(vx >= vy, jnp.uint8)
    return _u8(jnp.astype(vx, jnp.int32) - vy), no_borrow


def alu_shift_right(vx, vy):
    """8XY6 - Shift right: VX >>= 1, VF = shifted out bit."""
    return vx >> 1, vx & 1


def alu_sub_yx(vx, vy):
    """8XY7 - Subtract: VX = VY - VX, VF = not borrow."""
    no_borrow = jnp.astype(vy >= vx, jnp.uint8)
    return _u8(jnp.astype(vy, jnp.int32) - vx), no_borrow


def alu_shift_left(vx, vy):
    """8XYE - Shift left: VX <<= 1, VF = shifted out bit."""
    shifted_bit = (vx & 0x80) >> 7
    return _u8(jnp.astype(vx, jnp.uint16) << 1), shifted_bit


# Indexed by N; unknown N values never reach here, see decode.is_known_instruction
_OPERATION_SLOT = jnp.array([0, 1, 2, 3, 4, 5, 6, 7, 0, 0, 0, 0, 0, 0, 8, 0], dtype=jnp.int32)
_WRITES_FLAG = jnp.array([0, 0, 0, 0, 1, 1, 1, 1, 0, 0, 0, 0, 0, 0, 1, 0], dtype=bool)


def execute_alu_operation(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XYN - ALU operations dispatcher.

    VX is written first and VF last, so the flag wins when X is F. The
    logical operations leave VF alone.
    """
    vx = state.V[instruction.x]
    vy = state.V[instruction.y]

    result, vf = jax.lax.switch(
        _OPERATION_SLOT[instruction.n],
        [alu_set, alu_or, alu_and, alu_xor, alu_add,
         alu_sub_xy, alu_shift_right, alu_sub_yx, alu_shift_left],
        vx, vy
    )

    new_V = state.V.at[instruction.x].set(result)
    new_V = jnp.where(_WRITES_FLAG[instruction.n], new_V.at[FLAG_REGISTER].set(vf), new_V)
    return state.replace(V=new_V)
