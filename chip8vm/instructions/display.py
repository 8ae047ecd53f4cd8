"""CHIP-8 display operations."""

import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction
from chip8vm.constants import SCREEN_WIDTH, SCREEN_HEIGHT, MEMORY_SIZE, FLAG_REGISTER

# Pre-computed coordinate grids for display operations
xx, yy = jnp.meshgrid(jnp.arange(SCREEN_WIDTH), jnp.arange(SCREEN_HEIGHT), indexing='ij')


def sprite_mask(memory: jnp.ndarray, index, x, y, height) -> jnp.ndarray:
    """Boolean (64, 32) mask of the pixels an N-row sprite at (x, y) covers.

    Sprite coordinates wrap around both screen edges.
    """
    col_offset = (xx - jnp.astype(x, jnp.int32)) % SCREEN_WIDTH
    row_offset = (yy - jnp.astype(y, jnp.int32)) % SCREEN_HEIGHT
    in_sprite = (col_offset < 8) & (row_offset < height)

    addresses = jnp.minimum(jnp.astype(index, jnp.int32) + row_offset, MEMORY_SIZE - 1)
    sprite_bytes = memory[addresses]
    bits = (sprite_bytes >> (7 - jnp.minimum(col_offset, 7))) & 1
    return (bits == 1) & in_sprite


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw an N-row sprite from memory[I] at (VX, VY); VF = collision.

    Set sprite bits turn pixels on and never off; a set bit over a lit pixel
    only records the collision.
    """
    sprite = sprite_mask(state.memory, state.I, state.V[instruction.x], state.V[instruction.y], instruction.n)
    collision = jnp.any(state.display & sprite)

    return state.replace(
        display=state.display | sprite,
        V=state.V.at[FLAG_REGISTER].set(jnp.astype(collision, jnp.uint8))
    )
