"""CHIP-8 instruction decoding."""

import jax
import jax.numpy as jnp
from chex import dataclass


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    raw: int
    opcode: int  # First nibble
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    nn: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)


def decode(instruction: int) -> DecodedInstruction:
    """Decode 16-bit instruction into components."""
    return DecodedInstruction(
        raw=instruction,
        opcode=(instruction & 0xF000) >> 12,
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=instruction & 0x000F,
        nn=instruction & 0x00FF,
        nnn=instruction & 0x0FFF
    )


# Valid low nibbles of 8XYN and valid low bytes of EXNN / FXNN
ALU_OPERATIONS = (0x0, 0x1, 0x2, 0x3, 0x4, 0x5, 0x6, 0x7, 0xE)
KEY_OPERATIONS = (0x9E, 0xA1)
MISC_OPERATIONS = (0x07, 0x0A, 0x15, 0x18, 0x1E, 0x29, 0x33, 0x55, 0x65)


def _one_of(value, options) -> jnp.ndarray:
    return jnp.any(jnp.array(options) == value)


def is_known_instruction(instruction: DecodedInstruction) -> jnp.ndarray:
    """Whether the decoded word matches an entry of the instruction table."""
    always = lambda inst: jnp.bool_(True)

    return jax.lax.switch(
        instruction.opcode,
        [
            lambda inst: _one_of(inst.raw, (0x0000, 0x00E0, 0x00EE)),
            always,
            always,
            always,
            always,
            lambda inst: inst.n == 0,
            always,
            always,
            lambda inst: _one_of(inst.n, ALU_OPERATIONS),
            lambda inst: inst.n == 0,
            always,
            always,
            always,
            always,
            lambda inst: _one_of(inst.nn, KEY_OPERATIONS),
            lambda inst: _one_of(inst.nn, MISC_OPERATIONS),
        ],
        instruction
    )
