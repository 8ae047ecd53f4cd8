"""Test configuration and fixtures for CHIP-8 emulator tests."""

import pytest
import jax.numpy as jnp
from chip8vm import create_state, Machine
from chip8vm.logging import ConsoleLogger


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state()


@pytest.fixture
def quiet_logger(capsys):
    """Logger that only reports errors."""
    return ConsoleLogger("test", log_level="ERROR", use_colors=False)


@pytest.fixture
def machine(quiet_logger):
    """Provide a fresh machine for each test."""
    return Machine(logger=quiet_logger)


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def program(*words):
    """Encode instruction words as big-endian program bytes."""
    return b"".join(word.to_bytes(2, "big") for word in words)
