"""CHIP-8 stack operations."""

import jax.numpy as jnp
from chip8vm.constants import STACK_SIZE
from chip8vm.state import StackState


def is_full(stack: StackState) -> jnp.ndarray:
    return stack.pointer >= STACK_SIZE


def is_empty(stack: StackState) -> jnp.ndarray:
    return stack.pointer <= 0


def push(stack: StackState, address: jnp.ndarray) -> StackState:
    """Push address onto stack.

    A push onto a full stack leaves it unchanged; callers check ``is_full``
    first and treat that case as an overflow.
    """
    full = is_full(stack)
    slot = jnp.minimum(stack.pointer, STACK_SIZE - 1)
    new_data = stack.data.at[slot].set(jnp.where(full, stack.data[slot], jnp.astype(address, jnp.uint16)))
    return stack.replace(data=new_data, pointer=jnp.where(full, stack.pointer, stack.pointer + 1))


def pop(stack: StackState) -> tuple[StackState, jnp.ndarray]:
    """Pop address from stack.

    Popping an empty stack returns address 0 and leaves the pointer at 0.
    """
    empty = is_empty(stack)
    new_pointer = jnp.where(empty, stack.pointer, stack.pointer - 1)
    popped_address = jnp.where(empty, jnp.zeros((), dtype=jnp.uint16), stack.data[new_pointer])
    new_data = stack.data.at[new_pointer].set(jnp.where(empty, stack.data[new_pointer], 0))
    return stack.replace(data=new_data, pointer=new_pointer), popped_address
