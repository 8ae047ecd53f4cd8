"""Tests for stack operations."""

import jax.numpy as jnp
from chip8vm import StackState, STACK_SIZE
from chip8vm.stack import push, pop, is_full, is_empty


def test_push_pop_order():
    stack = StackState()
    for address in (0x202, 0x304, 0x406):
        stack = push(stack, jnp.uint16(address))

    popped = []
    for _ in range(3):
        stack, address = pop(stack)
        popped.append(int(address))

    assert popped == [0x406, 0x304, 0x202]
    assert bool(is_empty(stack))


def test_push_on_full_stack_is_dropped():
    stack = StackState()
    for i in range(STACK_SIZE):
        stack = push(stack, jnp.uint16(0x200 + 2 * i))
    assert bool(is_full(stack))

    stack = push(stack, jnp.uint16(0xABC))

    assert int(stack.pointer) == STACK_SIZE
    assert 0xABC not in [int(v) for v in stack.data]


def test_pop_on_empty_stack():
    stack, address = pop(StackState())

    assert int(address) == 0
    assert int(stack.pointer) == 0
