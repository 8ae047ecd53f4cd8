"""Stateful owner of a CHIP-8 emulator state."""

import os
from typing import Iterable, Optional

import jax
import jax.numpy as jnp
import numpy as np

from chip8vm.constants import NUM_KEYS, STATUS_OK
from chip8vm.emulator import step, run_instructions, tick_timers, load_program, load_rom
from chip8vm.errors import error_for_status
from chip8vm.logging import ConsoleLogger, get_logger
from chip8vm.state import EmulatorState, create_state


class Machine:
    """A CHIP-8 virtual machine instance.

    Wraps the functional core with the imperative interface a driver needs:
    load a program, advance one instruction, advance the timers, read the
    framebuffer and update the keys. Each instance owns its own state, so any
    number of machines can run side by side.

    Fatal conditions (fetch past the end of memory, unknown instruction,
    stack overflow or underflow) raise a ``Chip8Error`` subclass and leave
    the state exactly as it was before the failing instruction.
    """

    def __init__(self, seed: int = 0, logger: Optional[ConsoleLogger] = None):
        self.seed = seed
        self.logger = logger or get_logger("machine")
        self.state: EmulatorState = create_state(jax.random.PRNGKey(seed))

    def reset(self):
        """Restore the power-on state: empty memory apart from the font, PC at 0x200."""
        self.state = create_state(jax.random.PRNGKey(self.seed))
        self.logger.debug("Machine reset")

    def load(self, program: bytes):
        """Copy ``program`` into memory at 0x200."""
        self.state = load_program(self.state, bytes(program))
        self.logger.info(f"Loaded program ({len(program)} bytes)")

    def load_rom(self, path: str | os.PathLike):
        """Load a ROM file into memory at 0x200."""
        self.state = load_rom(self.state, path)
        self.logger.info(f"Loaded ROM {os.fspath(path)} ({os.path.getsize(path)} bytes)")

    def tick(self):
        """Fetch and execute exactly one instruction."""
        state, status, instruction = step(self.state)
        self._check(int(status), int(instruction))
        self.state = state

    def run(self, n: int) -> int:
        """Execute ``n`` instructions; same semantics as ``n`` calls to ``tick``.

        Returns the number of instructions executed.
        """
        state, status, instruction, executed = run_instructions(self.state, n)
        self.state = state
        self._check(int(status), int(instruction))
        return int(executed)

    def _check(self, status: int, instruction: int):
        if status != STATUS_OK:
            error = error_for_status(status, self.pc, instruction)
            self.logger.error(error.message)
            raise error

    def tick_timers(self) -> bool:
        """Advance both timers by one frame. Returns True when a tone sounds this frame."""
        self.state, beep = tick_timers(self.state)
        return bool(beep)

    @property
    def framebuffer(self) -> np.ndarray:
        """Read-only (32, 64) boolean array indexed ``[row, column]``."""
        pixels = np.asarray(self.state.display).T
        pixels.flags.writeable = False
        return pixels

    @property
    def keys(self) -> tuple:
        return tuple(bool(pressed) for pressed in np.asarray(self.state.keypad))

    def set_key(self, key: int, pressed: bool):
        """Set the pressed state of key 0x0-0xF."""
        if not 0 <= key < NUM_KEYS:
            raise ValueError(f"Key index must be in 0..{NUM_KEYS - 1}, got {key}")
        self.state = self.state.replace(keypad=self.state.keypad.at[key].set(bool(pressed)))

    def set_keys(self, flags: Iterable[bool]):
        """Replace all 16 key flags at once."""
        flags = [bool(flag) for flag in flags]
        if len(flags) != NUM_KEYS:
            raise ValueError(f"Expected {NUM_KEYS} key flags, got {len(flags)}")
        self.state = self.state.replace(keypad=jnp.array(flags, dtype=bool))

    @property
    def sound_active(self) -> bool:
        return int(self.state.sound_timer) > 0

    @property
    def pc(self) -> int:
        return int(self.state.pc)

    @property
    def index(self) -> int:
        return int(self.state.I)

    @property
    def registers(self) -> tuple:
        return tuple(int(value) for value in np.asarray(self.state.V))

    @property
    def delay_timer(self) -> int:
        return int(self.state.delay_timer)

    @property
    def sound_timer(self) -> int:
        return int(self.state.sound_timer)

    @property
    def stack_pointer(self) -> int:
        return int(self.state.stack.pointer)
