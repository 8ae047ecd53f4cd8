"""Frame driver: a fixed number of instructions per timer tick."""

from typing import Dict, Optional, Tuple

from chip8vm.constants import INSTRUCTIONS_PER_FRAME
from chip8vm.logging import ConsoleLogger, get_logger, progress_bar
from chip8vm.machine import Machine


def run_frame(machine: Machine, instructions_per_frame: int = INSTRUCTIONS_PER_FRAME) -> Tuple[int, bool]:
    """Run one frame: the frame's instructions, then one timer tick.

    Returns the number of instructions executed and whether a tone sounds
    this frame.
    """
    executed = machine.run(instructions_per_frame)
    return executed, machine.tick_timers()


def run_headless(
    machine: Machine,
    frames: int,
    progress: bool = True,
    logger: Optional[ConsoleLogger] = None,
) -> Dict[str, int]:
    """Run ``frames`` frames without a window.

    Chip8Error propagates to the caller; the machine keeps the state from
    just before the failing instruction.

    Returns:
        Dictionary with the number of frames, instructions and beeps run
    """
    logger = logger or get_logger("runner")
    logger.info(f"Running {frames} frames headless at {INSTRUCTIONS_PER_FRAME} instructions per frame")

    instructions = 0
    beeps = 0
    with progress_bar(frames, disable=not progress) as bar:
        for _ in range(frames):
            executed, beep = run_frame(machine)
            instructions += executed
            beeps += beep
            bar.update(1)

    stats = {"frames": frames, "instructions": instructions, "beeps": beeps}
    logger.info(f"Finished: {stats['instructions']} instructions, {beeps} beeps, PC=0x{machine.pc:04X}")
    return stats
