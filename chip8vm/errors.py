"""Exceptions for fatal CHIP-8 execution conditions."""

from typing import Optional

from chip8vm.constants import (
    STATUS_FETCH_OUT_OF_BOUNDS, STATUS_UNKNOWN_INSTRUCTION, STATUS_STACK_OVERFLOW,
    STATUS_STACK_UNDERFLOW, MAX_PROGRAM_SIZE
)


class Chip8Error(Exception):
    """Base exception for all fatal machine errors."""

    def __init__(self, message: str, pc: int = 0, instruction: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.pc = pc
        self.instruction = instruction


class FetchOutOfBoundsError(Chip8Error):
    """PC points outside memory when an instruction is fetched."""


class UnknownInstructionError(Chip8Error):
    """Instruction word matches no known opcode."""


class StackOverflowError(Chip8Error):
    """Subroutine call with all stack slots in use."""


class StackUnderflowError(Chip8Error):
    """Return from subroutine with an empty stack."""


class ProgramTooLargeError(ValueError):
    """Program does not fit between 0x200 and the end of memory."""

    def __init__(self, size: int):
        super().__init__(f"Program is {size} bytes, at most {MAX_PROGRAM_SIZE} bytes fit in memory")
        self.size = size


def error_for_status(status: int, pc: int, instruction: int) -> Chip8Error:
    """Build the exception matching a non-OK step status."""
    if status == STATUS_FETCH_OUT_OF_BOUNDS:
        return FetchOutOfBoundsError(f"Instruction fetch out of bounds at PC=0x{pc:04X}", pc)
    if status == STATUS_UNKNOWN_INSTRUCTION:
        return UnknownInstructionError(
            f"Unknown instruction 0x{instruction:04X} at PC=0x{pc:04X}", pc, instruction
        )
    if status == STATUS_STACK_OVERFLOW:
        return StackOverflowError(
            f"Stack overflow calling 0x{instruction & 0xFFF:03X} at PC=0x{pc:04X}", pc, instruction
        )
    if status == STATUS_STACK_UNDERFLOW:
        return StackUnderflowError(f"Return with empty stack at PC=0x{pc:04X}", pc, instruction)
    raise ValueError(f"Unknown status code {status}")
