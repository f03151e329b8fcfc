"""
Errors raised by the bytecode virtual machine.

A VMError means the compiler and VM disagree about the stack discipline or
the chunk is corrupt; output of a correct compiler never triggers one,
except stack overflow when the configured capacity is too small.
"""

from typing import Optional

from ..diagnostics import CalcError


class VMError(CalcError):
    """Operand stack overflow/underflow or a malformed chunk."""

    def __init__(self, message: str, instruction_pointer: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.instruction_pointer = instruction_pointer


VM_ERROR_CODES = {
    "V001": "Stack overflow",
    "V002": "Stack underflow",
    "V003": "Constant index out of range",
    "V004": "Unknown opcode",
    "V005": "Missing halt",
    "V006": "Unbalanced stack at halt",
}


def create_stack_overflow_error(ip: int, capacity: int) -> VMError:
    return VMError(
        f"Stack overflow at instruction {ip}: capacity of {capacity} values exceeded",
        instruction_pointer=ip,
        code="V001",
        help_text="The expression needs more operand slots than the configured stack capacity.",
    )


def create_stack_underflow_error(ip: int) -> VMError:
    return VMError(
        f"Stack underflow at instruction {ip}",
        instruction_pointer=ip,
        code="V002",
    )


def create_bad_constant_error(ip: int, index: int, pool_size: int) -> VMError:
    return VMError(
        f"Constant index {index} out of range at instruction {ip} (pool holds {pool_size})",
        instruction_pointer=ip,
        code="V003",
    )


def create_unknown_opcode_error(ip: int, opcode) -> VMError:
    return VMError(
        f"Unknown opcode {opcode!r} at instruction {ip}",
        instruction_pointer=ip,
        code="V004",
    )


def create_missing_halt_error(ip: int) -> VMError:
    return VMError(
        f"Execution ran past the end of the chunk at instruction {ip} without HALT",
        instruction_pointer=ip,
        code="V005",
    )


def create_unbalanced_halt_error(ip: int, remaining: int) -> VMError:
    return VMError(
        f"HALT at instruction {ip} left {remaining} values on the stack, expected exactly 1",
        instruction_pointer=ip,
        code="V006",
    )
