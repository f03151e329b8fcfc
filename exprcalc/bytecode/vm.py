"""
Stack-based virtual machine for compiled expressions.

The operand stack is a preallocated list of fixed capacity. Every push is
checked against the capacity and every pop against the bottom, so a bad
chunk or an undersized stack is always a VMError, never silent corruption.
"""

import logging
import operator
from typing import List

from ..config import DEFAULT_STACK_CAPACITY
from ..runtime.arithmetic import divide, modulo, real_pow
from .chunk import Chunk, OpCode
from .errors import (
    create_stack_overflow_error, create_stack_underflow_error, create_bad_constant_error,
    create_unknown_opcode_error, create_missing_halt_error, create_unbalanced_halt_error
)

logger = logging.getLogger(__name__)


ARITHMETIC = {
    OpCode.ADD: operator.add,
    OpCode.SUBTRACT: operator.sub,
    OpCode.MULTIPLY: operator.mul,
    OpCode.POWER: real_pow,
}


class VirtualMachine:
    """
    Fetch-decode-execute loop over a Chunk.

    State is reset at the start of every run(), so one instance can execute
    any number of chunks in sequence.
    """

    def __init__(self, stack_capacity: int = DEFAULT_STACK_CAPACITY, trace: bool = False):
        if stack_capacity < 1:
            raise ValueError(f"stack_capacity must be positive, got {stack_capacity}")
        self.stack_capacity = stack_capacity
        self.trace = trace
        self.ip = 0
        self.stack: List[float] = [0.0] * stack_capacity
        self.stack_top = 0

    def run(self, chunk: Chunk) -> float:
        """
        Execute a chunk and return the value left by HALT.

        Raises:
            VMError: On stack overflow/underflow or a malformed chunk
            DivisionByZeroError: On DIVIDE or MODULO with a zero divisor
        """
        self.ip = 0
        self.stack_top = 0
        code = chunk.code

        while self.ip < len(code):
            ip = self.ip
            instruction = code[ip]
            opcode = instruction.opcode
            self.ip += 1

            if self.trace:
                logger.debug("%04d %-10s stack=%s", ip, getattr(opcode, "name", opcode),
                             self.stack[:self.stack_top])

            if opcode == OpCode.CONSTANT:
                index = instruction.operand
                if not 0 <= index < len(chunk.constants):
                    raise create_bad_constant_error(ip, index, len(chunk.constants))
                self._push(chunk.constants[index], ip)

            elif opcode == OpCode.NEGATE:
                self._push(-self._pop(ip), ip)

            elif opcode in ARITHMETIC:
                rhs = self._pop(ip)
                lhs = self._pop(ip)
                self._push(ARITHMETIC[opcode](lhs, rhs), ip)

            elif opcode == OpCode.DIVIDE:
                rhs = self._pop(ip)
                lhs = self._pop(ip)
                self._push(divide(lhs, rhs, chunk.offset_at(ip)), ip)

            elif opcode == OpCode.MODULO:
                rhs = self._pop(ip)
                lhs = self._pop(ip)
                self._push(modulo(lhs, rhs, chunk.offset_at(ip)), ip)

            elif opcode == OpCode.HALT:
                result = self._pop(ip)
                if self.stack_top != 0:
                    raise create_unbalanced_halt_error(ip, self.stack_top + 1)
                logger.debug("halted after %d instructions with %r", ip + 1, result)
                return result

            else:
                raise create_unknown_opcode_error(ip, opcode)

        raise create_missing_halt_error(self.ip)

    def _push(self, value: float, ip: int) -> None:
        if self.stack_top >= self.stack_capacity:
            raise create_stack_overflow_error(ip, self.stack_capacity)
        self.stack[self.stack_top] = value
        self.stack_top += 1

    def _pop(self, ip: int) -> float:
        if self.stack_top == 0:
            raise create_stack_underflow_error(ip)
        self.stack_top -= 1
        return self.stack[self.stack_top]


def run_chunk(chunk: Chunk, stack_capacity: int = DEFAULT_STACK_CAPACITY, trace: bool = False) -> float:
    """Execute a chunk on a fresh virtual machine."""
    return VirtualMachine(stack_capacity, trace).run(chunk)
