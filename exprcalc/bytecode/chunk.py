"""
Compiled program representation: instruction list plus constant pool.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional, NamedTuple


class OpCode(IntEnum):
    """Stack machine instruction set."""
    CONSTANT = 0    # push constants[operand]
    NEGATE = 1      # pop a, push -a
    ADD = 2         # pop b, pop a, push a + b
    SUBTRACT = 3
    MULTIPLY = 4
    DIVIDE = 5
    MODULO = 6
    POWER = 7
    HALT = 8        # pop and return the sole remaining value


# Net change in stack depth per opcode
STACK_EFFECT = {
    OpCode.CONSTANT: 1,
    OpCode.NEGATE: 0,
    OpCode.ADD: -1,
    OpCode.SUBTRACT: -1,
    OpCode.MULTIPLY: -1,
    OpCode.DIVIDE: -1,
    OpCode.MODULO: -1,
    OpCode.POWER: -1,
    OpCode.HALT: -1,
}


class Instruction(NamedTuple):
    opcode: OpCode
    operand: int = 0    # constant index, only meaningful for CONSTANT


@dataclass
class Chunk:
    """
    A compiled expression.

    offsets runs parallel to code and records the source offset each
    instruction reports in runtime errors (None when it has none).
    Indices into code and constants are stable; both lists only grow.
    """
    code: List[Instruction] = field(default_factory=list)
    constants: List[float] = field(default_factory=list)
    offsets: List[Optional[int]] = field(default_factory=list)

    def add_constant(self, value: float) -> int:
        self.constants.append(value)
        return len(self.constants) - 1

    def emit(self, opcode: OpCode, operand: int = 0, offset: Optional[int] = None) -> int:
        self.code.append(Instruction(opcode, operand))
        self.offsets.append(offset)
        return len(self.code) - 1

    def emit_constant(self, value: float, offset: Optional[int] = None) -> int:
        return self.emit(OpCode.CONSTANT, self.add_constant(value), offset)

    def offset_at(self, ip: int) -> Optional[int]:
        if 0 <= ip < len(self.offsets):
            return self.offsets[ip]
        return None

    def max_stack_depth(self) -> int:
        """Deepest operand stack the code reaches when executed."""
        depth = deepest = 0
        for instruction in self.code:
            depth += STACK_EFFECT.get(instruction.opcode, 0)
            deepest = max(deepest, depth)
        return deepest

    def disassemble(self, name: str = "chunk") -> str:
        """Human-readable listing, one instruction per line."""
        lines = [f"== {name} =="]
        for index, instruction in enumerate(self.code):
            line = f"{index:04d}  {instruction.opcode.name:<10}"
            if instruction.opcode == OpCode.CONSTANT:
                if instruction.operand < len(self.constants):
                    constant = f"{self.constants[instruction.operand]:g}"
                else:
                    constant = "<invalid>"
                line += f" {instruction.operand:4d}  ({constant})"
            lines.append(line.rstrip())
        return "\n".join(lines)

    def __len__(self) -> int:
        return len(self.code)
