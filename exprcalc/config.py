"""
Runtime configuration for one pipeline invocation.
"""

from dataclasses import dataclass


DEFAULT_STACK_CAPACITY = 256
DEFAULT_MAX_DEPTH = 128
DEFAULT_RESULT_DIGITS = 15

# The parser recurses once per nesting level (two frames per level), so the
# limit stays well below the interpreter's default recursion limit of 1000.
MAX_DEPTH_LIMIT = 256


@dataclass
class CalcConfig:
    """Resource limits and output settings.

    stack_capacity bounds the VM value stack. max_depth bounds how deeply
    operands may nest: parentheses, unary operators and '^' chains each add
    a level, while a flat chain such as 1 + 2 + 3 stays at one level however
    long it gets.
    """
    stack_capacity: int = DEFAULT_STACK_CAPACITY
    max_depth: int = DEFAULT_MAX_DEPTH
    result_digits: int = DEFAULT_RESULT_DIGITS
    trace: bool = False

    def __post_init__(self):
        if self.stack_capacity < 1:
            raise ValueError(f"stack_capacity must be positive, got {self.stack_capacity}")
        if not 1 <= self.max_depth <= MAX_DEPTH_LIMIT:
            raise ValueError(f"max_depth must be between 1 and {MAX_DEPTH_LIMIT}, got {self.max_depth}")
        if not 1 <= self.result_digits <= 17:
            raise ValueError(f"result_digits must be between 1 and 17, got {self.result_digits}")
