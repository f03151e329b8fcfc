"""
Floating point primitives shared by the evaluator and the virtual machine.

Python's own operators differ from C double arithmetic in a few corners:
`**` returns complex numbers for negative bases, math.pow and math.fmod
raise instead of returning inf/NaN. These helpers restore the C results so
that both execution strategies compute identical bits.
"""

import math
import struct

from .errors import create_division_by_zero_error


def _is_odd_integer(value: float) -> bool:
    return math.isfinite(value) and value.is_integer() and math.fmod(value, 2.0) != 0.0


def real_pow(base: float, exponent: float) -> float:
    """C pow(): NaN on domain error, signed infinity on overflow or pole."""
    try:
        return math.pow(base, exponent)
    except OverflowError:
        if base < 0.0 and _is_odd_integer(exponent):
            return -math.inf
        return math.inf
    except ValueError:
        if base == 0.0:
            # zero to a negative power
            if _is_odd_integer(exponent):
                return math.copysign(math.inf, base)
            return math.inf
        return math.nan


def real_fmod(dividend: float, divisor: float) -> float:
    """C fmod(): remainder with the sign of the dividend, NaN for infinite dividends."""
    try:
        return math.fmod(dividend, divisor)
    except ValueError:
        return math.nan


def divide(lhs: float, rhs: float, offset=None) -> float:
    if rhs == 0.0:
        raise create_division_by_zero_error("/", offset)
    return lhs / rhs


def modulo(lhs: float, rhs: float, offset=None) -> float:
    if rhs == 0.0:
        raise create_division_by_zero_error("%", offset)
    return real_fmod(lhs, rhs)


def same_bits(a: float, b: float) -> bool:
    """Exact bitwise equality, so NaN matches NaN and 0.0 differs from -0.0."""
    return struct.pack("<d", a) == struct.pack("<d", b)
