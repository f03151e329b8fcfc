"""
Expression Runtime Package

Direct tree evaluation plus the float primitives and runtime errors it
shares with the bytecode virtual machine.
"""

from .evaluator import Evaluator, evaluate
from .arithmetic import real_pow, real_fmod, same_bits
from .errors import EvaluationError, DivisionByZeroError, CrossCheckError

__all__ = [
    "Evaluator",
    "evaluate",
    "real_pow",
    "real_fmod",
    "same_bits",
    "EvaluationError",
    "DivisionByZeroError",
    "CrossCheckError",
]
