"""
Errors raised while computing a value, by either the tree evaluator or the
bytecode virtual machine.
"""

from typing import Optional

from ..diagnostics import CalcError


class EvaluationError(CalcError):
    """A runtime failure while computing an expression's value."""


class DivisionByZeroError(EvaluationError):
    """Division or remainder with an exact zero divisor."""


class CrossCheckError(EvaluationError):
    """The evaluator and the virtual machine disagreed on a result."""


def create_division_by_zero_error(operator: str, offset: Optional[int] = None) -> DivisionByZeroError:
    verb = "Modulo" if operator == "%" else "Division"
    return DivisionByZeroError(
        message=f"{verb} by zero",
        offset=offset,
        code="R001",
        help_text="The right operand of '/' and '%' must be non-zero.",
    )


def create_unknown_operator_error(operator, offset: Optional[int] = None) -> EvaluationError:
    return EvaluationError(
        message=f"Unknown operator {operator!r}",
        offset=offset,
        code="R002",
        help_text="The expression tree contains an operator the evaluator does not implement.",
    )


def create_cross_check_error(tree_value: float, vm_value: float) -> CrossCheckError:
    return CrossCheckError(
        message=f"Evaluator produced {tree_value!r} but the virtual machine produced {vm_value!r}",
        code="R003",
        help_text="The two execution strategies must agree bit for bit.",
    )
