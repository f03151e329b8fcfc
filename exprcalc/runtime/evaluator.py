"""
Tree-walking evaluator.

Reduces an AST to a float: operands first (left before right), then the
operator. The walk follows post_order() and keeps intermediate values on
its own stack, so arbitrarily long chains evaluate without recursion.
Nothing in the tree is mutated or cached.
"""

import logging
import operator
from typing import List

from ..lexer.tokens import TokenType
from ..parser.ast_nodes import ASTVisitor, Expression, NumberLiteral, UnaryOp, BinaryOp, post_order
from .arithmetic import divide, modulo, real_pow
from .errors import create_unknown_operator_error

logger = logging.getLogger(__name__)


class Evaluator(ASTVisitor):
    """Evaluates expression trees directly."""

    BINARY_OPERATIONS = {
        TokenType.PLUS: operator.add,
        TokenType.MINUS: operator.sub,
        TokenType.STAR: operator.mul,
        TokenType.CARET: real_pow,
    }

    def __init__(self):
        self.values: List[float] = []

    def evaluate(self, node: Expression) -> float:
        self.values = []
        for current in post_order(node):
            current.accept(self)
        return self.values.pop()

    def visit_number(self, node: NumberLiteral) -> None:
        self.values.append(node.value)

    def visit_unary(self, node: UnaryOp) -> None:
        value = self.values.pop()
        if node.op == TokenType.MINUS:
            self.values.append(-value)
        elif node.op == TokenType.PLUS:
            self.values.append(value)
        else:
            raise create_unknown_operator_error(node.op, node.start)

    def visit_binary(self, node: BinaryOp) -> None:
        rhs = self.values.pop()
        lhs = self.values.pop()

        if node.op == TokenType.SLASH:
            self.values.append(divide(lhs, rhs, node.right.start))
        elif node.op == TokenType.PERCENT:
            self.values.append(modulo(lhs, rhs, node.right.start))
        else:
            operation = self.BINARY_OPERATIONS.get(node.op)
            if operation is None:
                raise create_unknown_operator_error(node.op, node.start)
            self.values.append(operation(lhs, rhs))


def evaluate(node: Expression) -> float:
    """
    Evaluate an expression tree.

    Raises:
        DivisionByZeroError: On '/' or '%' with a zero right operand
        EvaluationError: If the tree holds an unknown operator
    """
    value = Evaluator().evaluate(node)
    logger.debug("evaluated tree of height %d to %r", node.height, value)
    return value
