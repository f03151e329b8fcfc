"""
Bytecode compiler: lowers an expression tree to a Chunk.

Emission follows post_order(), so operands are on the stack (left below right)
before their operator runs. Unary '+' is an identity and emits nothing.
"""

import logging
from typing import Optional

from ..lexer.tokens import TokenType
from ..parser.ast_nodes import ASTVisitor, Expression, NumberLiteral, UnaryOp, BinaryOp, post_order
from ..runtime.errors import create_unknown_operator_error
from .chunk import Chunk, OpCode

logger = logging.getLogger(__name__)


BINARY_OPCODES = {
    TokenType.PLUS: OpCode.ADD,
    TokenType.MINUS: OpCode.SUBTRACT,
    TokenType.STAR: OpCode.MULTIPLY,
    TokenType.SLASH: OpCode.DIVIDE,
    TokenType.PERCENT: OpCode.MODULO,
    TokenType.CARET: OpCode.POWER,
}


class BytecodeCompiler(ASTVisitor):
    """Compiles expression trees into stack machine code."""

    def __init__(self, chunk: Optional[Chunk] = None):
        self.chunk = chunk if chunk is not None else Chunk()

    def compile(self, root: Expression) -> Chunk:
        """Emit the whole tree followed by a single HALT."""
        self.emit_expression(root)
        self.chunk.emit(OpCode.HALT)
        logger.debug(
            "compiled %d instructions, %d constants, max stack depth %d",
            len(self.chunk.code), len(self.chunk.constants), self.chunk.max_stack_depth()
        )
        return self.chunk

    def emit_expression(self, node: Expression) -> None:
        """Emit code for node and its subtrees, without HALT."""
        for current in post_order(node):
            current.accept(self)

    def visit_number(self, node: NumberLiteral) -> None:
        self.chunk.emit_constant(node.value, node.start)

    def visit_unary(self, node: UnaryOp) -> None:
        if node.op == TokenType.MINUS:
            self.chunk.emit(OpCode.NEGATE, offset=node.start)
        elif node.op != TokenType.PLUS:
            raise create_unknown_operator_error(node.op, node.start)

    def visit_binary(self, node: BinaryOp) -> None:
        opcode = BINARY_OPCODES.get(node.op)
        if opcode is None:
            raise create_unknown_operator_error(node.op, node.start)
        # divide/modulo report the divisor's position, matching the evaluator
        self.chunk.emit(opcode, offset=node.right.start)


def compile_expression(root: Expression) -> Chunk:
    """Compile an expression tree into a fresh chunk ending in HALT."""
    return BytecodeCompiler().compile(root)
