"""
Expression Parser Package

Implements a Pratt (precedence climbing) parser that turns the lexer's
token list into a three-shape AST: number leaves, unary operations and
binary operations, each annotated with its source span.
"""

from .ast_nodes import (
    ASTNode, ASTNodeType, ASTVisitor, Expression, NumberLiteral, UnaryOp, BinaryOp, post_order
)
from .parser import Parser, parse_string, parse_tokens, BINDING_POWERS, UNARY_BINDING_POWER
from .errors import ParseError

__all__ = [
    # Core parser
    "Parser",
    "parse_string",
    "parse_tokens",
    "BINDING_POWERS",
    "UNARY_BINDING_POWER",

    # AST nodes
    "ASTNode", "ASTNodeType", "ASTVisitor", "Expression",
    "NumberLiteral", "UnaryOp", "BinaryOp", "post_order",

    # Error handling
    "ParseError",
]
