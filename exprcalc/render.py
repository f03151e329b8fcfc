"""
Text renderings of tokens, trees and results for the command line.
"""

import json
from typing import Any, Dict, List, Optional, Tuple

from .config import DEFAULT_RESULT_DIGITS
from .lexer.tokens import Token, TokenType
from .parser.ast_nodes import ASTVisitor, Expression, NumberLiteral, UnaryOp, BinaryOp, post_order


# Operator spelling in S-expressions
SEXPR_SYMBOLS = {
    TokenType.PLUS: "+",
    TokenType.MINUS: "-",
    TokenType.STAR: "*",
    TokenType.SLASH: "/",
    TokenType.PERCENT: "mod",
    TokenType.CARET: "expt",
}

# Operator spelling in the structured tree
SOURCE_SYMBOLS = {
    TokenType.PLUS: "+",
    TokenType.MINUS: "-",
    TokenType.STAR: "*",
    TokenType.SLASH: "/",
    TokenType.PERCENT: "%",
    TokenType.CARET: "^",
}


def format_number(value: float) -> str:
    """General-format float, as C's %g prints it."""
    return f"{value:g}"


class TextRenderer(ASTVisitor):
    """
    Base for renderers that write text top-down.

    Each visit_* method returns the pieces of its node's text in order:
    plain strings, or (child, depth) pairs to be expanded in place. The
    pieces wait on an explicit stack, so tree height never becomes
    recursion depth.
    """

    def __init__(self):
        self.depth = 0

    def render(self, root: Expression) -> str:
        output = []
        pending: List[Any] = [(root, 0)]
        while pending:
            piece = pending.pop()
            if isinstance(piece, str):
                output.append(piece)
                continue
            node, self.depth = piece
            pending.extend(reversed(node.accept(self)))
        return "".join(output)

    def _child(self, node: Expression) -> Tuple[Expression, int]:
        return (node, self.depth + 1)


class SExpressionRenderer(TextRenderer):
    """Renders trees in prefix form, e.g. (+ 1 (* 2 3))."""

    def visit_number(self, node: NumberLiteral) -> List[Any]:
        return [format_number(node.value)]

    def visit_unary(self, node: UnaryOp) -> List[Any]:
        return [f"({SEXPR_SYMBOLS.get(node.op, '?')} ", self._child(node.child), ")"]

    def visit_binary(self, node: BinaryOp) -> List[Any]:
        return [f"({SEXPR_SYMBOLS.get(node.op, '?')} ",
                self._child(node.left), " ", self._child(node.right), ")"]


class JSONRenderer(TextRenderer):
    """
    Renders trees as JSON text laid out the way json.dumps lays out the
    to_dict() form: same keys, same order, same indentation.
    """

    def __init__(self, indent: Optional[int] = 2):
        super().__init__()
        self.indent = indent

    def _object(self, fields: List[Tuple[str, Any]]) -> List[Any]:
        if self.indent is None:
            separator, opening, closing = ", ", "", ""
        else:
            separator = ","
            opening = "\n" + " " * (self.indent * (self.depth + 1))
            closing = "\n" + " " * (self.indent * self.depth)

        pieces: List[Any] = ["{"]
        for index, (key, value) in enumerate(fields):
            if index:
                pieces.append(separator)
            pieces.append(f"{opening}{json.dumps(key)}: ")
            pieces.append(value)
        pieces.append(closing + "}")
        return pieces

    def visit_number(self, node: NumberLiteral) -> List[Any]:
        return self._object([
            ("type", '"number"'),
            ("value", json.dumps(node.value)),
            ("start", str(node.start)),
            ("end", str(node.end)),
        ])

    def visit_unary(self, node: UnaryOp) -> List[Any]:
        return self._object([
            ("type", '"unary"'),
            ("op", json.dumps(SOURCE_SYMBOLS.get(node.op, "?"))),
            ("start", str(node.start)),
            ("end", str(node.end)),
            ("child", self._child(node.child)),
        ])

    def visit_binary(self, node: BinaryOp) -> List[Any]:
        return self._object([
            ("type", '"binary"'),
            ("op", json.dumps(SOURCE_SYMBOLS.get(node.op, "?"))),
            ("start", str(node.start)),
            ("end", str(node.end)),
            ("left", self._child(node.left)),
            ("right", self._child(node.right)),
        ])


class TreeDictRenderer(ASTVisitor):
    """Renders trees as nested dictionaries, built bottom-up."""

    def __init__(self):
        self.results: List[Dict[str, Any]] = []

    def render(self, node: Optional[Expression]) -> Optional[Dict[str, Any]]:
        if node is None:
            return None
        self.results = []
        for current in post_order(node):
            current.accept(self)
        return self.results.pop()

    def visit_number(self, node: NumberLiteral) -> None:
        self.results.append({"type": "number", "value": node.value, "start": node.start, "end": node.end})

    def visit_unary(self, node: UnaryOp) -> None:
        child = self.results.pop()
        self.results.append({
            "type": "unary",
            "op": SOURCE_SYMBOLS.get(node.op, "?"),
            "start": node.start,
            "end": node.end,
            "child": child,
        })

    def visit_binary(self, node: BinaryOp) -> None:
        right = self.results.pop()
        left = self.results.pop()
        self.results.append({
            "type": "binary",
            "op": SOURCE_SYMBOLS.get(node.op, "?"),
            "start": node.start,
            "end": node.end,
            "left": left,
            "right": right,
        })


def to_sexpr(node: Optional[Expression]) -> str:
    if node is None:
        return ""
    return SExpressionRenderer().render(node)


def to_dict(node: Optional[Expression]) -> Optional[Dict[str, Any]]:
    return TreeDictRenderer().render(node)


def to_json(node: Optional[Expression], indent: Optional[int] = 2) -> str:
    if node is None:
        return "null"
    return JSONRenderer(indent).render(node)


def format_result(value: float, digits: int = DEFAULT_RESULT_DIGITS) -> str:
    return f"{value:.{digits}g}"


def format_tokens(tokens: List[Token]) -> str:
    """One line per token, END excluded."""
    lines = []
    for token in tokens:
        if token.type == TokenType.END:
            continue
        payload = format_number(token.value) if token.type == TokenType.NUMBER else token.lexeme
        lines.append(f"{token.type.name:<8} {payload:<12} start={token.start} end={token.end}")
    return "\n".join(lines)
