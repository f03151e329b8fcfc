"""
Abstract Syntax Tree node definitions.

Three node shapes cover the whole language: number leaves, unary
operations and binary operations. Each node records the inclusive source
span it was built from and supports the visitor pattern, which gives the
evaluator, compiler and renderers one exhaustive dispatch point each.

Trees are walked with post_order(), which keeps its own stack. A long
chain such as 1 + 1 + ... + 1 is as tall as it has terms, so no consumer
of the tree recurses on its height.
"""

from abc import ABC, abstractmethod
from typing import Iterator, List, Any, Tuple
from enum import Enum

from ..lexer.tokens import TokenType


class ASTNodeType(Enum):
    """Enumeration of all AST node types."""
    NUMBER = "number"
    UNARY = "unary"
    BINARY = "binary"


class ASTVisitor(ABC):
    """Visitor interface; one method per node shape."""

    @abstractmethod
    def visit_number(self, node: 'NumberLiteral') -> Any:
        pass

    @abstractmethod
    def visit_unary(self, node: 'UnaryOp') -> Any:
        pass

    @abstractmethod
    def visit_binary(self, node: 'BinaryOp') -> Any:
        pass


class ASTNode(ABC):
    """Base class for all AST nodes."""

    def __init__(self, node_type: ASTNodeType, start: int, end: int):
        self.node_type = node_type
        self.start = start
        self.end = end

    @abstractmethod
    def accept(self, visitor: ASTVisitor) -> Any:
        """Accept a visitor (visitor pattern)."""
        pass

    @abstractmethod
    def children(self) -> List['ASTNode']:
        """Get all child nodes."""
        pass

    @abstractmethod
    def _fields(self) -> Tuple:
        """The node's own data, children excluded."""
        pass

    @property
    def height(self) -> int:
        """Number of nodes on the longest root-to-leaf path."""
        return self._height

    def __eq__(self, other) -> bool:
        if not isinstance(other, ASTNode):
            return NotImplemented
        pending = [(self, other)]
        while pending:
            lhs, rhs = pending.pop()
            if type(lhs) is not type(rhs) or lhs._fields() != rhs._fields():
                return False
            pending.extend(zip(lhs.children(), rhs.children()))
        return True

    __hash__ = None

    def __str__(self) -> str:
        return f"{self.node_type.value}@{self.start}-{self.end}"


class Expression(ASTNode):
    """Base class for expressions."""
    pass


class NumberLiteral(Expression):
    """Numeric literal leaf."""
    value: float

    def __init__(self, value: float, start: int, end: int):
        super().__init__(ASTNodeType.NUMBER, start, end)
        self.value = value
        self._height = 1

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_number(self)

    def children(self) -> List[ASTNode]:
        return []

    def _fields(self) -> Tuple:
        return (self.value, self.start, self.end)

    def __repr__(self) -> str:
        return f"NumberLiteral({self.value!r}, {self.start}, {self.end})"


class UnaryOp(Expression):
    """Unary operation expression (negation or identity)."""
    op: TokenType
    child: Expression

    def __init__(self, op: TokenType, child: Expression, start: int, end: int):
        super().__init__(ASTNodeType.UNARY, start, end)
        self.op = op
        self.child = child
        self._height = child.height + 1

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_unary(self)

    def children(self) -> List[ASTNode]:
        return [self.child]

    def _fields(self) -> Tuple:
        return (self.op, self.start, self.end)

    def __repr__(self) -> str:
        return f"UnaryOp({self.op.name}, {self.child!r}, {self.start}, {self.end})"


class BinaryOp(Expression):
    """Binary operation expression."""
    op: TokenType
    left: Expression
    right: Expression

    def __init__(self, op: TokenType, left: Expression, right: Expression, start: int, end: int):
        super().__init__(ASTNodeType.BINARY, start, end)
        self.op = op
        self.left = left
        self.right = right
        self._height = max(left.height, right.height) + 1

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_binary(self)

    def children(self) -> List[ASTNode]:
        return [self.left, self.right]

    def _fields(self) -> Tuple:
        return (self.op, self.start, self.end)

    def __repr__(self) -> str:
        return f"BinaryOp({self.op.name}, {self.left!r}, {self.right!r}, {self.start}, {self.end})"


def post_order(root: ASTNode) -> Iterator[ASTNode]:
    """
    Yield every node of the tree, children before their parent and left
    subtrees before right ones.

    This is the order both the evaluator and the compiled code apply
    operators in, so the first failing operator is the same for both.
    """
    pending = [(root, False)]
    while pending:
        node, expanded = pending.pop()
        children = node.children()
        if expanded or not children:
            yield node
        else:
            pending.append((node, True))
            pending.extend((child, False) for child in reversed(children))
