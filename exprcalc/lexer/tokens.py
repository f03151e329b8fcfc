"""
Token definitions for the expression lexer.

The token set is deliberately small: numbers, the five arithmetic
operators plus exponentiation, parentheses, and an end marker.
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Optional, Union


class TokenType(Enum):
    """Enumeration of all token types."""

    # Literals
    NUMBER = auto()                 # 42, 3.14, 1e+20, .5

    # Arithmetic operators
    PLUS = auto()                   # +
    MINUS = auto()                  # -
    STAR = auto()                   # *
    SLASH = auto()                  # /
    PERCENT = auto()                # % (floating remainder)
    CARET = auto()                  # ^ (exponentiation)

    # Grouping
    LPAREN = auto()                 # (
    RPAREN = auto()                 # )

    # Special
    END = auto()                    # End of input


@dataclass(frozen=True)
class Token:
    """
    A lexical token.

    start and end are inclusive offsets into the source; the END token sits
    one past the last character with an empty lexeme.
    """
    type: TokenType
    lexeme: str                     # Raw text from source
    value: Optional[float]          # Parsed value for NUMBER, None otherwise
    start: int
    end: int

    @property
    def payload(self) -> Union[float, str]:
        """The parsed number for NUMBER tokens, the source character otherwise."""
        if self.type == TokenType.NUMBER:
            return self.value
        return self.lexeme

    def __str__(self) -> str:
        if self.type == TokenType.NUMBER:
            return f"{self.type.name}({self.lexeme!r} -> {self.value!r})"
        return f"{self.type.name}({self.lexeme!r})"


OPERATORS = {
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
    "%": TokenType.PERCENT,
    "^": TokenType.CARET,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
}

# Characters that may appear inside a numeric literal. '+' and '-' are only
# accepted directly after an exponent marker; the lexer enforces that.
DIGITS = frozenset("0123456789")
NUMBER_CHARS = DIGITS | frozenset(".eE")
EXPONENT_MARKERS = frozenset("eE")
EXPONENT_SIGNS = frozenset("+-")
