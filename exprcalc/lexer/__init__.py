"""
Expression Lexer Package

Scans arithmetic expression text into an ordered token list terminated by
an END token. Offsets on every token point back into the source for
diagnostics.
"""

from .tokens import Token, TokenType
from .lexer import Lexer, tokenize
from .errors import LexError

__all__ = [
    "Lexer",
    "Token",
    "TokenType",
    "LexError",
    "tokenize",
]
