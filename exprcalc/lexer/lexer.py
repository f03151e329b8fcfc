"""
Expression lexer - turns source text into a token list.

Scans left to right with a single cursor. Whitespace is skipped, operators
are single characters, and numbers are maximal runs of literal characters
handed to float() for conversion.

A '-' is always its own MINUS token, even directly before a digit. Negative
literals come from the parser's unary rule, so "3-4" and "3 - 4" lex the
same way.
"""

import logging
import math
from typing import List

from .tokens import (
    Token, TokenType, OPERATORS, DIGITS, NUMBER_CHARS, EXPONENT_MARKERS, EXPONENT_SIGNS
)
from .errors import (
    LexError, create_invalid_character_error, create_invalid_number_error,
    create_number_out_of_range_error
)

logger = logging.getLogger(__name__)


class Lexer:
    """
    Lexical analyzer for arithmetic expressions.

    A Lexer is single use: construct it with the source and call tokenize().
    """

    def __init__(self, source: str):
        """
        Initialize the lexer with source code.

        Args:
            source: Expression text
        """
        self.source = source
        self.pos = 0
        self.tokens: List[Token] = []

    def tokenize(self) -> List[Token]:
        """
        Tokenize the entire source.

        Returns:
            List of tokens ending with exactly one END token

        Raises:
            LexError: On the first unknown character or malformed literal
        """
        self.pos = 0
        self.tokens = []

        try:
            while self.pos < len(self.source):
                current_char = self.source[self.pos]

                if current_char.isspace():
                    self.pos += 1
                    continue

                self.tokens.append(self._next_token(current_char))
        except LexError as e:
            raise e.with_source(self.source)

        end = len(self.source)
        self.tokens.append(Token(TokenType.END, "", None, end, end))

        logger.debug("tokenized %d characters into %d tokens", len(self.source), len(self.tokens))
        return self.tokens

    def _next_token(self, current_char: str) -> Token:
        """Scan one token starting at the cursor."""
        if current_char in DIGITS or (current_char == '.' and self._peek() in DIGITS):
            return self._tokenize_number()

        token_type = OPERATORS.get(current_char)
        if token_type is None:
            raise create_invalid_character_error(current_char, self.pos)

        start = self.pos
        self.pos += 1
        return Token(token_type, current_char, None, start, start)

    def _tokenize_number(self) -> Token:
        """Tokenize a numeric literal."""
        start = self.pos

        while self.pos < len(self.source):
            char = self.source[self.pos]
            if char in NUMBER_CHARS:
                self.pos += 1
            elif char in EXPONENT_SIGNS and self.source[self.pos - 1] in EXPONENT_MARKERS:
                self.pos += 1
            else:
                break

        lexeme = self.source[start:self.pos]

        try:
            value = float(lexeme)
        except ValueError:
            raise create_invalid_number_error(lexeme, start) from None

        if math.isinf(value) or (value == 0.0 and _has_nonzero_mantissa(lexeme)):
            raise create_number_out_of_range_error(lexeme, start)

        return Token(TokenType.NUMBER, lexeme, value, start, self.pos - 1)

    def _peek(self, offset: int = 1) -> str:
        """Peek at character ahead without advancing."""
        peek_pos = self.pos + offset
        if peek_pos < len(self.source):
            return self.source[peek_pos]
        return '\0'


def _has_nonzero_mantissa(lexeme: str) -> bool:
    mantissa = lexeme.lower().split('e', 1)[0]
    return any(char in "123456789" for char in mantissa)


def tokenize(source: str) -> List[Token]:
    """
    Convenience function to tokenize a source string.

    Args:
        source: Expression text

    Returns:
        List of tokens

    Raises:
        LexError: If lexing fails
    """
    return Lexer(source).tokenize()
