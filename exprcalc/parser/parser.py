"""
Pratt Parser Implementation

Precedence climbing over a per-operator (left, right) binding power table.
Equal left and right powers make an operator left associative; a right
power below the left power (as for '^') makes it right associative.

Left associative chains are folded in a loop, so only right operands,
unary operands and parenthesised groups recurse. Those are the levels
counted against max_depth.
"""

import logging
from typing import Callable, Dict, List, Optional, Tuple

from ..config import CalcConfig, DEFAULT_MAX_DEPTH, MAX_DEPTH_LIMIT
from ..lexer.tokens import Token, TokenType
from .ast_nodes import Expression, NumberLiteral, UnaryOp, BinaryOp
from .errors import (
    ParseError, create_invalid_prefix_error, create_unexpected_eof_error,
    create_unclosed_delimiter_error, create_unmatched_close_error,
    create_empty_group_error, create_trailing_token_error, create_too_deep_error
)

logger = logging.getLogger(__name__)


# (left, right) binding powers for infix operators
BINDING_POWERS: Dict[TokenType, Tuple[int, int]] = {
    TokenType.PLUS: (1, 1),
    TokenType.MINUS: (1, 1),
    TokenType.STAR: (2, 2),
    TokenType.SLASH: (2, 2),
    TokenType.PERCENT: (2, 2),
    TokenType.CARET: (4, 3),
}

# A unary operand stops at '*', '/', '%', '+', '-' but absorbs a '^' chain,
# so -2^2 is -(2^2) while -2*3 is (-2)*3.
UNARY_BINDING_POWER = 2

NO_BINDING = (0, 0)


class Parser:
    """
    Precedence-climbing expression parser.

    Consumes a token list produced by the lexer and builds an AST. Parsing
    stops at the first error; there is no recovery.
    """

    def __init__(self, tokens: List[Token], max_depth: int = DEFAULT_MAX_DEPTH):
        """
        Initialize parser with a list of tokens.

        Args:
            tokens: List of tokens from the lexer, ending with END
            max_depth: Limit on operand nesting, at most MAX_DEPTH_LIMIT
        """
        if not tokens or tokens[-1].type != TokenType.END:
            raise ValueError("token list must end with an END token")
        if not 1 <= max_depth <= MAX_DEPTH_LIMIT:
            raise ValueError(f"max_depth must be between 1 and {MAX_DEPTH_LIMIT}, got {max_depth}")

        self.tokens = tokens
        self.current = 0
        self.max_depth = max_depth
        self._depth = 0

        self.prefix_parsers: Dict[TokenType, Callable[[Token], Expression]] = {
            TokenType.NUMBER: self._parse_number,
            TokenType.MINUS: self._parse_unary,
            TokenType.PLUS: self._parse_unary,
            TokenType.LPAREN: self._parse_grouping,
        }

    def parse(self) -> Optional[Expression]:
        """
        Parse the whole token list.

        Returns:
            The root expression, or None when the input holds no tokens
            besides END

        Raises:
            ParseError: If the tokens do not form exactly one expression
        """
        if self._check(TokenType.END):
            return None

        expr = self._parse_expression(0)

        trailing = self._peek()
        if trailing.type == TokenType.RPAREN:
            raise create_unmatched_close_error(trailing)
        if trailing.type != TokenType.END:
            raise create_trailing_token_error(trailing)

        logger.debug("parsed %d tokens into AST of height %d", len(self.tokens), expr.height)
        return expr

    def _parse_expression(self, min_power: int) -> Expression:
        """Parse expression whose infix operators all bind tighter than min_power."""
        self._depth += 1
        try:
            if self._depth > self.max_depth:
                raise create_too_deep_error(self._peek(), self.max_depth)

            token = self._advance()
            prefix_parser = self.prefix_parsers.get(token.type)
            if prefix_parser is None:
                if token.type == TokenType.END:
                    raise create_unexpected_eof_error("an operand", token)
                raise create_invalid_prefix_error(token)

            left = prefix_parser(token)

            while True:
                left_power, right_power = BINDING_POWERS.get(self._peek().type, NO_BINDING)
                if left_power <= min_power:
                    break

                operator_token = self._advance()
                right = self._parse_expression(right_power)
                left = BinaryOp(operator_token.type, left, right, left.start, right.end)

            return left
        finally:
            self._depth -= 1

    # Prefix parsers (tokens that can start an operand)

    def _parse_number(self, token: Token) -> NumberLiteral:
        return NumberLiteral(token.value, token.start, token.end)

    def _parse_unary(self, operator_token: Token) -> UnaryOp:
        """Parse unary '-' or '+'; '+' is kept as an explicit node."""
        operand = self._parse_expression(UNARY_BINDING_POWER)
        return UnaryOp(operator_token.type, operand, operator_token.start, operand.end)

    def _parse_grouping(self, open_token: Token) -> Expression:
        """Parse parenthesized expression; the inner node keeps its own span."""
        if self._check(TokenType.RPAREN):
            raise create_empty_group_error(open_token)

        expr = self._parse_expression(0)

        closing = self._peek()
        if closing.type != TokenType.RPAREN:
            raise create_unclosed_delimiter_error(open_token, closing)
        self._advance()

        return expr

    # Utility methods

    def _check(self, token_type: TokenType) -> bool:
        """Check if current token matches type without consuming."""
        return self._peek().type == token_type

    def _advance(self) -> Token:
        """Consume and return current token; END is never consumed past."""
        token = self._peek()
        if token.type != TokenType.END:
            self.current += 1
        return token

    def _peek(self) -> Token:
        """Return current token without consuming."""
        return self.tokens[min(self.current, len(self.tokens) - 1)]


def parse_tokens(tokens: List[Token], config: Optional[CalcConfig] = None) -> Optional[Expression]:
    """Parse an already tokenized expression."""
    config = config or CalcConfig()
    return Parser(tokens, max_depth=config.max_depth).parse()


def parse_string(source: str, config: Optional[CalcConfig] = None) -> Optional[Expression]:
    """
    Convenience function to parse a source string.

    Args:
        source: Expression text
        config: Limits to apply; defaults to CalcConfig()

    Returns:
        Expression AST, or None for an empty expression

    Raises:
        LexError: If lexing fails
        ParseError: If parsing fails
    """
    from ..lexer import tokenize

    tokens = tokenize(source)
    try:
        return parse_tokens(tokens, config)
    except ParseError as e:
        raise e.with_source(source)
