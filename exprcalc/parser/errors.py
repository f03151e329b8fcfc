"""
Error handling for the expression parser.

Provides the ParseError exception and factory helpers for each syntax
failure, each tagged with an error code and the offset of the token that
triggered it.
"""

from typing import Optional

from ..diagnostics import CalcError
from ..lexer.tokens import Token, TokenType


class ParseError(CalcError):
    """
    Raised when the token stream is not a well-formed expression.

    Contains the offending token when one is available.
    """

    def __init__(self, message: str, offset: Optional[int] = None,
                 token: Optional[Token] = None, **kwargs):
        super().__init__(message, offset, **kwargs)
        self.token = token


# Common parser error codes for categorization
PARSER_ERROR_CODES = {
    "P001": "Invalid prefix token",
    "P002": "Trailing tokens after expression",
    "P004": "Unclosed delimiter",
    "P005": "Invalid expression",
    "P010": "Unexpected end of input",
    "P012": "Mismatched parentheses",
    "P013": "Expression nested too deeply",
}


def describe_token(token: Token) -> str:
    """Human-readable description of a token for messages."""
    if token.type == TokenType.END:
        return "end of input"
    return f"'{token.lexeme}'"


def create_invalid_prefix_error(token: Token) -> ParseError:
    """Create an error for a token that cannot start an operand."""
    return ParseError(
        message=f"Invalid prefix token {describe_token(token)}",
        offset=token.start,
        token=token,
        code="P001",
        help_text="An operand must be a number, a unary '+'/'-', or a parenthesised expression.",
        suggestions=["Check for a missing left operand", "Check for two operators in a row"],
    )


def create_unexpected_eof_error(expected: str, token: Token) -> ParseError:
    """Create an error for unexpected end of input."""
    return ParseError(
        message=f"Unexpected end of input, expected {expected}",
        offset=token.start,
        token=token,
        code="P010",
        help_text=f"The expression ended while the parser still expected {expected}.",
        suggestions=["Check for a missing operand after the last operator"],
    )


def create_unclosed_delimiter_error(open_token: Token, found: Token) -> ParseError:
    """Create an error for a '(' that is never closed."""
    return ParseError(
        message=f"Unclosed '(' opened at offset {open_token.start}, found {describe_token(found)}",
        offset=found.start,
        token=found,
        code="P004",
        help_text=f"The opening '(' at offset {open_token.start} was never closed.",
        suggestions=["Add a closing ')'"],
    )


def create_unmatched_close_error(token: Token) -> ParseError:
    """Create an error for a ')' without an opening partner."""
    return ParseError(
        message="Unmatched ')'",
        offset=token.start,
        token=token,
        code="P012",
        help_text="This ')' has no matching '('.",
        suggestions=["Remove the ')' or add an opening '('"],
    )


def create_empty_group_error(open_token: Token) -> ParseError:
    """Create an error for '()' with nothing inside."""
    return ParseError(
        message="Empty parentheses",
        offset=open_token.start,
        token=open_token,
        code="P005",
        help_text="Parentheses must enclose an expression.",
    )


def create_trailing_token_error(token: Token) -> ParseError:
    """Create an error for tokens left over after a complete expression."""
    return ParseError(
        message=f"Unexpected token {describe_token(token)} after end of expression",
        offset=token.start,
        token=token,
        code="P002",
        help_text="The expression was complete before this token.",
        suggestions=["Check for a missing operator between operands"],
    )


def create_too_deep_error(token: Token, max_depth: int) -> ParseError:
    """Create an error for an expression that nests beyond the depth limit."""
    return ParseError(
        message=f"Expression nested deeper than {max_depth} levels",
        offset=token.start,
        token=token,
        code="P013",
        help_text="Split the expression or raise the configured maximum depth.",
    )
