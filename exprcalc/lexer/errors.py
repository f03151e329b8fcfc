"""
Error handling for the expression lexer.
"""

from ..diagnostics import CalcError


class LexError(CalcError):
    """
    Raised when the lexer meets a character or literal it cannot accept.

    Lexing stops at the first error; there is no recovery.
    """


# Common error codes for categorization
ERROR_CODES = {
    "L001": "Invalid character",
    "L003": "Invalid numeric literal",
    "L007": "Number literal out of range",
}

SUGGESTED_SPELLINGS = {
    "x": "*",
    "×": "*",
    "÷": "/",
    "−": "-",
    "[": "(",
    "]": ")",
    "{": "(",
    "}": ")",
}


def create_invalid_character_error(char: str, offset: int) -> LexError:
    """Create an error for a character outside the expression alphabet."""
    replacement = SUGGESTED_SPELLINGS.get(char)
    suggestions = [f"Use '{replacement}' instead"] if replacement else None

    if char.isprintable():
        help_text = "Expressions may contain numbers, + - * / % ^, parentheses and whitespace."
    else:
        help_text = f"Non-printable character (Unicode: U+{ord(char):04X}) is not allowed."

    return LexError(
        message=f"Unknown character '{char}' at offset {offset}",
        offset=offset,
        code="L001",
        help_text=help_text,
        suggestions=suggestions,
    )


def create_invalid_number_error(lexeme: str, offset: int) -> LexError:
    """Create an error for a malformed numeric literal."""
    return LexError(
        message=f"Invalid numeric literal '{lexeme}'",
        offset=offset,
        code="L003",
        help_text="Numbers are written as digits with an optional fraction and exponent, e.g. 1.5e-3.",
    )


def create_number_out_of_range_error(lexeme: str, offset: int) -> LexError:
    """Create an error for a literal outside double precision range."""
    return LexError(
        message=f"Number literal '{lexeme}' is out of range",
        offset=offset,
        code="L007",
        help_text="Literals must be representable as a 64-bit floating point number.",
    )
