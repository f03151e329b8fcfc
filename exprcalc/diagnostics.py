"""
Diagnostics shared by every stage of the expression engine.

Each stage raises a subclass of CalcError carrying a Diagnostic, so callers
can report any failure the same way: kind, code, message and, where the
failure has one, the offending source offset.
"""

from typing import Optional, List
from dataclasses import dataclass


@dataclass
class Diagnostic:
    """A single error report with optional source position."""
    message: str
    offset: Optional[int] = None
    severity: str = "error"  # "error", "warning"
    code: Optional[str] = None
    help_text: Optional[str] = None
    suggestions: Optional[List[str]] = None
    source: Optional[str] = None

    def excerpt(self) -> Optional[str]:
        """Render the source line with a caret under the offset."""
        if self.source is None or self.offset is None:
            return None
        line = self.source.replace("\n", " ").replace("\t", " ")
        return f"    {line}\n    {' ' * self.offset}^"

    def __str__(self) -> str:
        prefix = self.severity.upper()
        if self.code:
            prefix += f"[{self.code}]"
        result = f"{prefix}: {self.message}\n"
        if self.offset is not None:
            result += f"  --> offset {self.offset}\n"

        excerpt = self.excerpt()
        if excerpt:
            result += excerpt + "\n"

        if self.help_text:
            result += f"  help: {self.help_text}\n"

        if self.suggestions:
            result += "  suggestions:\n"
            for suggestion in self.suggestions:
                result += f"    - {suggestion}\n"

        return result


class CalcError(Exception):
    """
    Base class for every failure raised while processing an expression.

    The error kind reported to users is the concrete class name
    (LexError, ParseError, ...).
    """

    def __init__(
        self,
        message: str,
        offset: Optional[int] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None,
        source: Optional[str] = None,
    ):
        super().__init__(message)
        self.diagnostic = Diagnostic(
            message=message,
            offset=offset,
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions,
            source=source,
        )

    @property
    def kind(self) -> str:
        return type(self).__name__

    @property
    def message(self) -> str:
        return self.diagnostic.message

    @property
    def offset(self) -> Optional[int]:
        return self.diagnostic.offset

    @property
    def code(self) -> Optional[str]:
        return self.diagnostic.code

    def with_source(self, source: str) -> "CalcError":
        """Attach the expression text so the report can show an excerpt."""
        self.diagnostic.source = source
        return self

    def __str__(self) -> str:
        return f"{self.kind}: {self.diagnostic}"
