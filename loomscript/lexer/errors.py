"""
Error handling for the Loomscript lexer.

Every lexical failure is fatal: the lexer raises one of the exceptions below
and produces no further tokens. Each carries a diagnostic with the source
location of the offending lexeme.

Author: Loomscript contributors
"""

from typing import Optional
from dataclasses import dataclass

from .tokens import SourceLocation


@dataclass
class Diagnostic:
    """Base record for diagnostics (errors, warnings, info)."""
    message: str
    location: SourceLocation
    severity: str  # "error", "warning", "info"
    code: Optional[str] = None
    help_text: Optional[str] = None

    def __str__(self) -> str:
        severity_prefix = self.severity.upper()
        result = f"{severity_prefix}: {self.message}\n"
        result += f"  --> {self.location}\n"

        if self.help_text:
            result += f"  help: {self.help_text}\n"

        return result


class LexerError(Exception):
    """
    Exception raised when the lexer encounters a fatal error.

    Contains detailed diagnostic information for error reporting.
    """

    code: Optional[str] = None

    def __init__(
        self,
        message: str,
        location: SourceLocation,
        help_text: Optional[str] = None
    ):
        super().__init__(message)
        self.location = location
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="error",
            code=self.code,
            help_text=help_text
        )

    @property
    def line(self) -> int:
        return self.location.line

    @property
    def kind(self) -> str:
        """Short name of the failure, e.g. ``InvalidNumber``."""
        name = type(self).__name__
        return name[:-len("Error")] if name.endswith("Error") else name

    def __str__(self) -> str:
        return str(self.diagnostic)


class InvalidCharacterError(LexerError):
    """A character that cannot start any token."""
    code = "L001"

    def __init__(self, char: str, location: SourceLocation):
        if char.isprintable():
            help_text = f"The character '{char}' is not valid in Loomscript source code."
        else:
            help_text = f"Non-printable character (Unicode: U+{ord(char):04X}) is not allowed."
        super().__init__(f"Unknown character '{char}'", location, help_text)
        self.char = char


class UnterminatedStringError(LexerError):
    """End of input reached before the closing quote."""
    code = "L002"

    def __init__(self, location: SourceLocation):
        super().__init__(
            "Unterminated string literal",
            location,
            'String literals must be closed with a matching " quote.'
        )


class InvalidNumberError(LexerError):
    """A numeric literal with more than one decimal point."""
    code = "L003"

    def __init__(self, lexeme: str, location: SourceLocation):
        super().__init__(
            f"Invalid numeric literal: '{lexeme}'",
            location,
            "A number may contain at most one '.'."
        )
        self.lexeme = lexeme


class InvalidEscapeError(LexerError):
    """A backslash escape other than \\", \\n or \\\\."""
    code = "L006"

    def __init__(self, sequence: str, location: SourceLocation):
        super().__init__(
            f"Invalid escape sequence: '{sequence}'",
            location,
            'Only \\", \\n and \\\\ are recognized inside string literals.'
        )
        self.sequence = sequence


# Error codes for categorization
ERROR_CODES = {
    "L001": "Invalid character",
    "L002": "Unterminated string literal",
    "L003": "Invalid numeric literal",
    "L006": "Invalid escape sequence",
}
