"""
Error handling for the Loomscript parser.

Parse failures form a small closed taxonomy. Every failure carries the line
of the offending token and aborts the statement being parsed; there is no
recovery or resynchronization.

Author: Loomscript contributors
"""

from typing import Optional

from ..lexer.tokens import Token, SourceLocation
from ..lexer.errors import Diagnostic


class ParseError(Exception):
    """
    Exception raised when the parser encounters a fatal syntax error.

    Contains detailed diagnostic information for error reporting.
    """

    code: Optional[str] = None

    def __init__(
        self,
        message: str,
        line: int,
        token: Optional[Token] = None,
        help_text: Optional[str] = None
    ):
        super().__init__(message)
        self.line = line
        self.token = token
        location = token.location if token is not None else SourceLocation("<input>", line, 0, -1)
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="error",
            code=self.code,
            help_text=help_text
        )

    @property
    def kind(self) -> str:
        """Name of the failure variant, used in driver diagnostics."""
        return type(self).__name__

    def __str__(self) -> str:
        return str(self.diagnostic)


class UnexpectedToken(ParseError):
    """A token that cannot appear at this position."""
    code = "P001"

    def __init__(self, text: str, line: int, token: Optional[Token] = None):
        super().__init__(
            f"Unexpected token '{text}'",
            line,
            token,
            "The parser cannot continue the current statement with this token."
        )
        self.text = text

    def __repr__(self) -> str:
        return f"UnexpectedToken({self.text!r}, {self.line})"


class UnexpectedEndOfInput(UnexpectedToken):
    """The token sequence ran out without an end-of-file token."""
    code = "P010"

    def __init__(self, line: int):
        super().__init__("end of input", line)
        self.diagnostic.help_text = "The token stream ended before the statement was complete."


class ExpectedToken(ParseError):
    """A specific token was required but something else was found."""
    code = "P002"

    def __init__(self, expected: str, line: int, token: Optional[Token] = None):
        found = f", found '{token.text}'" if token is not None else ""
        super().__init__(
            f"Expected '{expected}'{found}",
            line,
            token,
            f"Add the missing '{expected}'."
        )
        self.expected = expected

    def __repr__(self) -> str:
        return f"ExpectedToken({self.expected!r}, {self.line})"


class ExpectedSemicolon(ParseError):
    """A statement was not terminated by ';'."""
    code = "P003"

    def __init__(self, line: int, token: Optional[Token] = None):
        super().__init__(
            "Expected ';'",
            line,
            token,
            "Add a semicolon ';' to end the statement."
        )

    def __repr__(self) -> str:
        return f"ExpectedSemicolon({self.line})"


class UnterminatedBlock(ParseError):
    """
    A block was not closed by '}'.

    ``line`` is the line of the block's first statement, not the line where
    parsing actually failed; the underlying failure, if any, is chained as
    ``__cause__``.
    """
    code = "P004"

    def __init__(self, line: int, token: Optional[Token] = None):
        super().__init__(
            "Unterminated block",
            line,
            token,
            "Add a closing brace '}' or fix the statement inside the block."
        )

    def __repr__(self) -> str:
        return f"UnterminatedBlock({self.line})"


class NestingTooDeep(ParseError):
    """Expressions or blocks nested deeper than the interpreter stack allows."""
    code = "P005"

    def __init__(self, line: int, token: Optional[Token] = None):
        super().__init__(
            "Nesting too deep",
            line,
            token,
            "Split deeply nested parentheses or blocks into separate statements."
        )

    def __repr__(self) -> str:
        return f"NestingTooDeep({self.line})"


# Parser error codes for categorization
PARSER_ERROR_CODES = {
    "P001": "Unexpected token",
    "P002": "Expected token not found",
    "P003": "Missing semicolon",
    "P004": "Unterminated block",
    "P005": "Nesting too deep",
    "P010": "Unexpected end of input",
}
