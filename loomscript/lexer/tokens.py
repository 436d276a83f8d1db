"""
Token definitions for the Loomscript lexer.

This module defines the closed set of token types Loomscript supports:
- Literals (numbers, strings, booleans, identifiers)
- Punctuation
- Operators (arithmetic, comparison, logical)
- Keywords
- The end-of-file marker

Author: Loomscript contributors
"""

from enum import Enum, auto
from dataclasses import dataclass


class TokenType(Enum):
    """
    Enumeration of all token types in Loomscript.

    Organized by category for clarity and maintainability.
    """

    # ========================================================================
    # Special Tokens
    # ========================================================================
    EOF = auto()                    # End of file

    # ========================================================================
    # Literals
    # ========================================================================
    NUMBER = auto()                 # 42, 3.14
    STRING = auto()                 # "hello"
    TRUE = auto()                   # true
    FALSE = auto()                  # false
    IDENTIFIER = auto()             # variable_name

    # ========================================================================
    # Keywords
    # ========================================================================
    LET = auto()                    # let
    FN = auto()                     # fn
    IF = auto()                     # if
    ELIF = auto()                   # elif
    ELSE = auto()                   # else
    LOOP = auto()                   # loop
    BREAK = auto()                  # break
    RETURN = auto()                 # return
    IMPORT = auto()                 # import
    PUB = auto()                    # pub (reserved, unused by the grammar)

    # ========================================================================
    # Operators
    # ========================================================================
    PLUS = auto()                   # +
    MINUS = auto()                  # -
    MULTIPLY = auto()               # *
    DIVIDE = auto()                 # /
    MODULO = auto()                 # %

    ASSIGN = auto()                 # =

    EQUAL = auto()                  # ==
    LESS_THAN = auto()              # <
    LESS_EQUAL = auto()             # <=
    GREATER_THAN = auto()           # >
    GREATER_EQUAL = auto()          # >=

    AND = auto()                    # and
    OR = auto()                     # or

    # ========================================================================
    # Punctuation and Delimiters
    # ========================================================================
    LEFT_PAREN = auto()             # (
    RIGHT_PAREN = auto()            # )
    LEFT_BRACE = auto()             # {
    RIGHT_BRACE = auto()            # }
    COMMA = auto()                  # ,
    SEMICOLON = auto()              # ;


@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in the source code.

    Used for error reporting and debugging information.
    """
    filename: str
    line: int
    column: int
    offset: int  # Character offset from start of file

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"

    def __repr__(self) -> str:
        return f"SourceLocation({self.filename!r}, {self.line}, {self.column}, {self.offset})"


@dataclass(frozen=True)
class Token:
    """
    Represents a lexical token in the Loomscript language.

    ``text`` is the literal lexeme for operators, punctuation, keywords and
    numbers, the name for identifiers and the unescaped value for strings.
    """
    type: TokenType
    text: str
    location: SourceLocation

    @property
    def line(self) -> int:
        """1-based source line on which the token started."""
        return self.location.line

    def __str__(self) -> str:
        return f"{self.type.name}({self.text!r})"

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.text!r}, {self.location!r})"

    @property
    def is_literal(self) -> bool:
        """Check if this token is a literal value."""
        return self.type in {
            TokenType.NUMBER, TokenType.STRING, TokenType.TRUE, TokenType.FALSE
        }

    @property
    def is_keyword(self) -> bool:
        """Check if this token is a keyword."""
        return self.type in KEYWORDS.values()

    @property
    def is_operator(self) -> bool:
        """Check if this token is an operator."""
        return self.type in OPERATOR_TYPES


# Lookup tables used by the lexer for keyword/operator recognition

KEYWORDS = {
    "loop": TokenType.LOOP,
    "if": TokenType.IF,
    "elif": TokenType.ELIF,
    "else": TokenType.ELSE,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
    "break": TokenType.BREAK,
    "return": TokenType.RETURN,
    "import": TokenType.IMPORT,
    "pub": TokenType.PUB,
    "fn": TokenType.FN,
    "and": TokenType.AND,
    "or": TokenType.OR,
    "let": TokenType.LET,
}

SINGLE_CHAR_TOKENS = {
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.MULTIPLY,
    "/": TokenType.DIVIDE,
    "%": TokenType.MODULO,
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    ",": TokenType.COMMA,
    ";": TokenType.SEMICOLON,
}

# First character -> (type without lookahead match, type with trailing '=')
TWO_CHAR_OPERATORS = {
    "=": (TokenType.ASSIGN, TokenType.EQUAL),
    "<": (TokenType.LESS_THAN, TokenType.LESS_EQUAL),
    ">": (TokenType.GREATER_THAN, TokenType.GREATER_EQUAL),
}

OPERATOR_TYPES = frozenset({
    TokenType.PLUS, TokenType.MINUS, TokenType.MULTIPLY, TokenType.DIVIDE,
    TokenType.MODULO, TokenType.ASSIGN, TokenType.EQUAL, TokenType.LESS_THAN,
    TokenType.LESS_EQUAL, TokenType.GREATER_THAN, TokenType.GREATER_EQUAL,
    TokenType.AND, TokenType.OR,
})

# Tokens allowed to begin a top-level expression
EXPRESSION_START_TYPES = frozenset({
    TokenType.IDENTIFIER, TokenType.NUMBER, TokenType.STRING,
    TokenType.TRUE, TokenType.FALSE,
})
