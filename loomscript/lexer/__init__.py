"""
Loomscript Lexer Package

Implements the lexical analyzer (tokenizer) for the Loomscript language.

Key Features:
- Pull-based scanning, one token per call
- '#' line comments
- Line and column tracking for diagnostics
- Fatal, line-tagged lexical errors

Author: Loomscript contributors
"""

from .tokens import Token, TokenType, SourceLocation
from .lexer import Lexer, tokenize_string, tokenize_file
from .errors import (
    Diagnostic, LexerError, InvalidCharacterError, UnterminatedStringError,
    InvalidNumberError, InvalidEscapeError
)

__all__ = [
    "Lexer",
    "Token",
    "TokenType",
    "SourceLocation",
    "tokenize_string",
    "tokenize_file",
    "Diagnostic",
    "LexerError",
    "InvalidCharacterError",
    "UnterminatedStringError",
    "InvalidNumberError",
    "InvalidEscapeError",
]
