"""
Loomscript Front End Package

Turns Loomscript source text into abstract syntax trees. The pipeline stops
at the AST: there is no semantic analysis, evaluation or code generation.

Architecture:
    loomscript/
    ├── lexer/           # Tokenization and lexical analysis
    ├── parser/          # Syntax analysis and AST generation
    ├── printer.py       # Tree rendering for debugging output
    ├── unparse.py       # AST -> canonical source
    └── cli.py           # loomc command-line driver

License: MIT
"""

__version__ = "0.1.0"
__license__ = "MIT"

from .lexer import Lexer, Token, TokenType, LexerError
from .parser import Parser, ParseError, parse_string, parse_file
from .printer import format_tree, format_program, pretty_print
from .unparse import unparse, unparse_program

__all__ = [
    # Core classes
    "Lexer",
    "Token",
    "TokenType",
    "Parser",

    # Errors
    "LexerError",
    "ParseError",

    # Convenience functions
    "parse_string",
    "parse_file",
    "format_tree",
    "format_program",
    "pretty_print",
    "unparse",
    "unparse_program",

    # Version info
    "__version__",
    "__license__",
]
