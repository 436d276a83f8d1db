"""
Loomscript Parser Package

Implements the recursive descent parser for the Loomscript language.
Produces immutable Abstract Syntax Trees, one per top-level statement.

Key Features:
- Precedence climbing over logic/comparison/arithmetic/term/factor levels
- One-token lookahead for call vs. reference vs. assignment
- Block-structured statements (fn, if/elif/else, loop)
- Line-tagged, fail-fast error diagnostics

Author: Loomscript contributors
"""

from .ast_nodes import *
from .parser import Parser, TokenCursor, parse_string, parse_file
from .errors import (
    ParseError, UnexpectedToken, UnexpectedEndOfInput, ExpectedToken,
    ExpectedSemicolon, UnterminatedBlock, NestingTooDeep
)

__all__ = [
    # Core parser
    "Parser",
    "TokenCursor",
    "parse_string",
    "parse_file",

    # AST nodes
    "ASTNode", "ASTNodeType", "walk",
    "Eof", "Number", "Identifier", "StrLiteral", "BoolNode", "BreakNode",
    "ReturnNode", "ImportNode", "BinOpNode", "VarDecNode", "AssignNode",
    "IfElseNode", "LoopNode", "FuncCall", "FuncDef",

    # Error handling
    "ParseError", "UnexpectedToken", "UnexpectedEndOfInput", "ExpectedToken",
    "ExpectedSemicolon", "UnterminatedBlock", "NestingTooDeep",
]
