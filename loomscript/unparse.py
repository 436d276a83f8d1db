"""
Canonical source serializer.

unparse() turns an AST back into Loomscript source. Parentheses are only
emitted where operator precedence or left-associativity requires them, so
re-parsing the output of a parser-produced tree yields an equal tree.
"""

import math
from decimal import Decimal
from typing import Iterable, List

from .printer import format_number
from .parser.ast_nodes import (
    ASTNode, Eof, Number, Identifier, StrLiteral, BoolNode, BreakNode,
    ReturnNode, ImportNode, BinOpNode, VarDecNode, AssignNode, IfElseNode,
    LoopNode, FuncCall, FuncDef, Block
)

INDENT = "    "

# Binding strength per operator; higher binds tighter
PRECEDENCE = {
    "and": 1, "or": 1,
    "==": 2, "<": 2, "<=": 2, ">": 2, ">=": 2,
    "+": 3, "-": 3,
    "*": 4, "/": 4, "%": 4,
}
ATOM_PRECEDENCE = 5

STRING_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
}


def _number_source(value: float) -> str:
    if not math.isfinite(value):
        raise ValueError(f"{value!r} has no Loomscript literal form")
    text = format_number(value)
    if "e" in text or "E" in text:
        text = format(Decimal(text), "f")
    return text


def _string_source(text: str) -> str:
    return '"' + "".join(STRING_ESCAPES.get(char, char) for char in text) + '"'


def _precedence(node: ASTNode) -> int:
    if isinstance(node, BinOpNode):
        return PRECEDENCE[node.op]
    return ATOM_PRECEDENCE


def unparse_expression(node: ASTNode) -> str:
    """Serialize an expression node."""
    if isinstance(node, Number):
        return _number_source(node.value)
    elif isinstance(node, Identifier):
        return node.name
    elif isinstance(node, StrLiteral):
        return _string_source(node.text)
    elif isinstance(node, BoolNode):
        return "true" if node.value else "false"
    elif isinstance(node, FuncCall):
        arguments = ", ".join(unparse_expression(argument) for argument in node.arguments)
        return f"{node.name}({arguments})"
    elif isinstance(node, BinOpNode):
        precedence = PRECEDENCE[node.op]
        left = unparse_expression(node.left)
        right = unparse_expression(node.right)
        if _precedence(node.left) < precedence:
            left = f"({left})"
        # Operators are left-associative, so an equal-precedence right operand needs parentheses
        if _precedence(node.right) <= precedence:
            right = f"({right})"
        return f"{left} {node.op} {right}"

    raise TypeError(f"{type(node).__name__} is not an expression")


def _block_lines(block: Block, depth: int) -> List[str]:
    lines: List[str] = []
    for statement in block:
        lines.extend(_statement_lines(statement, depth + 1))
    return lines


def _statement_lines(node: ASTNode, depth: int) -> List[str]:
    pad = INDENT * depth

    if isinstance(node, Eof):
        return []
    elif isinstance(node, ImportNode):
        return [f"{pad}import {_string_source(node.module)}"]
    elif isinstance(node, VarDecNode):
        return [f"{pad}let {node.name} = {unparse_expression(node.value)};"]
    elif isinstance(node, AssignNode):
        return [f"{pad}{node.name} = {unparse_expression(node.value)};"]
    elif isinstance(node, BreakNode):
        return [f"{pad}break;"]
    elif isinstance(node, ReturnNode):
        if node.value is None:
            return [f"{pad}return;"]
        return [f"{pad}return {unparse_expression(node.value)};"]
    elif isinstance(node, FuncDef):
        parameters = ", ".join(argument.name for argument in node.arguments)
        return ([f"{pad}fn {node.name}({parameters}) {{"]
                + _block_lines(node.block, depth)
                + [f"{pad}}}"])
    elif isinstance(node, LoopNode):
        return ([f"{pad}loop ({unparse_expression(node.condition)}) {{"]
                + _block_lines(node.block, depth)
                + [f"{pad}}}"])
    elif isinstance(node, IfElseNode):
        lines = [f"{pad}if ({unparse_expression(node.condition)}) {{"]
        lines.extend(_block_lines(node.then_branch, depth))
        for condition, block in node.elif_branch:
            lines.append(f"{pad}}} elif ({unparse_expression(condition)}) {{")
            lines.extend(_block_lines(block, depth))
        if node.else_branch is not None:
            lines.append(f"{pad}}} else {{")
            lines.extend(_block_lines(node.else_branch, depth))
        lines.append(f"{pad}}}")
        return lines

    return [f"{pad}{unparse_expression(node)};"]


def unparse(node: ASTNode) -> str:
    """Serialize a single statement (possibly spanning several lines)."""
    return "\n".join(_statement_lines(node, 0))


def unparse_program(nodes: Iterable[ASTNode]) -> str:
    """Serialize top-level statements, one after another, newline-terminated."""
    lines: List[str] = []
    for node in nodes:
        lines.extend(_statement_lines(node, 0))
    return "\n".join(lines) + "\n" if lines else ""
