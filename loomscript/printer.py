"""
AST pretty-printer.

Renders trees with box-drawing connectors, one node per line:

    └── BinOp('+')
        ├── Number(1)
        └── Number(2)

Rendering is a pure walk over the tree; nothing is mutated.
"""

import math
import sys
from typing import Iterable, List, NamedTuple, TextIO, Tuple, Union

from .parser.ast_nodes import (
    ASTNode, Eof, Number, Identifier, StrLiteral, BoolNode, BreakNode,
    ReturnNode, ImportNode, BinOpNode, VarDecNode, AssignNode, IfElseNode,
    LoopNode, FuncCall, FuncDef
)

BRANCH = "├── "
LAST_BRANCH = "└── "
PIPE = "│   "
SPACE = "    "


class _Group(NamedTuple):
    """A labelled row that is not a node itself, e.g. ``Then`` or ``Args``."""
    label: str
    items: Tuple[Union[ASTNode, "_Group"], ...] = ()


_Row = Union[ASTNode, _Group]


def format_number(value: float) -> str:
    """Format a double the way the tree shows it: ``1`` rather than ``1.0``."""
    if math.isfinite(value) and value.is_integer():
        return str(int(value))
    return repr(value)


def _describe(node: ASTNode) -> Tuple[str, List[_Row]]:
    """Return the label for ``node`` and the rows nested under it."""
    if isinstance(node, Eof):
        return "End of file.", []
    elif isinstance(node, Number):
        return f"Number({format_number(node.value)})", []
    elif isinstance(node, Identifier):
        return f"Identifier({node.name})", []
    elif isinstance(node, BoolNode):
        return f"Bool({'true' if node.value else 'false'})", []
    elif isinstance(node, BreakNode):
        return "Break", []
    elif isinstance(node, StrLiteral):
        return f'StrLiteral("{node.text}")', []
    elif isinstance(node, ImportNode):
        return f"Import({node.module})", []
    elif isinstance(node, ReturnNode):
        return "Return", node.children()
    elif isinstance(node, BinOpNode):
        return f"BinOp('{node.op}')", [node.left, node.right]
    elif isinstance(node, VarDecNode):
        return f"VarDec({node.name})", [node.value]
    elif isinstance(node, AssignNode):
        return f"Assign({node.name})", [node.value]
    elif isinstance(node, IfElseNode):
        rows: List[_Row] = [node.condition, _Group("Then", node.then_branch)]
        for condition, block in node.elif_branch:
            rows.append(_Group("Elif", (condition,) + tuple(block)))
        if node.else_branch is not None:
            rows.append(_Group("Else", node.else_branch))
        return "If", rows
    elif isinstance(node, LoopNode):
        return "Loop", [node.condition, *node.block]
    elif isinstance(node, FuncCall):
        return f"FuncCall({node.name})", list(node.arguments)
    elif isinstance(node, FuncDef):
        names = ", ".join(argument.name for argument in node.arguments)
        return f"FuncDef({node.name})", [_Group(f"Args: [{names}]"), *node.block]

    raise TypeError(f"Cannot print {type(node).__name__}")


def _render(row: _Row, prefix: str, is_last: bool, lines: List[str]):
    connector = LAST_BRANCH if is_last else BRANCH
    if isinstance(row, _Group):
        label, children = row.label, list(row.items)
    else:
        label, children = _describe(row)

    lines.append(f"{prefix}{connector}{label}")

    child_prefix = prefix + (SPACE if is_last else PIPE)
    for index, child in enumerate(children):
        _render(child, child_prefix, index == len(children) - 1, lines)


def format_tree(node: ASTNode) -> str:
    """Render a single AST as a tree, without a trailing newline."""
    lines: List[str] = []
    _render(node, "", True, lines)
    return "\n".join(lines)


def format_program(nodes: Iterable[ASTNode]) -> str:
    """Render a sequence of top-level ASTs, one tree after another."""
    return "\n".join(format_tree(node) for node in nodes)


def pretty_print(node: ASTNode, stream: TextIO = None):
    """Write the tree for ``node`` to ``stream`` (stdout by default)."""
    stream = stream if stream is not None else sys.stdout
    stream.write(format_tree(node) + "\n")
