"""
Abstract Syntax Tree node definitions for Loomscript.

The node set is closed. Every node is an immutable dataclass that owns its
children outright: there are no parent links and no sharing, and two trees
compare equal when they have the same structure.

Author: Loomscript contributors
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, ClassVar, Iterator, List, Optional, Tuple


class ASTNodeType(Enum):
    """Enumeration of all AST node types."""

    EOF = "Eof"

    # Leaves
    NUMBER = "Number"
    IDENTIFIER = "Identifier"
    STR_LITERAL = "StrLiteral"
    BOOL = "BoolNode"
    BREAK = "BreakNode"
    IMPORT = "ImportNode"

    # Composite nodes
    RETURN = "ReturnNode"
    BIN_OP = "BinOpNode"
    VAR_DEC = "VarDecNode"
    ASSIGN = "AssignNode"
    IF_ELSE = "IfElseNode"
    LOOP = "LoopNode"
    FUNC_CALL = "FuncCall"
    FUNC_DEF = "FuncDef"


def _freeze(value: Any) -> Any:
    """Turn (nested) lists into tuples so nodes stay hashable and immutable."""
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    return value


@dataclass(frozen=True)
class ASTNode:
    """Base class for all AST nodes."""

    node_type: ClassVar[ASTNodeType]

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, list):
                object.__setattr__(self, f.name, _freeze(value))

    def children(self) -> List['ASTNode']:
        """Get all direct child nodes, in source order."""
        return []


Block = Tuple[ASTNode, ...]
ElifClause = Tuple[ASTNode, Block]


# ============================================================================
# Leaves
# ============================================================================

@dataclass(frozen=True)
class Eof(ASTNode):
    """Marks the end of the token stream; tells the driver to stop."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.EOF


@dataclass(frozen=True)
class Number(ASTNode):
    """Numeric literal, always an IEEE double."""
    value: float
    node_type: ClassVar[ASTNodeType] = ASTNodeType.NUMBER


@dataclass(frozen=True)
class Identifier(ASTNode):
    """Reference to a name."""
    name: str
    node_type: ClassVar[ASTNodeType] = ASTNodeType.IDENTIFIER


@dataclass(frozen=True)
class StrLiteral(ASTNode):
    """String literal holding its unescaped text."""
    text: str
    node_type: ClassVar[ASTNodeType] = ASTNodeType.STR_LITERAL


@dataclass(frozen=True)
class BoolNode(ASTNode):
    value: bool
    node_type: ClassVar[ASTNodeType] = ASTNodeType.BOOL


@dataclass(frozen=True)
class BreakNode(ASTNode):
    node_type: ClassVar[ASTNodeType] = ASTNodeType.BREAK


@dataclass(frozen=True)
class ImportNode(ASTNode):
    """``import "module";`` - only the literal module string is recorded."""
    module: str
    node_type: ClassVar[ASTNodeType] = ASTNodeType.IMPORT


# ============================================================================
# Composite nodes
# ============================================================================

@dataclass(frozen=True)
class ReturnNode(ASTNode):
    value: Optional[ASTNode] = None
    node_type: ClassVar[ASTNodeType] = ASTNodeType.RETURN

    def children(self) -> List[ASTNode]:
        return [self.value] if self.value is not None else []


@dataclass(frozen=True)
class BinOpNode(ASTNode):
    """Binary operation; ``op`` is the operator's source text."""
    op: str
    left: ASTNode
    right: ASTNode
    node_type: ClassVar[ASTNodeType] = ASTNodeType.BIN_OP

    def children(self) -> List[ASTNode]:
        return [self.left, self.right]


@dataclass(frozen=True)
class VarDecNode(ASTNode):
    """``let name = value;``"""
    name: str
    value: ASTNode
    node_type: ClassVar[ASTNodeType] = ASTNodeType.VAR_DEC

    def children(self) -> List[ASTNode]:
        return [self.value]


@dataclass(frozen=True)
class AssignNode(ASTNode):
    """``name = value;``"""
    name: str
    value: ASTNode
    node_type: ClassVar[ASTNodeType] = ASTNodeType.ASSIGN

    def children(self) -> List[ASTNode]:
        return [self.value]


@dataclass(frozen=True)
class IfElseNode(ASTNode):
    """
    if/elif/else chain.

    An empty ``elif_branch`` means no elif clauses. ``else_branch`` is None
    when there is no else clause, which is distinct from an else clause with
    an empty body (an empty tuple).
    """
    condition: ASTNode
    then_branch: Block
    elif_branch: Tuple[ElifClause, ...] = ()
    else_branch: Optional[Block] = None
    node_type: ClassVar[ASTNodeType] = ASTNodeType.IF_ELSE

    def children(self) -> List[ASTNode]:
        children = [self.condition]
        children.extend(self.then_branch)
        for elif_condition, elif_block in self.elif_branch:
            children.append(elif_condition)
            children.extend(elif_block)
        if self.else_branch is not None:
            children.extend(self.else_branch)
        return children


@dataclass(frozen=True)
class LoopNode(ASTNode):
    """``loop (condition) { block }`` - the only looping construct."""
    condition: ASTNode
    block: Block
    node_type: ClassVar[ASTNodeType] = ASTNodeType.LOOP

    def children(self) -> List[ASTNode]:
        return [self.condition, *self.block]


@dataclass(frozen=True)
class FuncCall(ASTNode):
    name: str
    arguments: Tuple[ASTNode, ...] = ()
    node_type: ClassVar[ASTNodeType] = ASTNodeType.FUNC_CALL

    def children(self) -> List[ASTNode]:
        return list(self.arguments)


@dataclass(frozen=True)
class FuncDef(ASTNode):
    """Function definition; parameters are bare identifiers."""
    name: str
    arguments: Tuple[Identifier, ...]
    block: Block
    node_type: ClassVar[ASTNodeType] = ASTNodeType.FUNC_DEF

    def children(self) -> List[ASTNode]:
        return [*self.arguments, *self.block]


def walk(node: ASTNode) -> Iterator[ASTNode]:
    """Yield ``node`` and all of its descendants in depth-first pre-order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children()))
