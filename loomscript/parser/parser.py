"""
Loomscript Recursive Descent Parser

Turns the materialized token sequence into one AST per top-level statement.
Expressions are parsed by precedence climbing over a fixed chain of grammar
levels (logic -> comparison -> arithmetic -> term -> factor), each level
left-associative. Statements are dispatched on the current token.

The first failure aborts the statement being parsed; nothing is recovered.

Author: Loomscript contributors
"""

import logging
from typing import Callable, FrozenSet, List, Optional, Sequence

from ..lexer.tokens import Token, TokenType, EXPRESSION_START_TYPES
from .ast_nodes import (
    ASTNode, Eof, Number, Identifier, StrLiteral, BoolNode, BreakNode,
    ReturnNode, ImportNode, BinOpNode, VarDecNode, AssignNode, IfElseNode,
    LoopNode, FuncCall, FuncDef, Block
)
from .errors import (
    ParseError, UnexpectedToken, UnexpectedEndOfInput, ExpectedToken,
    ExpectedSemicolon, UnterminatedBlock, NestingTooDeep
)

logger = logging.getLogger(__name__)


LOGIC_OPERATORS = frozenset({TokenType.AND, TokenType.OR})
COMPARISON_OPERATORS = frozenset({
    TokenType.EQUAL, TokenType.LESS_THAN, TokenType.LESS_EQUAL,
    TokenType.GREATER_THAN, TokenType.GREATER_EQUAL,
})
ARITHMETIC_OPERATORS = frozenset({TokenType.PLUS, TokenType.MINUS})
TERM_OPERATORS = frozenset({TokenType.MULTIPLY, TokenType.DIVIDE, TokenType.MODULO})


class TokenCursor:
    """
    Read cursor over an immutable token sequence.

    Moves forward one token at a time. Lookahead is limited to one token:
    either peek_next(), or consume() followed by a single pushback().
    """

    def __init__(self, tokens: Sequence[Token]):
        self.tokens = tuple(tokens)
        self.index = 0
        self._pushed_back = False

    @property
    def exhausted(self) -> bool:
        return self.index >= len(self.tokens)

    def current(self) -> Token:
        """Return the token under the cursor."""
        if self.exhausted:
            raise UnexpectedEndOfInput(self.last_line())
        return self.tokens[self.index]

    def peek_next(self) -> Token:
        """Return the token after the current one without moving."""
        if self.index + 1 >= len(self.tokens):
            raise UnexpectedEndOfInput(self.last_line())
        return self.tokens[self.index + 1]

    def consume(self):
        """Advance by one token; a no-op once past the end."""
        if not self.exhausted:
            self.index += 1
        self._pushed_back = False

    def pushback(self):
        """Undo the last consume(). Only one token can be pushed back."""
        if self._pushed_back:
            raise RuntimeError("pushback() called twice without an intervening consume()")
        if self.index > 0:
            self.index -= 1
        self._pushed_back = True

    def last_line(self) -> int:
        """Line of the final token in the sequence, or 1 when it is empty."""
        return self.tokens[-1].line if self.tokens else 1


class Parser:
    """
    Loomscript parser.

    Owns its token sequence. parse_statement() returns one AST per call and
    an Eof node once the end-of-file token is reached.
    """

    def __init__(self, tokens: Sequence[Token]):
        """
        Initialize parser with a sequence of tokens.

        Args:
            tokens: Tokens from the lexer, normally ending in an EOF token
        """
        self.cursor = TokenCursor(tokens)

    def parse(self) -> List[ASTNode]:
        """
        Parse every top-level statement.

        Returns:
            The statements in source order, without the trailing Eof node

        Raises:
            ParseError: On the first syntax error
        """
        statements = []
        while True:
            statement = self.parse_statement()
            if isinstance(statement, Eof):
                return statements
            statements.append(statement)

    def parse_statement(self) -> ASTNode:
        """
        Parse one top-level statement.

        Raises:
            ParseError: On the first syntax error, or NestingTooDeep when the
                statement nests deeper than the Python stack allows
        """
        try:
            statement = self._parse_statement()
        except ParseError as e:
            logger.debug("parse failure: %r", e)
            raise
        except RecursionError:
            token = None if self.cursor.exhausted else self.cursor.current()
            line = token.line if token is not None else self.cursor.last_line()
            logger.debug("nesting too deep at line %d", line)
            raise NestingTooDeep(line, token) from None
        logger.debug("parsed %s", type(statement).__name__)
        return statement

    def is_at_end(self) -> bool:
        """True on the EOF token or when the sequence is exhausted."""
        return self.cursor.exhausted or self.cursor.current().type == TokenType.EOF

    # Statements

    def _parse_statement(self) -> ASTNode:
        token = self.cursor.current()
        token_type = token.type

        if token_type == TokenType.EOF:
            return Eof()
        if token_type == TokenType.IMPORT:
            return self._parse_import()
        if token_type == TokenType.LET:
            return self._parse_var_decl()
        if token_type == TokenType.FN:
            return self._parse_func_def()
        if token_type == TokenType.IF:
            return self._parse_if_else()
        if token_type == TokenType.LOOP:
            return self._parse_loop()
        if token_type == TokenType.BREAK:
            self.cursor.consume()
            self._expect_semicolon()
            return BreakNode()
        if token_type == TokenType.RETURN:
            return self._parse_return()
        if token_type == TokenType.IDENTIFIER:
            return self._parse_identifier_statement()

        return self.parse_expression(terminate=True)

    def _parse_import(self) -> ImportNode:
        self.cursor.consume()  # import

        token = self.cursor.current()
        if token.type != TokenType.STRING:
            raise UnexpectedToken(token.text, token.line, token)
        self.cursor.consume()

        # No terminator: a following ';' starts the next statement
        return ImportNode(token.text)

    def _parse_var_decl(self) -> VarDecNode:
        self.cursor.consume()  # let

        name = self._expect(TokenType.IDENTIFIER, "identifier").text
        self._expect(TokenType.ASSIGN, "=")
        value = self.parse_expression(terminate=True)

        return VarDecNode(name, value)

    def _parse_func_def(self) -> FuncDef:
        self.cursor.consume()  # fn

        name = self._expect(TokenType.IDENTIFIER, "identifier").text
        arguments = self._parse_parameters()
        block = self._parse_block()

        return FuncDef(name, tuple(arguments), block)

    def _parse_parameters(self) -> List[Identifier]:
        """Parse ``( [IDENT ("," IDENT)*] )``."""
        self._expect(TokenType.LEFT_PAREN, "(")

        parameters: List[Identifier] = []
        if self._check(TokenType.RIGHT_PAREN):
            self.cursor.consume()
            return parameters

        while True:
            name = self._expect(TokenType.IDENTIFIER, "identifier").text
            parameters.append(Identifier(name))

            separator = self.cursor.current()
            if separator.type == TokenType.COMMA:
                self.cursor.consume()
            elif separator.type == TokenType.RIGHT_PAREN:
                self.cursor.consume()
                return parameters
            else:
                raise UnexpectedToken(separator.text, separator.line, separator)

    def _parse_if_else(self) -> IfElseNode:
        self.cursor.consume()  # if

        condition = self._parse_condition()
        then_branch = self._parse_block()

        elif_branch = []
        while self._check(TokenType.ELIF):
            self.cursor.consume()
            elif_condition = self._parse_condition()
            elif_branch.append((elif_condition, self._parse_block()))

        else_branch: Optional[Block] = None
        if self._check(TokenType.ELSE):
            self.cursor.consume()
            else_branch = self._parse_block()

        return IfElseNode(condition, then_branch, tuple(elif_branch), else_branch)

    def _parse_loop(self) -> LoopNode:
        self.cursor.consume()  # loop

        condition = self._parse_condition()
        block = self._parse_block()

        return LoopNode(condition, block)

    def _parse_condition(self) -> ASTNode:
        """Parse a parenthesized ``(expr)`` condition."""
        self._expect(TokenType.LEFT_PAREN, "(")
        condition = self.parse_expression(terminate=False)
        self._expect(TokenType.RIGHT_PAREN, ")")
        return condition

    def _parse_return(self) -> ReturnNode:
        self.cursor.consume()  # return

        if self._check(*EXPRESSION_START_TYPES):
            return ReturnNode(self.parse_expression(terminate=True))

        self._expect_semicolon()
        return ReturnNode(None)

    def _parse_identifier_statement(self) -> ASTNode:
        """Decide between ``name(args);`` and ``name = expr;`` on one token of lookahead."""
        following = self.cursor.peek_next()

        if following.type == TokenType.LEFT_PAREN:
            call = self._parse_func_call()
            self._expect_semicolon()
            return call
        if following.type == TokenType.ASSIGN:
            return self._parse_assign()

        raise UnexpectedToken(following.text, following.line, following)

    def _parse_assign(self) -> AssignNode:
        name = self.cursor.current().text
        self.cursor.consume()  # name
        self.cursor.consume()  # =

        value = self.parse_expression(terminate=True)

        return AssignNode(name, value)

    def _parse_block(self) -> Block:
        """
        Parse ``{ statement* }``.

        Any failure before the closing brace, including running out of
        tokens, is reported as UnterminatedBlock at the line of the block's
        first statement.
        """
        opening = self._expect(TokenType.LEFT_BRACE, "{")

        start_token = None if self.cursor.exhausted else self.cursor.current()
        start_line = start_token.line if start_token is not None else opening.line

        statements = []
        while True:
            if self.cursor.exhausted or self.cursor.current().type == TokenType.EOF:
                raise UnterminatedBlock(start_line, start_token)
            if self.cursor.current().type == TokenType.RIGHT_BRACE:
                self.cursor.consume()
                return tuple(statements)

            try:
                statements.append(self._parse_statement())
            except ParseError as e:
                raise UnterminatedBlock(start_line, start_token) from e

    # Expressions

    def parse_expression(self, terminate: bool) -> ASTNode:
        """
        Parse an expression starting at the current token.

        Args:
            terminate: Require (and consume) a ';' after the expression
        """
        token = self.cursor.current()
        if token.type not in EXPRESSION_START_TYPES:
            raise UnexpectedToken(token.text, token.line, token)

        node = self._parse_logic()

        if terminate:
            self._expect_semicolon()

        return node

    def _parse_logic(self) -> ASTNode:
        return self._parse_left_associative(self._parse_comparison, LOGIC_OPERATORS)

    def _parse_comparison(self) -> ASTNode:
        return self._parse_left_associative(self._parse_arithmetic, COMPARISON_OPERATORS)

    def _parse_arithmetic(self) -> ASTNode:
        return self._parse_left_associative(self._parse_term, ARITHMETIC_OPERATORS)

    def _parse_term(self) -> ASTNode:
        return self._parse_left_associative(self._parse_factor, TERM_OPERATORS)

    def _parse_left_associative(self, operand: Callable[[], ASTNode],
                                operators: FrozenSet[TokenType]) -> ASTNode:
        """Fold ``operand (op operand)*`` into a left-leaning BinOpNode chain."""
        node = operand()

        while self._check(*operators):
            op = self.cursor.current().text
            self.cursor.consume()
            node = BinOpNode(op, node, operand())

        return node

    def _parse_factor(self) -> ASTNode:
        token = self.cursor.current()

        if token.type == TokenType.NUMBER:
            self.cursor.consume()
            return Number(float(token.text))

        if token.type == TokenType.IDENTIFIER:
            if self.cursor.peek_next().type == TokenType.LEFT_PAREN:
                return self._parse_func_call()
            self.cursor.consume()
            return Identifier(token.text)

        if token.type == TokenType.STRING:
            self.cursor.consume()
            return StrLiteral(token.text)

        if token.type in (TokenType.TRUE, TokenType.FALSE):
            self.cursor.consume()
            return BoolNode(token.type == TokenType.TRUE)

        if token.type == TokenType.LEFT_PAREN:
            self.cursor.consume()
            node = self._parse_logic()
            self._expect(TokenType.RIGHT_PAREN, ")")
            return node

        raise UnexpectedToken(token.text, token.line, token)

    def _parse_func_call(self) -> FuncCall:
        """Parse ``name ( [expr ("," expr)*] )``."""
        name = self.cursor.current().text
        self.cursor.consume()
        self._expect(TokenType.LEFT_PAREN, "(")

        arguments = []
        if self._check(TokenType.RIGHT_PAREN):
            self.cursor.consume()
            return FuncCall(name, ())

        while True:
            arguments.append(self.parse_expression(terminate=False))

            separator = self.cursor.current()
            if separator.type == TokenType.COMMA:
                self.cursor.consume()
            elif separator.type == TokenType.RIGHT_PAREN:
                self.cursor.consume()
                return FuncCall(name, tuple(arguments))
            else:
                raise UnexpectedToken(separator.text, separator.line, separator)

    # Utility methods

    def _check(self, *token_types: TokenType) -> bool:
        """Check the current token's type without consuming; False when exhausted."""
        if self.cursor.exhausted:
            return False
        return self.cursor.current().type in token_types

    def _expect(self, token_type: TokenType, expected: str) -> Token:
        """Consume a token of the given type or raise ExpectedToken."""
        token = self.cursor.current()
        if token.type != token_type:
            raise ExpectedToken(expected, token.line, token)
        self.cursor.consume()
        return token

    def _expect_semicolon(self):
        token = self.cursor.current()
        if token.type != TokenType.SEMICOLON:
            raise ExpectedSemicolon(token.line, token)
        self.cursor.consume()


def parse_string(source: str, filename: str = "<string>") -> List[ASTNode]:
    """
    Convenience function to parse a source string.

    Args:
        source: Source code string
        filename: Filename for error reporting

    Returns:
        Top-level statements

    Raises:
        LexerError: If lexing fails
        ParseError: If parsing fails
    """
    from ..lexer import tokenize_string

    tokens = tokenize_string(source, filename)
    return Parser(tokens).parse()


def parse_file(filepath: str) -> List[ASTNode]:
    """
    Convenience function to parse a source file.

    Args:
        filepath: Path to source file

    Returns:
        Top-level statements

    Raises:
        LexerError: If lexing fails
        ParseError: If parsing fails
        IOError: If file cannot be read
    """
    from ..lexer import tokenize_file

    tokens = tokenize_file(filepath)
    return Parser(tokens).parse()
