"""
Test suite for the Loomscript parser.

Tests cover:
- Expression precedence and associativity
- Every statement form
- Failure kinds and the lines they report
- The token cursor
"""

import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from loomscript.lexer.lexer import tokenize_string
from loomscript.parser.parser import Parser, TokenCursor
from loomscript.parser.ast_nodes import (
    Eof, Number, Identifier, StrLiteral, BoolNode, BreakNode, ReturnNode,
    ImportNode, BinOpNode, VarDecNode, AssignNode, IfElseNode, LoopNode,
    FuncCall, FuncDef, walk
)
from loomscript.parser.errors import (
    ParseError, UnexpectedToken, UnexpectedEndOfInput, ExpectedToken,
    ExpectedSemicolon, UnterminatedBlock, NestingTooDeep
)


def parse(source):
    return Parser(tokenize_string(source)).parse()


class TestExpressions(unittest.TestCase):
    """Precedence climbing over the expression levels."""

    def test_multiplication_binds_tighter_than_addition(self):
        self.assertEqual(parse("1 + 2 * 3;"), [
            BinOpNode("+", Number(1), BinOpNode("*", Number(2), Number(3)))
        ])

    def test_subtraction_is_left_associative(self):
        self.assertEqual(parse("8 - 3 - 2;"), [
            BinOpNode("-", BinOpNode("-", Number(8), Number(3)), Number(2))
        ])

    def test_comparison_chain_is_left_associative(self):
        self.assertEqual(parse("1 < 2 == true;"), [
            BinOpNode("==", BinOpNode("<", Number(1), Number(2)), BoolNode(True))
        ])

    def test_logic_binds_loosest(self):
        self.assertEqual(parse("1 < 2 and 3 >= 4 or true;"), [
            BinOpNode(
                "or",
                BinOpNode(
                    "and",
                    BinOpNode("<", Number(1), Number(2)),
                    BinOpNode(">=", Number(3), Number(4)),
                ),
                BoolNode(True),
            )
        ])

    def test_parentheses_group(self):
        self.assertEqual(parse("2 * (3 + 4);"), [
            BinOpNode("*", Number(2), BinOpNode("+", Number(3), Number(4)))
        ])

    def test_nested_parentheses(self):
        self.assertEqual(parse("1 * ((2 + 3) % x);"), [
            BinOpNode(
                "*",
                Number(1),
                BinOpNode("%", BinOpNode("+", Number(2), Number(3)), Identifier("x")),
            )
        ])

    def test_literals(self):
        self.assertEqual(parse('"s"; true; false; 2.5;'), [
            StrLiteral("s"), BoolNode(True), BoolNode(False), Number(2.5)
        ])

    def test_call_inside_expression(self):
        self.assertEqual(parse("let y = f(1) + 2;"), [
            VarDecNode("y", BinOpNode("+", FuncCall("f", (Number(1),)), Number(2)))
        ])

    def test_comments_do_not_change_the_tree(self):
        plain = parse("let x = 1 + 2;\nx = x * 3;")
        commented = parse("# setup\nlet x = 1 + # inline\n 2;\nx = x * 3; # done\n")
        self.assertEqual(plain, commented)

    def test_leading_parenthesis_is_rejected(self):
        with self.assertRaises(UnexpectedToken) as ctx:
            parse("(1);")
        self.assertEqual(ctx.exception.text, "(")

    def test_unary_minus_is_rejected(self):
        with self.assertRaises(UnexpectedToken) as ctx:
            parse("let x = -1;")
        self.assertEqual(ctx.exception.text, "-")

    def test_missing_operand(self):
        with self.assertRaises(UnexpectedToken) as ctx:
            parse("1 + ;")
        self.assertEqual(ctx.exception.text, ";")

    def test_unclosed_parenthesis(self):
        with self.assertRaises(ExpectedToken) as ctx:
            parse("1 * (2 + 3;")
        self.assertEqual(ctx.exception.expected, ")")


class TestStatements(unittest.TestCase):
    """One AST per top-level statement."""

    def test_variable_declaration(self):
        self.assertEqual(parse("let x = 1 + y;"), [
            VarDecNode("x", BinOpNode("+", Number(1), Identifier("y")))
        ])

    def test_assignment(self):
        self.assertEqual(parse("x = 5;"), [AssignNode("x", Number(5))])

    def test_call_statement_without_arguments(self):
        self.assertEqual(parse("f();"), [FuncCall("f", ())])

    def test_call_statement_with_arguments(self):
        self.assertEqual(parse('print(1, x, "s", g(2));'), [
            FuncCall("print", (
                Number(1), Identifier("x"), StrLiteral("s"), FuncCall("g", (Number(2),))
            ))
        ])

    def test_import(self):
        self.assertEqual(parse('import "math"'), [ImportNode("math")])
        self.assertEqual(parse('import "m"\nlet x = 1;'), [
            ImportNode("m"), VarDecNode("x", Number(1))
        ])

    def test_function_definition(self):
        self.assertEqual(parse("fn add(a, b) { return a + b; }"), [
            FuncDef(
                "add",
                (Identifier("a"), Identifier("b")),
                (ReturnNode(BinOpNode("+", Identifier("a"), Identifier("b"))),),
            )
        ])

    def test_function_without_parameters_or_body(self):
        self.assertEqual(parse("fn f() { }"), [FuncDef("f", (), ())])

    def test_if_elif_else(self):
        (node,) = parse("if (true) { break; } elif (false) { break; } else { break; }")
        self.assertIsInstance(node, IfElseNode)
        self.assertEqual(node.condition, BoolNode(True))
        self.assertEqual(node.then_branch, (BreakNode(),))
        self.assertEqual(node.elif_branch, ((BoolNode(False), (BreakNode(),)),))
        self.assertEqual(node.else_branch, (BreakNode(),))

    def test_if_without_else(self):
        (node,) = parse("if (x) { y = 1; }")
        self.assertEqual(node.elif_branch, ())
        self.assertIsNone(node.else_branch)

    def test_empty_else_is_not_missing_else(self):
        (node,) = parse("if (x) { } else { }")
        self.assertEqual(node.then_branch, ())
        self.assertEqual(node.else_branch, ())

    def test_multiple_elif_clauses(self):
        (node,) = parse("if (a) { } elif (b) { } elif (c) { x = 1; }")
        self.assertEqual([condition for condition, _ in node.elif_branch],
                         [Identifier("b"), Identifier("c")])
        self.assertEqual(node.elif_branch[1][1], (AssignNode("x", Number(1)),))

    def test_loop(self):
        self.assertEqual(parse("loop (i < 10) { i = i + 1; break; }"), [
            LoopNode(
                BinOpNode("<", Identifier("i"), Number(10)),
                (AssignNode("i", BinOpNode("+", Identifier("i"), Number(1))), BreakNode()),
            )
        ])

    def test_return_with_and_without_value(self):
        (node,) = parse("fn f() { return; }")
        self.assertEqual(node.block, (ReturnNode(None),))
        self.assertEqual(parse("return 1;"), [ReturnNode(Number(1))])

    def test_nested_blocks(self):
        (node,) = parse("fn f(n) { loop (n > 0) { if (n == 1) { return n; } n = n - 1; } }")
        self.assertIsInstance(node.block[0], LoopNode)
        self.assertIsInstance(node.block[0].block[0], IfElseNode)

    def test_parse_statement_at_end_returns_eof(self):
        parser = Parser(tokenize_string("x = 1;"))
        self.assertEqual(parser.parse_statement(), AssignNode("x", Number(1)))
        self.assertTrue(parser.is_at_end())
        self.assertEqual(parser.parse_statement(), Eof())
        self.assertEqual(parser.parse_statement(), Eof())

    def test_empty_program(self):
        self.assertEqual(parse(""), [])
        self.assertEqual(parse("# nothing here\n"), [])

    def test_walk_visits_in_pre_order(self):
        (node,) = parse("1 + 2 * 3;")
        self.assertEqual([type(n).__name__ for n in walk(node)], [
            "BinOpNode", "Number", "BinOpNode", "Number", "Number"
        ])


class TestParseErrors(unittest.TestCase):
    """Failure kinds and reported lines."""

    def test_bare_identifier_statement(self):
        with self.assertRaises(UnexpectedToken) as ctx:
            parse("f;")
        self.assertEqual(ctx.exception.text, ";")
        self.assertEqual(ctx.exception.line, 1)

    def test_identifier_followed_by_operator(self):
        with self.assertRaises(UnexpectedToken) as ctx:
            parse("x + 1;")
        self.assertEqual(ctx.exception.text, "+")

    def test_let_requires_name_and_equals(self):
        with self.assertRaises(ExpectedToken) as ctx:
            parse("let 1 = 2;")
        self.assertEqual(ctx.exception.expected, "identifier")
        with self.assertRaises(ExpectedToken) as ctx:
            parse("let x 1;")
        self.assertEqual(ctx.exception.expected, "=")

    def test_missing_semicolon(self):
        with self.assertRaises(ExpectedSemicolon) as ctx:
            parse("let x = 1")
        self.assertEqual(ctx.exception.line, 1)

    def test_missing_semicolon_reports_next_token_line(self):
        with self.assertRaises(ExpectedSemicolon) as ctx:
            parse("let a = 1;\nlet b = 2\nlet c = 3;")
        self.assertEqual(ctx.exception.line, 3)

    def test_break_requires_semicolon(self):
        with self.assertRaises(ExpectedSemicolon):
            parse("break")

    def test_return_followed_by_non_expression(self):
        with self.assertRaises(ExpectedSemicolon):
            parse("return );")

    def test_import_requires_string(self):
        with self.assertRaises(UnexpectedToken) as ctx:
            parse("import math;")
        self.assertEqual(ctx.exception.text, "math")

    def test_import_takes_no_semicolon(self):
        parser = Parser(tokenize_string('import "m"; let x = 1;'))
        self.assertEqual(parser.parse_statement(), ImportNode("m"))
        with self.assertRaises(UnexpectedToken) as ctx:
            parser.parse_statement()
        self.assertEqual(ctx.exception.text, ";")

    def test_deeply_nested_parentheses(self):
        depth = 2000
        source = "let x = 1 * " + "(" * depth + "1" + ")" * depth + ";"
        with self.assertRaises(NestingTooDeep) as ctx:
            parse(source)
        self.assertEqual(ctx.exception.line, 1)
        self.assertEqual(ctx.exception.kind, "NestingTooDeep")

    def test_parser_usable_after_nesting_failure(self):
        depth = 2000
        source = "1 * " + "(" * depth + "1" + ")" * depth + ";"
        parser = Parser(tokenize_string(source))
        with self.assertRaises(NestingTooDeep):
            parser.parse_statement()
        self.assertEqual(parse("1 * ((2));"), [BinOpNode("*", Number(1), Number(2))])

    def test_condition_requires_parentheses(self):
        with self.assertRaises(ExpectedToken) as ctx:
            parse("if true { }")
        self.assertEqual(ctx.exception.expected, "(")

    def test_bad_parameter_list(self):
        with self.assertRaises(ExpectedToken) as ctx:
            parse("fn f(1) { }")
        self.assertEqual(ctx.exception.expected, "identifier")
        with self.assertRaises(UnexpectedToken) as ctx:
            parse("fn f(a b) { }")
        self.assertEqual(ctx.exception.text, "b")

    def test_trailing_comma_in_call(self):
        with self.assertRaises(UnexpectedToken) as ctx:
            parse("f(1,);")
        self.assertEqual(ctx.exception.text, ")")

    def test_missing_comma_in_call(self):
        with self.assertRaises(UnexpectedToken) as ctx:
            parse("f(1 2);")
        self.assertEqual(ctx.exception.text, "2")

    def test_pub_is_not_a_statement(self):
        with self.assertRaises(UnexpectedToken) as ctx:
            parse("pub fn f() { }")
        self.assertEqual(ctx.exception.text, "pub")

    def test_unterminated_block_at_end_of_file(self):
        with self.assertRaises(UnterminatedBlock) as ctx:
            parse("fn f() { let x = 1;")
        self.assertEqual(ctx.exception.line, 1)

    def test_unterminated_block_reports_first_statement_line(self):
        source = "fn f() {\n  let x = 1;\n  let y = ;\n}"
        with self.assertRaises(UnterminatedBlock) as ctx:
            parse(source)
        self.assertEqual(ctx.exception.line, 2)
        cause = ctx.exception.__cause__
        self.assertIsInstance(cause, UnexpectedToken)
        self.assertEqual(cause.line, 3)

    def test_failure_kind_names(self):
        with self.assertRaises(ParseError) as ctx:
            parse("loop (x) { ")
        self.assertEqual(ctx.exception.kind, "UnterminatedBlock")
        self.assertIn("ERROR:", str(ctx.exception))


class TestTruncatedInput(unittest.TestCase):
    """Token sequences that end without an EOF token."""

    def test_missing_eof_after_complete_statement(self):
        tokens = tokenize_string("let x = 1;")[:-1]
        with self.assertRaises(UnexpectedEndOfInput) as ctx:
            Parser(tokens).parse()
        self.assertEqual(ctx.exception.line, 1)

    def test_sequence_ends_mid_statement(self):
        tokens = tokenize_string("let x = 1;")[:3]
        with self.assertRaises(UnexpectedEndOfInput):
            Parser(tokens).parse()

    def test_lookahead_past_end(self):
        tokens = tokenize_string("x")[:-1]
        with self.assertRaises(UnexpectedToken):
            Parser(tokens).parse()

    def test_empty_sequence(self):
        parser = Parser([])
        self.assertTrue(parser.is_at_end())
        with self.assertRaises(UnexpectedEndOfInput):
            parser.parse()


class TestTokenCursor(unittest.TestCase):
    """Single-token lookahead and pushback."""

    def setUp(self):
        self.cursor = TokenCursor(tokenize_string("a = 1;"))

    def test_consume_and_current(self):
        self.assertEqual(self.cursor.current().text, "a")
        self.cursor.consume()
        self.assertEqual(self.cursor.current().text, "=")
        self.assertEqual(self.cursor.peek_next().text, "1")

    def test_single_pushback(self):
        self.cursor.consume()
        self.cursor.pushback()
        self.assertEqual(self.cursor.current().text, "a")

    def test_double_pushback_is_rejected(self):
        self.cursor.consume()
        self.cursor.consume()
        self.cursor.pushback()
        with self.assertRaises(RuntimeError):
            self.cursor.pushback()

    def test_pushback_allowed_again_after_consume(self):
        self.cursor.consume()
        self.cursor.pushback()
        self.cursor.consume()
        self.cursor.pushback()
        self.assertEqual(self.cursor.current().text, "a")

    def test_consume_past_end_is_a_no_op(self):
        for _ in range(10):
            self.cursor.consume()
        self.assertTrue(self.cursor.exhausted)
        with self.assertRaises(UnexpectedEndOfInput):
            self.cursor.current()


if __name__ == '__main__':
    unittest.main()
