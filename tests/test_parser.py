"""
Tests for the Pratt parser.

Tests cover:
- Precedence and associativity from the binding power table
- Unary operators and their interaction with '^'
- Source spans on every node
- Syntax errors, trailing tokens and the nesting limit
"""

import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from exprcalc.config import CalcConfig, MAX_DEPTH_LIMIT
from exprcalc.lexer import TokenType, tokenize
from exprcalc.parser import (
    Parser, ParseError, parse_string, NumberLiteral, UnaryOp, BinaryOp, ASTNodeType
)
from exprcalc.render import to_sexpr


class TestParserStructure(unittest.TestCase):
    """Shape of the trees the parser builds."""

    def assertTree(self, source, expected):
        self.assertEqual(to_sexpr(parse_string(source)), expected)

    def test_single_number(self):
        self.assertEqual(parse_string("42"), NumberLiteral(42.0, 0, 1))

    def test_precedence(self):
        self.assertTree("2 + 3 * 4", "(+ 2 (* 3 4))")
        self.assertTree("2 * 3 + 4", "(+ (* 2 3) 4)")
        self.assertTree("2 * 3 ^ 2", "(* 2 (expt 3 2))")

    def test_left_associativity(self):
        self.assertTree("1 - 2 - 3", "(- (- 1 2) 3)")
        self.assertTree("8 / 4 / 2", "(/ (/ 8 4) 2)")
        self.assertTree("9 % 5 * 2", "(* (mod 9 5) 2)")

    def test_power_is_right_associative(self):
        self.assertTree("2 ^ 3 ^ 2", "(expt 2 (expt 3 2))")

    def test_parentheses_override_precedence(self):
        self.assertTree("(2 + 3) * 4", "(* (+ 2 3) 4)")
        self.assertTree("((((1))))", "1")

    def test_unary_absorbs_power_chain(self):
        self.assertTree("-2 ^ 2", "(- (expt 2 2))")
        self.assertTree("-2 ^ 3 ^ 2", "(- (expt 2 (expt 3 2)))")

    def test_unary_binds_tighter_than_factor(self):
        self.assertTree("-2 * 3", "(* (- 2) 3)")
        self.assertTree("-7 % 3", "(mod (- 7) 3)")
        self.assertTree("- - 1", "(- (- 1))")

    def test_unary_plus_is_kept(self):
        tree = parse_string("+5")
        self.assertIsInstance(tree, UnaryOp)
        self.assertEqual(tree.op, TokenType.PLUS)

    def test_unary_in_exponent(self):
        self.assertTree("2 ^ -1", "(expt 2 (- 1))")

    def test_minus_without_spaces(self):
        self.assertTree("3-4", "(- 3 4)")
        self.assertTree("3--4", "(- 3 (- 4))")

    def test_spans(self):
        tree = parse_string("1 + -23")
        self.assertIsInstance(tree, BinaryOp)
        self.assertEqual((tree.start, tree.end), (0, 6))
        self.assertEqual((tree.left.start, tree.left.end), (0, 0))
        self.assertEqual((tree.right.start, tree.right.end), (4, 6))
        self.assertEqual((tree.right.child.start, tree.right.child.end), (5, 6))

    def test_parenthesised_node_keeps_inner_span(self):
        tree = parse_string("(1 + 2) * 3")
        self.assertEqual((tree.left.start, tree.left.end), (1, 5))
        self.assertEqual((tree.start, tree.end), (1, 10))

    def test_node_metadata(self):
        tree = parse_string("1 + 2 * 3")
        self.assertEqual(tree.node_type, ASTNodeType.BINARY)
        self.assertEqual(tree.height, 3)
        self.assertEqual(len(tree.children()), 2)
        self.assertEqual(tree.right.children()[0].node_type, ASTNodeType.NUMBER)

    def test_empty_input_yields_no_tree(self):
        self.assertIsNone(parse_string(""))
        self.assertIsNone(parse_string("   "))


class TestParserErrors(unittest.TestCase):
    """Syntax errors."""

    def assertParseError(self, source, code, offset=None):
        with self.assertRaises(ParseError) as ctx:
            parse_string(source)
        self.assertEqual(ctx.exception.code, code, str(ctx.exception))
        if offset is not None:
            self.assertEqual(ctx.exception.offset, offset)
        self.assertEqual(ctx.exception.diagnostic.source, source)
        return ctx.exception

    def test_unclosed_parenthesis(self):
        self.assertParseError("(1 + 2", "P004", offset=6)

    def test_missing_operand(self):
        self.assertParseError("1 + ", "P010", offset=4)
        self.assertParseError("-", "P010")
        self.assertParseError("(", "P010")

    def test_invalid_prefix(self):
        self.assertParseError("* 2", "P001", offset=0)
        self.assertParseError("1 + * 2", "P001", offset=4)
        self.assertParseError(")", "P001")

    def test_empty_parentheses(self):
        self.assertParseError("()", "P005", offset=0)
        self.assertParseError("2 * ()", "P005", offset=4)

    def test_unmatched_close(self):
        self.assertParseError("1 + 2)", "P012", offset=5)

    def test_trailing_tokens(self):
        self.assertParseError("3 4", "P002", offset=2)
        self.assertParseError("2 (3)", "P002", offset=2)

    def test_error_carries_token(self):
        error = self.assertParseError("1 2", "P002")
        self.assertEqual(error.token.type, TokenType.NUMBER)

    def test_deep_parentheses_rejected(self):
        source = "(" * 300 + "1" + ")" * 300
        self.assertParseError(source, "P013")

    def test_long_flat_chain_is_not_nesting(self):
        source = "1" + " + 1" * 999
        tree = parse_string(source)
        self.assertEqual(tree.height, 1000)
        self.assertEqual((tree.start, tree.end), (0, len(source) - 1))

    def test_right_nested_chains_count_as_nesting(self):
        self.assertParseError("2" + " ^ 2" * 300, "P013")
        self.assertParseError("-" * 300 + "1", "P013")

    def test_custom_depth_limit(self):
        config = CalcConfig(max_depth=3)
        self.assertIsNotNone(parse_string("1 + 1 + 1 + 1 + 1", config))
        self.assertIsNotNone(parse_string("((1))", config))
        self.assertIsNotNone(parse_string("--1", config))
        with self.assertRaises(ParseError):
            parse_string("(((1)))", config)
        with self.assertRaises(ParseError):
            parse_string("---1", config)

    def test_depth_limit_is_capped(self):
        with self.assertRaises(ValueError):
            Parser(tokenize("1"), max_depth=MAX_DEPTH_LIMIT + 1)
        with self.assertRaises(ValueError):
            Parser(tokenize("1"), max_depth=0)

    def test_nesting_at_the_highest_limit(self):
        config = CalcConfig(max_depth=MAX_DEPTH_LIMIT)
        levels = MAX_DEPTH_LIMIT - 1
        self.assertEqual(parse_string("(" * levels + "1" + ")" * levels, config),
                         NumberLiteral(1.0, levels, levels))
        with self.assertRaises(ParseError) as ctx:
            parse_string("(" * 3000 + "1" + ")" * 3000, config)
        self.assertEqual(ctx.exception.code, "P013")

    def test_parser_requires_end_token(self):
        tokens = tokenize("1")[:-1]
        with self.assertRaises(ValueError):
            Parser(tokens)


if __name__ == "__main__":
    unittest.main()
