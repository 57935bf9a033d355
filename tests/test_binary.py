"""Tests for binary and boolean expression layout."""

from __future__ import annotations

import pytest

from apexfmt.ast_nodes import Node, NodeKind
from apexfmt.binary import operator_symbol, precedence
from apexfmt.errors import MalformedNodeError
from tests.helpers import binary, boolean, comments, fmt, integer, node, stmt, var, var_decl


class TestOperators:
    def test_parser_operator_names(self):
        assert operator_symbol(binary(var("a"), "ADDITION", var("b"))) == "+"
        assert operator_symbol(boolean(var("a"), "AND", var("b"))) == "&&"
        assert operator_symbol(binary(var("a"), "AND", var("b"))) == "&"
        assert operator_symbol(boolean(var("a"), "ALT_NOT_EQUAL", var("b"))) == "<>"

    def test_precedence_order(self):
        order = ["??", "||", "&&", "|", "^", "&", "==", "<", "<<", "+", "*"]
        levels = [precedence(binary(var("a"), op, var("b"))) for op in order]
        assert levels == sorted(levels)
        assert len(set(levels)) == len(levels)

    def test_unknown_operator(self):
        with pytest.raises(MalformedNodeError, match="unknown operator"):
            fmt(stmt(binary(var("a"), "EXPONENT", var("b"))))

    def test_missing_operand(self):
        broken = Node(NodeKind.BINARY_EXPR, None, {"left": var("a"), "op": "+"})
        with pytest.raises(MalformedNodeError, match="right"):
            fmt(stmt(broken))


class TestChains:
    def test_fits_on_one_line(self):
        tree = var_decl("Integer", "x", binary(var("a"), "+", var("b")))
        assert fmt(tree) == "Integer x = a + b;\n"

    def test_same_precedence_chain_breaks_one_operand_per_line(self):
        chain = binary(binary(var("first"), "+", var("second")), "+", var("third"))
        assert fmt(var_decl("Integer", "total", chain), width=20) == (
            "Integer total =\n"
            "  first +\n"
            "  second +\n"
            "  third;\n"
        )

    def test_boolean_chain(self):
        chain = boolean(boolean(var("a"), "AND", var("b")), "AND", var("c"))
        assert fmt(var_decl("Boolean", "ok", chain), width=12) == (
            "Boolean ok =\n"
            "  a &&\n"
            "  b &&\n"
            "  c;\n"
        )

    def test_right_hand_side_moves_as_a_whole(self):
        expr = binary(var("first"), "+", binary(var("second"), "*", var("third")))
        assert fmt(var_decl("Integer", "total", expr), width=30) == (
            "Integer total =\n"
            "  first + second * third;\n"
        )

    def test_higher_precedence_operand_stays_together(self):
        expr = binary(var("first"), "+", binary(var("second"), "*", var("third")))
        assert fmt(var_decl("Integer", "total", expr), width=16) == (
            "Integer total =\n"
            "  first +\n"
            "  second * third;\n"
        )

    def test_same_precedence_operands(self):
        expr = boolean(
            boolean(var("a"), ">", integer(1)),
            "&&",
            boolean(var("c"), ">", integer(1)),
        )
        assert fmt(var_decl("Boolean", "ok", expr), width=20) == (
            "Boolean ok =\n"
            "  a > 1 &&\n"
            "  c > 1;\n"
        )

    def test_comparison_heading_a_boolean_chain_stays_together(self):
        # (aaaa > bbbb && cccc) && dddd
        expr = boolean(
            boolean(boolean(var("aaaa"), ">", var("bbbb")), "&&", var("cccc")),
            "&&",
            var("dddd"),
        )
        assert fmt(var_decl("Boolean", "ok", expr), width=20) == (
            "Boolean ok =\n"
            "  aaaa > bbbb &&\n"
            "  cccc &&\n"
            "  dddd;\n"
        )
        assert fmt(node(NodeKind.RETURN_STMNT, expr=expr), width=20) == (
            "return aaaa > bbbb &&\n"
            "  cccc &&\n"
            "  dddd;\n"
        )

    def test_parenthesised_chain_is_indented(self):
        chain = boolean(
            boolean(var("first"), "&&", var("second")),
            "&&",
            var("third"),
            parens=True,
        )
        assert fmt(var_decl("Boolean", "ok", chain), width=20) == (
            "Boolean ok =\n"
            "  (first &&\n"
            "    second &&\n"
            "    third);\n"
        )

    def test_parentheses_are_kept(self):
        expr = binary(binary(var("a"), "+", var("b"), parens=True), "*", var("c"))
        assert fmt(stmt(expr)) == "(a + b) * c;\n"

    def test_long_chain(self):
        chain = var("a0")
        for i in range(1, 1500):
            chain = binary(chain, "+", var(f"a{i}"))
        lines = fmt(stmt(chain)).splitlines()
        assert len(lines) == 1500
        assert lines[0] == "a0 +"
        assert lines[-1] == "a1499;"


class TestEndOfLineComments:
    def test_comment_after_left_operand_forces_break(self):
        left = var("a")
        tree = stmt(binary(left, "+", var("b")))
        result = fmt(tree, comment_map=comments((left, "// note", "endOfLine")))
        assert result == "a + // note\nb;\n"

    def test_comment_is_stable_across_passes(self):
        left = var("a")
        tree = stmt(binary(left, "+", var("b")))
        comment_map = comments((left, "// note", "endOfLine"))
        assert fmt(tree, comment_map=comment_map) == fmt(tree, comment_map=comment_map)

    def test_no_comment_no_break(self):
        assert fmt(stmt(binary(var("a"), "+", var("b")))) == "a + b;\n"
