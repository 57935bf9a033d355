"""Tests for comment placement around printed nodes."""

from __future__ import annotations

from apexfmt.ast_nodes import NodeKind
from apexfmt.comments import (
    EMPTY_COMMENTS,
    Comment,
    CommentMap,
    Placement,
    has_trailing_end_of_line_comment,
)
from tests.helpers import binary, call, comments, fmt, node, stmt, var


class TestPlacement:
    def test_leading(self):
        tree = stmt(call("foo"))
        result = fmt(tree, comment_map=comments((tree, "// first", "leading")))
        assert result == "// first\nfoo();\n"

    def test_own_line(self):
        tree = stmt(call("foo"))
        result = fmt(tree, comment_map=comments((tree, "// after", "ownLine")))
        assert result == "foo();\n// after\n"

    def test_end_of_line(self):
        tree = stmt(call("foo"))
        result = fmt(tree, comment_map=comments((tree, "// done", "endOfLine")))
        assert result == "foo(); // done\n"

    def test_trailing_block_comment_stays_inline(self):
        left = var("a")
        tree = stmt(binary(left, "+", var("b")))
        result = fmt(tree, comment_map=comments((left, "/* x */", "trailing")))
        assert result == "a /* x */ + b;\n"

    def test_trailing_line_comment_acts_as_end_of_line(self):
        left = var("a")
        tree = stmt(binary(left, "+", var("b")))
        result = fmt(tree, comment_map=comments((left, "// x", "trailing")))
        assert result == "a + // x\nb;\n"

    def test_block_comment_continuation_lines_are_aligned(self):
        tree = stmt(call("foo"))
        doc = "/**\n      * Does foo.\n      */"
        result = fmt(tree, comment_map=comments((tree, doc, "leading")))
        assert result == "/**\n * Does foo.\n */\nfoo();\n"

    def test_comments_inside_a_block(self):
        first = stmt(call("first"))
        second = stmt(call("second"))
        block = node(NodeKind.BLOCK_STMNT, stmnts=(first, second))
        comment_map = comments((second, "// then", "leading"), (first, "// start", "endOfLine"))
        assert fmt(block, comment_map=comment_map) == (
            "{\n"
            "  first(); // start\n"
            "  // then\n"
            "  second();\n"
            "}\n"
        )


class TestCommentMap:
    def test_lookup_is_by_identity(self):
        a, b = var("x"), var("x")
        comment_map = CommentMap({a: [Comment("// a", Placement.LEADING)]})
        assert a in comment_map
        assert b not in comment_map
        assert comment_map.comments_for(b) == ()
        assert len(comment_map) == 1

    def test_nodes_without_comments_are_dropped(self):
        comment_map = CommentMap({var("x"): []})
        assert len(comment_map) == 0
        assert len(EMPTY_COMMENTS) == 0

    def test_end_of_line_detection(self):
        target = var("a")
        assert has_trailing_end_of_line_comment(target, comments((target, "// x", "endOfLine")))
        assert has_trailing_end_of_line_comment(target, comments((target, "// x", "trailing")))
        assert not has_trailing_end_of_line_comment(target, comments((target, "/* x */", "trailing")))
        assert not has_trailing_end_of_line_comment(target, comments((target, "// x", "leading")))
        assert not has_trailing_end_of_line_comment(None, EMPTY_COMMENTS)
