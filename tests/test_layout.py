"""Tests for the layout engine."""

from __future__ import annotations

from apexfmt.doc import (
    BREAK_PARENT,
    EMPTY,
    HARDLINE,
    LINE,
    SOFTLINE,
    concat,
    dedent,
    group,
    indent,
    line_suffix,
)
from apexfmt.layout import flat_width, render


class TestGroups:
    def test_group_that_fits_stays_flat(self):
        assert render(group("a", LINE, "b"), 80, 2) == "a b"

    def test_group_that_does_not_fit_breaks(self):
        assert render(group("aaaa", LINE, "bbbb"), 5, 2) == "aaaa\nbbbb"

    def test_softline_is_empty_when_flat(self):
        doc = group("f(", indent(SOFTLINE, "x"), SOFTLINE, ")")
        assert render(doc, 80, 2) == "f(x)"
        assert render(doc, 3, 2) == "f(\n  x\n)"

    def test_width_is_measured_from_current_column(self):
        doc = concat("abc", group("d", LINE, "e"))
        assert render(doc, 5, 2) == "abcd\ne"

    def test_exact_fit_stays_flat(self):
        assert render(group("ab", LINE, "cd"), 5, 2) == "ab cd"

    def test_nested_group_is_decided_again(self):
        doc = group("aaaa", LINE, group("b", LINE, "c"))
        assert render(doc, 6, 2) == "aaaa\nb c"

    def test_hardline_breaks_every_enclosing_group(self):
        doc = group("a", LINE, group("b", HARDLINE, "c"))
        assert render(doc, 80, 2) == "a\nb\nc"

    def test_should_break_hint(self):
        assert render(group("a", LINE, "b", should_break=True), 80, 2) == "a\nb"

    def test_break_parent(self):
        assert render(group("a", LINE, "b", BREAK_PARENT), 80, 2) == "a\nb"

    def test_width_counts_code_points(self):
        assert render(group("ééééé", LINE, "x"), 7, 2) == "ééééé x"


class TestIndentation:
    def test_indent_applies_after_newlines(self):
        doc = concat("{", indent(HARDLINE, "x"), HARDLINE, "}")
        assert render(doc, 80, 2) == "{\n  x\n}"
        assert render(doc, 80, 4) == "{\n    x\n}"

    def test_dedent(self):
        doc = indent("a", HARDLINE, dedent("b", HARDLINE, "c"))
        assert render(doc, 80, 2) == "a\n  b\nc"

    def test_dedent_never_goes_negative(self):
        assert render(dedent("a", HARDLINE, "b"), 80, 2) == "a\nb"

    def test_tabs(self):
        doc = concat("{", indent(HARDLINE, "x"), HARDLINE, "}")
        assert render(doc, 80, 2, use_tabs=True) == "{\n\tx\n}"

    def test_trailing_whitespace_is_trimmed(self):
        doc = concat("a ", indent(HARDLINE, HARDLINE, "b"))
        assert render(doc, 80, 2) == "a\n\n  b"


class TestLineSuffix:
    def test_suffix_is_written_before_the_next_newline(self):
        doc = concat("a", line_suffix(" // c"), ";", HARDLINE, "b")
        assert render(doc, 80, 2) == "a; // c\nb"

    def test_suffix_is_flushed_at_end(self):
        assert render(concat("a", line_suffix(" // c")), 80, 2) == "a // c"

    def test_suffix_has_no_width(self):
        assert flat_width(concat("a", line_suffix(" // long comment"))) == 1


class TestFlatWidth:
    def test_widths(self):
        assert flat_width(concat("ab", LINE, "c")) == 4
        assert flat_width(concat("ab", SOFTLINE, "c")) == 3
        assert flat_width(EMPTY) == 0

    def test_forced_breaks_have_no_flat_width(self):
        assert flat_width(concat("a", HARDLINE)) is None
        assert flat_width(group("a", should_break=True)) is None
        assert flat_width(concat(BREAK_PARENT)) is None

    def test_empty_doc_renders_nothing(self):
        assert render(EMPTY, 80, 2) == ""

    def test_deeply_nested_document(self):
        doc = concat("x")
        for _ in range(5000):
            doc = group(indent(doc))
        assert render(doc, 80, 2) == "x"
