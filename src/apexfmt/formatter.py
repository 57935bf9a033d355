"""Pretty-printer for Apex syntax trees.

Takes a parsed tree (see ``apexfmt.loader``) and produces canonical source
text: the printers build a ``Doc`` and the layout engine fits it into the
configured width. Formatting is deterministic; the same tree and
configuration always give the same text.
"""

from __future__ import annotations

from pathlib import Path

from apexfmt.ast_nodes import Node
from apexfmt.comments import EMPTY_COMMENTS, CommentMap
from apexfmt.config import FormatConfig
from apexfmt.layout import render
from apexfmt.loader import load_file
from apexfmt.printer import Printer


class ApexFormatter:
    """Format an Apex syntax tree to canonical source text."""

    def __init__(self, config: FormatConfig | None = None) -> None:
        self.config = (config or FormatConfig()).validate()

    # ── Public API ─────────────────────────────────────────────

    def format(self, root: Node, comments: CommentMap | None = None) -> str:
        """Format a tree, with its attached comments, to source text."""
        doc = Printer(self.config, comments or EMPTY_COMMENTS).print(root)
        result = render(
            doc,
            self.config.print_width,
            self.config.indent_width,
            use_tabs=self.config.use_tabs,
            tab_width=self.config.tab_width,
        )
        return result.rstrip("\n") + "\n"

    def format_file(self, path: Path) -> str:
        """Load a JSON syntax tree from disk and format it."""
        root, comments = load_file(path)
        return self.format(root, comments)
