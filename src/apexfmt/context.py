"""Traversal context handed to every printer function.

Nodes do not know their parents, so the printer threads a chain of contexts
down the tree instead: each context holds its node, the context it was
reached from and the field name it was reached through.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from apexfmt.ast_nodes import Node
from apexfmt.doc import Doc
from apexfmt.errors import MalformedNodeError

if TYPE_CHECKING:
    from apexfmt.comments import CommentMap
    from apexfmt.config import FormatConfig
    from apexfmt.printer import Printer


@dataclass(frozen=True)
class PrintContext:
    node: Node
    printer: Printer
    parent_context: PrintContext | None = None
    field_name: str | None = None

    @property
    def config(self) -> FormatConfig:
        return self.printer.config

    @property
    def comments(self) -> CommentMap:
        return self.printer.comments

    @property
    def parent(self) -> Node | None:
        return self.ancestor(0)

    @property
    def grandparent(self) -> Node | None:
        return self.ancestor(1)

    @property
    def parent_field_name(self) -> str | None:
        """The field name under which the parent was reached."""
        if self.parent_context is None:
            return None
        return self.parent_context.field_name

    def ancestor(self, level: int) -> Node | None:
        """``ancestor(0)`` is the parent, ``ancestor(1)`` the grandparent..."""
        ctx = self.parent_context
        for _ in range(level):
            if ctx is None:
                return None
            ctx = ctx.parent_context
        return ctx.node if ctx is not None else None

    def child(self, name: str, index: int | None = None) -> PrintContext:
        value = self.node.require(name)
        if index is not None:
            value = value[index]
        if not isinstance(value, Node):
            raise MalformedNodeError(
                f"{self.node.short_tag}.{name} must be a node, got {type(value).__name__}",
                span=self.node.span,
                tag=self.node.tag,
            )
        return PrintContext(value, self.printer, self, name)

    def print_child(self, name: str) -> Doc:
        return self.printer.print_node(self.child(name))

    def print_children(self, name: str) -> list[Doc]:
        """Print every node in a list field; an absent field prints nothing."""
        values = self.node.get(name, ())
        if not isinstance(values, tuple):
            return [self.print_child(name)]
        return [self.printer.print_node(self.child(name, i)) for i in range(len(values))]

    def decorate(self, doc: Doc) -> Doc:
        return self.printer.decorate(self, doc)
