"""Layout of dotted expressions: method call chains, field access, indexing.

In ``a.b().c().d()`` the parser nests each call as the ``dottedExpr`` of the
next one, so ``d()`` is the root. Only the root of a chain opens a group;
every nested segment leaves its line breaks to that group, so a broken chain
puts each segment on its own line at one indentation:

    records.get(0)
      .toString()
      .trim();
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from apexfmt.ast_nodes import NodeKind, is_binaryish, is_kind
from apexfmt.doc import (
    EMPTY,
    LINE,
    SOFTLINE,
    Doc,
    concat,
    dedent,
    group,
    indent,
    join,
)
from apexfmt.errors import MalformedNodeError

if TYPE_CHECKING:
    from apexfmt.context import PrintContext

_SEGMENT_KINDS = (NodeKind.METHOD_CALL_EXPR, NodeKind.VARIABLE_EXPR)
_SHALLOW_RECEIVERS = (NodeKind.THIS_VARIABLE_EXPR, NodeKind.SUPER_VARIABLE_EXPR)


def argument_list(docs: list[Doc]) -> Doc:
    """Arguments separated by ``, `` that break one per line; ``()`` stays tight."""
    if not docs:
        return EMPTY
    return concat(SOFTLINE, join(concat(",", LINE), docs), dedent(SOFTLINE))


def is_nested_dotted_segment(ctx: PrintContext) -> bool:
    """Is this node an inner segment of a chain owned by an ancestor?"""
    if ctx.field_name == "dottedExpr":
        return True
    # a
    #   .b[0]  <- b is the expr of the array access, which is the dottedExpr
    #   .c()
    return (
        is_kind(ctx.node, *_SEGMENT_KINDS)
        and is_kind(ctx.parent, NodeKind.ARRAY_EXPR)
        and ctx.field_name == "expr"
        and ctx.parent_field_name == "dottedExpr"
    )


def _is_soql_receiver(receiver: object) -> bool:
    if is_kind(receiver, NodeKind.SOQL_EXPR):
        return True
    return is_kind(receiver, NodeKind.ARRAY_EXPR) and is_kind(
        receiver.get("expr"), NodeKind.SOQL_EXPR
    )


def _dot_may_break(ctx: PrintContext) -> bool:
    receiver = ctx.node.require("dottedExpr")
    # `super.` cannot be followed by whitespace; `this.` matches it.
    if is_kind(receiver, *_SHALLOW_RECEIVERS):
        return False
    if ctx.node.kind is not NodeKind.METHOD_CALL_EXPR:
        return True
    # A bare call heading the chain stays with its first segment: a().b()
    return not (
        is_kind(receiver, NodeKind.METHOD_CALL_EXPR)
        and receiver.get("dottedExpr") is None
        and len(receiver.get("names", ())) == 1
    )


def _dotted_prefix(ctx: PrintContext, receiver_doc: Doc | None) -> Doc:
    if receiver_doc is None:
        return EMPTY
    parts: list[Doc | str] = [receiver_doc]
    if _dot_may_break(ctx):
        parts.append(SOFTLINE)
    if ctx.node.get("isSafeNav"):
        parts.append("?")
    parts.append(".")
    return concat(*parts)


def _names(ctx: PrintContext) -> Doc:
    if not ctx.node.get("names"):
        raise MalformedNodeError(
            f"{ctx.node.short_tag} has no names",
            span=ctx.node.span,
            tag=ctx.node.tag,
        )
    return join(".", ctx.print_children("names"))


def print_index(array_ctx: PrintContext, with_group: bool) -> Doc:
    """The ``[index]`` part of an array access."""
    index_doc = array_ctx.print_child("index")
    if is_kind(array_ctx.node.get("index"), NodeKind.LITERAL_EXPR):
        return concat("[", index_doc, "]")
    parts = concat("[", SOFTLINE, index_doc, dedent(SOFTLINE), "]")
    return group(indent(parts)) if with_group else indent(parts)


def _deferred_index(ctx: PrintContext, with_group: bool) -> Doc:
    # In a()[b] the call is the child of the array access, but the brackets
    # are printed here so they indent with the chain rather than the outer
    # expression:
    #   a
    #     .b
    #     .c()[
    #       d.callMethod()
    #     ]
    if ctx.parent_context is None or ctx.field_name != "expr":
        return EMPTY
    if not is_kind(ctx.parent, NodeKind.ARRAY_EXPR):
        return EMPTY
    return print_index(ctx.parent_context, with_group)


def _is_ungrouped(ctx: PrintContext) -> bool:
    """Does this call leave grouping and indentation to its surroundings?"""
    receiver = ctx.node.get("dottedExpr")
    return (
        is_nested_dotted_segment(ctx)
        or (_is_soql_receiver(receiver) and is_binaryish(ctx.parent))
        # this.simpleMethod() is only one level deep
        or is_kind(receiver, *_SHALLOW_RECEIVERS)
    )


def _method_call_segment(ctx: PrintContext, receiver_doc: Doc | None) -> Doc:
    has_receiver = ctx.node.get("dottedExpr") is not None
    is_nested = is_nested_dotted_segment(ctx)

    dotted_doc = _dotted_prefix(ctx, receiver_doc)
    names_doc = _names(ctx)
    # Arguments are grouped one by one: a binary chain argument relies on
    # its parent for a group.
    params_doc = argument_list([group(d) for d in ctx.print_children("inputParameters")])
    index_doc = _deferred_index(ctx, with_group=is_nested or has_receiver)

    if _is_ungrouped(ctx):
        return concat(dotted_doc, names_doc, "(", group(indent(params_doc)), ")", index_doc)

    # Root of the chain. Without a receiver the names are grouped on their
    # own so that a.callMethod(...) breaks inside the parentheses; with one
    # they join the chain's group and break before each dot.
    return group(
        indent(
            dotted_doc,
            names_doc if has_receiver else group(names_doc),
            "(",
            group(indent(params_doc)) if has_receiver else group(params_doc),
            ")",
            index_doc,
        )
    )


def _variable_segment(ctx: PrintContext, receiver_doc: Doc | None) -> Doc:
    has_receiver = ctx.node.get("dottedExpr") is not None
    is_nested = is_nested_dotted_segment(ctx)
    parts = concat(
        _dotted_prefix(ctx, receiver_doc),
        _names(ctx),
        _deferred_index(ctx, with_group=is_nested or has_receiver),
    )
    if is_nested or has_receiver:
        return parts
    return group(indent(parts))


_SEGMENT_PRINTERS: dict[NodeKind, Callable[[PrintContext, Doc | None], Doc]] = {
    NodeKind.METHOD_CALL_EXPR: _method_call_segment,
    NodeKind.VARIABLE_EXPR: _variable_segment,
}


def _indents_chain(ctx: PrintContext) -> bool:
    return ctx.node.kind is NodeKind.METHOD_CALL_EXPR and not _is_ungrouped(ctx)


def print_dotted(ctx: PrintContext) -> Doc:
    """Print a method call or variable expression with its receiver chain."""
    # Collect the receiver spine iteratively; a chain of N calls is N levels
    # deep in the tree.
    spine = [ctx]
    while is_kind(spine[-1].node.get("dottedExpr"), *_SEGMENT_KINDS):
        spine.append(spine[-1].child("dottedExpr"))

    innermost = spine[-1]
    receiver_doc = None
    if innermost.node.get("dottedExpr") is not None:
        receiver_doc = innermost.print_child("dottedExpr")
        if _is_soql_receiver(innermost.node.get("dottedExpr")) and _indents_chain(ctx):
            # The query brackets stay at the statement's level, only the
            # segments are indented:
            #   [
            #     SELECT Id FROM Account
            #   ]
            #     .size()
            receiver_doc = dedent(receiver_doc)

    for frame in reversed(spine[1:]):
        segment = _SEGMENT_PRINTERS[frame.node.kind](frame, receiver_doc)
        receiver_doc = frame.decorate(segment)
    return _SEGMENT_PRINTERS[ctx.node.kind](ctx, receiver_doc)


def print_array_expr(ctx: PrintContext) -> Doc:
    expr = ctx.node.require("expr")
    # Calls and variables print the brackets themselves.
    if is_kind(expr, *_SEGMENT_KINDS):
        return ctx.print_child("expr")
    return concat(ctx.print_child("expr"), print_index(ctx, with_group=True))
