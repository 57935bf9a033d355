"""Layout of binary and boolean operator chains.

The naive recursive layout nests one indentation level per operand. Here a
chain of operators sharing one precedence is emitted without inner groups,
so that when it breaks every operand lands on its own line at the same
indentation:

    Boolean result =
      first &&
      second &&
      third;

Operands of a different precedence keep their own groups.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from apexfmt.ast_nodes import Node, NodeKind, is_binaryish
from apexfmt.comments import has_trailing_end_of_line_comment
from apexfmt.doc import HARDLINE, LINE, Doc, concat, group, indent, text
from apexfmt.errors import MalformedNodeError

if TYPE_CHECKING:
    from apexfmt.context import PrintContext

# Operator precedence table (higher binds tighter)
PRECEDENCE: dict[str, int] = {
    "??": 0,
    "||": 1,
    "&&": 2,
    "|": 3,
    "^": 4,
    "&": 5,
    "==": 6, "===": 6, "!=": 6, "!==": 6, "<>": 6,
    "<": 7, ">": 7, "<=": 7, ">=": 7,
    "<<": 8, ">>": 8, ">>>": 8,
    "+": 9, "-": 9,
    "*": 10, "/": 10, "%": 10,
}

# Parser enum names, per node kind
BINARY_OPERATORS: dict[str, str] = {
    "ADDITION": "+",
    "SUBTRACTION": "-",
    "MULTIPLICATION": "*",
    "DIVISION": "/",
    "MODULO": "%",
    "LEFT_SHIFT": "<<",
    "RIGHT_SHIFT_SIGNED": ">>",
    "RIGHT_SHIFT_UNSIGNED": ">>>",
    "XOR": "^",
    "AND": "&",
    "OR": "|",
    "NULL_COALESCING": "??",
}

BOOLEAN_OPERATORS: dict[str, str] = {
    "DOUBLE_EQUAL": "==",
    "TRIPLE_EQUAL": "===",
    "NOT_EQUAL": "!=",
    "ALT_NOT_EQUAL": "<>",
    "NOT_TRIPLE_EQUAL": "!==",
    "LESS_THAN": "<",
    "GREATER_THAN": ">",
    "LESS_THAN_EQUAL": "<=",
    "GREATER_THAN_EQUAL": ">=",
    "AND": "&&",
    "OR": "||",
}


def operator_symbol(node: Node) -> str:
    op = node.require("op")
    table = BOOLEAN_OPERATORS if node.kind is NodeKind.BOOLEAN_EXPR else BINARY_OPERATORS
    if isinstance(op, str):
        if op in PRECEDENCE:
            return op
        if op in table:
            return table[op]
    raise MalformedNodeError(
        f"{node.short_tag} has unknown operator {op!r}",
        span=node.span,
        tag=node.tag,
    )


def precedence(node: Node) -> int:
    return PRECEDENCE[operator_symbol(node)]


def print_binaryish(ctx: PrintContext) -> Doc:
    # Walk down the left spine first; long chains like a + b + c + ... are
    # left-deep and would otherwise recurse once per operand.
    spine = [ctx]
    while is_binaryish(spine[-1].node.get("left")):
        spine.append(spine[-1].child("left"))

    doc = spine[-1].print_child("left")
    for frame in reversed(spine[1:]):
        doc = frame.decorate(_layout(frame, doc))
    return _layout(ctx, doc)


def _layout(ctx: PrintContext, left_doc: Doc) -> Doc:
    node = ctx.node
    left = node.require("left")
    node.require("right")
    parent = ctx.parent

    node_precedence = precedence(node)
    is_left_binaryish = is_binaryish(left)
    is_right_binaryish = is_binaryish(node.get("right"))
    is_nested = is_binaryish(parent)
    is_nested_right = is_nested and ctx.field_name == "right"

    same_as_left = is_left_binaryish and node_precedence == precedence(left)
    same_as_parent = is_nested and node_precedence == precedence(parent)

    op_doc = text(operator_symbol(node))
    right_doc = ctx.print_child("right")
    chain = concat(left_doc, " ", op_doc, LINE, right_doc)
    # Parenthesised chains continue one level past the opening parenthesis:
    #   (first &&
    #     second &&
    #     third)
    parenthesised = bool(node.get("insideParenthesis"))

    # Left child of a same-precedence parent: share the parent's indentation.
    #   a = b >
    #     c >   <- the (b > c) node
    #     d
    if (same_as_left or not is_left_binaryish) and same_as_parent and not is_nested_right:
        return indent(chain) if parenthesised else chain

    # Both operands are chains of one precedence:
    #   a = b > 1 &&
    #     c > 1
    if (
        is_left_binaryish
        and is_right_binaryish
        and precedence(left) == precedence(node.get("right"))
    ):
        return chain

    # Topmost node of a same-precedence chain.
    if same_as_left and not is_nested:
        return indent(chain) if parenthesised else chain

    # The left operand needs its own group but the rest continues the
    # parent's chain:
    #   a = b > c && d && e   <- the (b > c && d) node
    if same_as_parent and not is_nested_right:
        return concat(group(left_doc), " ", op_doc, LINE, right_doc)

    # Not part of a chain: group both sides separately.
    #   a = b
    #     .c() > d
    # An end-of-line comment after the left operand must stay there, so the
    # right operand always starts a new line.
    if has_trailing_end_of_line_comment(left, ctx.comments):
        rest = group(op_doc, HARDLINE, right_doc)
    else:
        rest = group(op_doc, LINE, right_doc)
    return group(group(left_doc), " ", rest)
