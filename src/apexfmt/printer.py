"""Node printers and the table that dispatches to them.

Every printer takes a ``PrintContext`` and returns a ``Doc``. The printer for
a node kind is looked up in ``_PRINTERS``; binary chains and dotted
expressions have their own modules.
"""

from __future__ import annotations

from typing import Callable

from apexfmt import binary, method_chain
from apexfmt.ast_nodes import MODIFIER_KEYWORDS, Node, NodeKind, is_binaryish, is_kind
from apexfmt.comments import EMPTY_COMMENTS, CommentMap, print_comments
from apexfmt.config import FormatConfig
from apexfmt.context import PrintContext
from apexfmt.doc import (
    EMPTY,
    HARDLINE,
    LINE,
    SOFTLINE,
    Doc,
    concat,
    group,
    indent,
    join,
    text,
)
from apexfmt.errors import DispatchError, MalformedNodeError

PrinterFn = Callable[[PrintContext], Doc]


class Printer:
    """Turn a node tree into a ``Doc``."""

    def __init__(self, config: FormatConfig, comments: CommentMap = EMPTY_COMMENTS) -> None:
        self.config = config
        self.comments = comments

    # ── Public API ─────────────────────────────────────────────

    def print(self, root: Node) -> Doc:
        return self.print_node(PrintContext(root, self))

    def print_node(self, ctx: PrintContext) -> Doc:
        node = ctx.node
        printer = _PRINTERS.get(node.kind) if isinstance(node.kind, NodeKind) else None
        if printer is None:
            raise DispatchError(
                f"no printer for node tag {node.tag!r}",
                span=node.span,
                tag=node.tag,
            )
        return self.decorate(ctx, printer(ctx))

    def decorate(self, ctx: PrintContext, doc: Doc) -> Doc:
        """Apply parentheses and attached comments to a printed node."""
        if ctx.node.get("insideParenthesis"):
            doc = concat("(", doc, ")")
        return print_comments(ctx.node, doc, self.comments)


# ── Helpers ──────────────────────────────────────────────────────


def _modifiers(ctx: PrintContext) -> Doc:
    """Modifier keywords followed by a space, or nothing."""
    docs = ctx.print_children("modifiers")
    if not docs:
        return EMPTY
    return concat(join(" ", docs), " ")


def _block(docs: list[Doc]) -> Doc:
    if not docs:
        return text("{}")
    return concat("{", indent(HARDLINE, join(HARDLINE, docs)), HARDLINE, "}")


def _assigned(ctx: PrintContext, operator: str, field: str) -> Doc:
    # A binary chain moves to its own line as a whole rather than breaking
    # after its first operand:
    #   Integer total =
    #     first +
    #     second;
    value = ctx.print_child(field)
    if is_binaryish(ctx.node.get(field)):
        return concat(" ", operator, group(indent(LINE, value)))
    return concat(" ", operator, " ", value)


def _enum_value(ctx: PrintContext, name: str, table: dict[str, str]) -> str:
    value = ctx.node.require(name)
    if value not in table:
        raise MalformedNodeError(
            f"{ctx.node.short_tag} has unknown {name} {value!r}",
            span=ctx.node.span,
            tag=ctx.node.tag,
            notes=[f"expected one of: {', '.join(table)}"],
        )
    return table[value]


# ── Declarations ─────────────────────────────────────────────────


def _print_class_decl_unit(ctx: PrintContext) -> Doc:
    return ctx.print_child("body")


def _print_class_decl(ctx: PrintContext) -> Doc:
    header: list[Doc | str] = [_modifiers(ctx), "class ", ctx.print_child("name")]
    if ctx.node.get("superClass") is not None:
        header.extend([" extends ", ctx.print_child("superClass")])
    interfaces = ctx.print_children("interfaces")
    if interfaces:
        header.extend([" implements ", join(", ", interfaces)])

    members = ctx.node.get("members", ())
    if not members:
        return concat(*header, " {}")

    body: list[Doc | str] = []
    for i, doc in enumerate(ctx.print_children("members")):
        if i > 0:
            body.append(HARDLINE)
            # Blank line around methods
            if is_kind(members[i], NodeKind.METHOD_MEMBER) or is_kind(
                members[i - 1], NodeKind.METHOD_MEMBER
            ):
                body.append(HARDLINE)
        body.append(doc)
    return concat(*header, " {", indent(HARDLINE, *body), HARDLINE, "}")


def _print_modifier(ctx: PrintContext) -> Doc:
    return text(MODIFIER_KEYWORDS[ctx.node.kind])


def _print_stmnt_block_member(ctx: PrintContext) -> Doc:
    return ctx.print_child("stmnt")


def _print_field_member(ctx: PrintContext) -> Doc:
    return concat(ctx.print_child("variableDecls"), ";")


def _print_method_member(ctx: PrintContext) -> Doc:
    return ctx.print_child("methodDecl")


def _print_method_decl(ctx: PrintContext) -> Doc:
    return_type = ctx.print_child("type") if ctx.node.get("type") is not None else text("void")
    params = method_chain.argument_list(ctx.print_children("parameters"))
    signature = concat(
        _modifiers(ctx),
        return_type,
        " ",
        ctx.print_child("name"),
        group("(", indent(params), ")"),
    )
    if ctx.node.get("stmnt") is None:
        return concat(signature, ";")
    return concat(signature, " ", ctx.print_child("stmnt"))


def _print_parameter_ref(ctx: PrintContext) -> Doc:
    return concat(_modifiers(ctx), ctx.print_child("typeRef"), " ", ctx.print_child("name"))


# ── Statements ───────────────────────────────────────────────────


def _print_block_stmnt(ctx: PrintContext) -> Doc:
    return _block(ctx.print_children("stmnts"))


def _print_expression_stmnt(ctx: PrintContext) -> Doc:
    return group(ctx.print_child("expr"), ";")


def _print_return_stmnt(ctx: PrintContext) -> Doc:
    if ctx.node.get("expr") is None:
        return text("return;")
    expr = ctx.print_child("expr")
    if is_binaryish(ctx.node.get("expr")):
        return concat("return ", group(indent(expr)), ";")
    return concat("return ", expr, ";")


def _print_variable_decl_stmnt(ctx: PrintContext) -> Doc:
    return concat(ctx.print_child("variableDecls"), ";")


def _print_variable_decls(ctx: PrintContext) -> Doc:
    return concat(
        _modifiers(ctx),
        ctx.print_child("type"),
        " ",
        join(", ", ctx.print_children("decls")),
    )


def _print_variable_decl(ctx: PrintContext) -> Doc:
    name = ctx.print_child("name")
    if ctx.node.get("assignment") is None:
        return name
    return concat(name, _assigned(ctx, "=", "assignment"))


# ── Expressions ──────────────────────────────────────────────────

ASSIGNMENT_OPERATORS: dict[str, str] = {
    "EQUALS": "=",
    "ADDITION_EQUALS": "+=",
    "SUBTRACTION_EQUALS": "-=",
    "MULTIPLICATION_EQUALS": "*=",
    "DIVISION_EQUALS": "/=",
    "AND_EQUALS": "&=",
    "OR_EQUALS": "|=",
    "XOR_EQUALS": "^=",
    "LEFT_SHIFT_EQUALS": "<<=",
    "RIGHT_SHIFT_SIGNED_EQUALS": ">>=",
    "RIGHT_SHIFT_UNSIGNED_EQUALS": ">>>=",
}

PREFIX_OPERATORS: dict[str, str] = {
    "NOT": "!",
    "NEGATE": "-",
    "POSITIVE": "+",
    "INC": "++",
    "DEC": "--",
    "BITWISE_COMPLEMENT": "~",
}

POSTFIX_OPERATORS: dict[str, str] = {
    "INC": "++",
    "DEC": "--",
}

_KEYWORD_LITERALS = {"TRUE": "true", "FALSE": "false", "NULL": "null"}
_NUMBER_SUFFIXES = {"INTEGER": "", "DECIMAL": "", "LONG": "L", "DOUBLE": "d"}
_STRING_ESCAPES = str.maketrans({"\\": "\\\\", "'": "\\'", "\n": "\\n", "\r": "\\r", "\t": "\\t"})


def _print_assignment_expr(ctx: PrintContext) -> Doc:
    operator = _enum_value(ctx, "op", ASSIGNMENT_OPERATORS)
    return concat(ctx.print_child("left"), _assigned(ctx, operator, "right"))


def _print_prefix_expr(ctx: PrintContext) -> Doc:
    return concat(_enum_value(ctx, "op", PREFIX_OPERATORS), ctx.print_child("expr"))


def _print_postfix_expr(ctx: PrintContext) -> Doc:
    return concat(ctx.print_child("expr"), _enum_value(ctx, "op", POSTFIX_OPERATORS))


def _print_ternary_expr(ctx: PrintContext) -> Doc:
    return group(
        ctx.print_child("condition"),
        indent(
            LINE, "? ", ctx.print_child("trueExpr"),
            LINE, ": ", ctx.print_child("falseExpr"),
        ),
    )


def _print_literal_expr(ctx: PrintContext) -> Doc:
    node = ctx.node
    literal_type = node.require("type")
    if literal_type in _KEYWORD_LITERALS:
        return text(_KEYWORD_LITERALS[literal_type])
    value = node.require("literal")
    if literal_type == "STRING":
        return text("'" + str(value).translate(_STRING_ESCAPES) + "'")
    if literal_type in _NUMBER_SUFFIXES:
        return text(f"{value}{_NUMBER_SUFFIXES[literal_type]}")
    raise MalformedNodeError(
        f"{node.short_tag} has unknown literal type {literal_type!r}",
        span=node.span,
        tag=node.tag,
    )


def _print_this(ctx: PrintContext) -> Doc:
    return text("this")


def _print_super(ctx: PrintContext) -> Doc:
    return text("super")


def _normalize_query(raw: str) -> str:
    """Collapse runs of whitespace outside single-quoted string literals."""
    out: list[str] = []
    quoted = False
    pending_space = False
    i = 0
    while i < len(raw):
        ch = raw[i]
        if quoted:
            out.append(ch)
            if ch == "\\" and i + 1 < len(raw):
                i += 1
                out.append(raw[i])
            elif ch == "'":
                quoted = False
        elif ch.isspace():
            pending_space = bool(out)
        else:
            if pending_space:
                out.append(" ")
                pending_space = False
            out.append(ch)
            quoted = ch == "'"
        i += 1
    return "".join(out)


def _print_soql_expr(ctx: PrintContext) -> Doc:
    query = _normalize_query(str(ctx.node.require("rawQuery")))
    if query.startswith("[") and query.endswith("]"):
        query = query[1:-1].strip()
    return group("[", indent(SOFTLINE, query), SOFTLINE, "]")


# ── Names and types ──────────────────────────────────────────────


def _print_identifier(ctx: PrintContext) -> Doc:
    return text(str(ctx.node.require("value")))


def _print_class_type_ref(ctx: PrintContext) -> Doc:
    name = join(".", ctx.print_children("names"))
    arguments = ctx.print_children("typeArguments")
    if not arguments:
        return name
    return concat(name, "<", join(", ", arguments), ">")


def _print_array_type_ref(ctx: PrintContext) -> Doc:
    return concat(ctx.print_child("heldType"), "[]")


_PRINTERS: dict[NodeKind, PrinterFn] = {
    NodeKind.CLASS_DECL_UNIT: _print_class_decl_unit,
    NodeKind.CLASS_DECL: _print_class_decl,
    NodeKind.STMNT_BLOCK_MEMBER: _print_stmnt_block_member,
    NodeKind.FIELD_MEMBER: _print_field_member,
    NodeKind.METHOD_MEMBER: _print_method_member,
    NodeKind.METHOD_DECL: _print_method_decl,
    NodeKind.PARAMETER_REF: _print_parameter_ref,
    **{kind: _print_modifier for kind in MODIFIER_KEYWORDS},
    NodeKind.BLOCK_STMNT: _print_block_stmnt,
    NodeKind.EXPRESSION_STMNT: _print_expression_stmnt,
    NodeKind.RETURN_STMNT: _print_return_stmnt,
    NodeKind.VARIABLE_DECL_STMNT: _print_variable_decl_stmnt,
    NodeKind.VARIABLE_DECLS: _print_variable_decls,
    NodeKind.VARIABLE_DECL: _print_variable_decl,
    NodeKind.METHOD_CALL_EXPR: method_chain.print_dotted,
    NodeKind.VARIABLE_EXPR: method_chain.print_dotted,
    NodeKind.ARRAY_EXPR: method_chain.print_array_expr,
    NodeKind.THIS_VARIABLE_EXPR: _print_this,
    NodeKind.SUPER_VARIABLE_EXPR: _print_super,
    NodeKind.SOQL_EXPR: _print_soql_expr,
    NodeKind.LITERAL_EXPR: _print_literal_expr,
    NodeKind.BINARY_EXPR: binary.print_binaryish,
    NodeKind.BOOLEAN_EXPR: binary.print_binaryish,
    NodeKind.ASSIGNMENT_EXPR: _print_assignment_expr,
    NodeKind.PREFIX_EXPR: _print_prefix_expr,
    NodeKind.POSTFIX_EXPR: _print_postfix_expr,
    NodeKind.TERNARY_EXPR: _print_ternary_expr,
    NodeKind.IDENTIFIER: _print_identifier,
    NodeKind.CLASS_TYPE_REF: _print_class_type_ref,
    NodeKind.ARRAY_TYPE_REF: _print_array_type_ref,
}

_missing = [kind.name for kind in NodeKind if kind not in _PRINTERS]
if _missing:
    raise RuntimeError(f"no printer registered for: {', '.join(_missing)}")
