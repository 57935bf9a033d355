"""Shared test helpers for the apexfmt test suite."""

from __future__ import annotations

from apexfmt.ast_nodes import MODIFIER_KEYWORDS, Node, NodeKind
from apexfmt.comments import Comment, CommentMap, Placement
from apexfmt.config import FormatConfig
from apexfmt.formatter import ApexFormatter
from apexfmt.source import Span

_KEYWORD_MODIFIERS = {keyword: kind for kind, keyword in MODIFIER_KEYWORDS.items()}


def node(kind: NodeKind | str, **fields: object) -> Node:
    return Node(kind, Span("<test>", 0, 1, 1, 1), fields)


def ident(name: str) -> Node:
    return node(NodeKind.IDENTIFIER, value=name)


def var(*names: str, receiver: Node | None = None, safe: bool = False) -> Node:
    return node(
        NodeKind.VARIABLE_EXPR,
        dottedExpr=receiver,
        names=tuple(ident(n) for n in names),
        isSafeNav=safe,
    )


def call(
    *names: str,
    args: tuple[Node, ...] = (),
    receiver: Node | None = None,
    safe: bool = False,
) -> Node:
    return node(
        NodeKind.METHOD_CALL_EXPR,
        dottedExpr=receiver,
        names=tuple(ident(n) for n in names),
        inputParameters=tuple(args),
        isSafeNav=safe,
    )


def binary(left: Node, op: str, right: Node, *, parens: bool = False) -> Node:
    return node(NodeKind.BINARY_EXPR, left=left, op=op, right=right, insideParenthesis=parens)


def boolean(left: Node, op: str, right: Node, *, parens: bool = False) -> Node:
    return node(NodeKind.BOOLEAN_EXPR, left=left, op=op, right=right, insideParenthesis=parens)


def literal(literal_type: str, value: object = None) -> Node:
    return node(NodeKind.LITERAL_EXPR, type=literal_type, literal=value)


def integer(value: int) -> Node:
    return literal("INTEGER", value)


def array(expr: Node, index: Node) -> Node:
    return node(NodeKind.ARRAY_EXPR, expr=expr, index=index)


def soql(raw: str) -> Node:
    return node(NodeKind.SOQL_EXPR, rawQuery=raw)


def class_type(*names: str) -> Node:
    return node(NodeKind.CLASS_TYPE_REF, names=tuple(ident(n) for n in names), typeArguments=())


def modifiers(*keywords: str) -> tuple[Node, ...]:
    return tuple(node(_KEYWORD_MODIFIERS[k]) for k in keywords)


def stmt(expr: Node) -> Node:
    return node(NodeKind.EXPRESSION_STMNT, expr=expr)


def var_decl(type_name: str, name: str, value: Node | None = None) -> Node:
    """``Type name = value;`` as a variable declaration statement."""
    decl = node(NodeKind.VARIABLE_DECL, name=ident(name), assignment=value)
    decls = node(
        NodeKind.VARIABLE_DECLS,
        modifiers=(),
        type=class_type(type_name),
        decls=(decl,),
    )
    return node(NodeKind.VARIABLE_DECL_STMNT, variableDecls=decls)


def comments(*entries: tuple[Node, str, str]) -> CommentMap:
    """Build a CommentMap from (node, text, placement) triples."""
    attachments: dict[Node, list[Comment]] = {}
    for target, text, placement in entries:
        attachments.setdefault(target, []).append(Comment(text, Placement(placement)))
    return CommentMap(attachments)


def fmt(root: Node, width: int = 80, comment_map: CommentMap | None = None, **options: object) -> str:
    """Format a tree with the given print width and options."""
    config = FormatConfig(print_width=width, **options)
    return ApexFormatter(config).format(root, comment_map)


def _j_ident(name: str) -> dict:
    return {"@class": NodeKind.IDENTIFIER.value, "value": name}


def _j_call(name: str, receiver: dict | None) -> dict:
    return {
        "@class": NodeKind.METHOD_CALL_EXPR.value,
        "dottedExpr": {"value": receiver} if receiver is not None else {},
        "isSafeNav": False,
        "names": [_j_ident(name)],
        "inputParameters": [],
    }


def chain_json() -> dict:
    """Parser output for the statement ``a().b().c();``."""
    chain = _j_call("c", _j_call("b", _j_call("a", None)))
    return {
        "apex.jorje.semantic.compiler.parser.ParserOutput": {
            "parseErrors": [],
            "unit": {
                "@class": NodeKind.EXPRESSION_STMNT.value,
                "loc": {"startIndex": 0, "endIndex": 12, "line": 1, "column": 1},
                "expr": chain,
            },
        }
    }
