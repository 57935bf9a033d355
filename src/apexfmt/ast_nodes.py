"""AST node definitions for the Apex formatter.

Nodes mirror the jorje parser's output: every node is tagged with the
parser's class name and carries its fields by name. Nodes never point at
their parents; the printer tracks ancestry while it walks the tree.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Union

from apexfmt.errors import MalformedNodeError
from apexfmt.source import Span

_AST = "apex.jorje.data.ast."


class NodeKind(Enum):
    # ── Compilation units and declarations ─────────────────────
    CLASS_DECL_UNIT = _AST + "CompilationUnit$ClassDeclUnit"
    CLASS_DECL = _AST + "ClassDecl"
    STMNT_BLOCK_MEMBER = _AST + "BlockMember$StmntBlockMember"
    FIELD_MEMBER = _AST + "BlockMember$FieldMember"
    METHOD_MEMBER = _AST + "BlockMember$MethodMember"
    METHOD_DECL = _AST + "MethodDecl"
    PARAMETER_REF = _AST + "ParameterRef$EmptyModifierParameterRef"

    # ── Modifiers ──────────────────────────────────────────────
    PUBLIC_MODIFIER = _AST + "Modifier$PublicModifier"
    PRIVATE_MODIFIER = _AST + "Modifier$PrivateModifier"
    PROTECTED_MODIFIER = _AST + "Modifier$ProtectedModifier"
    GLOBAL_MODIFIER = _AST + "Modifier$GlobalModifier"
    STATIC_MODIFIER = _AST + "Modifier$StaticModifier"
    FINAL_MODIFIER = _AST + "Modifier$FinalModifier"
    VIRTUAL_MODIFIER = _AST + "Modifier$VirtualModifier"
    ABSTRACT_MODIFIER = _AST + "Modifier$AbstractModifier"
    OVERRIDE_MODIFIER = _AST + "Modifier$OverrideModifier"
    TRANSIENT_MODIFIER = _AST + "Modifier$TransientModifier"
    WITH_SHARING_MODIFIER = _AST + "Modifier$WithSharingModifier"
    WITHOUT_SHARING_MODIFIER = _AST + "Modifier$WithoutSharingModifier"

    # ── Statements ─────────────────────────────────────────────
    BLOCK_STMNT = _AST + "Stmnt$BlockStmnt"
    EXPRESSION_STMNT = _AST + "Stmnt$ExpressionStmnt"
    RETURN_STMNT = _AST + "Stmnt$ReturnStmnt"
    VARIABLE_DECL_STMNT = _AST + "Stmnt$VariableDeclStmnt"
    VARIABLE_DECLS = _AST + "VariableDecls"
    VARIABLE_DECL = _AST + "VariableDecl"

    # ── Expressions ────────────────────────────────────────────
    METHOD_CALL_EXPR = _AST + "Expr$MethodCallExpr"
    VARIABLE_EXPR = _AST + "Expr$VariableExpr"
    ARRAY_EXPR = _AST + "Expr$ArrayExpr"
    THIS_VARIABLE_EXPR = _AST + "Expr$ThisVariableExpr"
    SUPER_VARIABLE_EXPR = _AST + "Expr$SuperVariableExpr"
    SOQL_EXPR = _AST + "Expr$SoqlExpr"
    LITERAL_EXPR = _AST + "Expr$LiteralExpr"
    BINARY_EXPR = _AST + "Expr$BinaryExpr"
    BOOLEAN_EXPR = _AST + "Expr$BooleanExpr"
    ASSIGNMENT_EXPR = _AST + "Expr$AssignmentExpr"
    PREFIX_EXPR = _AST + "Expr$PrefixExpr"
    POSTFIX_EXPR = _AST + "Expr$PostfixExpr"
    TERNARY_EXPR = _AST + "Expr$TernaryExpr"

    # ── Names and types ────────────────────────────────────────
    IDENTIFIER = "apex.jorje.data.Identifiers$LocationIdentifier"
    CLASS_TYPE_REF = _AST + "TypeRefs$ClassTypeRef"
    ARRAY_TYPE_REF = _AST + "TypeRefs$ArrayTypeRef"

    @classmethod
    def from_tag(cls, tag: str) -> NodeKind | str:
        """Resolve a class tag, keeping unknown tags as plain strings."""
        try:
            return cls(tag)
        except ValueError:
            return tag


MODIFIER_KEYWORDS: dict[NodeKind, str] = {
    NodeKind.PUBLIC_MODIFIER: "public",
    NodeKind.PRIVATE_MODIFIER: "private",
    NodeKind.PROTECTED_MODIFIER: "protected",
    NodeKind.GLOBAL_MODIFIER: "global",
    NodeKind.STATIC_MODIFIER: "static",
    NodeKind.FINAL_MODIFIER: "final",
    NodeKind.VIRTUAL_MODIFIER: "virtual",
    NodeKind.ABSTRACT_MODIFIER: "abstract",
    NodeKind.OVERRIDE_MODIFIER: "override",
    NodeKind.TRANSIENT_MODIFIER: "transient",
    NodeKind.WITH_SHARING_MODIFIER: "with sharing",
    NodeKind.WITHOUT_SHARING_MODIFIER: "without sharing",
}

BINARYISH_KINDS = frozenset({NodeKind.BINARY_EXPR, NodeKind.BOOLEAN_EXPR})


Value = Union["Node", tuple["Node", ...], str, int, float, bool, None]


@dataclass(frozen=True, eq=False)
class Node:
    """A tagged AST node. Equality and hashing are by identity."""

    kind: NodeKind | str
    span: Span | None
    fields: Mapping[str, Value] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    @property
    def tag(self) -> str:
        return self.kind.value if isinstance(self.kind, NodeKind) else self.kind

    @property
    def short_tag(self) -> str:
        """The class name without its package, e.g. ``Expr$BinaryExpr``."""
        return self.tag.rsplit(".", 1)[-1]

    def get(self, name: str, default: Any = None) -> Any:
        value = self.fields.get(name, default)
        return default if value is None else value

    def require(self, name: str) -> Any:
        value = self.fields.get(name)
        if value is None:
            raise MalformedNodeError(
                f"{self.short_tag} is missing required field '{name}'",
                span=self.span,
                tag=self.tag,
            )
        return value

    def children(self) -> Iterator[tuple[str, Node]]:
        """Yield (field name, child) for every child node, in field order."""
        for name, value in self.fields.items():
            if isinstance(value, Node):
                yield name, value
            elif isinstance(value, tuple):
                for item in value:
                    if isinstance(item, Node):
                        yield name, item

    def __repr__(self) -> str:
        return f"Node({self.short_tag}, {dict(self.fields)!r})"


def is_kind(node: Any, *kinds: NodeKind) -> bool:
    return isinstance(node, Node) and node.kind in kinds


def is_binaryish(node: Any) -> bool:
    return isinstance(node, Node) and node.kind in BINARYISH_KINDS
