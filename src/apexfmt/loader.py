"""Load jorje-style JSON ASTs into ``Node`` trees and a ``CommentMap``.

The wire format is the one the Apex parser server emits: objects tagged with
``@class``, ``Optional`` values wrapped as ``{"value": ...}`` (or ``{}`` when
absent) and enum values boxed as ``{"$": ...}``. Comments already attached
by the upstream comment pass arrive as a ``comments`` array on their node.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from apexfmt.ast_nodes import BINARYISH_KINDS, Node, NodeKind
from apexfmt.comments import Comment, CommentMap, Placement
from apexfmt.errors import MalformedNodeError
from apexfmt.source import Span

_ENVELOPE = "apex.jorje.semantic.compiler.parser.ParserOutput"

# Field renames applied per node kind so printers see one vocabulary.
_FIELD_ALIASES: dict[NodeKind, dict[str, str]] = {
    kind: {"expr1": "left", "expr2": "right"} for kind in BINARYISH_KINDS
}

_SKIPPED_KEYS = frozenset({"@class", "loc", "comments"})


class AstLoader:
    """Convert decoded JSON into nodes, collecting comment attachments."""

    def __init__(self, filename: str = "<ast>", source_filename: str | None = None) -> None:
        self.filename = filename
        # Node locations index into the Apex source, not into the JSON.
        self.source_filename = source_filename or filename
        self._attachments: dict[Node, list[Comment]] = {}

    def load(self, data: Any) -> tuple[Node, CommentMap]:
        root = self._node(self._unwrap_envelope(data))
        return root, CommentMap(self._attachments)

    def _unwrap_envelope(self, data: Any) -> dict:
        if not isinstance(data, dict):
            raise MalformedNodeError(f"{self.filename}: expected a JSON object at the top level")
        if _ENVELOPE in data:
            data = data[_ENVELOPE]
        if "unit" in data and "@class" not in data:
            errors = data.get("parseErrors") or []
            if errors:
                raise MalformedNodeError(
                    f"{self.filename}: the parser reported {len(errors)} error(s)",
                    notes=[str(e) for e in errors[:5]],
                )
            data = data["unit"]
        if not isinstance(data, dict) or "@class" not in data:
            raise MalformedNodeError(f"{self.filename}: no tagged root node found")
        return data

    def _span(self, loc: Any) -> Span | None:
        if not isinstance(loc, dict):
            return None
        return Span(
            file=self.source_filename,
            start_index=int(loc.get("startIndex", 0)),
            end_index=int(loc.get("endIndex", 0)),
            line=int(loc.get("line", 0)),
            column=int(loc.get("column", 0)),
        )

    def _node(self, data: dict) -> Node:
        tag = data["@class"]
        if not isinstance(tag, str):
            raise MalformedNodeError(f"{self.filename}: '@class' must be a string, got {tag!r}")
        kind = NodeKind.from_tag(tag)
        span = self._span(data.get("loc"))
        aliases = _FIELD_ALIASES.get(kind, {}) if isinstance(kind, NodeKind) else {}

        values: dict[str, Any] = {}
        for key, raw in data.items():
            if key in _SKIPPED_KEYS:
                continue
            values[aliases.get(key, key)] = self._value(raw, key, span)

        node = Node(kind, span, values)
        comments = data.get("comments")
        if comments:
            self._attachments[node] = [self._comment(c, span) for c in comments]
        return node

    def _value(self, raw: Any, key: str, span: Span | None) -> Any:
        if isinstance(raw, list):
            return tuple(self._value(item, key, span) for item in raw)
        if not isinstance(raw, dict):
            return raw
        if "@class" in raw:
            return self._node(raw)
        if not raw:
            return None  # empty Optional
        if set(raw) == {"value"}:
            return self._value(raw["value"], key, span)
        if set(raw) == {"$"}:
            return raw["$"]
        raise MalformedNodeError(
            f"{self.filename}: field '{key}' has an unsupported shape",
            span=span,
            notes=[f"keys: {', '.join(sorted(raw))}"],
        )

    def _comment(self, raw: Any, span: Span | None) -> Comment:
        if not isinstance(raw, dict) or not isinstance(raw.get("value"), str):
            raise MalformedNodeError(f"{self.filename}: comment without text", span=span)
        placement = raw.get("placement", "leading")
        try:
            return Comment(raw["value"], Placement(placement))
        except ValueError:
            raise MalformedNodeError(
                f"{self.filename}: unknown comment placement {placement!r}",
                span=span,
                notes=[f"expected one of: {', '.join(p.value for p in Placement)}"],
            ) from None


def load_json(
    data: Any, filename: str = "<ast>", source_filename: str | None = None
) -> tuple[Node, CommentMap]:
    return AstLoader(filename, source_filename).load(data)


def loads(
    text: str, filename: str = "<ast>", source_filename: str | None = None
) -> tuple[Node, CommentMap]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedNodeError(f"{filename}: invalid JSON ({e.msg} at line {e.lineno})") from e
    return load_json(data, filename, source_filename)


def load_file(path: Path) -> tuple[Node, CommentMap]:
    """Load ``Foo.json``; locations refer to ``Foo.cls`` when it exists."""
    source = path.with_suffix(".cls")
    source_filename = str(source) if source.is_file() else None
    return loads(path.read_text(), str(path), source_filename)
