"""Document algebra produced by the printers and consumed by the layout engine.

A ``Doc`` is an immutable tree of layout primitives. Printers build docs with
the helper functions at the bottom of this module; ``apexfmt.layout.render``
turns a doc into text.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Union


@dataclass(frozen=True)
class Text:
    text: str

    def __post_init__(self) -> None:
        if "\n" in self.text:
            raise ValueError(f"Text docs cannot contain newlines: {self.text!r}")


@dataclass(frozen=True)
class Concat:
    parts: tuple[Doc, ...]


@dataclass(frozen=True)
class Line:
    """A space when flat, a newline plus indentation when broken."""


@dataclass(frozen=True)
class SoftLine:
    """Nothing when flat, a newline plus indentation when broken."""


@dataclass(frozen=True)
class HardLine:
    """Always a newline; every enclosing group is broken."""


@dataclass(frozen=True)
class BreakParent:
    """Zero-width marker that breaks every enclosing group."""


@dataclass(frozen=True)
class Group:
    contents: Doc
    should_break: bool = False


@dataclass(frozen=True)
class Indent:
    contents: Doc


@dataclass(frozen=True)
class Dedent:
    contents: Doc


@dataclass(frozen=True)
class LineSuffix:
    """Contents are held back and written just before the next newline."""

    contents: Doc


Doc = Union[Text, Concat, Line, SoftLine, HardLine, BreakParent, Group, Indent, Dedent, LineSuffix]
DocLike = Union[Doc, str]

EMPTY = Concat(())
LINE = Line()
SOFTLINE = SoftLine()
HARDLINE = HardLine()
BREAK_PARENT = BreakParent()


# ── Builders ─────────────────────────────────────────────────────


def text(value: str) -> Doc:
    return Text(value) if value else EMPTY


def as_doc(value: DocLike) -> Doc:
    if isinstance(value, str):
        return text(value)
    return value


def concat(*parts: DocLike) -> Doc:
    """Concatenate parts, flattening nested concats and dropping empties."""
    flat: list[Doc] = []
    for part in parts:
        doc = as_doc(part)
        if isinstance(doc, Concat):
            flat.extend(doc.parts)
        else:
            flat.append(doc)
    if len(flat) == 1:
        return flat[0]
    return Concat(tuple(flat))


def group(*parts: DocLike, should_break: bool = False) -> Doc:
    return Group(concat(*parts), should_break)


def indent(*parts: DocLike) -> Doc:
    return Indent(concat(*parts))


def dedent(*parts: DocLike) -> Doc:
    return Dedent(concat(*parts))


def line_suffix(*parts: DocLike) -> Doc:
    return LineSuffix(concat(*parts))


def join(separator: DocLike, docs: Iterable[DocLike]) -> Doc:
    parts: list[DocLike] = []
    for i, doc in enumerate(docs):
        if i > 0:
            parts.append(separator)
        parts.append(doc)
    return concat(*parts)


def is_empty(doc: Doc) -> bool:
    return isinstance(doc, Concat) and not doc.parts
