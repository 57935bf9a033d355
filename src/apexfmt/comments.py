"""Comment attachments and their placement around printed nodes.

Comments are attached to nodes by a pre-pass before printing starts. The
result is an immutable ``CommentMap``; printers only read it. Each comment is
printed by the printer of the node it belongs to, at the position its
placement dictates, so that reformatting the output attaches it to the same
node again.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping

from apexfmt.ast_nodes import Node
from apexfmt.doc import BREAK_PARENT, HARDLINE, Doc, concat, line_suffix


class Placement(Enum):
    LEADING = "leading"
    TRAILING = "trailing"
    END_OF_LINE = "endOfLine"
    OWN_LINE = "ownLine"


@dataclass(frozen=True)
class Comment:
    text: str
    placement: Placement

    @property
    def is_line_comment(self) -> bool:
        return self.text.startswith("//")

    def lines(self) -> list[str]:
        return [line.rstrip() for line in self.text.splitlines()] or [""]


class CommentMap:
    """Read-only mapping from node (by identity) to its comments."""

    def __init__(self, attachments: Mapping[Node, Iterable[Comment]] | None = None) -> None:
        entries = {node: tuple(comments) for node, comments in (attachments or {}).items()}
        self._entries = MappingProxyType({n: c for n, c in entries.items() if c})

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, node: object) -> bool:
        return node in self._entries

    def comments_for(self, node: Node) -> tuple[Comment, ...]:
        return self._entries.get(node, ())


EMPTY_COMMENTS = CommentMap()


def has_trailing_end_of_line_comment(node: object, comments: CommentMap) -> bool:
    if not isinstance(node, Node):
        return False
    return any(_is_end_of_line(c) for c in comments.comments_for(node))


def _is_end_of_line(comment: Comment) -> bool:
    if comment.placement is Placement.END_OF_LINE:
        return True
    # A trailing line comment swallows everything after it on its line.
    return comment.placement is Placement.TRAILING and comment.is_line_comment


def _comment_doc(comment: Comment) -> Doc:
    parts: list[Doc | str] = []
    for i, line in enumerate(comment.lines()):
        if i > 0:
            parts.append(HARDLINE)
            line = line.strip()
            # Continuation lines of a block comment line up under the first star.
            if line.startswith("*"):
                line = " " + line
        parts.append(line)
    return concat(*parts)


def print_comments(node: Node, doc: Doc, comments: CommentMap) -> Doc:
    """Surround a node's doc with the comments attached to it."""
    attached = comments.comments_for(node)
    if not attached:
        return doc

    leading: list[Doc | str] = []
    trailing: list[Doc | str] = []
    for comment in attached:
        if comment.placement is Placement.LEADING:
            leading.extend([_comment_doc(comment), HARDLINE])
        elif comment.placement is Placement.OWN_LINE:
            trailing.extend([HARDLINE, _comment_doc(comment)])
        elif _is_end_of_line(comment):
            # Held until the end of the line this node ends on; nothing else
            # may follow it there.
            trailing.extend([line_suffix(" ", _comment_doc(comment)), BREAK_PARENT])
        else:
            trailing.extend([" ", _comment_doc(comment)])
    return concat(*leading, doc, *trailing)
