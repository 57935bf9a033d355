"""Layout engine: resolves a ``Doc`` into text for a given line width.

Groups are decided greedily, outermost first. A group renders flat when its
flattened contents hold no forced break and fit in the columns left on the
current line; otherwise its own line breaks become newlines and each nested
group is decided again at the column it starts on.

Both the traversal and the width measurement use explicit stacks, so very
deep documents do not hit the interpreter's recursion limit.
"""

from __future__ import annotations

from apexfmt.doc import (
    BreakParent,
    Concat,
    Dedent,
    Doc,
    Group,
    HardLine,
    Indent,
    Line,
    LineSuffix,
    SoftLine,
    Text,
)

# A pending fragment: (indentation level, flat?, doc)
_Fragment = tuple[int, bool, Doc]


def render(
    doc: Doc,
    max_width: int,
    indent_width: int,
    *,
    use_tabs: bool = False,
    tab_width: int = 4,
) -> str:
    """Render ``doc`` so that flat groups never exceed ``max_width`` columns."""
    return _Renderer(max_width, indent_width, use_tabs, tab_width).render(doc)


def flat_width(doc: Doc) -> int | None:
    """Width of ``doc`` rendered on one line, or None if it must break."""
    return _measure(doc, {})


def _measure(doc: Doc, memo: dict[int, int | None]) -> int | None:
    width = 0
    stack: list[Doc] = [doc]
    while stack:
        current = stack.pop()
        if isinstance(current, Text):
            width += len(current.text)
        elif isinstance(current, Concat):
            stack.extend(current.parts)
        elif isinstance(current, Line):
            width += 1
        elif isinstance(current, SoftLine | LineSuffix):
            continue
        elif isinstance(current, HardLine | BreakParent):
            return None
        elif isinstance(current, Group):
            if current.should_break:
                return None
            key = id(current)
            if key in memo:
                inner = memo[key]
                if inner is None:
                    return None
                width += inner
            else:
                stack.append(current.contents)
        elif isinstance(current, Indent | Dedent):
            stack.append(current.contents)
        else:
            raise TypeError(f"not a document: {current!r}")
    return width


class _Renderer:
    def __init__(self, max_width: int, indent_width: int, use_tabs: bool, tab_width: int) -> None:
        self.max_width = max_width
        self.indent_width = indent_width
        self.use_tabs = use_tabs
        self.tab_width = tab_width
        self._widths: dict[int, int | None] = {}

    def _group_width(self, group: Group) -> int | None:
        key = id(group)
        if key not in self._widths:
            self._widths[key] = None if group.should_break else _measure(group.contents, self._widths)
        return self._widths[key]

    def _indentation(self, level: int) -> tuple[str, int]:
        if self.use_tabs:
            return "\t" * level, level * self.tab_width
        spaces = level * self.indent_width
        return " " * spaces, spaces

    def render(self, doc: Doc) -> str:
        out: list[str] = []
        col = 0
        suffixes: list[_Fragment] = []
        stack: list[_Fragment] = [(0, False, Group(doc))]

        while stack or suffixes:
            if not stack:
                # Flush end-of-line content still pending at the end.
                stack.extend(reversed(suffixes))
                suffixes.clear()
                continue

            level, flat, current = stack.pop()

            if isinstance(current, Text):
                out.append(current.text)
                col += len(current.text)
            elif isinstance(current, Concat):
                for part in reversed(current.parts):
                    stack.append((level, flat, part))
            elif isinstance(current, Group):
                if flat:
                    stack.append((level, True, current.contents))
                else:
                    width = self._group_width(current)
                    fits = width is not None and width <= self.max_width - col
                    stack.append((level, fits, current.contents))
            elif isinstance(current, Indent):
                stack.append((level + 1, flat, current.contents))
            elif isinstance(current, Dedent):
                stack.append((max(level - 1, 0), flat, current.contents))
            elif isinstance(current, LineSuffix):
                suffixes.append((level, True, current.contents))
            elif isinstance(current, BreakParent):
                continue
            elif isinstance(current, Line | SoftLine | HardLine):
                if flat and not isinstance(current, HardLine):
                    if isinstance(current, Line):
                        out.append(" ")
                        col += 1
                    continue
                if suffixes:
                    # Write the held-back content before leaving this line.
                    stack.append((level, flat, current))
                    stack.extend(reversed(suffixes))
                    suffixes.clear()
                    continue
                _trim_trailing_whitespace(out)
                prefix, col = self._indentation(level)
                out.append("\n")
                out.append(prefix)
            else:
                raise TypeError(f"not a document: {current!r}")

        _trim_trailing_whitespace(out)
        return "".join(out)


def _trim_trailing_whitespace(out: list[str]) -> None:
    while out:
        stripped = out[-1].rstrip(" \t")
        if stripped:
            out[-1] = stripped
            return
        out.pop()
