"""Error taxonomy and Rust-style colored diagnostic rendering."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from apexfmt.source import SourceFile

if TYPE_CHECKING:
    from apexfmt.source import Span


class Severity(Enum):
    ERROR = "error"


# ANSI color codes
_COLORS = {
    Severity.ERROR: "\033[1;31m",  # bold red
}
_BOLD = "\033[1m"
_BLUE = "\033[1;34m"
_RESET = "\033[0m"


@dataclass(frozen=True)
class DiagnosticLabel:
    """Points to a specific source location."""

    span: Span
    message: str


@dataclass(frozen=True)
class Suggestion:
    """A suggested fix."""

    message: str
    replacement: str


@dataclass
class Diagnostic:
    """A single diagnostic message with optional labels and suggestions."""

    severity: Severity
    code: str
    message: str
    labels: list[DiagnosticLabel] = field(default_factory=list)
    suggestions: list[Suggestion] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)


class DiagnosticRenderer:
    """Renders diagnostics in Rust-style format with colors."""

    def __init__(self, *, color: bool = True) -> None:
        self.color = color
        self._file_cache: dict[str, SourceFile | None] = {}

    def _c(self, code: str) -> str:
        return code if self.color else ""

    def _get_source_line(self, filename: str, line_num: int) -> str | None:
        """Load and cache the source file, return the 1-indexed line."""
        # Spans carry Apex source positions; a JSON tree has no matching lines.
        if filename.endswith(".json"):
            return None
        if filename not in self._file_cache:
            path = Path(filename)
            try:
                self._file_cache[filename] = SourceFile(path) if path.is_file() else None
            except (OSError, UnicodeDecodeError):
                self._file_cache[filename] = None
        source = self._file_cache[filename]
        if source is None or not 1 <= line_num <= len(source.lines):
            return None
        return source.line_at(line_num)

    def render(self, diag: Diagnostic) -> str:
        lines: list[str] = []
        sev = diag.severity
        color = _COLORS[sev]

        # Header: error[E001]: message
        lines.append(
            f"{self._c(color)}{sev.value}[{diag.code}]{self._c(_RESET)}"
            f"{self._c(_BOLD)}: {diag.message}{self._c(_RESET)}"
        )

        for label in diag.labels:
            span = label.span
            lines.append(f"  {self._c(_BLUE)}-->{self._c(_RESET)} {span}")
            gutter = f"{span.line:>4}"
            lines.append(f"  {self._c(_BLUE)}   |{self._c(_RESET)}")

            source_line = self._get_source_line(span.file, span.line)
            if source_line is not None:
                lines.append(
                    f"  {self._c(_BLUE)}{gutter} |{self._c(_RESET)} {source_line}"
                )
                available = max(1, len(source_line) - span.column + 1)
                padding = " " * (span.column - 1)
                carets = "^" * min(span.width, available)
                lines.append(
                    f"  {self._c(_BLUE)}   |{self._c(_RESET)} "
                    f"{padding}{self._c(color)}{carets}{self._c(_RESET)}"
                )

            if label.message:
                lines.append(
                    f"  {self._c(_BLUE)}   |{self._c(_RESET)}   "
                    f"{self._c(color)}{label.message}{self._c(_RESET)}"
                )

        for note in diag.notes:
            lines.append(f"  {self._c(_BLUE)}={self._c(_RESET)} note: {note}")

        for suggestion in diag.suggestions:
            lines.append(
                f"  {self._c(_BLUE)}try:{self._c(_RESET)} {suggestion.replacement}"
            )

        return "\n".join(lines)


# ── Errors ───────────────────────────────────────────────────────


class FormatError(Exception):
    """Base class for every fatal formatting failure.

    Formatting is a pure function of its input, so none of these is retried:
    the caller has to fix the AST or the configuration.
    """

    code = "E000"

    def __init__(
        self,
        message: str,
        *,
        span: Span | None = None,
        tag: str | None = None,
        notes: list[str] | None = None,
        suggestions: list[Suggestion] | None = None,
    ) -> None:
        self.message = message
        self.span = span
        self.tag = tag
        self.notes = list(notes or [])
        self.suggestions = list(suggestions or [])
        location = f" at {span}" if span is not None else ""
        super().__init__(f"{message}{location}")

    def to_diagnostic(self) -> Diagnostic:
        labels = []
        if self.span is not None:
            labels.append(DiagnosticLabel(self.span, self.tag or ""))
        return Diagnostic(
            severity=Severity.ERROR,
            code=self.code,
            message=self.message,
            labels=labels,
            suggestions=self.suggestions,
            notes=self.notes,
        )


class DispatchError(FormatError):
    """A node carries a tag that no printer is registered for."""

    code = "E001"


class MalformedNodeError(FormatError):
    """A node lacks a field its printer requires, or has an invalid shape."""

    code = "E002"


class ConfigurationError(FormatError):
    """Formatting options were rejected before printing started."""

    code = "E003"
