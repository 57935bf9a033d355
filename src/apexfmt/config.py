"""Formatting options and TOML config loading for apexfmt.toml."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

from apexfmt.errors import ConfigurationError, Suggestion

CONFIG_FILENAME = "apexfmt.toml"


@dataclass(frozen=True)
class FormatConfig:
    print_width: int = 80
    indent_width: int = 2
    use_tabs: bool = False
    tab_width: int = 4

    def validate(self) -> FormatConfig:
        """Reject unusable values before any printing starts."""
        for name in ("print_width", "indent_width", "tab_width"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                default = getattr(FormatConfig, name)
                raise ConfigurationError(
                    f"{name} must be a positive integer, got {value!r}",
                    suggestions=[Suggestion(f"use the default {name}", f"{name} = {default}")],
                )
        if not isinstance(self.use_tabs, bool):
            raise ConfigurationError(f"use_tabs must be true or false, got {self.use_tabs!r}")
        return self

    def with_overrides(self, **overrides: Any) -> FormatConfig:
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def find_config(start_path: Path | None = None) -> Path:
    """Walk up directories to find apexfmt.toml. Raises FileNotFoundError."""
    path = (start_path or Path.cwd()).resolve()
    if path.is_file():
        path = path.parent
    while True:
        candidate = path / CONFIG_FILENAME
        if candidate.exists():
            return candidate
        parent = path.parent
        if parent == path:
            raise FileNotFoundError(f"No {CONFIG_FILENAME} found in any parent directory")
        path = parent


def load_config(path: Path) -> FormatConfig:
    """Parse an apexfmt.toml file into a validated FormatConfig."""
    with open(path, "rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"invalid TOML in {path}: {e}") from e

    section = data.get("format", {})
    known = {f.name for f in fields(FormatConfig)}
    unknown = sorted(set(section) - known)
    if unknown:
        raise ConfigurationError(
            f"unknown option(s) in [format]: {', '.join(unknown)}",
            notes=[f"recognized options: {', '.join(sorted(known))}"],
        )
    return FormatConfig(**section).validate()
