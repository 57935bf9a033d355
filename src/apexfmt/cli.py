"""apexfmt command-line interface."""

from __future__ import annotations

import sys
import time
from pathlib import Path

import click

from apexfmt import __version__
from apexfmt.ast_nodes import Node
from apexfmt.comments import CommentMap
from apexfmt.config import FormatConfig, find_config, load_config
from apexfmt.errors import DiagnosticRenderer, FormatError
from apexfmt.formatter import ApexFormatter
from apexfmt.loader import load_file, loads


def _resolve_config(path: Path, config_file: str | None, **overrides: object) -> FormatConfig:
    """Explicit --config, else the nearest apexfmt.toml, else defaults."""
    if config_file is not None:
        config = load_config(Path(config_file))
    else:
        try:
            config = load_config(find_config(path))
        except FileNotFoundError:
            config = FormatConfig()
    return config.with_overrides(**overrides).validate()


def _report(error: FormatError) -> None:
    renderer = DiagnosticRenderer(color=True)
    click.echo(renderer.render(error.to_diagnostic()), err=True)


def _report_time(show_time: bool, start: float) -> None:
    if show_time:
        click.echo(f"execution time: {time.perf_counter() - start:.3f}s", err=True)


@click.group()
@click.version_option(__version__, prog_name="apexfmt")
def main() -> None:
    """Pretty-printer for Apex syntax trees."""


@main.command(name="format")
@click.argument("path", default=".", type=click.Path(exists=True))
@click.option("--check", is_flag=True, help="Exit 1 if the sibling .cls file would change.")
@click.option("--write", is_flag=True, help="Write the result to the sibling .cls file.")
@click.option("--stdin", "use_stdin", is_flag=True, help="Read a JSON tree from stdin, write to stdout.")
@click.option("--print-width", type=int, default=None, help="Maximum line width.")
@click.option("--indent-width", type=int, default=None, help="Spaces per indentation level.")
@click.option("--use-tabs/--use-spaces", default=None, help="Indent with tabs or spaces.")
@click.option("--config", "config_file", type=click.Path(exists=True, dir_okay=False), default=None,
              help="Path to an apexfmt.toml file.")
@click.option("--time", "show_time", is_flag=True, help="Report how long formatting took.")
def format_cmd(
    path: str,
    check: bool,
    write: bool,
    use_stdin: bool,
    print_width: int | None,
    indent_width: int | None,
    use_tabs: bool | None,
    config_file: str | None,
    show_time: bool,
) -> None:
    """Format Apex syntax trees (*.json) to source text."""
    if check and write:
        click.echo("error: --check and --write cannot be combined", err=True)
        raise SystemExit(1)

    try:
        config = _resolve_config(
            Path(path),
            config_file,
            print_width=print_width,
            indent_width=indent_width,
            use_tabs=use_tabs,
        )
        formatter = ApexFormatter(config)
    except FormatError as e:
        _report(e)
        raise SystemExit(1)

    start = time.perf_counter()

    if use_stdin:
        try:
            root, comments = loads(sys.stdin.read(), "<stdin>")
            formatted = formatter.format(root, comments)
        except FormatError as e:
            _report(e)
            raise SystemExit(1)
        sys.stdout.write(formatted)
        _report_time(show_time, start)
        return

    target = Path(path)
    json_files = sorted(target.rglob("*.json")) if target.is_dir() else [target]

    if not json_files:
        click.echo("no .json files found", err=True)
        return

    had_errors = False
    needs_formatting = False
    for json_file in json_files:
        try:
            formatted = formatter.format_file(json_file)
        except FormatError as e:
            _report(e)
            had_errors = True
            continue

        output = json_file.with_suffix(".cls")
        if check:
            current = output.read_text() if output.exists() else None
            if formatted != current:
                click.echo(f"would reformat {output}")
                needs_formatting = True
        elif write:
            output.write_text(formatted)
            click.echo(f"formatted {output}")
        else:
            click.echo(formatted, nl=False)

    _report_time(show_time, start)
    if had_errors or (check and needs_formatting):
        raise SystemExit(1)


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
def view(file: str) -> None:
    """View the syntax tree stored in a JSON file."""
    try:
        root, comments = load_file(Path(file))
    except FormatError as e:
        _report(e)
        raise SystemExit(1)

    _dump_ast(root, comments, 0)


def _dump_ast(node: Node, comments: CommentMap, depth: int) -> None:
    """Print a readable AST dump."""
    indent = "  " * depth
    click.echo(f"{indent}{node.short_tag}")
    for comment in comments.comments_for(node):
        click.echo(f"{indent}  # {comment.placement.value}: {comment.text}")
    for field_name, value in node.fields.items():
        if isinstance(value, tuple):
            if value:
                click.echo(f"{indent}  {field_name}:")
                for item in value:
                    _dump_value(item, comments, depth + 2)
            else:
                click.echo(f"{indent}  {field_name}: []")
        elif isinstance(value, Node):
            click.echo(f"{indent}  {field_name}:")
            _dump_ast(value, comments, depth + 2)
        elif value is not None:
            click.echo(f"{indent}  {field_name}: {value!r}")


def _dump_value(value: object, comments: CommentMap, depth: int) -> None:
    if isinstance(value, Node):
        _dump_ast(value, comments, depth)
    else:
        click.echo(f"{'  ' * depth}{value!r}")
