"""
Main CLI entry point for unchanged.

Each command reads a JSON or YAML document (from FILE, or stdin when FILE is
omitted or ``-``), applies one operation and writes the result to stdout.
The input file is never modified.
"""

import logging as _logging
import sys as _sys
import typing as _typing

import click as _click
import pydantic as _pydantic

import unchanged
import unchanged.cli.documents as documents
import unchanged.config as config

_logger = _logging.getLogger(__name__)

# Custom Click context settings for better help formatting
CONTEXT_SETTINGS: dict[str, _typing.Any] = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 100,
}

# Name of the handler installed on the package logger by the CLI
_LOG_HANDLER_NAME = "unchanged-cli"

_document_argument = _click.argument(
    "document",
    type=_click.File("r", encoding="utf-8"),
    default="-",
    required=False,
)

_raw_option = _click.option(
    "--raw",
    is_flag=True,
    help="Treat VALUE as a plain string instead of YAML",
)


def _configure_logging(settings: config.Settings) -> None:
    """Send package log records to stderr at the configured level."""
    package_logger = _logging.getLogger("unchanged")

    for handler in list(package_logger.handlers):
        if handler.get_name() == _LOG_HANDLER_NAME:
            package_logger.removeHandler(handler)

    handler = _logging.StreamHandler(_sys.stderr)
    handler.set_name(_LOG_HANDLER_NAME)
    handler.setFormatter(_logging.Formatter(settings.logging.format))
    package_logger.addHandler(handler)
    package_logger.setLevel(settings.logging.level)


def _settings(ctx: _click.Context) -> config.Settings:
    settings: config.Settings = ctx.obj["settings"]
    return settings


def _apply(operation: _typing.Callable[..., _typing.Any], *args: _typing.Any) -> _typing.Any:
    """Run an operation, reporting misuse as a CLI error."""
    try:
        return operation(*args)
    except (unchanged.UnchangedError, TypeError) as e:
        raise _click.ClickException(str(e)) from e


def _emit(ctx: _click.Context, value: _typing.Any) -> None:
    _click.echo(documents.dump_document(value, _settings(ctx).output))


@_click.group(context_settings=CONTEXT_SETTINGS)
@_click.version_option(unchanged.__version__, "-V", "--version", prog_name="unchanged")
@_click.option(
    "--format",
    "output_format",
    type=_click.Choice(["json", "yaml"]),
    default=None,
    help="Output format (default from config: json)",
)
@_click.option(
    "--indent",
    type=_click.IntRange(0, 8),
    default=None,
    help="Indentation width; 0 writes compact JSON",
)
@_click.option(
    "--sort-keys/--no-sort-keys",
    default=None,
    help="Sort mapping keys in the output",
)
@_click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Log debug output to stderr",
)
@_click.pass_context
def cli(
    ctx: _click.Context,
    output_format: str | None,
    indent: int | None,
    sort_keys: bool | None,
    verbose: bool,
) -> None:
    """
    unchanged - read and update nested JSON/YAML documents by path.

    PATH uses dot and bracket notation (users[0].name); "." is the root.

    \b
    Examples:
        unchanged get users[0].name data.json
        unchanged set settings.theme dark data.json
        cat data.yaml | unchanged --format yaml add tags new-tag
        unchanged merge . '{settings: {lang: en}}' data.json
    """
    try:
        settings = config.load_settings()
    except (config.ConfigFileError, _pydantic.ValidationError) as e:
        raise _click.ClickException(str(e)) from e

    if output_format:
        settings.output.format = output_format  # type: ignore[assignment]
    if indent is not None:
        settings.output.indent = indent
    if sort_keys is not None:
        settings.output.sort_keys = sort_keys
    if verbose:
        settings.logging.level = "DEBUG"

    _configure_logging(settings)
    settings.warn_unknown_fields()

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


# =============================================================================
# Read Commands
# =============================================================================


@cli.command()
@_click.argument("path")
@_document_argument
@_click.option(
    "--default",
    "default",
    default=None,
    help="Value (YAML) printed when nothing is at PATH",
)
@_raw_option
@_click.pass_context
def get(
    ctx: _click.Context,
    path: str,
    document: _typing.TextIO,
    default: str | None,
    raw: bool,
) -> None:
    """Print the value at PATH (null when missing)."""
    keys = documents.parse_cli_path(path)
    data = documents.load_document(document)

    if default is None:
        value = _apply(unchanged.get, keys, data)
    else:
        fallback = documents.parse_value(default, raw)
        value = _apply(unchanged.get_or, fallback, keys, data)

    _emit(ctx, value)


@cli.command()
@_click.argument("path")
@_document_argument
@_click.pass_context
def has(ctx: _click.Context, path: str, document: _typing.TextIO) -> None:
    """Exit with status 0 when a value is present at PATH, 1 otherwise."""
    keys = documents.parse_cli_path(path)
    data = documents.load_document(document)

    present = _apply(unchanged.has, keys, data)
    _logger.debug("Value at %r present: %s", path, present)
    ctx.exit(0 if present else 1)


# =============================================================================
# Write Commands
# =============================================================================


@cli.command("set")
@_click.argument("path")
@_click.argument("value")
@_document_argument
@_raw_option
@_click.pass_context
def set_command(
    ctx: _click.Context,
    path: str,
    value: str,
    document: _typing.TextIO,
    raw: bool,
) -> None:
    """Store VALUE at PATH, creating missing branches."""
    keys = documents.parse_cli_path(path)
    data = documents.load_document(document)
    _emit(ctx, _apply(unchanged.set, keys, documents.parse_value(value, raw), data))


@cli.command()
@_click.argument("path")
@_click.argument("value")
@_document_argument
@_raw_option
@_click.pass_context
def add(
    ctx: _click.Context,
    path: str,
    value: str,
    document: _typing.TextIO,
    raw: bool,
) -> None:
    """Append VALUE to the list at PATH, or set it when PATH holds no list."""
    keys = documents.parse_cli_path(path)
    data = documents.load_document(document)
    _emit(ctx, _apply(unchanged.add, keys, documents.parse_value(value, raw), data))


@cli.command()
@_click.argument("path")
@_document_argument
@_click.pass_context
def remove(ctx: _click.Context, path: str, document: _typing.TextIO) -> None:
    """Delete the value at PATH."""
    keys = documents.parse_cli_path(path)
    data = documents.load_document(document)
    _emit(ctx, _apply(unchanged.remove, keys, data))


@cli.command()
@_click.argument("path")
@_click.argument("value")
@_document_argument
@_raw_option
@_click.pass_context
def merge(
    ctx: _click.Context,
    path: str,
    value: str,
    document: _typing.TextIO,
    raw: bool,
) -> None:
    """Deep-merge VALUE into the value at PATH."""
    keys = documents.parse_cli_path(path)
    data = documents.load_document(document)
    _emit(ctx, _apply(unchanged.merge, keys, documents.parse_value(value, raw), data))


@cli.command()
@_click.argument("path")
@_click.argument("value")
@_document_argument
@_raw_option
@_click.pass_context
def assign(
    ctx: _click.Context,
    path: str,
    value: str,
    document: _typing.TextIO,
    raw: bool,
) -> None:
    """Shallow-merge VALUE into the value at PATH."""
    keys = documents.parse_cli_path(path)
    data = documents.load_document(document)
    _emit(ctx, _apply(unchanged.assign, keys, documents.parse_value(value, raw), data))


def main() -> None:
    """Main entry point with correct program name."""
    cli(prog_name="unchanged")


if __name__ == "__main__":
    main()
