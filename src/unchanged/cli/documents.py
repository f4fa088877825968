"""
Reading and writing documents for the command line.

Input documents are parsed as YAML, which also accepts every JSON document.
Output is rendered as JSON or YAML according to the output settings.
"""

import json as _json
import typing as _typing

import click as _click
import yaml as _yaml

import unchanged
import unchanged.config as config

# PATH argument that addresses the document root
ROOT_PATH = "."


def load_document(stream: _typing.TextIO) -> _typing.Any:
    """
    Parse a JSON or YAML document from an open text stream.

    An empty stream is the null document.

    Raises:
        click.ClickException: If the document cannot be parsed.
    """
    name = getattr(stream, "name", "<stdin>")
    try:
        return _yaml.safe_load(stream.read())
    except _yaml.YAMLError as e:
        raise _click.ClickException(f"Cannot parse document {name}: {e}") from e


def parse_value(text: str, raw: bool = False) -> _typing.Any:
    """
    Parse a VALUE argument.

    Values are YAML scalars or flow collections (``42``, ``true``,
    ``[1, 2]``, ``{a: 1}``); with raw the text is kept as a string.

    Raises:
        click.ClickException: If the value is not valid YAML.
    """
    if raw:
        return text
    try:
        return _yaml.safe_load(text)
    except _yaml.YAMLError as e:
        raise _click.ClickException(f"Cannot parse value {text!r}: {e}") from e


def parse_cli_path(text: str) -> list[_typing.Any]:
    """
    Parse a PATH argument into keys.

    ``.`` is the root. Numeric segments address list positions, so
    ``items.0`` and ``items[0]`` are the same path.

    Raises:
        click.ClickException: If the path is malformed.
    """
    if text == ROOT_PATH:
        return []
    try:
        return unchanged.parse_path(text)
    except unchanged.PathSyntaxError as e:
        raise _click.ClickException(str(e)) from e


def dump_document(value: _typing.Any, output: config.OutputConfig) -> str:
    """Render a value as JSON or YAML without a trailing newline."""
    if output.format == "yaml":
        rendered = _yaml.safe_dump(
            value,
            indent=max(output.indent, 2),
            sort_keys=output.sort_keys,
            default_flow_style=False,
            allow_unicode=True,
        )
        # Scalars are followed by an explicit document end marker
        return rendered.removesuffix("...\n").rstrip("\n")

    return _json.dumps(
        value,
        indent=output.indent or None,
        sort_keys=output.sort_keys,
        ensure_ascii=False,
        default=str,
    )
