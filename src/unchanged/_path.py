"""
Path parsing and normalization.

A path is given either as a sequence of keys or as a string using dot and
bracket notation:

    >>> parse_path('deeply[0].nested["key"]')
    ['deeply', 0, 'nested', 'key']

Bare segments that spell a non-negative integer become list indices; quoted
bracket keys always stay strings:

    >>> parse_path('rows.0["0"]')
    ['rows', 0, '0']
"""

from __future__ import annotations

import re as _re
import typing as _typing

import unchanged._types as _types
import unchanged.errors as errors

_INDEX_RE = _re.compile(r"^(?:0|[1-9][0-9]*)$")

_QUOTES = ('"', "'")


def _coerce_segment(segment: str) -> _types.Key:
    """Turn a canonical integer segment into an index, else keep the string."""
    if _INDEX_RE.match(segment):
        return int(segment)
    return segment


def _read_quoted(text: str, start: int) -> tuple[str, int]:
    """
    Read a quoted key starting at the opening quote.

    Returns:
        Tuple of (key, index just past the closing quote).

    Raises:
        PathSyntaxError: If the closing quote is missing.
    """
    quote = text[start]
    chars: list[str] = []
    index = start + 1

    while index < len(text):
        char = text[index]
        if char == "\\" and index + 1 < len(text):
            chars.append(text[index + 1])
            index += 2
            continue
        if char == quote:
            return "".join(chars), index + 1
        chars.append(char)
        index += 1

    raise errors.PathSyntaxError(text, start, "unterminated quoted key")


def _read_bracket(text: str, start: int) -> tuple[_types.Key, int]:
    """
    Read a bracketed segment starting at '['.

    Returns:
        Tuple of (key, index just past ']').

    Raises:
        PathSyntaxError: If the bracket is not closed.
    """
    index = start + 1
    while index < len(text) and text[index].isspace():
        index += 1

    if index < len(text) and text[index] in _QUOTES:
        key, index = _read_quoted(text, index)
        while index < len(text) and text[index].isspace():
            index += 1
        if index >= len(text) or text[index] != "]":
            raise errors.PathSyntaxError(text, index, "expected ']' after quoted key")
        return key, index + 1

    end = text.find("]", index)
    if end == -1:
        raise errors.PathSyntaxError(text, start, "unterminated bracket")
    return _coerce_segment(text[index:end].strip()), end + 1


def parse_path(text: str) -> _types.ParsedPath:
    """
    Parse a path string into an ordered list of keys.

    Supports dot-separated identifiers, bracketed indices ``[0]`` and
    bracketed quoted keys ``["key"]`` / ``['key']`` in any combination.
    Empty dot segments are skipped. The empty string is the single key ``""``.

    Args:
        text: The path string.

    Returns:
        List of keys.

    Raises:
        PathSyntaxError: On an unterminated bracket or quote.
    """
    if text == "":
        return [""]

    keys: _types.ParsedPath = []
    buffer: list[str] = []
    index = 0

    def flush() -> None:
        if buffer:
            keys.append(_coerce_segment("".join(buffer)))
            buffer.clear()

    while index < len(text):
        char = text[index]
        if char == ".":
            flush()
            index += 1
        elif char == "[":
            flush()
            key, index = _read_bracket(text, index)
            keys.append(key)
        else:
            buffer.append(char)
            index += 1

    flush()
    return keys


def has_path_syntax(text: str) -> bool:
    """Check whether a string needs parsing (contains '.' or '[')."""
    return "." in text or "[" in text


def is_empty_path(path: _typing.Any) -> bool:
    """
    Check whether a path addresses the root value itself.

    None, zero-length sequences and path strings without any key (``"."``,
    ``".."``) are empty. A single key, including ``0`` and ``""``, is never
    empty.
    """
    if path is None:
        return True
    if isinstance(path, (list, tuple)):
        return len(path) == 0
    if isinstance(path, str) and has_path_syntax(path):
        return len(parse_path(path)) == 0
    return False


def normalize_path(path: _typing.Any) -> _types.ParsedPath:
    """
    Normalize any accepted path form into a list of keys.

    Lists are returned as-is (not copied), so callers must not mutate the
    result. Tuples are converted to lists. Strings containing path syntax are
    parsed; any other single key becomes a one-element list.
    """
    if isinstance(path, list):
        return path
    if isinstance(path, tuple):
        return list(path)
    if isinstance(path, str) and has_path_syntax(path):
        return parse_path(path)
    return [path]


def append_index(path: _typing.Any, index: int) -> _typing.Any:
    """
    Extend a path with a trailing list index, keeping its representation.

    String paths get ``[index]`` appended, sequences get the index appended,
    and empty paths become a one-element path.

        >>> append_index("rows.items", 2)
        'rows.items[2]'
        >>> append_index("items", 2)
        ['items', 2]
        >>> append_index(["items"], 2)
        ['items', 2]
        >>> append_index(None, 0)
        [0]
    """
    if is_empty_path(path):
        return [index]
    if isinstance(path, (list, tuple)):
        return [*path, index]
    if isinstance(path, str) and has_path_syntax(path):
        return f"{path}[{index}]"
    # Single keys ("", "0", tuples) would change meaning if re-parsed
    return [path, index]
