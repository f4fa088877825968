"""
Structural-sharing engine: clone along a path, read along a path, merge.

Writes never touch the input. clone_along_path() copies exactly the
containers between the root and the written key; every other branch of the
result is the identical object found in the input:

    >>> data = {"a": {"b": 1}, "untouched": {"c": 2}}
    >>> result = clone_along_path("a.b", data, lambda ref, key: ...)
    >>> result is data, result["a"] is data["a"]
    (False, False)
    >>> result["untouched"] is data["untouched"]
    True

Callers must treat both input and output as immutable: mutating a result in
place can leak into the input through shared branches.
"""

from __future__ import annotations

import logging as _logging
import typing as _typing

import unchanged._clone as _clone
import unchanged._path as _path
import unchanged._types as _types

_logger = _logging.getLogger(__name__)

# Callback invoked with (parent_clone, terminal_key)
OnMatch: _typing.TypeAlias = _typing.Callable[[_typing.Any, _types.Key], None]


def _clone_root(value: _typing.Any, first_key: _types.Key) -> _typing.Any:
    """Clone the root, or synthesize one when the root is not cloneable."""
    if value is not None and not _clone.is_cloneable(value):
        _logger.debug(
            "Replacing non-cloneable root %s with an empty container",
            type(value).__name__,
        )
    return _clone.clone_or_empty(value, first_key)


def _clone_child(value: _typing.Any, next_key: _types.Key) -> _typing.Any:
    """Clone an intermediate branch, or synthesize one shaped by next_key."""
    if value is not _types.MISSING and value is not None and not _clone.is_cloneable(value):
        _logger.debug(
            "Replacing non-cloneable %s on path with an empty container",
            type(value).__name__,
        )
    return _clone.clone_or_empty(value, next_key)


def _walk_clone(
    keys: _types.ParsedPath,
    clone: _typing.Any,
    on_match: OnMatch,
    index: int,
) -> _typing.Any:
    """
    Clone the branch at keys[index] inside an already-cloned container.

    Args:
        keys: The full normalized path.
        clone: The cloned container holding keys[index].
        on_match: Terminal callback.
        index: Position of the key to process.

    Returns:
        The same clone, with the branch replaced by its clone chain.
    """
    key = keys[index]
    next_index = index + 1

    if next_index == len(keys):
        on_match(clone, key)
        return clone

    child = _clone_child(_clone.read_key(clone, key), keys[next_index])
    _clone.write_key(clone, key, _walk_clone(keys, child, on_match, next_index))
    return clone


def clone_along_path(
    path: _typing.Any,
    obj: _typing.Any,
    on_match: OnMatch,
) -> _typing.Any:
    """
    Produce a new root cloned along path and apply on_match at its end.

    Every container from the root to the parent of the terminal key is a
    fresh shallow clone; missing or non-cloneable branches are replaced by an
    empty list (index key next) or dict (any other key). on_match is called
    exactly once with (parent_clone, terminal_key) and is the only place a
    value is written, deleted, or merged.

    Args:
        path: A non-empty path in any accepted form.
        obj: The original root (never mutated).
        on_match: Callback performing the terminal side effect.

    Returns:
        The new root.

    Raises:
        ValueError: If path holds no keys.
    """
    keys = _path.normalize_path(path)
    if not keys:
        raise ValueError(f"Cannot clone along an empty path: {path!r}")
    root = _clone_root(obj, keys[0])

    if len(keys) == 1:
        on_match(root, keys[0])
        return root

    return _walk_clone(keys, root, on_match, 0)


def read_at_path(
    path: _typing.Any,
    obj: _typing.Any,
    fallback: _typing.Any = _types.MISSING,
) -> _typing.Any:
    """
    Read the value at path without cloning.

    Traversal stops at the first missing link and returns fallback.

    Args:
        path: A non-empty path in any accepted form.
        obj: The root to read from.
        fallback: Returned when nothing is found (default MISSING).

    Returns:
        The value found, or fallback.
    """
    keys = _path.normalize_path(path)

    if len(keys) == 1:
        value = _clone.read_key(obj, keys[0])
        return fallback if value is _types.MISSING else value

    current = obj
    for key in keys:
        if current is None:
            return fallback
        current = _clone.read_key(current, key)
        if current is _types.MISSING:
            return fallback

    return current


def has_at_path(path: _typing.Any, obj: _typing.Any) -> bool:
    """Check whether a value is present at path."""
    return read_at_path(path, obj) is not _types.MISSING


def merge_values(left: _typing.Any, right: _typing.Any, deep: bool) -> _typing.Any:
    """
    Combine two values into a new one.

    - Exactly one side is a list, or left is not cloneable: a shallow clone
      of right (right itself if it is not cloneable).
    - Both lists: a new list of left's type, left's items then right's.
      Lists are appended, never overlaid index by index.
    - Both objects: a clone of left updated with every own item of right.
      When deep, items whose right-hand value is cloneable are merged
      recursively; otherwise right's value overwrites.

    Args:
        left: The value being merged into (never mutated).
        right: The value merged in; wins on conflicts.
        deep: Whether nested objects are merged recursively.

    Returns:
        The merged value.
    """
    left_is_list = isinstance(left, list)

    if left_is_list != isinstance(right, list) or not _clone.is_cloneable(left):
        return _clone.clone_if_possible(right)

    if left_is_list:
        merged = _clone.shallow_clone(left)
        merged.extend(right)
        return merged

    target = _clone.shallow_clone(left)

    for key, value in _clone.own_items(right):
        if deep and _clone.is_cloneable(value):
            value = merge_values(_clone.read_key(target, key), value, deep)
        _clone.write_key(target, key, value)

    return target


def path_for_append(path: _typing.Any, obj: _typing.Any) -> _typing.Any:
    """
    Rewrite path to address the next free index when it points at a list.

    The decision depends on the value already at the path (the root for an
    empty path), never on the value being added.

        >>> path_for_append("items", {"items": ["a"]})
        ['items', 1]
        >>> path_for_append("name", {"name": "x"})
        'name'
    """
    existing = obj if _path.is_empty_path(path) else read_at_path(path, obj)

    if isinstance(existing, list):
        full_path = _path.append_index(path, len(existing))
        _logger.debug("Appending at %r", full_path)
        return full_path

    return path
