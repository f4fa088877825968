"""
The operation layer.

Each operation is a pure function taking the object last among its required
arguments. Write operations return a new root that shares every untouched
branch with the input, or the input itself when nothing had to change.

The *_with variants take a handler first. The handler receives the current
value at the path followed by any extra trailing arguments, and either
produces the new value (set_with, merge_with, assign_with, add_with) or
gates the operation (has_with, remove_with, call_with).
"""

from __future__ import annotations

import logging as _logging
import math as _math
import types as _types_module
import typing as _typing

import unchanged._clone as _clone
import unchanged._engine as _engine
import unchanged._path as _path
import unchanged._types as _types
import unchanged.errors as errors

_logger = _logging.getLogger(__name__)


def _validate_handler(fn: _typing.Any) -> None:
    """Raise InvalidHandlerError unless fn is callable."""
    if not callable(fn):
        raise errors.InvalidHandlerError(fn)


def _current_value(path: _typing.Any, obj: _typing.Any) -> _typing.Any:
    """Value at path (the root for an empty path), None when missing."""
    if _path.is_empty_path(path):
        return obj
    return _engine.read_at_path(path, obj, None)


def _call_if_function(
    target: _typing.Any,
    context: _typing.Any,
    parameters: _typing.Iterable[_typing.Any] | None,
) -> _typing.Any:
    """Call target with parameters if it is callable, else return None."""
    if not callable(target):
        return None

    if context is not _types.MISSING and isinstance(target, _types_module.FunctionType):
        target = _types_module.MethodType(target, context)

    return target(*(parameters or ()))


def is_same_value_zero(first: _typing.Any, second: _typing.Any) -> bool:
    """
    Compare two values, treating NaN as equal to itself.

    Booleans never equal numbers, so ``True`` does not match ``1``.
    """
    if first is second:
        return True
    if isinstance(first, bool) != isinstance(second, bool):
        return False
    if isinstance(first, float) and isinstance(second, float):
        if _math.isnan(first) and _math.isnan(second):
            return True
    return bool(first == second)


def _remove_at(ref: _typing.Any, key: _types.Key) -> None:
    _clone.delete_key(ref, key)


# =============================================================================
# Reads
# =============================================================================


def get(path: _typing.Any, obj: _typing.Any) -> _typing.Any:
    """Return the value at path, the object itself for an empty path, else None."""
    if _path.is_empty_path(path):
        return obj
    return _engine.read_at_path(path, obj, None)


def get_or(fallback: _typing.Any, path: _typing.Any, obj: _typing.Any) -> _typing.Any:
    """Return the value at path, or fallback when nothing is there."""
    if _path.is_empty_path(path):
        return obj
    return _engine.read_at_path(path, obj, fallback)


def get_with(
    fn: _types.WithHandler,
    path: _typing.Any,
    obj: _typing.Any,
    *extra_args: _typing.Any,
) -> _typing.Any:
    """
    Return fn applied to the value at path.

    Returns None without calling fn when nothing is at the path.

    Raises:
        InvalidHandlerError: If fn is not callable.
    """
    return get_with_or(fn, None, path, obj, *extra_args)


def get_with_or(
    fn: _types.WithHandler,
    fallback: _typing.Any,
    path: _typing.Any,
    obj: _typing.Any,
    *extra_args: _typing.Any,
) -> _typing.Any:
    """
    Return fn applied to the value at path, or fallback when nothing is there.

    Raises:
        InvalidHandlerError: If fn is not callable.
    """
    _validate_handler(fn)

    if _path.is_empty_path(path):
        return fn(obj, *extra_args)

    value = _engine.read_at_path(path, obj)
    return fallback if value is _types.MISSING else fn(value, *extra_args)


def has(path: _typing.Any, obj: _typing.Any) -> bool:
    """Check whether a value is present at path (root: obj is not None)."""
    if _path.is_empty_path(path):
        return obj is not None
    return _engine.has_at_path(path, obj)


def has_with(
    fn: _types.WithHandler,
    path: _typing.Any,
    obj: _typing.Any,
    *extra_args: _typing.Any,
) -> bool:
    """
    Check that a value is present at path and fn returns truthy for it.

    Raises:
        InvalidHandlerError: If fn is not callable.
    """
    _validate_handler(fn)

    if _path.is_empty_path(path):
        return bool(fn(obj, *extra_args))

    value = _engine.read_at_path(path, obj)
    return value is not _types.MISSING and bool(fn(value, *extra_args))


def is_(path: _typing.Any, value: _typing.Any, obj: _typing.Any) -> bool:
    """Check whether the value at path equals value (NaN matches NaN)."""
    return is_same_value_zero(_current_value(path, obj), value)


def is_with(
    fn: _types.WithHandler,
    path: _typing.Any,
    value: _typing.Any,
    obj: _typing.Any,
    *extra_args: _typing.Any,
) -> bool:
    """
    Check whether fn applied to the value at path equals value.

    fn is called with None when nothing is at the path.

    Raises:
        InvalidHandlerError: If fn is not callable.
    """
    _validate_handler(fn)
    return is_same_value_zero(fn(_current_value(path, obj), *extra_args), value)


def not_(path: _typing.Any, value: _typing.Any, obj: _typing.Any) -> bool:
    """Negation of is_()."""
    return not is_(path, value, obj)


def not_with(
    fn: _types.WithHandler,
    path: _typing.Any,
    value: _typing.Any,
    obj: _typing.Any,
    *extra_args: _typing.Any,
) -> bool:
    """Negation of is_with()."""
    return not is_with(fn, path, value, obj, *extra_args)


def call(
    path: _typing.Any,
    parameters: _typing.Iterable[_typing.Any] | None,
    obj: _typing.Any,
    context: _typing.Any = _types.MISSING,
) -> _typing.Any:
    """
    Call the function at path with parameters.

    When context is given and the target is a plain function, it is bound as
    the function's first argument. Returns None when the target is not
    callable.
    """
    target = obj if _path.is_empty_path(path) else _engine.read_at_path(path, obj)
    return _call_if_function(target, context, parameters)


def call_with(
    fn: _types.WithHandler,
    path: _typing.Any,
    parameters: _typing.Iterable[_typing.Any] | None,
    obj: _typing.Any,
    context: _typing.Any = _types.MISSING,
    *extra_args: _typing.Any,
) -> _typing.Any:
    """
    Call whatever fn returns for the value at path.

    Nothing is called when the path is missing or fn's result is not
    callable; None is returned instead.

    Raises:
        InvalidHandlerError: If fn is not callable.
    """
    _validate_handler(fn)

    if _path.is_empty_path(path):
        return _call_if_function(fn(obj, *extra_args), context, parameters)

    value = _engine.read_at_path(path, obj)
    if value is _types.MISSING:
        return None

    return _call_if_function(fn(value, *extra_args), context, parameters)


# =============================================================================
# Writes
# =============================================================================


def set(path: _typing.Any, value: _typing.Any, obj: _typing.Any) -> _typing.Any:  # noqa: A001
    """
    Return a new object with value stored at path.

    Missing branches are created: a list when the next key is an index, a
    dict otherwise. An empty path returns value itself without cloning.
    """
    if _path.is_empty_path(path):
        return value

    def assign_value(ref: _typing.Any, key: _types.Key) -> None:
        _clone.write_key(ref, key, value)

    return _engine.clone_along_path(path, obj, assign_value)


def set_with(
    fn: _types.WithHandler,
    path: _typing.Any,
    obj: _typing.Any,
    *extra_args: _typing.Any,
) -> _typing.Any:
    """
    Return a new object with fn(current value) stored at path.

    fn receives None when nothing is at the path yet.

    Raises:
        InvalidHandlerError: If fn is not callable.
    """
    _validate_handler(fn)

    if _path.is_empty_path(path):
        return fn(obj, *extra_args)

    def assign_result(ref: _typing.Any, key: _types.Key) -> None:
        current = _clone.read_key(ref, key)
        current = None if current is _types.MISSING else current
        _clone.write_key(ref, key, fn(current, *extra_args))

    return _engine.clone_along_path(path, obj, assign_result)


def add(path: _typing.Any, value: _typing.Any, obj: _typing.Any) -> _typing.Any:
    """
    Append value to the list at path, or set it when path holds no list.

    With an empty path, a list root gets value appended and any other root is
    replaced by value.
    """
    return set(_engine.path_for_append(path, obj), value, obj)


def add_with(
    fn: _types.WithHandler,
    path: _typing.Any,
    obj: _typing.Any,
    *extra_args: _typing.Any,
) -> _typing.Any:
    """
    Like add(), with the appended value produced by fn.

    Raises:
        InvalidHandlerError: If fn is not callable.
    """
    _validate_handler(fn)
    return set_with(fn, _engine.path_for_append(path, obj), obj, *extra_args)


def remove(path: _typing.Any, obj: _typing.Any) -> _typing.Any:
    """
    Return a new object without the value at path.

    Lists close the gap left by a removed index. When nothing is at path the
    input itself is returned. An empty path returns an empty list or dict
    matching the root.
    """
    if _path.is_empty_path(path):
        return _clone.empty_like(obj)

    if not _engine.has_at_path(path, obj):
        _logger.debug("Nothing to remove at %r", path)
        return obj

    return _engine.clone_along_path(path, obj, _remove_at)


def remove_with(
    fn: _types.WithHandler,
    path: _typing.Any,
    obj: _typing.Any,
    *extra_args: _typing.Any,
) -> _typing.Any:
    """
    Like remove(), but only when fn returns truthy for the current value.

    Raises:
        InvalidHandlerError: If fn is not callable.
    """
    _validate_handler(fn)

    if _path.is_empty_path(path):
        empty = _clone.empty_like(obj)
        return empty if fn(empty, *extra_args) else obj

    value = _engine.read_at_path(path, obj)
    if value is _types.MISSING or not fn(value, *extra_args):
        return obj

    return _engine.clone_along_path(path, obj, _remove_at)


def _merge(path: _typing.Any, value: _typing.Any, obj: _typing.Any, deep: bool) -> _typing.Any:
    if not _clone.is_cloneable(obj):
        return value

    if _path.is_empty_path(path):
        return _engine.merge_values(obj, value, deep)

    def merge_value(ref: _typing.Any, key: _types.Key) -> None:
        _clone.write_key(ref, key, _engine.merge_values(_clone.read_key(ref, key), value, deep))

    return _engine.clone_along_path(path, obj, merge_value)


def _merge_with(
    fn: _types.WithHandler,
    path: _typing.Any,
    obj: _typing.Any,
    extra_args: tuple[_typing.Any, ...],
    deep: bool,
) -> _typing.Any:
    _validate_handler(fn)

    if not _clone.is_cloneable(obj):
        return fn(obj, *extra_args)

    if _path.is_empty_path(path):
        value = fn(obj, *extra_args)
        return _engine.merge_values(obj, value, deep) if value else obj

    changed = False

    def merge_result(ref: _typing.Any, key: _types.Key) -> None:
        nonlocal changed

        current = _clone.read_key(ref, key)
        value = fn(None if current is _types.MISSING else current, *extra_args)
        if value:
            _clone.write_key(ref, key, _engine.merge_values(current, value, deep))
            changed = True

    result = _engine.clone_along_path(path, obj, merge_result)
    return result if changed else obj


def merge(path: _typing.Any, value: _typing.Any, obj: _typing.Any) -> _typing.Any:
    """
    Return a new object with value deep-merged into the value at path.

    Nested objects merge key by key, lists are concatenated, and any type
    mismatch replaces the existing value with a clone of value. A
    non-cloneable root yields value itself, whatever the path.
    """
    return _merge(path, value, obj, deep=True)


def merge_with(
    fn: _types.WithHandler,
    path: _typing.Any,
    obj: _typing.Any,
    *extra_args: _typing.Any,
) -> _typing.Any:
    """
    Deep-merge whatever fn returns for the current value at path.

    A falsy result from fn (None, {}, [], 0, "") leaves the object unchanged
    and the input is returned. A non-cloneable root yields fn(obj) itself.

    Raises:
        InvalidHandlerError: If fn is not callable.
    """
    return _merge_with(fn, path, obj, extra_args, deep=True)


def assign(path: _typing.Any, value: _typing.Any, obj: _typing.Any) -> _typing.Any:
    """Shallow variant of merge(): nested objects are overwritten, not merged."""
    return _merge(path, value, obj, deep=False)


def assign_with(
    fn: _types.WithHandler,
    path: _typing.Any,
    obj: _typing.Any,
    *extra_args: _typing.Any,
) -> _typing.Any:
    """Shallow variant of merge_with()."""
    return _merge_with(fn, path, obj, extra_args, deep=False)
