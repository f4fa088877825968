"""
Classification, cloning primitives, and key accessors.

Every value the engine meets is either terminal (scalars, callables, opaque
objects such as dates) or a container of one of four kinds:

- ARRAY: lists, cloned through their own class so subclasses survive
- PLAIN_OBJECT: exact dicts, cloned with dict()
- GLOBAL_INSTANCE: other built-in containers, cloned to an empty dict
- CUSTOM_INSTANCE: mapping subclasses and attribute objects, cloned with
  copy.copy (same class, __init__ not run)

Key access is dispatched on the container as well: mappings use items,
sequences use integer indices, and any other object uses attributes.
"""

from __future__ import annotations

import collections as _collections
import collections.abc as _abc
import copy as _copy
import datetime as _datetime
import enum as _enum
import numbers as _numbers
import pathlib as _pathlib
import re as _re
import types as _types_module
import typing as _typing
import uuid as _uuid
import xml.etree.ElementTree as _element_tree

import unchanged._types as _types

# Terminal values that are never walked into
_SCALAR_TYPES: tuple[type, ...] = (
    type(None),
    bool,
    _numbers.Number,
    str,
    bytes,
)

# Callables and namespaces are values, not containers
_CALLABLE_TYPES: tuple[type, ...] = (
    type,
    _types_module.FunctionType,
    _types_module.BuiltinFunctionType,
    _types_module.MethodType,
    _types_module.ModuleType,
)

# Objects whose internal state must not be copied member by member
_BUILTIN_OPAQUE_TYPES: tuple[type, ...] = (
    _datetime.date,
    _datetime.time,
    _datetime.timedelta,
    _datetime.tzinfo,
    _re.Pattern,
    _enum.Enum,
    _uuid.UUID,
    _pathlib.PurePath,
    _element_tree.Element,
)

# Built-in containers other than dict/list: cloned as an empty dict
_GLOBAL_TYPES: tuple[type, ...] = (
    tuple,
    set,
    frozenset,
    bytearray,
    memoryview,
    range,
    _collections.deque,
    _types_module.MappingProxyType,
)

_registered_opaque_types: list[type] = []


def register_opaque_type(cls: type) -> type:
    """
    Mark a type as non-cloneable.

    Instances are treated as opaque leaves: a write that needs to pass
    through one replaces it with an empty container, and merges replace it
    outright. Usable as a class decorator.

    Args:
        cls: The type to register.

    Returns:
        The same type.
    """
    if not isinstance(cls, type):
        raise TypeError(f"Expected a type, got {type(cls).__name__}")
    if cls not in _registered_opaque_types:
        _registered_opaque_types.append(cls)
    return cls


def unregister_opaque_type(cls: type) -> None:
    """Remove a type previously passed to register_opaque_type()."""
    if cls in _registered_opaque_types:
        _registered_opaque_types.remove(cls)


def opaque_types() -> tuple[type, ...]:
    """Return every type currently treated as opaque."""
    return _BUILTIN_OPAQUE_TYPES + tuple(_registered_opaque_types)


def classify(value: _typing.Any) -> _types.ContainerKind | None:
    """
    Classify a value for cloning.

    Returns:
        The ContainerKind, or None when the value is not cloneable.
    """
    if value is _types.MISSING:
        return None
    if isinstance(value, _SCALAR_TYPES) or isinstance(value, _CALLABLE_TYPES):
        return None
    if isinstance(value, opaque_types()):
        return None
    if isinstance(value, list):
        return _types.ContainerKind.ARRAY
    if type(value) is dict:
        return _types.ContainerKind.PLAIN_OBJECT
    if isinstance(value, _GLOBAL_TYPES):
        return _types.ContainerKind.GLOBAL_INSTANCE
    return _types.ContainerKind.CUSTOM_INSTANCE


def is_cloneable(value: _typing.Any) -> bool:
    """Check whether the engine may shallow-clone and walk into a value."""
    return classify(value) is not None


def shallow_clone(value: _typing.Any) -> _typing.Any:
    """
    Shallow-clone a cloneable container, preserving its effective type.

    Raises:
        TypeError: If the value is not cloneable.
    """
    kind = classify(value)

    if kind is _types.ContainerKind.PLAIN_OBJECT:
        return dict(value)
    if kind is _types.ContainerKind.ARRAY:
        cloned = type(value)()
        cloned.extend(value)
        return cloned
    if kind is _types.ContainerKind.GLOBAL_INSTANCE:
        return {}
    if kind is _types.ContainerKind.CUSTOM_INSTANCE:
        return _copy.copy(value)

    raise TypeError(f"Cannot clone value of type {type(value).__name__}")


def clone_if_possible(value: _typing.Any) -> _typing.Any:
    """Shallow-clone the value if cloneable, else return it unchanged."""
    return shallow_clone(value) if is_cloneable(value) else value


def is_index(key: _typing.Any) -> bool:
    """Check whether a key addresses a list position (bool excluded)."""
    return isinstance(key, int) and not isinstance(key, bool)


def empty_child_for(key: _typing.Any) -> list[_typing.Any] | dict[_typing.Any, _typing.Any]:
    """Return an empty list for an index key, else an empty dict."""
    return [] if is_index(key) else {}


def empty_like(value: _typing.Any) -> list[_typing.Any] | dict[_typing.Any, _typing.Any]:
    """Return an empty list if the value is a list, else an empty dict."""
    return [] if isinstance(value, list) else {}


def clone_or_empty(value: _typing.Any, next_key: _typing.Any) -> _typing.Any:
    """Shallow-clone the value if cloneable, else synthesize a child for next_key."""
    return shallow_clone(value) if is_cloneable(value) else empty_child_for(next_key)


# =============================================================================
# Key accessors
# =============================================================================


def _is_sequence(value: _typing.Any) -> bool:
    """Sequences addressed by index (strings and bytes are terminal)."""
    return isinstance(value, _abc.Sequence) and not isinstance(value, (str, bytes, bytearray))


def _uses_attributes(value: _typing.Any) -> bool:
    """Objects addressed through attributes rather than items."""
    return (
        not isinstance(value, (_abc.Mapping, _abc.Set))
        and not _is_sequence(value)
        and not isinstance(value, _collections.deque)
        and classify(value) is _types.ContainerKind.CUSTOM_INSTANCE
    )


def _instance_attributes(value: _typing.Any) -> dict[str, _typing.Any]:
    """Collect an object's own attributes from __dict__ and __slots__."""
    attributes: dict[str, _typing.Any] = {}

    for cls in reversed(type(value).__mro__):
        slots = cls.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if name in ("__dict__", "__weakref__"):
                continue
            attribute = getattr(value, name, _types.MISSING)
            if attribute is not _types.MISSING:
                attributes[name] = attribute

    attributes.update(getattr(value, "__dict__", {}))
    return attributes


def read_key(container: _typing.Any, key: _typing.Any) -> _typing.Any:
    """
    Read a key from a container without raising.

    Attribute objects expose only their own instance attributes, so methods
    and class attributes read as missing.

    Returns:
        The value, or MISSING when the container lacks the key or is not a
        container at all.
    """
    if container is None or isinstance(container, (str, bytes, bytearray)):
        return _types.MISSING

    if isinstance(container, _abc.Mapping):
        try:
            return container.get(key, _types.MISSING)
        except TypeError:
            # Unhashable key
            return _types.MISSING

    if _is_sequence(container) or isinstance(container, _collections.deque):
        if is_index(key) and -len(container) <= key < len(container):
            return container[key]
        return _types.MISSING

    if isinstance(key, str) and _uses_attributes(container):
        return _instance_attributes(container).get(key, _types.MISSING)

    return _types.MISSING


def write_key(container: _typing.Any, key: _typing.Any, value: _typing.Any) -> None:
    """
    Write a value into a freshly cloned container.

    Writing past the end of a list pads the gap with None.

    Raises:
        TypeError: If the key cannot address the container (for example a
            string key on a list, or a negative index before its start).
    """
    if isinstance(container, list):
        if not is_index(key):
            raise TypeError(
                f"list keys must be integers, got {type(key).__name__} {key!r}"
            )
        if key < -len(container):
            raise TypeError(
                f"list index {key} out of range for a list of length {len(container)}"
            )
        if key >= len(container):
            container.extend([None] * (key - len(container) + 1))
        container[key] = value
        return

    if isinstance(container, _abc.Mapping):
        container[key] = value
        return

    if not isinstance(key, str):
        raise TypeError(
            f"attribute names must be strings, got {type(key).__name__} {key!r}"
        )
    setattr(container, key, value)


def delete_key(container: _typing.Any, key: _typing.Any) -> None:
    """
    Delete a key from a freshly cloned container.

    Lists shift later items left and shrink by one. Missing keys are ignored.
    """
    if isinstance(container, list):
        if is_index(key) and -len(container) <= key < len(container):
            del container[key]
        return

    if isinstance(container, _abc.Mapping):
        if key in container:
            del container[key]
        return

    if isinstance(key, str) and key in _instance_attributes(container):
        delattr(container, key)


def own_items(container: _typing.Any) -> list[tuple[_typing.Any, _typing.Any]]:
    """
    List a container's own (key, value) pairs.

    Global instances (tuples, sets, ...) expose no own items, matching how
    they clone to an empty dict.
    """
    kind = classify(container)

    if kind is None or kind is _types.ContainerKind.GLOBAL_INSTANCE:
        return []
    if kind is _types.ContainerKind.ARRAY:
        return list(enumerate(container))
    if isinstance(container, _abc.Mapping):
        return list(container.items())
    return list(_instance_attributes(container).items())
