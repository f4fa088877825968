"""
Type aliases and sentinels shared across the unchanged package.

- Key: a single path component (property name, mapping key, or list index)
- ParsedPath: normalized list of keys
- Path: anything accepted where a path is expected
- ContainerKind: how a value is cloned and walked into
- MISSING: marks an absent key, attribute, or index
"""

from __future__ import annotations

import enum as _enum
import typing as _typing

# A key is a string property name, a list index, or any other hashable
# mapping key (tuples, enum members, ...).
Key: _typing.TypeAlias = _typing.Hashable

# Example: ["deeply", 0, "nested", "key"] represents deeply[0].nested["key"]
ParsedPath: _typing.TypeAlias = list[Key]

Path: _typing.TypeAlias = "Key | _typing.Sequence[Key] | None"

# Handler passed to the *_with operations
WithHandler: _typing.TypeAlias = _typing.Callable[..., _typing.Any]


class ContainerKind(_enum.Enum):
    """Classification of a cloneable value."""

    ARRAY = "array"
    """A list or list subclass."""

    PLAIN_OBJECT = "plain_object"
    """An instance whose type is exactly dict."""

    GLOBAL_INSTANCE = "global_instance"
    """A built-in container other than dict/list; clones to an empty dict."""

    CUSTOM_INSTANCE = "custom_instance"
    """A mapping subclass or attribute-bearing object; cloned with its class."""


# Helper function to reconstruct the MISSING singleton during unpickle
def _get_missing_singleton() -> _MissingType:
    """Return the MISSING singleton. Called by pickle to reconstruct."""
    return MISSING


class _MissingType:
    """Sentinel type marking an absent value."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "<MISSING>"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> tuple[_typing.Callable[[], _MissingType], tuple[()]]:
        """Pickle support: ensure singleton is preserved."""
        return (_get_missing_singleton, ())


MISSING = _MissingType()
