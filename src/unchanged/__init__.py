"""
unchanged - non-mutating operations on nested data.

Read and write plain nested structures (dicts, lists, and attribute objects)
by path, without mutating the input and without deep-copying it: a write
clones only the containers along the path and shares everything else.

Example:
    >>> import unchanged
    >>> state = {"users": [{"name": "Ada"}], "settings": {"theme": "dark"}}
    >>> updated = unchanged.set("users[0].name", "Grace", state)
    >>> updated["users"][0]["name"], state["users"][0]["name"]
    ('Grace', 'Ada')
    >>> updated["settings"] is state["settings"]
    True

Every operation is curried and accepts the placeholder ``__``.
"""

import importlib.metadata as _metadata

# Version is defined in pyproject.toml - read it and parse into tuple (primary representation)
_raw_version = _metadata.version("unchanged")
__version_info__: tuple[int, int, int] = tuple(int(x) for x in _raw_version.split(".")[:3])  # type: ignore[assignment]
__version__: str = ".".join(str(x) for x in __version_info__)

from unchanged import _handlers  # noqa: E402
from unchanged._clone import (  # noqa: E402
    is_cloneable,
    register_opaque_type,
    unregister_opaque_type,
)
from unchanged._curry import PLACEHOLDER, Curried, __, curry  # noqa: E402
from unchanged._path import is_empty_path, normalize_path, parse_path  # noqa: E402
from unchanged._types import MISSING, ContainerKind  # noqa: E402
from unchanged.errors import (  # noqa: E402
    InvalidHandlerError,
    PathSyntaxError,
    UnchangedError,
)

add = curry(_handlers.add)
add_with = curry(_handlers.add_with)
assign = curry(_handlers.assign)
assign_with = curry(_handlers.assign_with)
call = curry(_handlers.call, 3)
call_with = curry(_handlers.call_with, 4)
get = curry(_handlers.get)
get_or = curry(_handlers.get_or)
get_with = curry(_handlers.get_with)
get_with_or = curry(_handlers.get_with_or)
has = curry(_handlers.has)
has_with = curry(_handlers.has_with)
is_ = curry(_handlers.is_)
is_with = curry(_handlers.is_with)
merge = curry(_handlers.merge)
merge_with = curry(_handlers.merge_with)
not_ = curry(_handlers.not_)
not_with = curry(_handlers.not_with)
remove = curry(_handlers.remove)
remove_with = curry(_handlers.remove_with)
set = curry(_handlers.set)  # noqa: A001
set_with = curry(_handlers.set_with)

__all__ = [
    "MISSING",
    "PLACEHOLDER",
    "ContainerKind",
    "Curried",
    "InvalidHandlerError",
    "PathSyntaxError",
    "UnchangedError",
    "__",
    "__version__",
    "__version_info__",
    "add",
    "add_with",
    "assign",
    "assign_with",
    "call",
    "call_with",
    "curry",
    "get",
    "get_or",
    "get_with",
    "get_with_or",
    "has",
    "has_with",
    "is_",
    "is_cloneable",
    "is_empty_path",
    "is_with",
    "merge",
    "merge_with",
    "normalize_path",
    "not_",
    "not_with",
    "parse_path",
    "register_opaque_type",
    "remove",
    "remove_with",
    "set",
    "set_with",
    "unregister_opaque_type",
]
