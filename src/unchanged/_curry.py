"""
Curry-with-placeholder calling convention.

Every public operation can be called with fewer arguments than it needs,
returning a function that waits for the rest:

    >>> set_name = set("name")
    >>> set_name("Ada", {})
    {'name': 'Ada'}

The placeholder ``__`` skips a position so it can be filled by a later call:

    >>> get_from_user = get(__, {"name": "Ada"})
    >>> get_from_user("name")
    'Ada'
"""

from __future__ import annotations

import functools as _functools
import inspect as _inspect
import typing as _typing

_T = _typing.TypeVar("_T")


# Helper function to reconstruct the placeholder singleton during unpickle
def _get_placeholder_singleton() -> _PlaceholderType:
    """Return the placeholder singleton. Called by pickle to reconstruct."""
    return PLACEHOLDER


class _PlaceholderType:
    """Sentinel type marking a skipped positional argument."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "__"

    def __reduce__(self) -> tuple[_typing.Callable[[], _PlaceholderType], tuple[()]]:
        """Pickle support: ensure singleton is preserved."""
        return (_get_placeholder_singleton, ())


PLACEHOLDER = _PlaceholderType()
__ = PLACEHOLDER


def required_arity(fn: _typing.Callable[..., _typing.Any]) -> int:
    """Count the positional parameters of fn that have no default."""
    parameters = _inspect.signature(fn).parameters.values()
    return sum(
        1
        for parameter in parameters
        if parameter.kind
        in (_inspect.Parameter.POSITIONAL_ONLY, _inspect.Parameter.POSITIONAL_OR_KEYWORD)
        and parameter.default is _inspect.Parameter.empty
    )


def _fill_placeholders(
    previous: tuple[_typing.Any, ...],
    following: tuple[_typing.Any, ...],
) -> tuple[_typing.Any, ...]:
    """Fill placeholders in previous from following, left to right, then append the rest."""
    remaining = list(following)
    filled = [
        remaining.pop(0) if arg is PLACEHOLDER and remaining else arg
        for arg in previous
    ]
    return (*filled, *remaining)


def _positional_names(signature: _inspect.Signature | None) -> list[str]:
    """Names of the parameters that can be passed by position, in order."""
    if signature is None:
        return []
    return [
        parameter.name
        for parameter in signature.parameters.values()
        if parameter.kind
        in (_inspect.Parameter.POSITIONAL_ONLY, _inspect.Parameter.POSITIONAL_OR_KEYWORD)
    ]


class Curried(_typing.Generic[_T]):
    """
    A function awaiting the rest of its arguments.

    The wrapped function runs once each of its first ``arity`` positional
    parameters holds a value other than the placeholder. A parameter can be
    filled by position or by keyword, so ``get("a", obj=data)`` runs straight
    away. Other keyword arguments are collected and forwarded as-is.
    """

    def __init__(
        self,
        fn: _typing.Callable[..., _T],
        arity: int | None = None,
        args: tuple[_typing.Any, ...] = (),
        kwargs: dict[str, _typing.Any] | None = None,
    ) -> None:
        _functools.update_wrapper(self, fn)
        self._fn = fn
        self._arity = required_arity(fn) if arity is None else arity
        self._args = args
        self._kwargs = dict(kwargs or {})
        try:
            self._signature: _inspect.Signature | None = _inspect.signature(fn)
        except (TypeError, ValueError):
            self._signature = None
        self._required = _positional_names(self._signature)[: self._arity]

    @property
    def arity(self) -> int:
        """Number of arguments needed to run."""
        return self._arity

    @property
    def args(self) -> tuple[_typing.Any, ...]:
        """Positional arguments collected so far (placeholders included)."""
        return self._args

    def _supplied(self, args: tuple[_typing.Any, ...], kwargs: dict[str, _typing.Any]) -> int | None:
        """
        Count the required parameters filled by args and kwargs.

        Returns:
            The count, or None when the arguments cannot bind at all (the call
            is then made so the function reports the error itself).
        """
        if self._signature is None:
            return sum(1 for arg in args[: self._arity] if arg is not PLACEHOLDER)

        try:
            bound = self._signature.bind_partial(*args, **kwargs)
        except TypeError:
            return None

        supplied = sum(
            1 for name in self._required if bound.arguments.get(name, PLACEHOLDER) is not PLACEHOLDER
        )
        # An explicit arity may reach into *args
        supplied += sum(
            1 for arg in args[len(self._required) : self._arity] if arg is not PLACEHOLDER
        )
        return supplied

    def __call__(self, *args: _typing.Any, **kwargs: _typing.Any) -> _T | Curried[_T]:
        combined = _fill_placeholders(self._args, args)
        combined_kwargs = {**self._kwargs, **kwargs}

        supplied = self._supplied(combined, combined_kwargs)
        if supplied is None or supplied >= self._arity:
            return self._fn(*combined, **combined_kwargs)

        return Curried(self._fn, self._arity, combined, combined_kwargs)

    def __repr__(self) -> str:
        supplied = self._supplied(self._args, self._kwargs) or 0
        return f"<curried {self.__name__} ({supplied} of {self._arity} arguments)>"


def curry(fn: _typing.Callable[..., _T], arity: int | None = None) -> Curried[_T]:
    """
    Make fn callable with its arguments spread over several calls.

    Args:
        fn: The function to wrap.
        arity: Arguments required before fn runs, filled by position or by
            keyword. Defaults to the number of positional parameters without
            a default.

    Returns:
        The curried function.
    """
    return Curried(fn, arity)
