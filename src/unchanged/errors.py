"""
Exceptions raised by unchanged.

Soft misses (a path that does not resolve) are never errors: operations
return a fallback or the original object instead. Only misuse raises.
"""


class UnchangedError(Exception):
    """Base class for all unchanged errors."""

    pass


class InvalidHandlerError(UnchangedError, TypeError):
    """Raised when a *_with operation receives a handler that is not callable."""

    def __init__(self, handler: object = None) -> None:
        self.handler = handler
        super().__init__('handler passed is not of type "function".')


class PathSyntaxError(UnchangedError, ValueError):
    """Raised when a path string cannot be tokenized."""

    def __init__(self, path: str, position: int, message: str) -> None:
        self.path = path
        self.position = position
        super().__init__(f"Invalid path {path!r} at position {position}: {message}")
