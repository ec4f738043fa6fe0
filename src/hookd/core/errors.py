"""
Structured error types for hookd.

Every fallible core operation raises one of the errors below.  The core
never speaks HTTP: the API layer is solely responsible for mapping an
:class:`ErrorCategory` onto a transport status code.

Manifesto:
    - **Small taxonomy:** NotFound, InvalidRange, RangeNotSatisfiable,
      Internal (plus Config for startup)
    - **Rich context:** Errors carry metadata for structured logging
    - **Error chaining:** The original exception is kept as ``cause``
      and as ``__cause__`` so tracebacks stay intact

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────┐
        │                       HookdError                          │
        │            (category, context, cause)                     │
        ├──────────────────────────────────────────────────────────┤
        │  NotFoundError            → NOT_FOUND                     │
        │  InvalidRangeError        → INVALID_RANGE                 │
        │  RangeNotSatisfiableError → RANGE_NOT_SATISFIABLE         │
        │  InternalError            → INTERNAL                      │
        │  ConfigError              → CONFIG                        │
        └──────────────────────────────────────────────────────────┘

Examples:
    >>> error = NotFoundError("No hook with this name configured")
    >>> error.category.value
    'NOT_FOUND'

    >>> try:
    ...     raise OSError("disk full")
    ... except OSError as e:
    ...     raise InternalError("Couldn't write hook info", cause=e)
    Traceback (most recent call last):
    ...
    InternalError: Couldn't write hook info

Tags:
    error-handling, exception-hierarchy, error-context, hookd

Doc-Types:
    api-reference
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Error categories used for logging and transport mapping."""

    NOT_FOUND = "NOT_FOUND"                        # Unknown hook, instance or stream
    INVALID_RANGE = "INVALID_RANGE"                # Semantically malformed byte range
    RANGE_NOT_SATISFIABLE = "RANGE_NOT_SATISFIABLE"  # Start beyond current EOF
    CONFIG = "CONFIG"                              # Missing or invalid configuration
    INTERNAL = "INTERNAL"                          # Filesystem, spawn, serialization


class HookdError(Exception):
    """
    Base exception for all hookd errors.

    Subclasses set ``default_category``; callers may attach extra metadata
    with :meth:`with_context` before raising.

    Attributes:
        message: Human-readable description, safe to log
        category: ErrorCategory used for routing
        context: Extra key/value pairs for structured logging
        cause: The underlying exception, if any
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context: dict[str, Any] = dict(context or {})
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> HookdError:
        """Attach metadata and return self (fluent).

        Example:
            raise NotFoundError("Log doesn't exist").with_context(
                instance_id=str(instance_id), stream="stdout"
            )
        """
        self.context.update(kwargs)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Serialize for structured logging."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        if self.context:
            result["context"] = dict(self.context)
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


class NotFoundError(HookdError):
    """Unknown hook name, unknown instance id, or stream file not yet present."""

    default_category = ErrorCategory.NOT_FOUND


class InvalidRangeError(HookdError):
    """Semantically malformed byte range, e.g. ``start >= end``."""

    default_category = ErrorCategory.INVALID_RANGE


class RangeNotSatisfiableError(HookdError):
    """Explicit range start lies beyond the current end of the log."""

    default_category = ErrorCategory.RANGE_NOT_SATISFIABLE


class InternalError(HookdError):
    """Filesystem, spawn, serialization or OS-level failure."""

    default_category = ErrorCategory.INTERNAL


class ConfigError(HookdError):
    """The daemon configuration could not be loaded or is invalid."""

    default_category = ErrorCategory.CONFIG


__all__ = [
    "ErrorCategory",
    "HookdError",
    "NotFoundError",
    "InvalidRangeError",
    "RangeNotSatisfiableError",
    "InternalError",
    "ConfigError",
]
