"""
Result type and error hierarchy for jumpdir.

This module provides:
1. Result[T, E] type for explicit error handling
2. Domain-specific exception hierarchy

Usage:
    from jumpdir.core.result import Ok, Err, Result, NotFoundError

    def unwind(entry_id: int) -> Result[list[Entry], NotFoundError]:
        if not present:
            return Err(NotFoundError("No entry with that id", context={"id": entry_id}))
        return Ok(popped)

    match unwind(3):
        case Ok(entries):
            ...
        case Err(err):
            ...
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")
E = TypeVar("E", bound=Exception)


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Represents a successful result containing a value."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        """Return the contained value."""
        return self.value


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Represents a failed result containing an error."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> T:
        """Raise the contained error."""
        raise self.error


# Type alias for Result
Result = Ok[T] | Err[E]


# ---------------------------------------------------------------------------
# Domain-specific error hierarchy
# ---------------------------------------------------------------------------


class JumpdirError(Exception):
    """Base exception for all jumpdir errors.

    Every error carries a human readable message plus an optional context
    mapping that is rendered after the message.
    """

    def __init__(self, message: str, *, context: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} [{ctx_str}]"
        return self.message


class MissingArgumentError(JumpdirError):
    """Raised when a command is missing its pattern or entry id."""


class NotFoundError(JumpdirError):
    """Raised when a navigation target cannot be located.

    Examples:
    - pop-until id not present in the history
    - no directory matches the requested pattern
    """


class CorruptStateError(JumpdirError):
    """Raised when the history file holds a record that cannot be parsed.

    The file is left untouched so no unrelated history is lost.
    """


class IOFailureError(JumpdirError):
    """Raised when the history file cannot be opened, read or rewritten."""


class ValidationError(JumpdirError):
    """Raised for conflicting or malformed command input."""


class ConfigurationError(JumpdirError):
    """Raised for configuration issues such as an unwritable startup file."""


__all__ = [
    # Result types
    "Ok",
    "Err",
    "Result",
    # Error hierarchy
    "JumpdirError",
    "MissingArgumentError",
    "NotFoundError",
    "CorruptStateError",
    "IOFailureError",
    "ValidationError",
    "ConfigurationError",
]
