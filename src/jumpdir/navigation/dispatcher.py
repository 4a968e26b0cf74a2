"""Command dispatch for forward and backward jumps.

The dispatcher is the only component that mutates the navigation stack. It
turns one resolved command into at most one stack mutation plus at most one
marker line, and reports failures as ``Err`` values instead of raising.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from jumpdir.core.console import get_logger
from jumpdir.core.result import (
    CorruptStateError,
    Err,
    IOFailureError,
    JumpdirError,
    MissingArgumentError,
    NotFoundError,
    Ok,
    Result,
    ValidationError,
)
from jumpdir.navigation.protocol import ShellProtocol
from jumpdir.navigation.stack import NavigationStack

logger = get_logger(__name__)

SearchFn = Callable[[str], Path | None]


@dataclass(frozen=True, slots=True)
class ChangeForward:
    pattern: str | None


@dataclass(frozen=True, slots=True)
class ChangeBackward:
    pass


@dataclass(frozen=True, slots=True)
class ChangeBackwardUntil:
    entry_id: int | None


Command = ChangeForward | ChangeBackward | ChangeBackwardUntil


def select_command(
    pattern: str | None = None, back: bool = False, back_until: int | None = None
) -> Command:
    """Pick the single command requested by the parsed arguments."""
    selected = [
        name
        for name, present in (
            ("pattern", pattern is not None),
            ("--back", back),
            ("--back-until", back_until is not None),
        )
        if present
    ]
    if len(selected) > 1:
        raise ValidationError(
            "Choose only one of a pattern, --back or --back-until",
            context={"given": " ".join(selected)},
        )
    if back:
        return ChangeBackward()
    if back_until is not None:
        return ChangeBackwardUntil(back_until)
    return ChangeForward(pattern)


@dataclass(frozen=True, slots=True)
class Outcome:
    """Where a dispatched command left the shell.

    ``destination`` is None for a benign no-op; ``emitted`` tells whether a
    marker line was written.
    """

    destination: Path | None
    emitted: bool = False


class Dispatcher:
    def __init__(self, stack: NavigationStack, protocol: ShellProtocol, search: SearchFn) -> None:
        self._stack = stack
        self._protocol = protocol
        self._search = search

    def dispatch(self, command: Command) -> Result[Outcome, JumpdirError]:
        try:
            match command:
                case ChangeForward(pattern=pattern):
                    return self._forward(pattern)
                case ChangeBackward():
                    return self._backward()
                case ChangeBackwardUntil(entry_id=entry_id):
                    return self._backward_until(entry_id)
        except (CorruptStateError, IOFailureError) as exc:
            return Err(exc)
        return Err(ValidationError("Unknown command", context={"command": repr(command)}))

    def _forward(self, pattern: str | None) -> Result[Outcome, JumpdirError]:
        if not pattern:
            return Err(MissingArgumentError("A directory pattern is required"))

        candidate = self._search(pattern)
        if candidate is None:
            return Err(NotFoundError("No directory matches", context={"pattern": pattern}))
        if "\n" in str(candidate) or "\r" in str(candidate):
            return Err(
                ValidationError(
                    "Cannot jump to a path containing a line break",
                    context={"path": repr(str(candidate))},
                )
            )

        entry = self._stack.push(candidate)
        logger.info("Jumping to %s", entry.path)
        destination = Path(entry.path)
        return Ok(Outcome(destination, self._protocol.emit(destination)))

    def _backward(self) -> Result[Outcome, JumpdirError]:
        entry = self._stack.pop()
        if entry is None:
            logger.info("Navigation history is empty")
            return Ok(Outcome(None))

        logger.info("Back to %s", entry.path)
        destination = Path(entry.path)
        return Ok(Outcome(destination, self._protocol.emit(destination)))

    def _backward_until(self, entry_id: int | None) -> Result[Outcome, JumpdirError]:
        if entry_id is None:
            return Err(MissingArgumentError("An entry id is required for --back-until"))

        try:
            popped = self._stack.pop_until(entry_id)
        except NotFoundError as exc:
            return Err(exc)

        final = popped[-1]
        logger.info("Unwound %d entries back to %s", len(popped), final.path)
        destination = Path(final.path)
        return Ok(Outcome(destination, self._protocol.emit(destination)))


__all__ = [
    "ChangeBackward",
    "ChangeBackwardUntil",
    "ChangeForward",
    "Command",
    "Dispatcher",
    "Outcome",
    "SearchFn",
    "select_command",
]
