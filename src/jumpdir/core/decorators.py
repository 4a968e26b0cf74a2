from __future__ import annotations

import functools
from collections.abc import Callable
from typing import Any, NoReturn, TypeVar

import typer
from rich.markup import escape

from jumpdir.core.config import ConfigError
from jumpdir.core.console import redact, stderr_console
from jumpdir.core.result import JumpdirError

F = TypeVar("F", bound=Callable[..., Any])


def report_error(exc: Exception) -> None:
    stderr_console.print(f"[red]Error:[/red] {escape(redact(str(exc)))}", highlight=False)


def _handle_exception(exc: Exception) -> NoReturn:
    report_error(exc)
    raise typer.Exit(code=1)


def handle_exceptions(func: F) -> F:
    """Decorate CLI entrypoints to present friendly errors and exit cleanly."""

    @functools.wraps(func)
    def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except (JumpdirError, ConfigError, PermissionError) as exc:
            _handle_exception(exc)

    return sync_wrapper  # type: ignore[return-value]


__all__ = ["handle_exceptions", "report_error"]
