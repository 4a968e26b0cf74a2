"""Console output and logging configuration.

Provides Rich-based console output and logging setup:
    - console: Main Rich console for stdout
    - stderr_console: Rich console for stderr (all diagnostics)
    - setup_logging(): Configure logging with a Rich handler
    - get_logger(): Get a named logger instance

Standard output is reserved for command results and the shell marker line,
so the log handler always writes to stderr.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from rich.console import Console
from rich.logging import RichHandler

console = Console()
stderr_console = Console(stderr=True)

REDACTED = "<redacted>"

# Tokens registered by setup_logging; also applied to reported errors.
_redact_tokens: tuple[str, ...] = ()


def redact(text: str, tokens: Iterable[str] | None = None, replacement: str = REDACTED) -> str:
    """Replace every reserved token in ``text``."""
    for token in _redact_tokens if tokens is None else tokens:
        if token:
            text = text.replace(token, replacement)
    return text


class TokenRedactingFilter(logging.Filter):
    """Rewrite reserved tokens out of log messages.

    The shell wrapper scans tool output for a reserved token, so a log line
    that happens to quote it must not reach the terminal verbatim.
    """

    def __init__(self, tokens: Iterable[str], replacement: str = REDACTED) -> None:
        super().__init__()
        self._tokens = tuple(token for token in tokens if token)
        self._replacement = replacement

    def filter(self, record: logging.LogRecord) -> bool:
        if not self._tokens:
            return True
        message = record.getMessage()
        if not any(token in message for token in self._tokens):
            return True
        record.msg = redact(message, self._tokens, self._replacement)
        record.args = None
        return True


def _normalize_level(level: str | int) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.INFO)
    return int(level)


def setup_logging(
    level: str | int = logging.INFO,
    verbose: bool = False,
    redact_tokens: Iterable[str] = (),
) -> logging.Logger:
    """Configure logging with a Rich handler and return the app logger."""
    global _redact_tokens
    numeric_level = logging.DEBUG if verbose else _normalize_level(level)
    _redact_tokens = tuple(token for token in redact_tokens if token)

    handler = RichHandler(
        console=stderr_console,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=False,
        show_path=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    handler.setLevel(numeric_level)
    handler.addFilter(TokenRedactingFilter(_redact_tokens))

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(numeric_level)
    root.addHandler(handler)

    logger = logging.getLogger("jumpdir")
    logger.handlers.clear()
    logger.setLevel(numeric_level)
    logger.propagate = False
    logger.addHandler(handler)

    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    return logging.getLogger(name or "jumpdir")
