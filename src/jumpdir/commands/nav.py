"""Directory jump and history commands.

Provides CLI commands for shell navigation:
    - go: forward jump by pattern, or back through the history
    - find: list every directory matching a pattern
    - history: show or clear the navigation history

Only `go` ever writes the marker line; the `jd` shell function reads it and
performs the actual `cd`.
"""

from __future__ import annotations

import functools
from datetime import datetime
from pathlib import Path

import typer
from rich import box
from rich.table import Table

from jumpdir.core import search as search_core
from jumpdir.core.config import AppConfig
from jumpdir.core.console import console, get_logger
from jumpdir.core.decorators import handle_exceptions, report_error
from jumpdir.core.result import Err, Ok, ValidationError
from jumpdir.navigation.dispatcher import Dispatcher, SearchFn, select_command
from jumpdir.navigation.protocol import ShellProtocol
from jumpdir.navigation.stack import NavigationStack

logger = get_logger(__name__)


def _human_time(timestamp: str) -> str:
    try:
        parsed = datetime.fromisoformat(timestamp)
    except ValueError:
        return timestamp or "?"
    return parsed.astimezone().strftime("%Y-%m-%d %H:%M")


def _search_root(config: AppConfig, root: Path | None) -> Path:
    base = root or config.search.root or Path.cwd()
    return base.expanduser()


def _build_search(config: AppConfig, root: Path) -> SearchFn:
    return functools.partial(
        search_core.find_directory,
        root=root,
        max_depth=config.search.max_depth,
        ignore_dirs=config.search.ignore_dirs,
        follow_symlinks=config.search.follow_symlinks,
    )


def _stack(config: AppConfig) -> NavigationStack:
    return NavigationStack(config.stack.file)


@handle_exceptions
def go(
    ctx: typer.Context,
    pattern: str | None = typer.Argument(
        None, help="Directory name, glob or path to jump to.", show_default=False
    ),
    back: bool = typer.Option(False, "--back", "-b", help="Return to the most recent jump."),
    back_until: int | None = typer.Option(
        None, "--back-until", "-u", help="Unwind the history down to this entry id."
    ),
    root: Path | None = typer.Option(
        None, "--root", "-r", help="Directory to search from (defaults to config or cwd)."
    ),
) -> None:
    """Jump to a matching directory, or back through the history."""
    config: AppConfig = ctx.obj.config

    try:
        command = select_command(pattern=pattern, back=back, back_until=back_until)
    except ValidationError as exc:
        report_error(exc)
        raise typer.Exit(code=2)

    dispatcher = Dispatcher(
        stack=_stack(config),
        protocol=ShellProtocol(),
        search=_build_search(config, _search_root(config, root)),
    )

    match dispatcher.dispatch(command):
        case Err(err):
            report_error(err)
            raise typer.Exit(code=1)
        case Ok(outcome):
            logger.debug("Dispatched %s -> %s", command, outcome)


@handle_exceptions
def find(
    ctx: typer.Context,
    pattern: str = typer.Argument(..., help="Directory name or glob to look for."),
    root: Path | None = typer.Option(
        None, "--root", "-r", help="Directory to search from (defaults to config or cwd)."
    ),
    max_depth: int | None = typer.Option(
        None, "--max-depth", min=0, help="Maximum depth to descend (defaults to config)."
    ),
) -> None:
    """List every directory matching PATTERN without jumping."""
    config: AppConfig = ctx.obj.config
    base_root = _search_root(config, root)

    if not base_root.is_dir():
        report_error(ValidationError("Search root is not a directory", context={"root": base_root}))
        raise typer.Exit(code=1)

    matches = search_core.iter_matches(
        pattern,
        base_root,
        max_depth=config.search.max_depth if max_depth is None else max_depth,
        ignore_dirs=config.search.ignore_dirs,
        follow_symlinks=config.search.follow_symlinks,
    )

    found = 0
    for match in matches:
        typer.echo(str(match))
        found += 1

    if not found:
        logger.warning("No directory named %s under %s", pattern, base_root)
        raise typer.Exit(code=1)


@handle_exceptions
def history(
    ctx: typer.Context,
    limit: int = typer.Option(20, "--limit", "-n", min=1, help="Maximum entries to show."),
    clear: bool = typer.Option(False, "--clear", help="Forget the whole history."),
) -> None:
    """Show the navigation history, most recent first."""
    config: AppConfig = ctx.obj.config
    stack = _stack(config)

    if clear:
        removed = stack.clear()
        console.print(f"[green]Cleared {removed} entries from[/green] {stack.path}")
        return

    entries = stack.entries()
    if not entries:
        console.print(f"[yellow]No navigation history in {stack.path}.[/yellow]")
        return

    table = Table(title="Navigation history", box=box.SIMPLE_HEAVY, expand=True)
    table.add_column("Id", style="cyan", no_wrap=True, justify="right")
    table.add_column("When", style="white", no_wrap=True)
    table.add_column("Path", style="white")

    for entry in entries[:limit]:
        table.add_row(str(entry.id), _human_time(entry.timestamp), entry.path)

    console.print(table)
    if len(entries) > limit:
        console.print(f"[dim]{len(entries) - limit} older entries not shown.[/dim]")
