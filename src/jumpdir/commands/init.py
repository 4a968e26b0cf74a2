"""Shell integration setup.

Provides CLI commands for:
    - Printing the `jd` wrapper function for bash, zsh or fish
    - Installing that function into the shell startup file
"""

from __future__ import annotations

import os
import re
from pathlib import Path

import typer

from jumpdir.core.console import console, get_logger
from jumpdir.core.decorators import handle_exceptions
from jumpdir.core.result import ConfigurationError, ValidationError
from jumpdir.navigation.protocol import (
    SUPPORTED_SHELLS,
    detect_shell,
    render_shell_function,
    resolve_executable,
)

logger = get_logger(__name__)

BLOCK_START = "# >>> jumpdir >>>"
BLOCK_END = "# <<< jumpdir <<<"
_BLOCK_PATTERN = re.compile(
    rf"^{re.escape(BLOCK_START)}\n.*?^{re.escape(BLOCK_END)}\n?", re.MULTILINE | re.DOTALL
)


def default_rc_file(shell: str, home: Path | None = None) -> Path:
    base = home or Path.home()
    if shell == "zsh":
        zdotdir = os.environ.get("ZDOTDIR")
        return Path(zdotdir).expanduser() / ".zshrc" if zdotdir else base / ".zshrc"
    if shell == "fish":
        return base / ".config" / "fish" / "conf.d" / "jumpdir.fish"
    return base / ".bashrc"


def _validated_shell(shell: str | None) -> str:
    name = (shell or detect_shell()).lower()
    if name not in SUPPORTED_SHELLS:
        raise ValidationError(
            "Unsupported shell", context={"shell": name, "supported": "/".join(SUPPORTED_SHELLS)}
        )
    return name


def build_block(function_source: str) -> str:
    return f"{BLOCK_START}\n{function_source.rstrip()}\n{BLOCK_END}\n"


def upsert_block(existing: str, block: str) -> str:
    """Replace a previous jumpdir block in ``existing`` or append ``block``."""
    if _BLOCK_PATTERN.search(existing):
        return _BLOCK_PATTERN.sub(lambda _match: block, existing, count=1)
    if existing and not existing.endswith("\n"):
        existing += "\n"
    separator = "\n" if existing else ""
    return f"{existing}{separator}{block}"


@handle_exceptions
def shell_init(
    shell: str | None = typer.Argument(
        None, help="Target shell (bash, zsh or fish); detected from $SHELL when omitted."
    ),
    executable: Path | None = typer.Option(
        None, "--executable", help="Path to the jumpdir executable to wrap."
    ),
) -> None:
    """Print the `jd` shell function; eval its output in your shell startup file."""
    name = _validated_shell(shell)
    exe = (executable or resolve_executable()).expanduser().resolve()
    typer.echo(render_shell_function(exe, name), nl=False)


@handle_exceptions
def install(
    shell: str | None = typer.Option(
        None, "--shell", "-s", help="Target shell; detected from $SHELL when omitted."
    ),
    rc_file: Path | None = typer.Option(
        None, "--rc-file", help="Startup file to modify (defaults to the shell's rc file)."
    ),
    executable: Path | None = typer.Option(
        None, "--executable", help="Path to the jumpdir executable to wrap."
    ),
) -> None:
    """Install the `jd` function into the shell startup file."""
    name = _validated_shell(shell)
    exe = (executable or resolve_executable()).expanduser().resolve()
    target = (rc_file or default_rc_file(name)).expanduser()

    block = build_block(render_shell_function(exe, name))
    try:
        existing = target.read_text(encoding="utf-8") if target.exists() else ""
        updated = upsert_block(existing, block)
        if updated == existing:
            console.print(f"[green]Already up to date:[/green] {target}")
            return
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(updated, encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(
            "Cannot update shell startup file", context={"file": target, "error": exc}
        ) from exc

    logger.debug("Wrote jd function for %s into %s", name, target)
    console.print(f"[green]Installed `jd` for {name} in[/green] {target}")
    console.print(f"Open a new shell or run `source {target}` to start using it.")
