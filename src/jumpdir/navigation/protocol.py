"""Marker-line protocol between jumpdir and its shell wrapper.

A child process cannot change its parent shell's working directory, so the
tool prints the destination on a single line of standard output::

    __JUMPDIR_CD__=/absolute/destination

The generated ``jd`` shell function captures the tool's output, echoes it,
takes the value of the last marker line and runs ``cd`` only when that value
is an existing directory. No marker line means no directory change.
"""

from __future__ import annotations

import os
import shlex
import shutil
import sys
from pathlib import Path
from typing import TextIO

import typer

from jumpdir.core.console import get_logger

logger = get_logger(__name__)

MARKER_TOKEN = "__JUMPDIR_CD__"
MARKER_PREFIX = f"{MARKER_TOKEN}="
FUNCTION_NAME = "jd"
SUPPORTED_SHELLS = ("bash", "zsh", "fish")

_POSIX_TEMPLATE = """\
{name}() {{
    local __jd_out __jd_rc __jd_dest
    __jd_out="$({exe} go "$@")"
    __jd_rc=$?
    if [ -n "$__jd_out" ]; then
        printf '%s\\n' "$__jd_out"
    fi
    __jd_dest="$(printf '%s\\n' "$__jd_out" | sed -n 's/^{token}=//p' | tail -n 1)"
    if [ -n "$__jd_dest" ] && [ -d "$__jd_dest" ]; then
        cd -- "$__jd_dest" || return 1
    fi
    return $__jd_rc
}}
"""

_FISH_TEMPLATE = """\
function {name}
    set -l __jd_out ({exe} go $argv | string collect)
    set -l __jd_rc $pipestatus[1]
    if test -n "$__jd_out"
        printf '%s\\n' "$__jd_out"
    end
    set -l __jd_dest (printf '%s\\n' "$__jd_out" | string replace -r -f '^{token}=' '' | tail -n 1)
    if test -n "$__jd_dest"; and test -d "$__jd_dest"
        cd "$__jd_dest"; or return 1
    end
    return $__jd_rc
end
"""


def format_marker(path: str | os.PathLike[str]) -> str:
    value = os.fspath(path)
    if "\n" in value or "\r" in value:
        raise ValueError("Marker value must be a single line")
    return f"{MARKER_PREFIX}{value}"


def parse_marker(output: str) -> str | None:
    """Return the value of the last marker line in ``output``, if any."""
    value: str | None = None
    for line in output.splitlines():
        if line.startswith(MARKER_PREFIX):
            value = line[len(MARKER_PREFIX) :]
    return value


class ShellProtocol:
    """Writes the destination marker line for the shell wrapper."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def emit(self, path: str | os.PathLike[str]) -> bool:
        """Emit the marker line for ``path``; returns False when nothing was emitted."""
        value = os.fspath(path)
        if "\n" in value or "\r" in value:
            logger.warning("Refusing to emit a destination containing a line break")
            return False
        if not os.path.isdir(value):
            logger.warning("Destination %s is not an existing directory; staying put", value)
            return False
        typer.echo(format_marker(value), file=self._stream)
        return True


def _fish_quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def render_shell_function(executable: str | os.PathLike[str], shell: str = "bash") -> str:
    """Render the ``jd`` wrapper for ``shell`` around the given executable."""
    exe = os.fspath(executable)
    if not os.path.isabs(exe):
        raise ValueError(f"Executable path must be absolute, got {exe!r}")

    shell_name = shell.lower()
    if shell_name in ("bash", "zsh"):
        return _POSIX_TEMPLATE.format(name=FUNCTION_NAME, exe=shlex.quote(exe), token=MARKER_TOKEN)
    if shell_name == "fish":
        return _FISH_TEMPLATE.format(name=FUNCTION_NAME, exe=_fish_quote(exe), token=MARKER_TOKEN)
    raise ValueError(
        f"Unsupported shell {shell!r}; expected one of {', '.join(SUPPORTED_SHELLS)}"
    )


def detect_shell(env_shell: str | None = None) -> str:
    """Guess the user's shell from ``$SHELL``, defaulting to bash."""
    shell_path = env_shell if env_shell is not None else os.environ.get("SHELL", "")
    name = Path(shell_path).name if shell_path else ""
    return name if name in SUPPORTED_SHELLS else "bash"


def resolve_executable() -> Path:
    """Absolute path of the installed ``jumpdir`` executable."""
    found = shutil.which("jumpdir")
    if found:
        return Path(found).resolve()
    return Path(sys.argv[0]).expanduser().resolve()


__all__ = [
    "FUNCTION_NAME",
    "MARKER_PREFIX",
    "MARKER_TOKEN",
    "SUPPORTED_SHELLS",
    "ShellProtocol",
    "detect_shell",
    "format_marker",
    "parse_marker",
    "render_shell_function",
    "resolve_executable",
]
