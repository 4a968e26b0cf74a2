"""Navigation history, shell protocol and command dispatch.

Exports:
    Entry: One recorded forward jump.
    NavigationStack: Persistent LIFO history.
    ShellProtocol: Marker-line emitter for the shell wrapper.
    Dispatcher: Runs forward/backward commands against the stack.
"""

from __future__ import annotations

from jumpdir.navigation.dispatcher import (
    ChangeBackward,
    ChangeBackwardUntil,
    ChangeForward,
    Dispatcher,
    Outcome,
    select_command,
)
from jumpdir.navigation.models import Entry
from jumpdir.navigation.protocol import MARKER_TOKEN, ShellProtocol, render_shell_function
from jumpdir.navigation.stack import NavigationStack

__all__ = [
    "MARKER_TOKEN",
    "ChangeBackward",
    "ChangeBackwardUntil",
    "ChangeForward",
    "Dispatcher",
    "Entry",
    "NavigationStack",
    "Outcome",
    "ShellProtocol",
    "render_shell_function",
    "select_command",
]
