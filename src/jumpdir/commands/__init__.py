"""CLI command modules for jumpdir.

This package contains the user-facing CLI commands:
    - init: Shell function generation and installation
    - nav: Directory jumps, matches and history
"""

from __future__ import annotations

from . import init, nav

__all__ = ["init", "nav"]
