"""jumpdir - jump between directories from the shell and back again.

This package provides the `jumpdir` command-line tool and the `jd` shell
function that performs the actual directory change.

Exports:
    __version__: Package version string.
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
