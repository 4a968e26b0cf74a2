from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: Any) -> None:
    """Drop JUMPDIR_* variables inherited from the developer's shell."""
    for key in list(os.environ):
        if key.startswith("JUMPDIR_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def isolate_config(tmp_path: Path, monkeypatch: Any, clean_env: None) -> Path:
    """Point config to a temp path so tests don't touch user state."""
    cfg_path = tmp_path / "config.toml"
    monkeypatch.setenv("JUMPDIR_CONFIG", str(cfg_path))
    return cfg_path


@pytest.fixture(autouse=True)
def stack_file(tmp_path: Path, monkeypatch: Any, clean_env: None) -> Path:
    """Keep the navigation history inside the test's temp directory."""
    path = tmp_path / "state" / "stack.jsonl"
    monkeypatch.setenv("JUMPDIR_STACK__FILE", str(path))
    return path


@pytest.fixture
def tree(tmp_path: Path) -> Path:
    """A small directory tree to search and jump around in."""
    root = tmp_path / "tree"
    for rel in (
        "alpha",
        "alpha/src",
        "beta/deep/src",
        "beta/docs",
        "node_modules/src",
        "gamma.d",
    ):
        (root / rel).mkdir(parents=True)
    (root / "alpha" / "notes.txt").write_text("not a directory", encoding="utf-8")
    return root
