from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from jumpdir.commands.init import (
    BLOCK_END,
    BLOCK_START,
    build_block,
    default_rc_file,
    upsert_block,
)
from jumpdir.main import app
from jumpdir.navigation.protocol import MARKER_TOKEN


@pytest.fixture
def exe(tmp_path: Path) -> Path:
    path = tmp_path / "bin" / "jumpdir"
    path.parent.mkdir()
    path.write_text("#!/bin/sh\n", encoding="utf-8")
    path.chmod(0o755)
    return path


def test_shell_init_prints_function(runner: CliRunner, exe: Path) -> None:
    result = runner.invoke(app, ["shell-init", "zsh", "--executable", str(exe)])
    assert result.exit_code == 0
    assert "jd()" in result.stdout
    assert str(exe) in result.stdout
    assert MARKER_TOKEN in result.stdout


def test_shell_init_fish(runner: CliRunner, exe: Path) -> None:
    result = runner.invoke(app, ["shell-init", "fish", "--executable", str(exe)])
    assert result.exit_code == 0
    assert "function jd" in result.stdout


def test_shell_init_rejects_unknown_shell(runner: CliRunner, exe: Path) -> None:
    result = runner.invoke(app, ["shell-init", "tcsh", "--executable", str(exe)])
    assert result.exit_code == 1
    assert "Unsupported shell" in result.output


def test_install_writes_guarded_block(runner: CliRunner, exe: Path, tmp_path: Path) -> None:
    rc_file = tmp_path / ".bashrc"
    rc_file.write_text("export EDITOR=vim", encoding="utf-8")

    result = runner.invoke(
        app, ["install", "--shell", "bash", "--rc-file", str(rc_file), "--executable", str(exe)]
    )
    assert result.exit_code == 0, result.output

    content = rc_file.read_text(encoding="utf-8")
    assert content.startswith("export EDITOR=vim\n")
    assert content.count(BLOCK_START) == 1
    assert content.rstrip().endswith(BLOCK_END)


def test_install_is_idempotent(runner: CliRunner, exe: Path, tmp_path: Path) -> None:
    rc_file = tmp_path / ".zshrc"
    args = ["install", "--shell", "zsh", "--rc-file", str(rc_file), "--executable", str(exe)]
    assert runner.invoke(app, args).exit_code == 0
    first = rc_file.read_text(encoding="utf-8")

    result = runner.invoke(app, args)
    assert result.exit_code == 0
    assert "Already up to date" in result.stdout
    assert rc_file.read_text(encoding="utf-8") == first


def test_install_replaces_stale_block(runner: CliRunner, exe: Path, tmp_path: Path) -> None:
    rc_file = tmp_path / ".bashrc"
    rc_file.write_text(
        f"before\n{BLOCK_START}\nold stuff\n{BLOCK_END}\nafter\n", encoding="utf-8"
    )
    args = ["install", "--shell", "bash", "--rc-file", str(rc_file), "--executable", str(exe)]
    assert runner.invoke(app, args).exit_code == 0

    content = rc_file.read_text(encoding="utf-8")
    assert "old stuff" not in content
    assert content.startswith("before\n")
    assert content.endswith("after\n")
    assert str(exe) in content


def test_install_creates_fish_conf_dir(runner: CliRunner, exe: Path, tmp_path: Path) -> None:
    rc_file = tmp_path / "fish" / "conf.d" / "jumpdir.fish"
    args = ["install", "--shell", "fish", "--rc-file", str(rc_file), "--executable", str(exe)]
    assert runner.invoke(app, args).exit_code == 0
    assert "function jd" in rc_file.read_text(encoding="utf-8")


def test_upsert_into_empty_file() -> None:
    block = build_block("jd() { :; }")
    assert upsert_block("", block) == block


@pytest.mark.parametrize(
    "shell, expected",
    [
        ("bash", Path(".bashrc")),
        ("zsh", Path(".zshrc")),
        ("fish", Path(".config/fish/conf.d/jumpdir.fish")),
    ],
)
def test_default_rc_file(shell: str, expected: Path, tmp_path: Path, monkeypatch) -> None:
    monkeypatch.delenv("ZDOTDIR", raising=False)
    assert default_rc_file(shell, home=tmp_path) == tmp_path / expected
