from __future__ import annotations

import click
from typer.main import get_command
from typer.testing import CliRunner

from jumpdir import __version__
from jumpdir.main import app

runner = CliRunner()


def test_app_version() -> None:
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_all_commands_have_help() -> None:
    """Every registered command must accept --help."""
    click_app = get_command(app)
    assert isinstance(click_app, click.Group)
    for name in click_app.commands:
        result = runner.invoke(app, [name, "--help"])
        assert result.exit_code == 0, f"Command 'jumpdir {name} --help' failed!"
        assert "Usage:" in result.stdout


def test_expected_commands_registered() -> None:
    click_app = get_command(app)
    assert isinstance(click_app, click.Group)
    assert {"go", "find", "history", "shell-init", "install", "config", "version"} <= set(
        click_app.commands
    )


def test_config_command_shows_source(isolate_config) -> None:
    result = runner.invoke(app, ["config"])
    assert result.exit_code == 0
    assert "stack.file" in result.stdout
    assert "Config source" in result.stdout


def test_broken_config_still_runs(isolate_config) -> None:
    isolate_config.write_text("not = = toml", encoding="utf-8")
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert "Safe Mode" in result.output
