"""CLI tests for the ``config`` sub-commands and ``version``."""

from __future__ import annotations

import json

from typer.testing import CliRunner

from blokit import __version__
from blokit.main import app

runner = CliRunner()


def test_version():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_show_outputs_json(isolated_config):
    result = runner.invoke(app, ["config", "show"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["block_minutes"] == 25


def test_set_updates_value(isolated_config):
    result = runner.invoke(app, ["config", "set", "block_minutes", "30"])

    assert result.exit_code == 0, result.output
    assert "set to '30'" in result.output
    assert isolated_config.get("block_minutes") == 30


def test_set_invalid_value_exits_with_invalid_args(isolated_config):
    result = runner.invoke(app, ["config", "set", "block_minutes", "0"])

    assert result.exit_code == 2
    assert isolated_config.get("block_minutes") == 25


def test_set_unknown_key(isolated_config):
    result = runner.invoke(app, ["config", "set", "colour", "blue"])
    assert result.exit_code == 2


def test_reset_requires_confirmation(isolated_config):
    isolated_config.set("block_minutes", 40)

    declined = runner.invoke(app, ["config", "reset"], input="n\n")
    assert isolated_config.get("block_minutes") == 40
    assert declined.exit_code == 0

    accepted = runner.invoke(app, ["config", "reset", "--yes"])
    assert accepted.exit_code == 0
    assert isolated_config.get("block_minutes") == 25
