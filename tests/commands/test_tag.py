"""Tests for the tag command group."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from schedtagctl.cli import cli


@pytest.mark.usefixtures("_isolated_data_dir")
class TestTagCommands:
    def test_create_and_list(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["tag", "create", "busy", "--resource-type", "host"])
        assert result.exit_code == 0, result.output
        assert "OK: create_tag" in result.output

        result = cli_runner.invoke(cli, ["--json", "tag", "list"])
        data = json.loads(result.stdout)
        assert data["data"]["count"] == 1
        assert data["data"]["items"][0]["default_strategy"] == "prefer"

    def test_list_renders_table(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["tag", "create", "fast", "--resource-type", "storage"])
        result = cli_runner.invoke(cli, ["tag", "list"])
        assert result.exit_code == 0
        assert "default_strategy" in result.output
        assert "fast" in result.output

    def test_invalid_strategy_rejected_by_click(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["tag", "create", "busy", "--resource-type", "host", "--strategy", "maybe"]
        )
        assert result.exit_code == 2

    def test_unbound_type_warns_on_stderr(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["tag", "create", "edge", "--resource-type", "router"])
        assert result.exit_code == 0
        assert "WARNING:" in result.stderr

    def test_delete_in_use(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["tag", "create", "busy", "--resource-type", "host"])
        cli_runner.invoke(cli, ["rule", "create", "r", "--tag", "busy", "--condition", "true"])
        result = cli_runner.invoke(cli, ["--json", "tag", "delete", "busy"])
        assert result.exit_code == 1
        assert json.loads(result.stderr)["error"]["code"] == "TAG_IN_USE"

    def test_delete_missing(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["tag", "delete", "nope"])
        assert result.exit_code == 1
        assert "ERROR: delete_tag [TAG_NOT_FOUND]" in result.stderr
