"""Tests for the rule command group."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from schedtagctl.cli import cli

PAIR = [
    "--resource-type",
    "host",
    "--object",
    "h1",
    "--virtual-resource-type",
    "guest",
    "--virtual-object",
    "vm1",
]


@pytest.fixture
def seeded(cli_runner: CliRunner) -> CliRunner:
    for args in (
        ["resource", "add", "host", "h1", "--attr", "sys_load=2.0"],
        ["resource", "add", "guest", "vm1", "--attr", "cpu_count=4"],
        ["tag", "create", "busy", "--resource-type", "host"],
    ):
        result = cli_runner.invoke(cli, args)
        assert result.exit_code == 0, result.output
    return cli_runner


@pytest.mark.usefixtures("_isolated_data_dir")
class TestRuleCommands:
    def test_create_show_update_delete(self, seeded: CliRunner) -> None:
        result = seeded.invoke(
            cli,
            ["--json", "rule", "create", "busy-hosts", "--tag", "busy", "--condition", "host.sys_load > 1.5"],
        )
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["data"]["resource_type"] == "host"

        result = seeded.invoke(cli, ["--json", "rule", "update", "busy-hosts", "--disable"])
        assert json.loads(result.stdout)["data"]["enabled"] is False

        result = seeded.invoke(cli, ["rule", "show", "busy-hosts"])
        assert result.exit_code == 0
        assert "busy-hosts" in result.output

        result = seeded.invoke(cli, ["rule", "delete", "busy-hosts"])
        assert result.exit_code == 0
        result = seeded.invoke(cli, ["rule", "show", "busy-hosts"])
        assert result.exit_code == 1

    def test_create_invalid_condition(self, seeded: CliRunner) -> None:
        result = seeded.invoke(
            cli, ["--json", "rule", "create", "r", "--tag", "busy", "--condition", "host.sys_load >"]
        )
        assert result.exit_code == 1
        error = json.loads(result.stderr)["error"]
        assert error["code"] == "INVALID_CONDITION"
        assert error["detail"]["position"] == 15

    def test_create_missing_condition(self, seeded: CliRunner) -> None:
        result = seeded.invoke(cli, ["rule", "create", "r", "--tag", "busy"])
        assert result.exit_code == 1
        assert "MISSING_PARAMETER" in result.stderr

    def test_list_enabled_filter(self, seeded: CliRunner) -> None:
        seeded.invoke(cli, ["rule", "create", "a", "--tag", "busy", "--condition", "true"])
        seeded.invoke(
            cli, ["rule", "create", "b", "--tag", "busy", "--condition", "true", "--disabled"]
        )
        result = seeded.invoke(cli, ["--json", "rule", "list", "--enabled"])
        names = [r["name"] for r in json.loads(result.stdout)["data"]["items"]]
        assert names == ["a"]

    def test_evaluate_stored_rule(self, seeded: CliRunner) -> None:
        seeded.invoke(
            cli,
            ["rule", "create", "busy-hosts", "--tag", "busy", "--condition", "host.sys_load > 1.5"],
        )
        result = seeded.invoke(cli, ["rule", "evaluate", "busy-hosts", *PAIR])
        assert result.exit_code == 0, result.output
        assert "matched: yes" in result.output

    def test_evaluate_condition(self, seeded: CliRunner) -> None:
        result = seeded.invoke(
            cli, ["--json", "rule", "evaluate", "--condition", "guest.cpu_count > 8", *PAIR]
        )
        data = json.loads(result.stdout)["data"]
        assert data["matched"] is False
        assert data["environment"]["guest"]["cpu_count"] == 4

    def test_evaluate_needs_exactly_one_source(self, seeded: CliRunner) -> None:
        result = seeded.invoke(cli, ["rule", "evaluate", *PAIR])
        assert result.exit_code == 2
        result = seeded.invoke(cli, ["rule", "evaluate", "r", "--condition", "true", *PAIR])
        assert result.exit_code == 2

    def test_evaluate_unsupported_type(self, seeded: CliRunner) -> None:
        pair = [*PAIR[:5], "router", *PAIR[6:]]
        result = seeded.invoke(cli, ["rule", "evaluate", "--condition", "true", *pair])
        assert result.exit_code == 1
        assert "RESOURCE_TYPE_NOT_SUPPORTED" in result.stderr
