"""Parametrized --help and --examples tests for all CLI commands."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from schedtagctl.cli import cli

# (CLI args, expected keywords in output)
HELP_COMMANDS: list[tuple[list[str], list[str]]] = [
    ([], ["validate", "match", "tag", "rule", "resource"]),
    (["tag", "--help"], ["create", "list", "delete"]),
    (["tag", "create", "--help"], ["--resource-type", "--strategy"]),
    (["rule", "--help"], ["create", "update", "show", "list", "delete", "evaluate"]),
    (["rule", "create", "--help"], ["--tag", "--condition", "--enabled / --disabled"]),
    (["rule", "update", "--help"], ["--enable / --disable", "--condition"]),
    (["rule", "evaluate", "--help"], ["--condition", "--virtual-object"]),
    (["resource", "--help"], ["add", "set", "list", "remove"]),
    (["resource", "set", "--help"], ["--attr", "--unset"]),
    (["match", "--help"], ["--resource-type", "--virtual-resource-type"]),
    (["validate", "--help"], ["CONDITION"]),
]

EXAMPLES_COMMANDS: list[tuple[list[str], list[str]]] = [
    (["tag", "--examples"], ["schedtagctl tag create"]),
    (["rule", "--examples"], ["schedtagctl rule evaluate"]),
    (["rule", "create", "--examples"], ["--condition 'host.sys_load > 1.5'"]),
    (["resource", "add", "--examples"], ["--attr sys_load=0.7"]),
    (["match", "--examples"], ["--virtual-object vm1"]),
    (["validate", "--examples"], ["schedtagctl validate"]),
]


@pytest.mark.usefixtures("_isolated_data_dir")
class TestHelp:
    @pytest.mark.parametrize(("args", "expected"), HELP_COMMANDS)
    def test_help_lists(self, cli_runner: CliRunner, args: list[str], expected: list[str]) -> None:
        result = cli_runner.invoke(cli, args)
        assert result.exit_code == 0, result.output
        for keyword in expected:
            assert keyword in result.output

    @pytest.mark.parametrize(("args", "expected"), EXAMPLES_COMMANDS)
    def test_examples(self, cli_runner: CliRunner, args: list[str], expected: list[str]) -> None:
        result = cli_runner.invoke(cli, args)
        assert result.exit_code == 0, result.output
        assert "Examples for" in result.output
        for keyword in expected:
            assert keyword in result.output

    def test_help_does_not_create_database(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        cli_runner.invoke(cli, ["rule", "--help"])
        assert not (tmp_path / ".schedtagctl").exists()
