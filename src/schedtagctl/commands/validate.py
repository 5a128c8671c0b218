"""Command: parse-only condition validation."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from schedtagctl.commands._base import SchedtagCommand

if TYPE_CHECKING:
    from schedtagctl.commands._context import AppContext


@click.command(
    cls=SchedtagCommand,
    examples="""\
  schedtagctl validate 'host.sys_load > 1.5 && guest.cpu_count >= 4'
  schedtagctl --json validate 'host.name == "h1"'""",
)
@click.argument("condition")
@click.pass_obj
def validate(app: AppContext, condition: str) -> None:
    """Check that CONDITION parses, without evaluating it."""
    from schedtagctl.services.rules import RuleService

    app.emit(RuleService(app.catalog).validate_condition(condition))
