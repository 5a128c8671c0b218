"""Command group: dynamic tag rules."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from schedtagctl.commands._base import SchedtagGroup, resource_pair_options
from schedtagctl.services.rules import RuleService

if TYPE_CHECKING:
    from schedtagctl.commands._context import AppContext

_RULE_EXAMPLES = """\
  schedtagctl rule create busy-hosts --tag busy --condition 'host.sys_load > 1.5'
  schedtagctl rule list --enabled
  schedtagctl rule evaluate busy-hosts --resource-type host --object h1 \\
      --virtual-resource-type guest --virtual-object vm1"""


@click.group(cls=SchedtagGroup, examples=_RULE_EXAMPLES)
def rule() -> None:
    """Manage dynamic tag rules."""


@rule.command(
    examples="""\
  schedtagctl rule create busy-hosts --tag busy --condition 'host.sys_load > 1.5'
  schedtagctl rule create big-guests --tag roomy --resource-type host \\
      --condition 'guest.cpu_count >= 8' --disabled"""
)
@click.argument("name")
@click.option("--tag", "tag_ref", default=None, help="Target tag (id or name).")
@click.option("--condition", default=None, help="Condition expression.")
@click.option(
    "--resource-type",
    default=None,
    help="Expected resource type; must equal the tag's resource type.",
)
@click.option("--enabled/--disabled", default=True, help="Whether the rule is active.")
@click.option("--description", default=None, help="Free-form description.")
@click.pass_obj
def create(
    app: AppContext,
    name: str,
    tag_ref: str | None,
    condition: str | None,
    resource_type: str | None,
    enabled: bool,
    description: str | None,
) -> None:
    """Create a dynamic tag rule."""
    app.emit(
        RuleService(app.catalog).create_rule(
            name,
            tag=tag_ref,
            condition=condition,
            enabled=enabled,
            resource_type=resource_type,
            description=description,
        )
    )


@rule.command(
    examples="""\
  schedtagctl rule update busy-hosts --condition 'host.sys_load > 2'
  schedtagctl rule update busy-hosts --disable"""
)
@click.argument("rule_ref", metavar="RULE")
@click.option("--condition", default=None, help="New condition expression.")
@click.option("--tag", "tag_ref", default=None, help="New target tag (id or name).")
@click.option("--enable/--disable", "enabled", default=None, help="Enable or disable.")
@click.option("--description", default=None, help="New description.")
@click.pass_obj
def update(
    app: AppContext,
    rule_ref: str,
    condition: str | None,
    tag_ref: str | None,
    enabled: bool | None,
    description: str | None,
) -> None:
    """Update RULE (id or name)."""
    app.emit(
        RuleService(app.catalog).update_rule(
            rule_ref,
            condition=condition,
            tag=tag_ref,
            enabled=enabled,
            description=description,
        )
    )


@rule.command(examples="  schedtagctl --json rule show busy-hosts")
@click.argument("rule_ref", metavar="RULE")
@click.pass_obj
def show(app: AppContext, rule_ref: str) -> None:
    """Show RULE (id or name)."""
    app.emit(RuleService(app.catalog).get_rule(rule_ref))


@rule.command(
    "list",
    examples="""\
  schedtagctl rule list
  schedtagctl rule list --enabled --resource-type host
  schedtagctl rule list --tag busy""",
)
@click.option("--enabled/--disabled", "enabled", default=None, help="Filter by enabled flag.")
@click.option("--tag", "tag_ref", default=None, help="Only rules targeting this tag.")
@click.option("--resource-type", default=None, help="Only rules for this resource type.")
@click.pass_obj
def list_cmd(
    app: AppContext,
    enabled: bool | None,
    tag_ref: str | None,
    resource_type: str | None,
) -> None:
    """List dynamic tag rules."""
    app.emit(
        RuleService(app.catalog).list_rules(
            enabled=enabled, tag=tag_ref, resource_type=resource_type
        )
    )


@rule.command(examples="  schedtagctl rule delete busy-hosts")
@click.argument("rule_ref", metavar="RULE")
@click.pass_obj
def delete(app: AppContext, rule_ref: str) -> None:
    """Delete RULE (id or name)."""
    app.emit(RuleService(app.catalog).delete_rule(rule_ref))


@rule.command(
    examples="""\
  schedtagctl rule evaluate busy-hosts --resource-type host --object h1 \\
      --virtual-resource-type guest --virtual-object vm1
  schedtagctl rule evaluate --condition 'host.sys_load > 1.5' \\
      --resource-type host --object h1 --virtual-resource-type guest --virtual-object vm1"""
)
@click.argument("rule_ref", metavar="[RULE]", required=False)
@click.option("--condition", default=None, help="Evaluate this condition instead of a rule.")
@resource_pair_options
@click.pass_obj
def evaluate(
    app: AppContext,
    rule_ref: str | None,
    condition: str | None,
    resource_type: str,
    object_id: str,
    virtual_resource_type: str,
    virtual_object_id: str,
) -> None:
    """Evaluate a stored RULE, or --condition, against a resource pair."""
    from schedtagctl.services.evaluate import EvaluationService

    if (rule_ref is None) == (condition is None):
        raise click.UsageError("Give exactly one of RULE or --condition.")

    svc = EvaluationService(app.catalog)
    pair = {
        "resource_type": resource_type,
        "object_id": object_id,
        "virtual_resource_type": virtual_resource_type,
        "virtual_object_id": virtual_object_id,
    }
    if condition is not None:
        app.emit(svc.evaluate(condition, **pair))
    else:
        assert rule_ref is not None
        app.emit(svc.evaluate_rule(rule_ref, **pair))
