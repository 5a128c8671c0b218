"""Command group: built-in resource inventory."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from schedtagctl.commands._base import SchedtagGroup, parse_attributes
from schedtagctl.services.inventory import InventoryService

if TYPE_CHECKING:
    from schedtagctl.commands._context import AppContext

_RESOURCE_EXAMPLES = """\
  schedtagctl resource add host h1 --attr sys_load=0.7 --attr ssd=true
  schedtagctl resource set host h1 --attr sys_load=2.4
  schedtagctl resource list --resource-type host"""

_attr_option = click.option(
    "--attr",
    "attrs",
    multiple=True,
    metavar="KEY=VALUE",
    help="Attribute (repeatable). true/false and numbers are typed.",
)


@click.group(cls=SchedtagGroup, examples=_RESOURCE_EXAMPLES)
def resource() -> None:
    """Manage the resource inventory behind the built-in resource types."""


@resource.command(
    examples="""\
  schedtagctl resource add host h1 --attr sys_load=0.7 --attr ssd=true
  schedtagctl resource add guest vm1 --attr cpu_count=4 --attr os=linux"""
)
@click.argument("resource_type")
@click.argument("name")
@_attr_option
@click.pass_obj
def add(app: AppContext, resource_type: str, name: str, attrs: tuple[str, ...]) -> None:
    """Add resource NAME of RESOURCE_TYPE."""
    app.emit(
        InventoryService(app.catalog).add_resource(
            resource_type, name, attributes=parse_attributes(attrs)
        )
    )


@resource.command(
    "set",
    examples="""\
  schedtagctl resource set host h1 --attr sys_load=2.4
  schedtagctl resource set host h1 --unset ssd""",
)
@click.argument("resource_type")
@click.argument("resource_ref", metavar="RESOURCE")
@_attr_option
@click.option("--unset", multiple=True, metavar="KEY", help="Remove an attribute (repeatable).")
@click.pass_obj
def set_cmd(
    app: AppContext,
    resource_type: str,
    resource_ref: str,
    attrs: tuple[str, ...],
    unset: tuple[str, ...],
) -> None:
    """Merge attributes into RESOURCE (id or name)."""
    app.emit(
        InventoryService(app.catalog).update_resource(
            resource_type,
            resource_ref,
            attributes=parse_attributes(attrs),
            remove=list(unset),
        )
    )


@resource.command(
    "list",
    examples="""\
  schedtagctl resource list
  schedtagctl --json resource list --resource-type guest""",
)
@click.option("--resource-type", default=None, help="Only resources of this type.")
@click.pass_obj
def list_cmd(app: AppContext, resource_type: str | None) -> None:
    """List inventory resources."""
    app.emit(InventoryService(app.catalog).list_resources(resource_type=resource_type))


@resource.command(examples="  schedtagctl resource remove host h1")
@click.argument("resource_type")
@click.argument("resource_ref", metavar="RESOURCE")
@click.pass_obj
def remove(app: AppContext, resource_type: str, resource_ref: str) -> None:
    """Remove RESOURCE (id or name)."""
    app.emit(InventoryService(app.catalog).remove_resource(resource_type, resource_ref))
