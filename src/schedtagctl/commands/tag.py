"""Command group: scheduling tags."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from schedtagctl.commands._base import SchedtagGroup
from schedtagctl.domain.rules import TagStrategy
from schedtagctl.services.tags import TagService

if TYPE_CHECKING:
    from schedtagctl.commands._context import AppContext

_TAG_EXAMPLES = """\
  schedtagctl tag create ssd-hosts --resource-type host
  schedtagctl tag list --resource-type host
  schedtagctl tag delete ssd-hosts"""


@click.group(cls=SchedtagGroup, examples=_TAG_EXAMPLES)
def tag() -> None:
    """Manage scheduling tags."""


@tag.command(
    examples="""\
  schedtagctl tag create ssd-hosts --resource-type host
  schedtagctl tag create busy --resource-type host --strategy avoid \\
      --description 'Hosts under heavy load'"""
)
@click.argument("name")
@click.option("--resource-type", required=True, help="Resource type the tag applies to.")
@click.option(
    "--strategy",
    type=click.Choice([s.value for s in TagStrategy]),
    default=TagStrategy.PREFER.value,
    show_default=True,
    help="Default scheduling strategy.",
)
@click.option("--description", default=None, help="Free-form description.")
@click.pass_obj
def create(
    app: AppContext,
    name: str,
    resource_type: str,
    strategy: str,
    description: str | None,
) -> None:
    """Create a scheduling tag."""
    app.emit(
        TagService(app.catalog).create_tag(
            name,
            resource_type,
            default_strategy=strategy,
            description=description,
        )
    )


@tag.command(
    "list",
    examples="""\
  schedtagctl tag list
  schedtagctl --json tag list --resource-type storage""",
)
@click.option("--resource-type", default=None, help="Only tags for this resource type.")
@click.pass_obj
def list_cmd(app: AppContext, resource_type: str | None) -> None:
    """List scheduling tags."""
    app.emit(TagService(app.catalog).list_tags(resource_type=resource_type))


@tag.command(
    examples="""\
  schedtagctl tag delete ssd-hosts"""
)
@click.argument("tag_ref", metavar="TAG")
@click.pass_obj
def delete(app: AppContext, tag_ref: str) -> None:
    """Delete TAG (id or name). Refused while rules still target it."""
    app.emit(TagService(app.catalog).delete_tag(tag_ref))
