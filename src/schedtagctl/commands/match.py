"""Command: list the tags whose enabled rules match a resource pair."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from schedtagctl.commands._base import SchedtagCommand, resource_pair_options

if TYPE_CHECKING:
    from schedtagctl.commands._context import AppContext


@click.command(
    cls=SchedtagCommand,
    examples="""\
  schedtagctl match --resource-type host --object h1 \\
      --virtual-resource-type guest --virtual-object vm1
  schedtagctl --json match --resource-type storage --object pool-a \\
      --virtual-resource-type disk --virtual-object d1""",
)
@resource_pair_options
@click.pass_obj
def match(
    app: AppContext,
    resource_type: str,
    object_id: str,
    virtual_resource_type: str,
    virtual_object_id: str,
) -> None:
    """Evaluate every enabled rule for a resource pair and list matching tags."""
    from schedtagctl.services.evaluate import EvaluationService

    app.emit(
        EvaluationService(app.catalog).match(
            resource_type=resource_type,
            object_id=object_id,
            virtual_resource_type=virtual_resource_type,
            virtual_object_id=virtual_object_id,
        )
    )
