"""Subcommand modules for schedtagctl.

Provides register_commands() which uses deferred imports to keep
``schedtagctl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root group."""
    # --- Groups ---
    from schedtagctl.commands.resource import resource
    from schedtagctl.commands.rule import rule
    from schedtagctl.commands.tag import tag

    cli.add_command(tag)
    cli.add_command(rule)
    cli.add_command(resource)

    # --- Standalone commands ---
    from schedtagctl.commands.match import match
    from schedtagctl.commands.validate import validate

    cli.add_command(validate)
    cli.add_command(match)
