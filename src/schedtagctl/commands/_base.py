"""Click base classes with ``--examples`` support.

``--help`` stays concise; ``--examples`` prints usage examples and exits.
"""

from __future__ import annotations

from typing import Any

import click


def _add_examples_option(cmd: click.Command, examples: str) -> None:
    """Attach an eager ``--examples`` flag to a Click command or group."""

    def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    cmd.params.append(
        click.Option(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=show_examples,
            help="Show usage examples.",
        )
    )


class SchedtagCommand(click.Command):
    """Command that accepts an ``examples`` string."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)


class SchedtagGroup(click.Group):
    """Group whose subcommands default to :class:`SchedtagCommand`."""

    command_class = SchedtagCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)


# ---------------------------------------------------------------------------
# Shared option helpers
# ---------------------------------------------------------------------------


def parse_attribute(raw: str) -> tuple[str, bool | int | float | str]:
    """Parse ``key=value`` into a typed pair.

    ``true``/``false`` become booleans, numeric text becomes int or float,
    everything else stays a string. Quote a value to force a string.
    """
    key, sep, value = raw.partition("=")
    key = key.strip()
    if not sep or not key:
        msg = f"Expected key=value, got {raw!r}"
        raise click.BadParameter(msg)
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return key, value[1:-1]
    if value in ("true", "false"):
        return key, value == "true"
    for convert in (int, float):
        try:
            return key, convert(value)
        except ValueError:
            continue
    return key, value


def parse_attributes(raw: tuple[str, ...]) -> dict[str, bool | int | float | str]:
    return dict(parse_attribute(item) for item in raw)


def resource_pair_options(func: Any) -> Any:
    """Add the standalone/virtual resource pair options to a command."""
    options = [
        click.option(
            "--resource-type", required=True, help="Standalone resource type (e.g. host)."
        ),
        click.option("--object", "object_id", required=True, help="Standalone id or name."),
        click.option(
            "--virtual-resource-type", required=True, help="Virtual resource type (e.g. guest)."
        ),
        click.option(
            "--virtual-object", "virtual_object_id", required=True, help="Virtual id or name."
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func
