"""AppContext: shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. The Catalog (database + registry bring-up) is created
lazily so ``--help`` and ``--version`` never touch the database.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from schedtagctl.output.formatters import format_result, format_warning

if TYPE_CHECKING:
    from schedtagctl.config.settings import SchedtagSettings
    from schedtagctl.infrastructure.catalog import Catalog
    from schedtagctl.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: SchedtagSettings) -> None:
        self.settings = settings
        self._catalog: Catalog | None = None

        from schedtagctl.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def catalog(self) -> Catalog:
        """The catalog (created lazily on first access)."""
        if self._catalog is None:
            from schedtagctl.infrastructure.catalog import Catalog

            self._catalog = Catalog(self.settings)
        return self._catalog

    def close(self) -> None:
        if self._catalog is not None:
            self._catalog.close()
            self._catalog = None

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: stdout; warnings to stderr unless in JSON mode.
        * Failure: stderr, exit code 1.
        """
        output = format_result(
            result,
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
        )
        if result.ok:
            if output:
                click.echo(output)
            if not self.settings.json_output:
                for warning in result.warnings:
                    click.echo(format_warning(warning), err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
