"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazily constructed services, JSON document
loading, and centralized result emission (stdout/stderr routing + exit
codes).
"""

from __future__ import annotations

import json
from typing import IO, TYPE_CHECKING, Any

import click

from furnictl.output.formatters import OutputSettings, format_result
from furnictl.services.result import ErrorCode, ServiceResult

if TYPE_CHECKING:
    from furnictl.config.settings import FurniSettings
    from furnictl.services.analytics import AnalyticsService
    from furnictl.services.catalog import CatalogService
    from furnictl.services.checkout import CheckoutService


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Subcommands access it via ``@click.pass_obj``.
    """

    def __init__(self, settings: FurniSettings) -> None:
        self.settings = settings

        # Configure structured logging
        from furnictl.config.logging import configure_logging

        configure_logging(
            verbose=settings.verbose, quiet=settings.quiet, log_json=settings.log_json
        )

        # Span timing is only collected under --verbose
        if settings.verbose:
            from furnictl.services.telemetry import enable_tracing

            enable_tracing()

    @property
    def checkout(self) -> CheckoutService:
        from furnictl.services.checkout import CheckoutService

        return CheckoutService(self.settings)

    @property
    def analytics(self) -> AnalyticsService:
        from furnictl.services.analytics import AnalyticsService

        return AnalyticsService(self.settings)

    @property
    def catalog(self) -> CatalogService:
        from furnictl.services.catalog import CatalogService

        return CatalogService(self.settings)

    def read_document(self, source: IO[str], *, op: str) -> Any:
        """Parse a JSON document from an open Click file (``-`` is stdin).

        Malformed JSON is reported as an INVALID_INPUT failure for *op*,
        which exits with code 1.
        """
        try:
            return json.load(source)
        except json.JSONDecodeError as exc:
            name = getattr(source, "name", "<input>")
            self.emit(
                ServiceResult.failure(op, ErrorCode.INVALID_INPUT, f"Invalid JSON in {name}: {exc}")
            )
            raise SystemExit(1) from exc

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
