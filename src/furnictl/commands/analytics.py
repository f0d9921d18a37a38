"""Command group: admin dashboard rollups over a JSON dashboard document."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import IO, TYPE_CHECKING

import click

from furnictl.commands._base import FurniGroup
from furnictl.services.analytics import PRICE_FIELDS

if TYPE_CHECKING:
    from furnictl.commands._context import AppContext

_ANALYTICS_EXAMPLES = """\
  furnictl analytics kpis dashboard.json
  furnictl analytics alerts dashboard.json --now 2026-03-01T12:00:00Z
  furnictl analytics top-products dashboard.json --price-field price_at_purchase
  furnictl analytics csv dashboard.json > orders.csv
  furnictl --json analytics dashboard dashboard.json"""


def _source_argument[**P, R](func: Callable[P, R]) -> Callable[P, R]:
    """Attach the dashboard document SOURCE argument (``-`` reads stdin)."""
    return click.argument("source", type=click.File("r"))(func)


@click.group(cls=FurniGroup, examples=_ANALYTICS_EXAMPLES)
@click.pass_obj
def analytics(app: AppContext) -> None:
    """Admin, showroom, and delivery dashboard metrics.

    Every subcommand reads a dashboard document: a JSON object whose
    ``products``, ``orders``, ``assignments``, ``partners``,
    ``order_items``, and ``jobs`` keys hold lists of rows.  Use ``-``
    to read from stdin.
    """


@analytics.command(examples="  furnictl analytics kpis dashboard.json")
@_source_argument
@click.pass_obj
def kpis(app: AppContext, source: IO[str]) -> None:
    """Headline KPIs: products, open orders, low stock, assignments, revenue."""
    doc = app.read_document(source, op="admin_kpis")
    app.emit(app.analytics.kpis(doc))


@analytics.command(examples="  furnictl analytics fulfillment dashboard.json")
@_source_argument
@click.pass_obj
def fulfillment(app: AppContext, source: IO[str]) -> None:
    """Order funnel counts and delivery progress."""
    doc = app.read_document(source, op="fulfillment_metrics")
    app.emit(app.analytics.fulfillment(doc))


@analytics.command(examples="  furnictl analytics breakdown dashboard.json")
@_source_argument
@click.pass_obj
def breakdown(app: AppContext, source: IO[str]) -> None:
    """Order counts per status, in order of first appearance."""
    doc = app.read_document(source, op="status_breakdown")
    app.emit(app.analytics.status_breakdown(doc))


@analytics.command(
    examples="""\
  furnictl analytics alerts dashboard.json
  furnictl analytics alerts dashboard.json --now 2026-03-01T12:00:00Z"""
)
@_source_argument
@click.option("--now", default=None, help="Reference time (ISO-8601). Defaults to current UTC.")
@click.pass_obj
def alerts(app: AppContext, source: IO[str], now: str | None) -> None:
    """Stale placed orders and long-running delivery assignments."""
    doc = app.read_document(source, op="operational_alerts")
    app.emit(app.analytics.alerts(doc, now))


@analytics.command(
    "top-products",
    examples="""\
  furnictl analytics top-products dashboard.json
  furnictl analytics top-products dashboard.json --price-field price_at_purchase""",
)
@_source_argument
@click.option(
    "--price-field",
    type=click.Choice(list(PRICE_FIELDS)),
    default="unit_price",
    show_default=True,
    help="Which order_items column carries the line price.",
)
@click.pass_obj
def top_products(app: AppContext, source: IO[str], price_field: str) -> None:
    """Best sellers by revenue."""
    doc = app.read_document(source, op="top_products")
    app.emit(app.analytics.top_products(doc, price_field))


@analytics.command(examples="  furnictl analytics partners dashboard.json")
@_source_argument
@click.pass_obj
def partners(app: AppContext, source: IO[str]) -> None:
    """Assigned and delivered order counts per delivery partner."""
    doc = app.read_document(source, op="partner_stats")
    app.emit(app.analytics.partner_stats(doc))


@analytics.command(
    "bulk-discount",
    examples="""\
  furnictl analytics bulk-discount dashboard.json --percent 15
  furnictl --json analytics bulk-discount dashboard.json --percent 120""",
)
@_source_argument
@click.option(
    "--percent", required=True, type=float, help="Discount percent (clamped to 0-90)."
)
@click.pass_obj
def bulk_discount(app: AppContext, source: IO[str], percent: float) -> None:
    """Preview discounted prices for every product."""
    doc = app.read_document(source, op="bulk_discount")
    app.emit(app.analytics.bulk_discount(doc, percent))


@analytics.command(
    examples="""\
  furnictl analytics csv dashboard.json > orders.csv
  furnictl analytics csv dashboard.json --output orders.csv"""
)
@_source_argument
@click.option(
    "--output",
    "output_file",
    type=click.Path(),
    default=None,
    help="Output file (omit to print to stdout).",
)
@click.pass_obj
def csv(app: AppContext, source: IO[str], output_file: str | None) -> None:
    """Export orders as CSV."""
    doc = app.read_document(source, op="orders_csv")
    result = app.analytics.orders_csv(doc)

    if not result.ok:
        app.emit(result)
        return

    if output_file:
        Path(output_file).write_text(result.data["content"] + "\n", encoding="utf-8")
        from furnictl.services.result import ServiceResult

        app.emit(
            ServiceResult.success(
                "orders_csv",
                {"output_file": output_file, "row_count": result.data["row_count"]},
            )
        )
    else:
        # Pipe-friendly: raw content to stdout
        click.echo(result.data["content"])


@analytics.command(examples="  furnictl analytics flags dashboard.json")
@_source_argument
@click.pass_obj
def flags(app: AppContext, source: IO[str]) -> None:
    """Pending-spike, low-stock, and cancellation risk flags."""
    doc = app.read_document(source, op="operational_flags")
    app.emit(app.analytics.flags(doc))


@analytics.command(
    "filter",
    examples="""\
  furnictl analytics filter dashboard.json --status placed
  furnictl -q analytics filter dashboard.json --status all""",
)
@_source_argument
@click.option("--status", default=None, help="Order status to keep ('all' keeps everything).")
@click.pass_obj
def filter_cmd(app: AppContext, source: IO[str], status: str | None) -> None:
    """List orders with a given status."""
    doc = app.read_document(source, op="filter_orders")
    app.emit(app.analytics.filter_orders(doc, status))


@analytics.command(examples="  furnictl analytics earnings jobs.json")
@_source_argument
@click.pass_obj
def earnings(app: AppContext, source: IO[str]) -> None:
    """Delivery partner earnings from completed jobs."""
    doc = app.read_document(source, op="partner_earnings")
    app.emit(app.analytics.earnings(doc))


@analytics.command(
    examples="""\
  echo '{"grossRevenue": 50000, "refunds": 2000, "orders": 12}' \\
    | furnictl analytics revenue -"""
)
@click.argument("source", type=click.File("r"))
@click.pass_obj
def revenue(app: AppContext, source: IO[str]) -> None:
    """Net revenue and average order value from a revenue snapshot."""
    doc = app.read_document(source, op="revenue_summary")
    app.emit(app.analytics.revenue(doc))


@analytics.command(
    examples="""\
  furnictl analytics dashboard dashboard.json
  furnictl --json analytics dashboard dashboard.json --now 2026-03-01T12:00:00Z"""
)
@_source_argument
@click.option("--now", default=None, help="Reference time for alerts (ISO-8601).")
@click.pass_obj
def dashboard(app: AppContext, source: IO[str], now: str | None) -> None:
    """Every admin widget in one report."""
    doc = app.read_document(source, op="admin_dashboard")
    app.emit(app.analytics.dashboard(doc, now))
