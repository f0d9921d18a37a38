"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from furnictl.output.console import create_console, get_output, money, style_for_status

if TYPE_CHECKING:
    from rich.console import Console

    from furnictl.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    items = result.data.get("items")
    if items and isinstance(items, list):
        keys = [_item_key(item) for item in items]
        return "\n".join(key for key in keys if key)

    if result.op == "checkout_totals":
        return money(result.data["total"])

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _item_key(item: Any) -> str:
    """Pick the most identifying field of a row for quiet output."""
    if isinstance(item, dict):
        for key in ("id", "order_number", "name", "label", "status"):
            val = item.get(key)
            if val is not None:
                return str(val)
    return ""


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="furni.ok")
    op = Text(f"  {result.op}", style="furni.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any, *, style: str = "") -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="furni.key")
    if isinstance(value, (dict, list)):
        value = _json.dumps(value, separators=(",", ":"))
    console.print(Text.assemble(k, Text(str(value), style=style)))


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including telemetry span tree (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))

    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(
    console: Console,
    span_data: dict[str, Any],
    indent: int = 4,
) -> None:
    """Render a span tree; everything here is sub-millisecond unless inputs are huge."""
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)
    style = "yellow" if duration > 50 else "dim"

    line = f"{prefix}[{style}]{duration:>8.3f}ms[/{style}]  {name}"
    annotations = span_data.get("annotations") or {}
    if annotations:
        line += "  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")"
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _table(*columns: str, right: tuple[str, ...] = ()) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    for col in columns:
        table.add_column(col, justify="right" if col in right else "left")
    return table


def _totals_table(totals: dict[str, Any]) -> Table:
    """Two-column breakdown of a CheckoutTotals payload."""
    table = Table(show_header=False, pad_edge=False, expand=False, box=None)
    table.add_column("Line")
    table.add_column("Amount", justify="right")
    table.add_row("Subtotal", money(totals.get("subtotal", 0)))
    table.add_row(
        "Discount", Text(f"-{money(totals.get('discount_amount', 0))}", style="furni.discount")
    )
    table.add_row("Taxable", money(totals.get("taxable_amount", 0)))
    table.add_row("Tax", money(totals.get("tax_amount", 0)))
    table.add_row("Shipping", money(totals.get("shipping_amount", 0)))
    table.add_row(
        Text("Total", style="furni.total"), Text(money(totals.get("total", 0)), style="furni.total")
    )
    return table


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="furni.error")
    op = Text(f"  {result.op}", style="furni.op")
    sep = Text(" — ")
    console.print(label, op, sep, msg)

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Checkout renderers ────────────────────────────────────────────────


def _render_coupon(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    _field(console, "code", d.get("code"))
    _field(console, "discount", money(d.get("discount_amount")), style="furni.discount")
    _field(console, "message", d.get("message"))
    if verbose:
        _render_meta(console, result)


def _render_totals(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    console.print(_totals_table(result.data))
    if verbose:
        _render_meta(console, result)


def _render_promotions(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    items = result.data.get("items", [])
    if not items:
        console.print("  No promotions apply")
    else:
        table = _table("Promotion", "Discount", right=("Discount",))
        for item in items:
            table.add_row(str(item.get("label", "")), money(item.get("discount_amount", 0)))
        console.print(table)
    _field(console, "discount_total", money(result.data.get("discount_total", 0)))
    if verbose:
        _render_meta(console, result)


def _render_quote(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    _field(console, "shipping_tier", d.get("shipping_tier"))
    coupon = d.get("coupon")
    if coupon:
        _field(console, "coupon", f"{coupon.get('code')} (-{money(coupon.get('discount_amount'))})")
    for promo in d.get("promotions", []):
        amount = money(promo.get("discount_amount"))
        _field(console, "promotion", f"{promo.get('label')} (-{amount})")
    console.print()
    console.print(_totals_table(d.get("totals", {})))
    if verbose:
        _render_meta(console, result)


# ── Analytics renderers ───────────────────────────────────────────────


def _render_fields(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Flat numeric summaries (KPIs, funnel, alerts, earnings)."""
    _status_line(console, result)
    for key, value in result.data.items():
        is_amount = key.endswith(("revenue", "earnings")) or key == "aov"
        shown = money(value) if is_amount else value
        _field(console, key, shown, style="furni.amount" if is_amount else "")
    if verbose:
        _render_meta(console, result)


def _render_flags(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key in ("pending_spike", "low_stock_risk", "cancellation_risk"):
        raised = bool(result.data.get(key))
        style = "furni.flag.on" if raised else "furni.flag.off"
        _field(console, key, "RAISED" if raised else "ok", style=style)
    if verbose:
        _field(console, "inputs", result.data.get("inputs", {}))
        _render_meta(console, result)


def _render_breakdown(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    table = _table("Status", "Orders", right=("Orders",))
    for item in result.data.get("items", []):
        status = str(item.get("status", ""))
        table.add_row(Text(status, style=style_for_status(status)), str(item.get("count", 0)))
    console.print(table)
    if verbose:
        _render_meta(console, result)


def _render_top_products(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    table = _table("#", "Product", "Qty", "Revenue", right=("#", "Qty", "Revenue"))
    for rank, item in enumerate(result.data.get("items", []), start=1):
        qty = item.get("qty", 0)
        table.add_row(
            str(rank),
            str(item.get("name", "")),
            f"{qty:g}" if isinstance(qty, (int, float)) else str(qty),
            money(item.get("revenue", 0)),
        )
    console.print(table)
    if verbose:
        _render_meta(console, result)


def _render_partners(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    table = _table("Partner", "Name", "Assigned", "Delivered", right=("Assigned", "Delivered"))
    for item in result.data.get("items", []):
        table.add_row(
            str(item.get("id", "")),
            str(item.get("name", item.get("full_name", ""))),
            str(item.get("assigned_orders", 0)),
            str(item.get("delivered_orders", 0)),
        )
    console.print(table)
    if verbose:
        _render_meta(console, result)


def _render_orders(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    table = _table("Order", "Status", "Total", "Created", right=("Total",))
    for item in result.data.get("items", []):
        status = str(item.get("status", ""))
        table.add_row(
            str(item.get("order_number", item.get("id", ""))),
            Text(status, style=style_for_status(status)),
            money(item.get("total_amount", "")),
            str(item.get("created_at", "")),
        )
    console.print(table)
    console.print(f"\n{result.data.get('count', 0)} orders ({result.data.get('status', 'all')})")


def _render_bulk_discount(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    _status_line(console, result)
    _field(console, "percent", f"{result.data.get('percent', 0):g}%")
    table = _table("Product", "Next price", right=("Next price",))
    for item in result.data.get("items", []):
        table.add_row(str(item.get("id", "")), money(item.get("next_price", 0)))
    console.print(table)


def _render_dashboard(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    kpis = d.get("kpis", {})
    for key in ("total_products", "open_orders", "low_stock_count", "active_assignments"):
        _field(console, key, kpis.get(key, 0))
    _field(console, "total_revenue", money(kpis.get("total_revenue", 0)), style="furni.amount")
    _field(console, "progress", f"{d.get('fulfillment', {}).get('progress', 0)}%")
    alerts = d.get("alerts", {})
    _field(console, "stale_placed_orders", alerts.get("stale_placed_orders", 0))
    _field(console, "long_running_assignments", alerts.get("long_running_assignments", 0))
    flags = d.get("flags", {})
    raised = [k for k in ("pending_spike", "low_stock_risk", "cancellation_risk") if flags.get(k)]
    _field(console, "flags", ", ".join(raised) or "none", style="furni.flag.on" if raised else "")
    top = d.get("top_products", {}).get("items", [])
    if top:
        console.print()
        table = _table("Top product", "Revenue", right=("Revenue",))
        for item in top:
            table.add_row(str(item.get("name", "")), money(item.get("revenue", 0)))
        console.print(table)
    if verbose:
        _render_meta(console, result)


# ── Catalog renderers ─────────────────────────────────────────────────


def _render_products(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    table = _table("ID", "Name", "Price", "Stock", right=("Price", "Stock"))
    for item in result.data.get("items", []):
        stock = item.get("stock_quantity", "")
        table.add_row(
            str(item.get("id", "")),
            str(item.get("name", "")),
            money(item.get("price", "")),
            f"{stock:g}" if isinstance(stock, (int, float)) else str(stock),
        )
    console.print(table)
    console.print(f"\n{result.data.get('count', 0)} products")


def _render_summary(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    console.print(str(result.data.get("summary", "")))


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    # Checkout
    "evaluate_coupon": _render_coupon,
    "checkout_totals": _render_totals,
    "checkout_quote": _render_quote,
    "evaluate_promotions": _render_promotions,
    # Analytics
    "admin_kpis": _render_fields,
    "fulfillment_metrics": _render_fields,
    "operational_alerts": _render_fields,
    "partner_earnings": _render_fields,
    "revenue_summary": _render_fields,
    "operational_flags": _render_flags,
    "status_breakdown": _render_breakdown,
    "top_products": _render_top_products,
    "partner_stats": _render_partners,
    "filter_orders": _render_orders,
    "bulk_discount": _render_bulk_discount,
    "admin_dashboard": _render_dashboard,
    # Catalog
    "normalize_products": _render_products,
    "filter_products": _render_products,
    "recommendations": _render_products,
    "search_summary": _render_summary,
}
