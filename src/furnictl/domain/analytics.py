"""Admin dashboard aggregations over orders, products, and assignments.

Inputs are read-only database rows (``Mapping[str, Any]``) owned by the
caller.  Numeric columns are read through
:func:`furnictl.domain.numbers.field_number`, so a missing or non-numeric
``total_amount`` / ``quantity`` / ``price`` counts as 0.  Time-relative
functions take ``now`` as a parameter and never consult the clock.
"""

from __future__ import annotations

import csv
import io
import math
from collections.abc import Iterable, Mapping, Sequence
from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from pydantic import BaseModel

from furnictl.domain.numbers import as_number, field_number

Record = Mapping[str, Any]

# --- Status vocabularies ---

OPEN_ORDER_STATUSES = frozenset({"placed", "processing", "assigned_to_delivery"})
DELIVERED = "delivered"
CANCELLED = "cancelled"
PENDING = "pending"
PLACED = "placed"
UNKNOWN_STATUS = "unknown"

# --- Thresholds ---

LOW_STOCK_THRESHOLD = 5
PENDING_SPIKE_THRESHOLD = 10
LOW_STOCK_RISK_THRESHOLD = 5
CANCELLATION_RISK_THRESHOLD = 0.15
STALE_ORDER_HOURS = 24
LONG_RUNNING_ASSIGNMENT_HOURS = 18
TOP_PRODUCTS_LIMIT = 5
MAX_BULK_DISCOUNT_PERCENT = 90
MIN_BULK_PRICE = 1
# Beyond this magnitude a double has no cents digits left to round.
CENTS_EXACT_LIMIT = 2**53 / 100

ORDERS_CSV_COLUMNS: tuple[str, ...] = ("order_number", "status", "total_amount", "created_at")

UNKNOWN_PRODUCT = "Unknown Product"
UNKNOWN_ORDER_ITEM = "Unknown"


# ---------------------------------------------------------------------------
# Result models
# ---------------------------------------------------------------------------


class AdminKpis(BaseModel):
    """Headline numbers for the admin dashboard."""

    model_config = {"frozen": True}

    total_products: int
    open_orders: int
    low_stock_count: int
    total_revenue: float
    active_assignments: int


class FulfillmentMetrics(BaseModel):
    """Order funnel counts and delivered share (whole percent)."""

    model_config = {"frozen": True}

    total: int
    delivered: int
    cancelled: int
    pending: int
    progress: int


class StatusCount(BaseModel):
    model_config = {"frozen": True}

    status: str
    count: int


class OperationalFlags(BaseModel):
    model_config = {"frozen": True}

    pending_spike: bool
    low_stock_risk: bool
    cancellation_risk: bool


class OperationalAlerts(BaseModel):
    """Counts of work that has been waiting too long."""

    model_config = {"frozen": True}

    stale_placed_orders: int
    long_running_assignments: int


class TopProduct(BaseModel):
    model_config = {"frozen": True}

    name: str
    qty: float
    revenue: float


class PriceUpdate(BaseModel):
    """Simulated post-discount price for one product."""

    model_config = {"frozen": True}

    id: Any
    next_price: float


# ---------------------------------------------------------------------------
# KPIs and partner stats
# ---------------------------------------------------------------------------


def is_low_stock(product: Record, threshold: float = LOW_STOCK_THRESHOLD) -> bool:
    """True when the product reports a stock level at or below *threshold*.

    A product with no ``stock_quantity`` column is not counted.
    """
    stock = product.get("stock_quantity")
    if stock is None:
        return False
    return as_number(stock) <= threshold


def build_admin_kpis(
    products: Sequence[Record],
    orders: Sequence[Record],
    assignments: Sequence[Record],
) -> AdminKpis:
    """Revenue from delivered orders plus open-order, stock, and assignment counts."""
    delivered = [order for order in orders if order.get("status") == DELIVERED]
    total_revenue = sum((field_number(order, "total_amount") for order in delivered), 0.0)
    open_orders = sum(1 for order in orders if order.get("status") in OPEN_ORDER_STATUSES)
    low_stock_count = sum(1 for product in products if is_low_stock(product))
    active_assignments = sum(1 for a in assignments if a.get("delivery_status") != DELIVERED)

    return AdminKpis(
        total_products=len(products),
        open_orders=open_orders,
        low_stock_count=low_stock_count,
        total_revenue=total_revenue,
        active_assignments=active_assignments,
    )


def build_partner_assignment_stats(
    partners: Sequence[Record],
    assignments: Sequence[Record],
) -> list[dict[str, Any]]:
    """Each partner row extended with ``assigned_orders`` and ``delivered_orders``."""
    stats: list[dict[str, Any]] = []
    for partner in partners:
        mine = [a for a in assignments if a.get("partner_id") == partner.get("id")]
        stats.append(
            {
                **partner,
                "assigned_orders": len(mine),
                "delivered_orders": sum(1 for a in mine if a.get("delivery_status") == DELIVERED),
            }
        )
    return stats


# ---------------------------------------------------------------------------
# Order status views
# ---------------------------------------------------------------------------


def filter_orders_by_status(
    orders: Sequence[Record],
    status_filter: str | None,
) -> list[Record]:
    """Orders matching *status_filter*; everything for ``None``/``""``/``"all"``."""
    if not status_filter or status_filter == "all":
        return list(orders)
    return [order for order in orders if order.get("status") == status_filter]


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _round_cents(value: float) -> float:
    """Two decimals, ties away from zero, on the exact binary value of *value*."""
    if abs(value) >= CENTS_EXACT_LIMIT:
        return value
    return float(Decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def compute_fulfillment_metrics(orders: Sequence[Record]) -> FulfillmentMetrics:
    total = len(orders)
    delivered = sum(1 for o in orders if o.get("status") == DELIVERED)
    cancelled = sum(1 for o in orders if o.get("status") == CANCELLED)
    pending = sum(1 for o in orders if o.get("status") == PENDING)
    progress = _round_half_up(delivered / total * 100) if total else 0
    return FulfillmentMetrics(
        total=total,
        delivered=delivered,
        cancelled=cancelled,
        pending=pending,
        progress=progress,
    )


def collect_status_breakdown(orders: Iterable[Record]) -> list[StatusCount]:
    """Count orders per status, in order of first appearance."""
    counts: dict[str, int] = {}
    for order in orders:
        status = order.get("status")
        key = str(status) if status else UNKNOWN_STATUS
        counts[key] = counts.get(key, 0) + 1
    return [StatusCount(status=status, count=count) for status, count in counts.items()]


def detect_operational_flags(
    pending_orders: float,
    low_stock_count: float,
    cancellation_rate: float,
) -> OperationalFlags:
    return OperationalFlags(
        pending_spike=pending_orders >= PENDING_SPIKE_THRESHOLD,
        low_stock_risk=low_stock_count >= LOW_STOCK_RISK_THRESHOLD,
        cancellation_risk=cancellation_rate >= CANCELLATION_RISK_THRESHOLD,
    )


# ---------------------------------------------------------------------------
# Time-relative alerts
# ---------------------------------------------------------------------------


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC.

    Returns None for missing or unparseable input.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def age_hours(created_at: Any, now: datetime) -> float | None:
    """Hours elapsed between *created_at* and *now* (None if unparseable)."""
    created = parse_timestamp(created_at)
    if created is None:
        return None
    return (now - created).total_seconds() / 3600


def build_operational_alerts(
    orders: Sequence[Record],
    assignments: Sequence[Record],
    now: str | datetime,
    *,
    stale_order_hours: float = STALE_ORDER_HOURS,
    long_running_hours: float = LONG_RUNNING_ASSIGNMENT_HOURS,
) -> OperationalAlerts:
    """Count placed orders and open assignments older than their thresholds.

    An unparseable *now* makes every age unknown, so both counts are 0.
    """
    reference = parse_timestamp(now)
    if reference is None:
        return OperationalAlerts(stale_placed_orders=0, long_running_assignments=0)

    stale = 0
    for order in orders:
        if order.get("status") != PLACED:
            continue
        age = age_hours(order.get("created_at"), reference)
        if age is not None and age >= stale_order_hours:
            stale += 1

    long_running = 0
    for assignment in assignments:
        if assignment.get("delivery_status") == DELIVERED:
            continue
        age = age_hours(assignment.get("created_at"), reference)
        if age is not None and age >= long_running_hours:
            long_running += 1

    return OperationalAlerts(stale_placed_orders=stale, long_running_assignments=long_running)


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------


def summarize_top_products(
    order_items: Iterable[Record],
    *,
    price_field: str = "unit_price",
    limit: int = TOP_PRODUCTS_LIMIT,
) -> list[TopProduct]:
    """Quantity and revenue per product name, best sellers by revenue first.

    *price_field* is ``"unit_price"`` for cart-style rows and
    ``"price_at_purchase"`` for order-item rows.  A missing name reads
    ``"Unknown Product"`` for cart rows and ``"Unknown"`` for order items.
    """
    unknown = UNKNOWN_ORDER_ITEM if price_field == "price_at_purchase" else UNKNOWN_PRODUCT
    totals: dict[str, list[float]] = {}
    for item in order_items:
        raw_name = item.get("product_name")
        name = str(raw_name) if raw_name else unknown
        quantity = field_number(item, "quantity")
        bucket = totals.setdefault(name, [0.0, 0.0])
        bucket[0] += quantity
        bucket[1] += quantity * field_number(item, price_field)

    ranked = sorted(totals.items(), key=lambda entry: entry[1][1], reverse=True)
    return [
        TopProduct(name=name, qty=qty, revenue=revenue) for name, (qty, revenue) in ranked[:limit]
    ]


def filter_products(
    products: Iterable[Record],
    query: str | None = None,
    category: str | None = None,
) -> list[Record]:
    """Case-insensitive name search combined with an exact category match."""
    needle = (query or "").lower()
    matches: list[Record] = []
    for product in products:
        if needle and needle not in str(product.get("name") or "").lower():
            continue
        if category and category != "all":
            if (product.get("category") or "uncategorized") != category:
                continue
        matches.append(product)
    return matches


def clamp_discount_percent(percent: Any) -> float:
    """Read *percent* as a number and clamp it to ``[0, 90]``."""
    return max(0.0, min(float(MAX_BULK_DISCOUNT_PERCENT), as_number(percent)))


def apply_bulk_discount(products: Iterable[Record], percent: Any) -> list[PriceUpdate]:
    """Simulate a storewide percent cut; prices never drop below 1."""
    safe_percent = clamp_discount_percent(percent)
    factor = 1 - safe_percent / 100
    return [
        PriceUpdate(
            id=product.get("id"),
            next_price=max(MIN_BULK_PRICE, _round_cents(field_number(product, "price") * factor)),
        )
        for product in products
    ]


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------


def _csv_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_orders_csv(orders: Iterable[Record]) -> str:
    """Render orders as a four-column CSV document (no trailing newline).

    Cells containing a comma, quote, or line break are quoted; all other
    output is plain comma-joined text.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(ORDERS_CSV_COLUMNS)
    for order in orders:
        writer.writerow([_csv_cell(order.get(column)) for column in ORDERS_CSV_COLUMNS])
    return buffer.getvalue().removesuffix("\n")


# ---------------------------------------------------------------------------
# Delivery partner ledger
# ---------------------------------------------------------------------------


def calculate_earnings(jobs: Iterable[Record]) -> float:
    """Sum of payouts over delivered jobs; negative payouts count as 0."""
    return sum(
        (max(0.0, field_number(job, "payout")) for job in jobs if job.get("status") == DELIVERED),
        0.0,
    )
