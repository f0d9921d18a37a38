"""AnalyticsService — admin, showroom, and delivery dashboard rollups.

Every method takes a *dashboard document*: a plain mapping with any of
the keys ``products``, ``orders``, ``assignments``, ``partners``,
``order_items``, and ``jobs``, each a list of database rows.  Missing
keys read as empty collections.
"""

from __future__ import annotations

from typing import Any

from furnictl.domain.analytics import (
    apply_bulk_discount,
    build_admin_kpis,
    build_operational_alerts,
    build_orders_csv,
    build_partner_assignment_stats,
    calculate_earnings,
    clamp_discount_percent,
    collect_status_breakdown,
    compute_fulfillment_metrics,
    detect_operational_flags,
    filter_orders_by_status,
    parse_timestamp,
    summarize_top_products,
)
from furnictl.domain.pricing import RevenueSnapshot, calculate_aov, calculate_net_revenue
from furnictl.services._helpers import dump, now_iso
from furnictl.services.base import BaseService, records
from furnictl.services.result import ErrorCode, ServiceResult
from furnictl.services.telemetry import trace_span, traced

PRICE_FIELDS = ("unit_price", "price_at_purchase")

Document = dict[str, Any]


class AnalyticsService(BaseService):
    """Pure aggregations over a caller-supplied dashboard document."""

    @traced
    def kpis(self, doc: Document) -> ServiceResult:
        kpis = build_admin_kpis(
            records(doc, "products"), records(doc, "orders"), records(doc, "assignments")
        )
        return ServiceResult.success("admin_kpis", dump(kpis))

    @traced
    def partner_stats(self, doc: Document) -> ServiceResult:
        stats = build_partner_assignment_stats(
            records(doc, "partners"), records(doc, "assignments")
        )
        return ServiceResult.success("partner_stats", {"items": stats, "count": len(stats)})

    @traced
    def filter_orders(self, doc: Document, status: str | None = None) -> ServiceResult:
        orders = filter_orders_by_status(records(doc, "orders"), status)
        return ServiceResult.success(
            "filter_orders",
            {"status": status or "all", "items": list(orders), "count": len(orders)},
        )

    @traced
    def fulfillment(self, doc: Document) -> ServiceResult:
        metrics = compute_fulfillment_metrics(records(doc, "orders"))
        return ServiceResult.success("fulfillment_metrics", dump(metrics))

    @traced
    def status_breakdown(self, doc: Document) -> ServiceResult:
        breakdown = collect_status_breakdown(records(doc, "orders"))
        return ServiceResult.success(
            "status_breakdown", {"items": dump(breakdown), "count": len(breakdown)}
        )

    @traced
    def flags(self, doc: Document) -> ServiceResult:
        """Risk flags derived from the fulfillment funnel and stock levels.

        ``cancellation_rate`` is cancelled orders over all orders (0 when
        there are none).
        """
        orders = records(doc, "orders")
        metrics = compute_fulfillment_metrics(orders)
        kpis = build_admin_kpis(records(doc, "products"), orders, [])
        rate = metrics.cancelled / metrics.total if metrics.total else 0.0
        flags = detect_operational_flags(metrics.pending, kpis.low_stock_count, rate)
        return ServiceResult.success(
            "operational_flags",
            {
                **dump(flags),
                "inputs": {
                    "pending_orders": metrics.pending,
                    "low_stock_count": kpis.low_stock_count,
                    "cancellation_rate": rate,
                },
            },
        )

    @traced
    def alerts(self, doc: Document, now: str | None = None) -> ServiceResult:
        """Stale-work counts relative to *now* (current UTC time if omitted)."""
        op = "operational_alerts"
        reference = now or now_iso()
        if parse_timestamp(reference) is None:
            return ServiceResult.failure(
                op, ErrorCode.INVALID_INPUT, f"Invalid timestamp for --now: {reference}"
            )
        cfg = self.settings.analytics
        alerts = build_operational_alerts(
            records(doc, "orders"),
            records(doc, "assignments"),
            reference,
            stale_order_hours=cfg.stale_order_hours,
            long_running_hours=cfg.long_running_assignment_hours,
        )
        return ServiceResult.success(op, {**dump(alerts), "now": reference})

    @traced
    def top_products(self, doc: Document, price_field: str = "unit_price") -> ServiceResult:
        op = "top_products"
        if price_field not in PRICE_FIELDS:
            return ServiceResult.failure(
                op,
                ErrorCode.INVALID_INPUT,
                f"Unknown price field: {price_field}",
                detail={"allowed": list(PRICE_FIELDS)},
            )
        top = summarize_top_products(
            records(doc, "order_items"),
            price_field=price_field,
            limit=self.settings.analytics.top_products_limit,
        )
        return ServiceResult.success(op, {"items": dump(top), "count": len(top)})

    @traced
    def bulk_discount(self, doc: Document, percent: Any) -> ServiceResult:
        warnings: list[str] = []
        applied = clamp_discount_percent(percent)
        try:
            requested = float(percent)
        except (TypeError, ValueError):
            requested = None
        if requested is None or requested != applied:
            warnings.append(f"Discount percent {percent!r} clamped to {applied:g}")
        updates = apply_bulk_discount(records(doc, "products"), percent)
        return ServiceResult.success(
            "bulk_discount",
            {"percent": applied, "items": dump(updates), "count": len(updates)},
            warnings=warnings,
        )

    @traced
    def orders_csv(self, doc: Document) -> ServiceResult:
        orders = records(doc, "orders")
        return ServiceResult.success(
            "orders_csv", {"content": build_orders_csv(orders), "row_count": len(orders)}
        )

    @traced
    def earnings(self, doc: Document) -> ServiceResult:
        jobs = records(doc, "jobs")
        return ServiceResult.success(
            "partner_earnings", {"earnings": calculate_earnings(jobs), "job_count": len(jobs)}
        )

    @traced
    def revenue(self, snapshot: RevenueSnapshot | dict[str, Any]) -> ServiceResult:
        op = "revenue_summary"
        parsed = self._parse(op, RevenueSnapshot, snapshot)
        if isinstance(parsed, ServiceResult):
            return parsed
        return ServiceResult.success(
            op,
            {
                "net_revenue": calculate_net_revenue(parsed),
                "aov": calculate_aov(parsed),
                "orders": parsed.orders,
            },
        )

    @traced
    def dashboard(self, doc: Document, now: str | None = None) -> ServiceResult:
        """All admin widgets in one pass: KPIs, funnel, breakdown, flags, alerts, top sellers."""
        op = "admin_dashboard"
        sections: dict[str, Any] = {}
        for name, method in (
            ("kpis", self.kpis),
            ("fulfillment", self.fulfillment),
            ("status_breakdown", self.status_breakdown),
            ("flags", self.flags),
            ("top_products", self.top_products),
        ):
            with trace_span(name):
                sections[name] = method(doc).data

        with trace_span("alerts"):
            alerts = self.alerts(doc, now)
        if not alerts.ok:
            return ServiceResult.failure(
                op, ErrorCode.INVALID_INPUT, alerts.error.message if alerts.error else ""
            )
        sections["alerts"] = alerts.data
        self._log.debug("dashboard.complete", sections=len(sections))
        return ServiceResult.success(op, sections)
