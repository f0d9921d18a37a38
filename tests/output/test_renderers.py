"""Tests for operation-specific Rich renderers."""

from __future__ import annotations

from furnictl.output.console import money, style_for_status
from furnictl.output.renderers import render_quiet, render_result
from furnictl.services.result import ServiceError, ServiceResult

# ── Helpers ───────────────────────────────────────────────────────────


def _ok(op: str, **data: object) -> ServiceResult:
    return ServiceResult(ok=True, op=op, data=dict(data))


def _err(op: str, code: str, message: str, **detail: object) -> ServiceResult:
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(code=code, message=message, detail=dict(detail)),
    )


TOTALS = {
    "subtotal": 1000.0,
    "discount_amount": 100.0,
    "taxable_amount": 900.0,
    "tax_amount": 162.0,
    "shipping_amount": 100.0,
    "total": 1162.0,
}


# ── Console helpers ──────────────────────────────────────────────────


class TestConsoleHelpers:
    def test_money(self) -> None:
        assert money(4000) == "4,000.00"
        assert money(0.5) == "0.50"

    def test_money_non_number(self) -> None:
        assert money("") == ""
        assert money(True) == "True"

    def test_style_for_status(self) -> None:
        assert style_for_status("delivered") == "furni.status.delivered"
        assert style_for_status("weird") == ""


# ── Error rendering ──────────────────────────────────────────────────


class TestErrorRenderer:
    def test_basic_error(self) -> None:
        result = _err("evaluate_coupon", "INVALID_COUPON", "This coupon is not valid.")
        output = render_result(result)
        assert "ERROR" in output
        assert "evaluate_coupon" in output
        assert "This coupon is not valid." in output

    def test_verbose_shows_detail(self) -> None:
        result = _err("top_products", "INVALID_INPUT", "Unknown price field", allowed="unit_price")
        output = render_result(result, verbose=True)
        assert "detail" in output
        assert "allowed" in output

    def test_no_error_object(self) -> None:
        assert "Unknown error" in render_result(ServiceResult(ok=False, op="test"))


# ── Checkout renderers ───────────────────────────────────────────────


class TestCheckoutRenderers:
    def test_coupon(self) -> None:
        output = render_result(
            _ok(
                "evaluate_coupon",
                ok=True,
                code="WELCOME10",
                discount_amount=4000.0,
                message="Coupon WELCOME10 applied successfully.",
            )
        )
        assert "WELCOME10" in output
        assert "4,000.00" in output

    def test_totals(self) -> None:
        output = render_result(_ok("checkout_totals", **TOTALS))
        for label in ("Subtotal", "Discount", "Taxable", "Tax", "Shipping", "Total"):
            assert label in output
        assert "1,162.00" in output
        assert "-100.00" in output

    def test_promotions_empty(self) -> None:
        output = render_result(_ok("evaluate_promotions", items=[], count=0, discount_total=0))
        assert "No promotions apply" in output

    def test_promotions(self) -> None:
        output = render_result(
            _ok(
                "evaluate_promotions",
                items=[{"label": "Gold Loyalty Benefit", "discount_amount": 400}],
                count=1,
                discount_total=400,
            )
        )
        assert "Gold Loyalty Benefit" in output
        assert "400.00" in output

    def test_quote(self) -> None:
        output = render_result(
            _ok(
                "checkout_quote",
                subtotal=1000,
                shipping_tier="standard",
                coupon={"code": "SAVE5", "discount_amount": 50},
                promotions=[{"label": "First Order Offer", "discount_amount": 250}],
                totals=TOTALS,
            )
        )
        assert "SAVE5 (-50.00)" in output
        assert "First Order Offer (-250.00)" in output
        assert "1,162.00" in output


# ── Analytics renderers ──────────────────────────────────────────────


class TestAnalyticsRenderers:
    def test_kpis_format_revenue(self) -> None:
        output = render_result(_ok("admin_kpis", total_products=3, total_revenue=7000.0))
        assert "total_products: 3" in output
        assert "total_revenue: 7,000.00" in output

    def test_flags(self) -> None:
        output = render_result(
            _ok(
                "operational_flags",
                pending_spike=False,
                low_stock_risk=False,
                cancellation_risk=True,
                inputs={"cancellation_rate": 0.25},
            )
        )
        assert "cancellation_risk: RAISED" in output
        assert "pending_spike: ok" in output
        assert "inputs" not in output

    def test_breakdown(self) -> None:
        output = render_result(
            _ok("status_breakdown", items=[{"status": "delivered", "count": 2}], count=1)
        )
        assert "delivered" in output
        assert "2" in output

    def test_top_products(self) -> None:
        output = render_result(
            _ok(
                "top_products",
                items=[{"name": "Teak Chair", "qty": 3.0, "revenue": 5400.0}],
                count=1,
            )
        )
        assert "Teak Chair" in output
        assert "5,400.00" in output

    def test_orders(self) -> None:
        output = render_result(
            _ok(
                "filter_orders",
                status="placed",
                items=[{"order_number": "FN-1002", "status": "placed", "total_amount": 1800}],
                count=1,
            )
        )
        assert "FN-1002" in output
        assert "1 orders (placed)" in output

    def test_dashboard(self) -> None:
        output = render_result(
            _ok(
                "admin_dashboard",
                kpis={"total_products": 3, "total_revenue": 7000.0},
                fulfillment={"progress": 50},
                alerts={"stale_placed_orders": 1, "long_running_assignments": 0},
                flags={"cancellation_risk": True},
                top_products={"items": [{"name": "Teak Chair", "revenue": 5400.0}]},
            )
        )
        assert "progress: 50%" in output
        assert "flags: cancellation_risk" in output
        assert "Teak Chair" in output


# ── Catalog renderers ────────────────────────────────────────────────


class TestCatalogRenderers:
    def test_products(self) -> None:
        output = render_result(
            _ok(
                "filter_products",
                items=[{"id": "p1", "name": "Oak Desk", "price": 4500, "stock_quantity": 2}],
                count=1,
            )
        )
        assert "Oak Desk" in output
        assert "4,500.00" in output
        assert "1 products" in output

    def test_summary(self) -> None:
        output = render_result(_ok("search_summary", summary="All products"))
        assert output == "All products"


# ── Verbose meta ─────────────────────────────────────────────────────


class TestTelemetryRendering:
    def test_span_tree(self) -> None:
        result = ServiceResult(
            ok=True,
            op="checkout_totals",
            data=TOTALS,
            meta={
                "telemetry": {
                    "name": "CheckoutService.totals",
                    "duration_ms": 0.123,
                    "children": [{"name": "inner", "duration_ms": 0.01}],
                }
            },
        )
        output = render_result(result, verbose=True)
        assert "CheckoutService.totals" in output
        assert "inner" in output

    def test_meta_hidden_without_verbose(self) -> None:
        result = ServiceResult(
            ok=True, op="checkout_totals", data=TOTALS, meta={"telemetry": {"name": "x"}}
        )
        assert "meta" not in render_result(result)


# ── Quiet mode ───────────────────────────────────────────────────────


class TestQuietRenderer:
    def test_error(self) -> None:
        output = render_quiet(_err("fraud_screen", "FRAUD_REJECTED", "Nope"))
        assert output == "ERROR: fraud_screen — Nope"

    def test_items(self) -> None:
        output = render_quiet(
            _ok("filter_orders", items=[{"id": "o1"}, {"order_number": "FN-2"}, {"x": 1}])
        )
        assert output == "o1\nFN-2"

    def test_totals(self) -> None:
        assert render_quiet(_ok("checkout_totals", **TOTALS)) == "1,162.00"

    def test_default(self) -> None:
        assert render_quiet(_ok("admin_kpis", total_products=3)) == "OK: admin_kpis"
