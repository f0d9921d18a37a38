"""CheckoutService — coupon, shipping, fraud, promotions, and totals.

The domain modules never call each other; this service is the call site
that combines them.  :meth:`CheckoutService.quote` is the full checkout
pipeline: address check, coupon, automatic promotions, shipping tier,
fraud screen, and the final totals breakdown.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from furnictl.domain.address import ShippingAddress, validate_shipping_address
from furnictl.domain.coupons import CouponResult, evaluate_coupon
from furnictl.domain.fraud import FraudContext, perform_fraud_screening, screen
from furnictl.domain.pricing import calculate_checkout_totals
from furnictl.domain.promotions import (
    PromotionContext,
    evaluate_promotions,
    total_promotion_discount,
)
from furnictl.domain.shipping import get_shipping_amount
from furnictl.services._helpers import dump
from furnictl.services.base import BaseService
from furnictl.services.result import ErrorCode, ServiceResult
from furnictl.services.telemetry import trace_span, traced

# --- Request models ---


class CartLine(BaseModel):
    """One cart row: unit price times quantity."""

    model_config = {
        "frozen": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    product_id: str | int | None = None
    name: str = ""
    price: float = 0
    quantity: int = Field(default=1, ge=0)

    @property
    def line_total(self) -> float:
        return self.price * self.quantity


class CheckoutRequest(BaseModel):
    """Everything the storefront submits when the shopper places an order."""

    model_config = {
        "frozen": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    lines: list[CartLine] = Field(default_factory=list)
    shipping_address: ShippingAddress = Field(default_factory=ShippingAddress)
    payment_method: str = "cod"
    coupon_code: str | None = None
    shipping_tier: str | None = None
    is_first_order: bool = False
    customer_tier: str | None = None

    @property
    def subtotal(self) -> float:
        return sum((line.line_total for line in self.lines), 0.0)


def discount_percent_for(discount_amount: float, subtotal: float) -> float:
    """Express a flat discount as a percent of *subtotal* (capped at 100).

    ``calculate_checkout_totals`` turns the percent back into an amount, so
    for a non-round subtotal the quoted ``discount_amount`` can differ from
    the coupon plus promotion sum in the last bit.  Compare amounts with a
    tolerance, or round to cents for display.
    """
    if subtotal <= 0:
        return 0.0
    return min(discount_amount, subtotal) / subtotal * 100


class CheckoutService(BaseService):
    """Checkout-time pricing decisions."""

    @traced
    def validate_address(self, address: ShippingAddress | dict[str, Any]) -> ServiceResult:
        op = "validate_address"
        parsed = self._parse(op, ShippingAddress, address)
        if isinstance(parsed, ServiceResult):
            return parsed
        check = validate_shipping_address(parsed)
        if not check.ok:
            self._log.debug("address.rejected", reason=check.message)
            return ServiceResult.failure(op, ErrorCode.INVALID_ADDRESS, check.message or "")
        return ServiceResult.success(op, {"address": parsed.model_dump(mode="json")})

    @traced
    def evaluate_coupon(self, code: str | None, subtotal: float) -> ServiceResult:
        op = "evaluate_coupon"
        result = evaluate_coupon(code, subtotal)
        if not result.ok:
            self._log.debug("coupon.rejected", code=code, subtotal=subtotal)
            return ServiceResult.failure(
                op, ErrorCode.INVALID_COUPON, result.message, data=dump(result)
            )
        return ServiceResult.success(op, dump(result))

    @traced
    def shipping(self, subtotal: float, tier: str | None = None) -> ServiceResult:
        resolved_tier = tier or self.settings.checkout.default_shipping_tier
        amount = get_shipping_amount(subtotal, resolved_tier)
        return ServiceResult.success(
            "shipping_amount",
            {"subtotal": subtotal, "shipping_tier": str(resolved_tier), "shipping_amount": amount},
        )

    @traced
    def screen_fraud(self, context: FraudContext | dict[str, Any]) -> ServiceResult:
        op = "fraud_screen"
        parsed = self._parse(op, FraudContext, context)
        if isinstance(parsed, ServiceResult):
            return parsed
        decision = screen(parsed)
        if not decision.approved:
            self._log.info(
                "fraud.rejected", subtotal=parsed.subtotal, payment=parsed.payment_method
            )
            return ServiceResult.failure(
                op, ErrorCode.FRAUD_REJECTED, decision.message or "", data=dump(decision)
            )
        return ServiceResult.success(op, dump(decision))

    @traced
    def totals(
        self,
        subtotal: float,
        *,
        discount_percent: float = 0,
        tax_rate: float | None = None,
        shipping_flat: float = 0,
    ) -> ServiceResult:
        rate = self.settings.checkout.tax_rate if tax_rate is None else tax_rate
        totals = calculate_checkout_totals(subtotal, discount_percent, rate, shipping_flat)
        return ServiceResult.success("checkout_totals", dump(totals))

    @traced
    def promotions(self, context: PromotionContext | dict[str, Any]) -> ServiceResult:
        op = "evaluate_promotions"
        parsed = self._parse(op, PromotionContext, context)
        if isinstance(parsed, ServiceResult):
            return parsed
        outcomes = evaluate_promotions(parsed)
        return ServiceResult.success(
            op,
            {
                "items": dump(outcomes),
                "count": len(outcomes),
                "discount_total": total_promotion_discount(outcomes),
            },
        )

    @traced
    def quote(self, request: CheckoutRequest | dict[str, Any]) -> ServiceResult:
        """Price a full checkout and decide whether it may be placed.

        Fails fast, in order, on an invalid address, a rejected coupon
        code, or a fraud-screen rejection.  Coupon and promotion discounts
        are summed, capped at the subtotal, and applied as a percent so
        tax is always charged on the post-discount amount.
        """
        op = "checkout_quote"
        parsed = self._parse(op, CheckoutRequest, request)
        if isinstance(parsed, ServiceResult):
            return parsed

        subtotal = parsed.subtotal

        with trace_span("validate_address"):
            check = validate_shipping_address(parsed.shipping_address)
        if not check.ok:
            return ServiceResult.failure(op, ErrorCode.INVALID_ADDRESS, check.message or "")

        coupon: CouponResult | None = None
        if parsed.coupon_code and parsed.coupon_code.strip():
            with trace_span("coupon"):
                coupon = evaluate_coupon(parsed.coupon_code, subtotal)
            if not coupon.ok:
                return ServiceResult.failure(
                    op, ErrorCode.INVALID_COUPON, coupon.message, data={"coupon": dump(coupon)}
                )

        with trace_span("promotions"):
            outcomes = evaluate_promotions(
                PromotionContext(
                    is_first_order=parsed.is_first_order,
                    subtotal=subtotal,
                    customer_tier=parsed.customer_tier,
                )
            )

        tier = parsed.shipping_tier or self.settings.checkout.default_shipping_tier
        with trace_span("shipping"):
            shipping_amount = get_shipping_amount(subtotal, tier)

        with trace_span("fraud"):
            decision = perform_fraud_screening(
                subtotal, parsed.shipping_address, parsed.payment_method
            )
        if not decision.approved:
            self._log.info("fraud.rejected", subtotal=subtotal, payment=parsed.payment_method)
            return ServiceResult.failure(op, ErrorCode.FRAUD_REJECTED, decision.message or "")

        coupon_discount = (coupon.discount_amount or 0.0) if coupon else 0.0
        discount_amount = coupon_discount + total_promotion_discount(outcomes)
        warnings: list[str] = []
        if discount_amount > subtotal:
            warnings.append("Combined discounts exceed the subtotal; capped at the subtotal")

        with trace_span("totals") as span:
            totals = calculate_checkout_totals(
                subtotal,
                discount_percent_for(discount_amount, subtotal),
                self.settings.checkout.tax_rate,
                shipping_amount,
            )
            if span is not None:
                span.note(total=totals.total)

        self._log.info("quote.complete", subtotal=subtotal, total=totals.total)
        return ServiceResult.success(
            op,
            {
                "subtotal": subtotal,
                "shipping_tier": str(tier),
                "coupon": dump(coupon) if coupon else None,
                "promotions": dump(outcomes),
                "totals": dump(totals),
            },
            warnings=warnings,
        )
