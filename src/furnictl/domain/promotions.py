"""Automatic promotions.

Rules are independent and additive: a context that satisfies several of
them gets every matching outcome, in rule order.
"""

from __future__ import annotations

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

FIRST_ORDER_MIN_SUBTOTAL = 2000
FIRST_ORDER_DISCOUNT = 250

GOLD_MIN_SUBTOTAL = 5000
GOLD_DISCOUNT = 400

ENTERPRISE_MIN_SUBTOTAL = 10000
ENTERPRISE_RATE = 0.07


class PromotionContext(BaseModel):
    """Customer and order facts that promotions key off."""

    model_config = {
        "frozen": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    is_first_order: bool = False
    subtotal: float = 0
    customer_tier: str | None = None


class PromotionOutcome(BaseModel):
    """One applied promotion."""

    model_config = {"frozen": True}

    label: str
    discount_amount: float


def evaluate_promotions(context: PromotionContext) -> list[PromotionOutcome]:
    """Return every promotion *context* qualifies for."""
    outcomes: list[PromotionOutcome] = []

    if context.is_first_order and context.subtotal >= FIRST_ORDER_MIN_SUBTOTAL:
        outcomes.append(
            PromotionOutcome(label="First Order Offer", discount_amount=FIRST_ORDER_DISCOUNT)
        )

    if context.customer_tier == "gold" and context.subtotal >= GOLD_MIN_SUBTOTAL:
        outcomes.append(
            PromotionOutcome(label="Gold Loyalty Benefit", discount_amount=GOLD_DISCOUNT)
        )

    if context.customer_tier == "enterprise" and context.subtotal >= ENTERPRISE_MIN_SUBTOTAL:
        outcomes.append(
            PromotionOutcome(
                label="Enterprise Contract Pricing",
                discount_amount=context.subtotal * ENTERPRISE_RATE,
            )
        )

    return outcomes


def total_promotion_discount(outcomes: list[PromotionOutcome]) -> float:
    """Sum of all outcome discounts."""
    return sum((o.discount_amount for o in outcomes), 0.0)
