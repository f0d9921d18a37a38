"""Checkout totals and revenue arithmetic.

Order of computation in :func:`calculate_checkout_totals` is fixed:
discount first, tax on the post-discount amount, shipping added last.
"""

from __future__ import annotations

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from furnictl.domain.numbers import non_negative


class CheckoutTotals(BaseModel):
    """Totals breakdown. ``total == taxable_amount + tax_amount + shipping_amount``."""

    model_config = {"frozen": True}

    subtotal: float
    discount_amount: float
    taxable_amount: float
    tax_amount: float
    shipping_amount: float
    total: float


def calculate_checkout_totals(
    subtotal: float,
    discount_percent: float = 0,
    tax_rate: float = 0,
    shipping_flat: float = 0,
) -> CheckoutTotals:
    """Combine subtotal, discount percent, tax rate, and flat shipping.

    Each input is sanitized on its own: non-numeric, non-finite, or
    negative values are read as 0.
    """
    safe_subtotal = non_negative(subtotal)
    safe_discount_percent = non_negative(discount_percent)
    safe_tax_rate = non_negative(tax_rate)
    safe_shipping = non_negative(shipping_flat)

    discount_amount = safe_subtotal * safe_discount_percent / 100
    taxable_amount = max(0.0, safe_subtotal - discount_amount)
    tax_amount = taxable_amount * safe_tax_rate
    total = taxable_amount + tax_amount + safe_shipping

    return CheckoutTotals(
        subtotal=safe_subtotal,
        discount_amount=discount_amount,
        taxable_amount=taxable_amount,
        tax_amount=tax_amount,
        shipping_amount=safe_shipping,
        total=total,
    )


# --- Revenue snapshot ---


class RevenueSnapshot(BaseModel):
    """Gross revenue, refunds, and order count for a reporting window."""

    model_config = {
        "frozen": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    gross_revenue: float = 0
    refunds: float = 0
    orders: int = 0


def calculate_net_revenue(snapshot: RevenueSnapshot) -> float:
    """Gross minus refunds, never below zero."""
    gross = max(0.0, snapshot.gross_revenue)
    refunds = max(0.0, snapshot.refunds)
    return max(0.0, gross - refunds)


def calculate_aov(snapshot: RevenueSnapshot) -> float:
    """Average order value over net revenue (0 when there are no orders)."""
    if snapshot.orders <= 0:
        return 0.0
    return calculate_net_revenue(snapshot) / snapshot.orders
