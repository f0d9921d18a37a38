"""Shipping tiers and cost table."""

from __future__ import annotations

from enum import StrEnum


class ShippingTier(StrEnum):
    """Requested delivery speed. Unknown tiers are charged as standard."""

    STANDARD = "standard"
    EXPRESS = "express"


# --- Cost table (subtotal thresholds are inclusive) ---

EXPRESS_DISCOUNT_THRESHOLD = 5000
EXPRESS_DISCOUNTED_FEE = 149
EXPRESS_FEE = 249

STANDARD_FREE_THRESHOLD = 3000
STANDARD_FEE = 99


def get_shipping_amount(
    subtotal: float,
    shipping_tier: str | None = ShippingTier.STANDARD,
) -> float:
    """Shipping charge for an order of *subtotal* on *shipping_tier*.

    An empty or invalid order (``subtotal <= 0``) ships for nothing.
    """
    if subtotal <= 0:
        return 0

    if shipping_tier == ShippingTier.EXPRESS:
        return EXPRESS_DISCOUNTED_FEE if subtotal >= EXPRESS_DISCOUNT_THRESHOLD else EXPRESS_FEE

    return 0 if subtotal >= STANDARD_FREE_THRESHOLD else STANDARD_FEE
