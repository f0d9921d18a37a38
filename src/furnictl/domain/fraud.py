"""Heuristic fraud screen run before an order is accepted.

This is a cheap synchronous gate, not a verdict: it prefers a false
rejection (customer switches payment mode or fixes the address) over
letting a risky order through.
"""

from __future__ import annotations

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from furnictl.domain.address import ShippingAddress

HIGH_VALUE_THRESHOLD = 150000
MIN_STREET_LENGTH = 8
CASH_ON_DELIVERY = "cod"

MSG_UNVERIFIED = (
    "We could not automatically verify this order. "
    "Please switch payment mode or update address details."
)


class FraudContext(BaseModel):
    """Inputs to :func:`perform_fraud_screening`."""

    model_config = {
        "frozen": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    subtotal: float
    shipping_address: ShippingAddress
    payment_method: str = ""


class FraudDecision(BaseModel):
    """Outcome of :func:`perform_fraud_screening`."""

    model_config = {"frozen": True}

    approved: bool
    message: str | None = None


def perform_fraud_screening(
    subtotal: float,
    shipping_address: ShippingAddress,
    payment_method: str,
) -> FraudDecision:
    """Reject high-value cash-on-delivery orders and too-sparse street lines."""
    cod_for_high_value = subtotal > HIGH_VALUE_THRESHOLD and payment_method == CASH_ON_DELIVERY
    sparse_address = len(shipping_address.street.strip()) < MIN_STREET_LENGTH

    if cod_for_high_value or sparse_address:
        return FraudDecision(approved=False, message=MSG_UNVERIFIED)
    return FraudDecision(approved=True)


def screen(context: FraudContext) -> FraudDecision:
    """Run :func:`perform_fraud_screening` on a parsed :class:`FraudContext`."""
    return perform_fraud_screening(
        context.subtotal, context.shipping_address, context.payment_method
    )
