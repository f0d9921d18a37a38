"""Coupon rule table and evaluation.

The rule table is built once at import and exposed read-only.  Codes are
matched after trimming and upper-casing, so ``" welcome10 "`` and
``"WELCOME10"`` are the same coupon.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from types import MappingProxyType

from pydantic import BaseModel

from furnictl.domain.numbers import as_number, format_amount

MSG_EMPTY_CODE = "Enter a coupon code first."
MSG_UNKNOWN_CODE = "This coupon is not valid."


class CouponType(StrEnum):
    """How a coupon's ``value`` is interpreted."""

    PERCENT = "percent"
    FLAT = "flat"


class CouponRule(BaseModel):
    """One row of the coupon table."""

    model_config = {"frozen": True}

    type: CouponType
    value: float
    min_subtotal: float
    max_discount: float

    def raw_discount(self, subtotal: float) -> float:
        """Discount before the ``max_discount`` clamp."""
        if self.type is CouponType.PERCENT:
            return subtotal * self.value / 100
        return self.value


class CouponResult(BaseModel):
    """Outcome of :func:`evaluate_coupon`. ``message`` is user-facing."""

    model_config = {"frozen": True}

    ok: bool
    message: str
    code: str | None = None
    discount_amount: float | None = None


COUPON_RULES: Mapping[str, CouponRule] = MappingProxyType(
    {
        "WELCOME10": CouponRule(
            type=CouponType.PERCENT, value=10, min_subtotal=1000, max_discount=4000
        ),
        "SAVE5": CouponRule(type=CouponType.PERCENT, value=5, min_subtotal=500, max_discount=1500),
        "FLAT250": CouponRule(type=CouponType.FLAT, value=250, min_subtotal=3000, max_discount=250),
    }
)


def normalize_code(code: str | None) -> str:
    """Trim and upper-case a user-entered code (``None`` becomes ``""``)."""
    return str(code or "").strip().upper()


def evaluate_coupon(
    code: str | None,
    subtotal: float,
    *,
    rules: Mapping[str, CouponRule] = COUPON_RULES,
) -> CouponResult:
    """Evaluate *code* against *subtotal*.

    Failure modes (empty code, unknown code, subtotal below the rule's
    minimum) come back as ``ok=False`` with a message; nothing raises.
    """
    normalized = normalize_code(code)
    if not normalized:
        return CouponResult(ok=False, message=MSG_EMPTY_CODE)

    rule = rules.get(normalized)
    if rule is None:
        return CouponResult(ok=False, message=MSG_UNKNOWN_CODE)

    amount = as_number(subtotal)
    if amount < rule.min_subtotal:
        return CouponResult(
            ok=False,
            message=(
                "This coupon requires a minimum order of "
                f"₹{format_amount(rule.min_subtotal)}."
            ),
        )

    discount = min(rule.raw_discount(amount), rule.max_discount)
    return CouponResult(
        ok=True,
        code=normalized,
        discount_amount=discount,
        message=f"Coupon {normalized} applied successfully.",
    )
