"""Tests for the coupon rule table and evaluation."""

from __future__ import annotations

import pytest

from furnictl.domain.coupons import (
    COUPON_RULES,
    MSG_EMPTY_CODE,
    MSG_UNKNOWN_CODE,
    CouponRule,
    CouponType,
    evaluate_coupon,
    normalize_code,
)


class TestCouponRules:
    def test_table_contents(self) -> None:
        assert set(COUPON_RULES) == {"WELCOME10", "SAVE5", "FLAT250"}
        assert COUPON_RULES["FLAT250"].type is CouponType.FLAT

    def test_table_is_read_only(self) -> None:
        with pytest.raises(TypeError):
            COUPON_RULES["FREE"] = COUPON_RULES["SAVE5"]  # type: ignore[index]


class TestNormalizeCode:
    def test_trims_and_uppercases(self) -> None:
        assert normalize_code("  welcome10 ") == "WELCOME10"

    def test_none_is_empty(self) -> None:
        assert normalize_code(None) == ""


class TestEvaluateCoupon:
    def test_percent_coupon_clamped_to_max(self) -> None:
        result = evaluate_coupon("welcome10", 100000)
        assert result.ok is True
        assert result.code == "WELCOME10"
        assert result.discount_amount == 4000
        assert result.message == "Coupon WELCOME10 applied successfully."

    def test_percent_coupon_below_cap(self) -> None:
        result = evaluate_coupon("WELCOME10", 12500)
        assert result.discount_amount == pytest.approx(1250)

    def test_flat_coupon(self) -> None:
        result = evaluate_coupon("FLAT250", 3000)
        assert result.ok is True
        assert result.discount_amount == 250

    def test_below_minimum(self) -> None:
        result = evaluate_coupon("WELCOME10", 200)
        assert result.ok is False
        assert result.message == "This coupon requires a minimum order of ₹1,000."
        assert result.discount_amount is None

    def test_minimum_is_inclusive(self) -> None:
        assert evaluate_coupon("SAVE5", 500).ok is True

    @pytest.mark.parametrize("code", ["", "   ", None])
    def test_empty_code(self, code: str | None) -> None:
        result = evaluate_coupon(code, 5000)
        assert result.ok is False
        assert result.message == MSG_EMPTY_CODE

    def test_unknown_code(self) -> None:
        result = evaluate_coupon("BOGUS", 5000)
        assert result.ok is False
        assert result.message == MSG_UNKNOWN_CODE

    @pytest.mark.parametrize("subtotal", [1000, 5000, 40000, 40001, 250000])
    def test_discount_never_exceeds_max(self, subtotal: float) -> None:
        for code, rule in COUPON_RULES.items():
            result = evaluate_coupon(code, subtotal)
            if result.ok:
                assert result.discount_amount is not None
                assert result.discount_amount <= rule.max_discount

    def test_custom_rule_table(self) -> None:
        rules = {
            "HALF": CouponRule(
                type=CouponType.PERCENT, value=50, min_subtotal=0, max_discount=100000
            )
        }
        result = evaluate_coupon("half", 800, rules=rules)
        assert result.discount_amount == pytest.approx(400)

    def test_idempotent(self) -> None:
        assert evaluate_coupon("SAVE5", 2000) == evaluate_coupon("SAVE5", 2000)
