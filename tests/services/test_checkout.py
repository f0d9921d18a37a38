"""Tests for CheckoutService: per-step decisions and the full quote pipeline."""

from __future__ import annotations

from typing import Any

import pytest

from furnictl.config.models import CheckoutConfig
from furnictl.config.settings import FurniSettings
from furnictl.domain.fraud import MSG_UNVERIFIED
from furnictl.services.checkout import (
    CartLine,
    CheckoutRequest,
    CheckoutService,
    discount_percent_for,
)


@pytest.fixture
def service(settings: FurniSettings) -> CheckoutService:
    return CheckoutService(settings)


def _cart(address: dict[str, str], **extra: Any) -> dict[str, Any]:
    return {
        "lines": [{"productId": "p1", "name": "Oak Desk", "price": 4500, "quantity": 2}],
        "shippingAddress": address,
        "paymentMethod": "card",
        **extra,
    }


class TestRequestModels:
    def test_line_total(self) -> None:
        assert CartLine(price=250, quantity=4).line_total == 1000

    def test_negative_quantity_rejected(self) -> None:
        with pytest.raises(ValueError):
            CartLine(price=250, quantity=-1)

    def test_subtotal(self, address: dict[str, str]) -> None:
        request = CheckoutRequest.model_validate(
            {
                "lines": [{"price": 100, "quantity": 2}, {"price": 50.5, "quantity": 1}],
                "shippingAddress": address,
            }
        )
        assert request.subtotal == pytest.approx(250.5)
        assert request.payment_method == "cod"

    def test_discount_percent_for(self) -> None:
        assert discount_percent_for(250, 1000) == 25
        assert discount_percent_for(5000, 1000) == 100
        assert discount_percent_for(100, 0) == 0


class TestValidateAddress:
    def test_valid(self, service: CheckoutService, address: dict[str, str]) -> None:
        result = service.validate_address(address)
        assert result.ok is True
        assert result.data["address"]["zip_code"] == "411045"

    def test_invalid_pin(self, service: CheckoutService, address: dict[str, str]) -> None:
        result = service.validate_address({**address, "zipCode": "123"})
        assert result.ok is False
        assert result.error is not None
        assert result.error.code == "INVALID_ADDRESS"
        assert result.error.message == "ZIP Code must be a valid 6-digit PIN."

    def test_wrong_shape_is_invalid_input(self, service: CheckoutService) -> None:
        result = service.validate_address(["not", "a", "mapping"])  # type: ignore[arg-type]
        assert result.ok is False
        assert result.error is not None
        assert result.error.code == "INVALID_INPUT"
        assert result.error.detail["errors"]


class TestEvaluateCoupon:
    def test_applied(self, service: CheckoutService) -> None:
        result = service.evaluate_coupon("welcome10", 100000)
        assert result.ok is True
        assert result.data["code"] == "WELCOME10"
        assert result.data["discount_amount"] == 4000

    def test_rejected(self, service: CheckoutService) -> None:
        result = service.evaluate_coupon("WELCOME10", 200)
        assert result.ok is False
        assert result.error is not None
        assert result.error.code == "INVALID_COUPON"
        assert result.data["ok"] is False


class TestShipping:
    def test_default_tier_from_config(self, service: CheckoutService) -> None:
        result = service.shipping(2500)
        assert result.data == {
            "subtotal": 2500,
            "shipping_tier": "standard",
            "shipping_amount": 99,
        }

    def test_explicit_tier(self, service: CheckoutService) -> None:
        assert service.shipping(6000, "express").data["shipping_amount"] == 149

    def test_configured_default_tier(self) -> None:
        settings = FurniSettings(checkout=CheckoutConfig(default_shipping_tier="express"))
        result = CheckoutService(settings).shipping(2500)
        assert result.data["shipping_tier"] == "express"
        assert result.data["shipping_amount"] == 249


class TestScreenFraud:
    def test_rejected(self, service: CheckoutService) -> None:
        result = service.screen_fraud(
            {"subtotal": 200000, "paymentMethod": "cod", "shippingAddress": {"street": "A"}}
        )
        assert result.ok is False
        assert result.error is not None
        assert result.error.code == "FRAUD_REJECTED"
        assert result.error.message == MSG_UNVERIFIED

    def test_approved(self, service: CheckoutService, address: dict[str, str]) -> None:
        result = service.screen_fraud(
            {"subtotal": 200000, "paymentMethod": "card", "shippingAddress": address}
        )
        assert result.ok is True
        assert result.data["approved"] is True

    def test_missing_subtotal(self, service: CheckoutService) -> None:
        result = service.screen_fraud({"shippingAddress": {}})
        assert result.error is not None
        assert result.error.code == "INVALID_INPUT"


class TestTotals:
    def test_explicit_rate(self, service: CheckoutService) -> None:
        result = service.totals(1000, discount_percent=10, tax_rate=0.18, shipping_flat=100)
        assert result.data["total"] == pytest.approx(1162)

    def test_default_rate_from_config(self, service: CheckoutService) -> None:
        result = service.totals(1000)
        assert result.data["tax_amount"] == pytest.approx(180)

    def test_zero_rate_is_not_replaced_by_default(self, service: CheckoutService) -> None:
        assert service.totals(1000, tax_rate=0).data["tax_amount"] == 0


class TestPromotions:
    def test_additive(self, service: CheckoutService) -> None:
        result = service.promotions(
            {"isFirstOrder": True, "subtotal": 6000, "customerTier": "gold"}
        )
        assert result.data["count"] == 2
        assert result.data["discount_total"] == 650
        assert [i["label"] for i in result.data["items"]] == [
            "First Order Offer",
            "Gold Loyalty Benefit",
        ]


class TestQuote:
    def test_happy_path(self, service: CheckoutService, address: dict[str, str]) -> None:
        result = service.quote(_cart(address, couponCode="welcome10"))
        assert result.ok is True
        data = result.data
        assert data["subtotal"] == 9000
        assert data["shipping_tier"] == "standard"
        assert data["coupon"]["discount_amount"] == pytest.approx(900)
        assert data["promotions"] == []
        totals = data["totals"]
        assert totals["discount_amount"] == pytest.approx(900)
        assert totals["taxable_amount"] == pytest.approx(8100)
        assert totals["tax_amount"] == pytest.approx(1458)
        assert totals["shipping_amount"] == 0
        assert totals["total"] == pytest.approx(9558)

    def test_coupon_and_promotions_combined(
        self, service: CheckoutService, address: dict[str, str]
    ) -> None:
        result = service.quote(
            _cart(address, couponCode="FLAT250", customerTier="gold", shippingTier="express")
        )
        totals = result.data["totals"]
        assert totals["discount_amount"] == pytest.approx(650)
        assert totals["shipping_amount"] == 149
        assert result.data["shipping_tier"] == "express"

    def test_discount_survives_percent_round_trip(
        self, service: CheckoutService, address: dict[str, str]
    ) -> None:
        cart = _cart(address, couponCode="SAVE5")
        cart["lines"] = [{"name": "Walnut Shelf", "price": 1234.57, "quantity": 1}]
        result = service.quote(cart)
        coupon = result.data["coupon"]["discount_amount"]
        totals = result.data["totals"]
        assert coupon == pytest.approx(61.7285)
        assert totals["discount_amount"] == pytest.approx(coupon, rel=1e-12)
        assert totals["taxable_amount"] + totals["discount_amount"] == pytest.approx(1234.57)

    def test_no_coupon(self, service: CheckoutService, address: dict[str, str]) -> None:
        result = service.quote(_cart(address))
        assert result.data["coupon"] is None
        assert result.data["totals"]["discount_amount"] == 0

    def test_blank_coupon_ignored(self, service: CheckoutService, address: dict[str, str]) -> None:
        assert service.quote(_cart(address, couponCode="  ")).ok is True

    def test_invalid_address_first(self, service: CheckoutService) -> None:
        result = service.quote(_cart({"street": "A"}, couponCode="BOGUS"))
        assert result.error is not None
        assert result.error.code == "INVALID_ADDRESS"

    def test_invalid_coupon(self, service: CheckoutService, address: dict[str, str]) -> None:
        result = service.quote(_cart(address, couponCode="BOGUS"))
        assert result.error is not None
        assert result.error.code == "INVALID_COUPON"
        assert result.data["coupon"]["message"] == "This coupon is not valid."

    def test_fraud_rejection(self, service: CheckoutService, address: dict[str, str]) -> None:
        cart = {
            "lines": [{"name": "Sofa Set", "price": 80000, "quantity": 2}],
            "shippingAddress": address,
            "paymentMethod": "cod",
        }
        result = service.quote(cart)
        assert result.error is not None
        assert result.error.code == "FRAUD_REJECTED"

    def test_first_order_promotion_without_tax(self, address: dict[str, str]) -> None:
        cart = {
            "lines": [{"name": "Stool", "price": 2000, "quantity": 1}],
            "shippingAddress": address,
            "paymentMethod": "card",
            "isFirstOrder": True,
        }
        service = CheckoutService(FurniSettings(checkout=CheckoutConfig(tax_rate=0)))
        result = service.quote(cart)
        assert result.ok is True
        assert result.data["totals"]["discount_amount"] == pytest.approx(250)
        assert result.data["totals"]["total"] == pytest.approx(1750 + 99)

    def test_invalid_document(self, service: CheckoutService) -> None:
        result = service.quote({"lines": [{"price": "free", "quantity": 1}]})
        assert result.error is not None
        assert result.error.code == "INVALID_INPUT"
