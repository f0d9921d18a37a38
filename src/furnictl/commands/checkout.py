"""Command group: checkout pricing decisions (address, coupon, shipping, fraud, totals)."""

from __future__ import annotations

from typing import IO, TYPE_CHECKING

import click

from furnictl.commands._base import FurniGroup
from furnictl.domain.shipping import ShippingTier

if TYPE_CHECKING:
    from furnictl.commands._context import AppContext

_CHECKOUT_EXAMPLES = """\
  furnictl checkout coupon WELCOME10 --subtotal 12500
  furnictl checkout shipping --subtotal 2500 --tier express
  furnictl checkout totals --subtotal 1000 --discount-percent 10 --shipping 100
  furnictl checkout address address.json
  furnictl checkout fraud order.json
  furnictl --json checkout quote cart.json"""


@click.group(cls=FurniGroup, examples=_CHECKOUT_EXAMPLES)
@click.pass_obj
def checkout(app: AppContext) -> None:
    """Price and screen a checkout."""


@checkout.command(
    examples="""\
  furnictl checkout address address.json
  echo '{"fullName": "Asha Rao", "street": "42 Baner Road", "city": "Pune",
         "state": "MH", "zipCode": "411045", "phone": "9876543210"}' \\
    | furnictl checkout address -"""
)
@click.argument("source", type=click.File("r"))
@click.pass_obj
def address(app: AppContext, source: IO[str]) -> None:
    """Validate a shipping address document."""
    doc = app.read_document(source, op="validate_address")
    app.emit(app.checkout.validate_address(doc))


@checkout.command(
    examples="""\
  furnictl checkout coupon WELCOME10 --subtotal 12500
  furnictl checkout coupon save5 --subtotal 800"""
)
@click.argument("code")
@click.option("--subtotal", required=True, type=float, help="Order subtotal before discounts.")
@click.pass_obj
def coupon(app: AppContext, code: str, subtotal: float) -> None:
    """Evaluate a coupon code against an order subtotal."""
    app.emit(app.checkout.evaluate_coupon(code, subtotal))


@checkout.command(
    examples="""\
  furnictl checkout shipping --subtotal 2500
  furnictl checkout shipping --subtotal 6000 --tier express"""
)
@click.option("--subtotal", required=True, type=float, help="Order subtotal.")
@click.option(
    "--tier",
    type=click.Choice([t.value for t in ShippingTier], case_sensitive=False),
    default=None,
    help="Shipping tier (default from [checkout] default_shipping_tier).",
)
@click.pass_obj
def shipping(app: AppContext, subtotal: float, tier: str | None) -> None:
    """Shipping charge for a subtotal and tier."""
    app.emit(app.checkout.shipping(subtotal, tier.lower() if tier else None))


@checkout.command(
    examples="""\
  furnictl checkout fraud order.json
  # order.json: {"subtotal": 200000, "paymentMethod": "cod",
  #              "shippingAddress": {"street": "A"}}"""
)
@click.argument("source", type=click.File("r"))
@click.pass_obj
def fraud(app: AppContext, source: IO[str]) -> None:
    """Run the fraud screen on an order document."""
    doc = app.read_document(source, op="fraud_screen")
    app.emit(app.checkout.screen_fraud(doc))


@checkout.command(
    examples="""\
  furnictl checkout totals --subtotal 1000 --discount-percent 10 --shipping 100
  furnictl checkout totals --subtotal 4999 --tax-rate 0.05"""
)
@click.option("--subtotal", required=True, type=float, help="Order subtotal.")
@click.option("--discount-percent", type=float, default=0.0, help="Discount percent (0-100).")
@click.option(
    "--tax-rate",
    type=float,
    default=None,
    help="Tax rate as a fraction (default from [checkout] tax_rate).",
)
@click.option("--shipping", "shipping_flat", type=float, default=0.0, help="Flat shipping.")
@click.pass_obj
def totals(
    app: AppContext,
    subtotal: float,
    discount_percent: float,
    tax_rate: float | None,
    shipping_flat: float,
) -> None:
    """Compute the discount, tax, shipping, and grand total."""
    app.emit(
        app.checkout.totals(
            subtotal,
            discount_percent=discount_percent,
            tax_rate=tax_rate,
            shipping_flat=shipping_flat,
        )
    )


@checkout.command(
    examples="""\
  furnictl checkout quote cart.json
  furnictl --json checkout quote cart.json
  # cart.json: {"lines": [{"name": "Oak Desk", "price": 4500, "quantity": 2}],
  #             "shippingAddress": {...}, "paymentMethod": "card",
  #             "couponCode": "WELCOME10", "customerTier": "gold"}"""
)
@click.argument("source", type=click.File("r"))
@click.pass_obj
def quote(app: AppContext, source: IO[str]) -> None:
    """Full checkout: address, coupon, promotions, shipping, fraud, totals."""
    doc = app.read_document(source, op="checkout_quote")
    app.emit(app.checkout.quote(doc))
