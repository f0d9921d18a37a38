"""Standalone command: evaluate automatic promotions for an order context."""

from __future__ import annotations

from typing import IO, TYPE_CHECKING

import click

from furnictl.commands._base import FurniCommand

if TYPE_CHECKING:
    from furnictl.commands._context import AppContext


@click.command(
    cls=FurniCommand,
    examples="""\
  furnictl promotions context.json
  echo '{"isFirstOrder": true, "subtotal": 12000, "customerTier": "enterprise"}' \\
    | furnictl promotions -""",
)
@click.argument("source", type=click.File("r"))
@click.pass_obj
def promotions(app: AppContext, source: IO[str]) -> None:
    """List every promotion a customer/order context qualifies for."""
    doc = app.read_document(source, op="evaluate_promotions")
    app.emit(app.checkout.promotions(doc))
