"""Command group: catalog feed cleanup, search, and recommendations."""

from __future__ import annotations

from typing import IO, TYPE_CHECKING

import click

from furnictl.commands._base import FurniGroup

if TYPE_CHECKING:
    from furnictl.commands._context import AppContext

_CATALOG_EXAMPLES = """\
  furnictl catalog normalize feed.json
  furnictl catalog search feed.json --query oak --category desk
  furnictl catalog recommend feed.json --viewed p-1 --viewed p-7
  furnictl catalog summary filters.json"""


@click.group(cls=FurniGroup, examples=_CATALOG_EXAMPLES)
@click.pass_obj
def catalog(app: AppContext) -> None:
    """Work with product catalog documents."""


@catalog.command(examples="  furnictl catalog normalize feed.json")
@click.argument("source", type=click.File("r"))
@click.pass_obj
def normalize(app: AppContext, source: IO[str]) -> None:
    """Coerce raw product rows and drop rows without an id."""
    app.emit(app.catalog.normalize(app.read_document(source, op="normalize_products")))


@catalog.command(
    examples="""\
  furnictl catalog search feed.json --query oak
  furnictl catalog search feed.json --category chair"""
)
@click.argument("source", type=click.File("r"))
@click.option("--query", default=None, help="Case-insensitive name search.")
@click.option("--category", default=None, help="Exact category ('all' matches everything).")
@click.pass_obj
def search(app: AppContext, source: IO[str], query: str | None, category: str | None) -> None:
    """Filter products by name and category."""
    app.emit(app.catalog.search(app.read_document(source, op="filter_products"), query, category))


@catalog.command(examples="  furnictl catalog recommend feed.json --viewed p-1")
@click.argument("source", type=click.File("r"))
@click.option(
    "--viewed",
    multiple=True,
    help="Recently viewed product id (repeatable). Defaults to the document's recently_viewed.",
)
@click.pass_obj
def recommend(app: AppContext, source: IO[str], viewed: tuple[str, ...]) -> None:
    """Top-rated products the shopper has not viewed recently."""
    doc = app.read_document(source, op="recommendations")
    app.emit(app.catalog.recommend(doc, list(viewed) if viewed else None))


@catalog.command(
    examples="""\
  echo '{"query": "desk", "minPrice": 1000, "inStockOnly": true}' | furnictl catalog summary -"""
)
@click.argument("source", type=click.File("r"))
@click.pass_obj
def summary(app: AppContext, source: IO[str]) -> None:
    """One-line summary of active search filters."""
    app.emit(app.catalog.search_summary(app.read_document(source, op="search_summary")))
