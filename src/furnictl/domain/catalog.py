"""Catalog record normalization, recommendations, and search summaries."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from furnictl.domain.numbers import as_number, field_number

RECOMMENDATION_LIMIT = 8
SUMMARY_SEPARATOR = " · "


class CatalogProduct(BaseModel):
    """A product row after coercion from the raw catalog feed."""

    model_config = {"frozen": True}

    id: str
    name: str
    slug: str
    description: str | None = None
    price: float = 0
    category_id: Any = None
    image_url: str | None = None
    stock_quantity: float = 0
    is_active: bool = False
    created_at: str = ""
    updated_at: str = ""


def _text(value: Any, default: str) -> str:
    return str(value) if value else default


def _optional_text(value: Any) -> str | None:
    return None if value is None else str(value)


def normalize_product(raw: Mapping[str, Any]) -> CatalogProduct:
    """Coerce one raw row; blank text fields get display defaults."""
    product_id = _text(raw.get("id"), "")
    return CatalogProduct(
        id=product_id,
        name=_text(raw.get("name"), "Unnamed Product"),
        slug=_text(raw.get("slug"), product_id or "product"),
        description=_optional_text(raw.get("description")),
        price=as_number(raw.get("price")),
        category_id=raw.get("category_id"),
        image_url=_optional_text(raw.get("image_url")),
        stock_quantity=as_number(raw.get("stock_quantity")),
        is_active=bool(raw.get("is_active")),
        created_at=_text(raw.get("created_at"), ""),
        updated_at=_text(raw.get("updated_at"), ""),
    )


def normalize_products(raw_products: Iterable[Mapping[str, Any]] | None) -> list[CatalogProduct]:
    """Normalize every row and drop those without an id."""
    normalized = (normalize_product(raw) for raw in raw_products or [])
    return [product for product in normalized if product.id]


def recommendation_score(product: Mapping[str, Any]) -> float:
    """Higher is better: rating dominates, cheaper breaks ties."""
    return field_number(product, "rating") * 1000 - field_number(product, "price")


def build_personalized_recommendations(
    products: Sequence[Mapping[str, Any]],
    recently_viewed_ids: Iterable[Any],
    *,
    limit: int = RECOMMENDATION_LIMIT,
) -> list[Mapping[str, Any]]:
    """Best-scoring products the shopper has not looked at recently."""
    viewed = set(recently_viewed_ids)
    unseen = [product for product in products if product.get("id") not in viewed]
    unseen.sort(key=recommendation_score, reverse=True)
    return unseen[:limit]


class SearchState(BaseModel):
    """Active search filters on the listing page."""

    model_config = {
        "frozen": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    query: str = ""
    min_price: float | None = None
    max_price: float | None = None
    in_stock_only: bool = False
    sort: str | None = None


def _price_label(value: float | None, default: str) -> str:
    if value is None:
        return default
    return str(int(value)) if float(value).is_integer() else str(value)


def build_search_summary(state: SearchState) -> str:
    """One-line description of the active filters, e.g. for a results header."""
    parts: list[str] = []

    if state.query.strip():
        parts.append(f"Query: {state.query.strip()}")
    if state.min_price is not None or state.max_price is not None:
        low = _price_label(state.min_price, "0")
        high = _price_label(state.max_price, "∞")
        parts.append(f"Price: ₹{low} - ₹{high}")
    if state.in_stock_only:
        parts.append("In-stock only")
    if state.sort:
        parts.append(f"Sort: {state.sort}")

    return SUMMARY_SEPARATOR.join(parts) if parts else "All products"
