"""CatalogService — product feed cleanup, search, and recommendations."""

from __future__ import annotations

from typing import Any

from furnictl.domain.analytics import filter_products
from furnictl.domain.catalog import (
    SearchState,
    build_personalized_recommendations,
    build_search_summary,
    normalize_products,
)
from furnictl.services._helpers import dump
from furnictl.services.base import BaseService, records
from furnictl.services.result import ServiceResult
from furnictl.services.telemetry import traced


class CatalogService(BaseService):
    """Catalog operations over a document with a ``products`` list."""

    @traced
    def normalize(self, doc: dict[str, Any]) -> ServiceResult:
        raw = records(doc, "products")
        products = normalize_products(raw)
        warnings: list[str] = []
        dropped = len(raw) - len(products)
        if dropped:
            warnings.append(f"Dropped {dropped} product(s) without an id")
        return ServiceResult.success(
            "normalize_products",
            {"items": dump(products), "count": len(products)},
            warnings=warnings,
        )

    @traced
    def search(
        self,
        doc: dict[str, Any],
        query: str | None = None,
        category: str | None = None,
    ) -> ServiceResult:
        matches = filter_products(records(doc, "products"), query, category)
        return ServiceResult.success(
            "filter_products",
            {
                "query": query or "",
                "category": category or "all",
                "items": list(matches),
                "count": len(matches),
            },
        )

    @traced
    def recommend(self, doc: dict[str, Any], viewed: list[Any] | None = None) -> ServiceResult:
        """Recommendations excluding *viewed* ids (or the document's ``recently_viewed``)."""
        if viewed is None:
            raw_viewed = doc.get("recently_viewed") if isinstance(doc, dict) else None
            viewed = list(raw_viewed) if isinstance(raw_viewed, list) else []
        picks = build_personalized_recommendations(records(doc, "products"), viewed)
        return ServiceResult.success("recommendations", {"items": list(picks), "count": len(picks)})

    @traced
    def search_summary(self, state: SearchState | dict[str, Any]) -> ServiceResult:
        op = "search_summary"
        parsed = self._parse(op, SearchState, state)
        if isinstance(parsed, ServiceResult):
            return parsed
        return ServiceResult.success(op, {"summary": build_search_summary(parsed)})
