"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, furnictl.toml only contains
overrides.  The defaults reproduce the storefront's pricing constants, so
an empty config behaves exactly like production checkout.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from furnictl.domain.analytics import (
    LONG_RUNNING_ASSIGNMENT_HOURS,
    STALE_ORDER_HOURS,
    TOP_PRODUCTS_LIMIT,
)
from furnictl.domain.shipping import ShippingTier

# --- furnictl.toml sections ---


class CheckoutConfig(BaseModel):
    """[checkout] section."""

    model_config = {"frozen": True}

    tax_rate: float = Field(default=0.18, ge=0)
    default_shipping_tier: ShippingTier = ShippingTier.STANDARD
    request_timeout_ms: int = Field(default=10000, gt=0)


class AnalyticsConfig(BaseModel):
    """[analytics] section."""

    model_config = {"frozen": True}

    top_products_limit: int = Field(default=TOP_PRODUCTS_LIMIT, gt=0)
    stale_order_hours: float = Field(default=STALE_ORDER_HOURS, ge=0)
    long_running_assignment_hours: float = Field(default=LONG_RUNNING_ASSIGNMENT_HOURS, ge=0)


class FurniConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    checkout: CheckoutConfig = Field(default_factory=CheckoutConfig)
    analytics: AnalyticsConfig = Field(default_factory=AnalyticsConfig)
