"""furnictl — checkout, promotions, and admin analytics rules for the furniture storefront."""

__version__ = "0.4.0"
