"""Explicit numeric parsing for loosely-typed storefront records.

Rows arrive from the hosted database as JSON, so numeric columns may be
missing, ``None``, strings, or garbage.  Every aggregation reads them
through :func:`as_number`, which maps anything that is not a finite
number to ``0.0``.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any


def as_number(value: Any) -> float:
    """Parse *value* as a finite float, falling back to ``0.0``.

    Examples:
        >>> as_number(12)
        12.0
        >>> as_number("4.5")
        4.5
        >>> as_number(None)
        0.0
        >>> as_number("n/a")
        0.0
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return 0.0
    else:
        return 0.0
    return number if math.isfinite(number) else 0.0


def field_number(record: Mapping[str, Any], key: str) -> float:
    """Read ``record[key]`` through :func:`as_number` (missing key is 0)."""
    return as_number(record.get(key))


def non_negative(value: Any) -> float:
    """Finite, non-negative float; everything else becomes ``0.0``."""
    return max(0.0, as_number(value))


def format_amount(value: float) -> str:
    """Thousands-separated amount for user-facing messages.

    Whole amounts drop the fractional part (``1,000``); others keep two
    decimals (``1,234.50``).
    """
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}"
