"""Shared pytest fixtures and test helpers for furnictl tests."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from furnictl.config.settings import FurniSettings


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every test from an empty temp directory with no FURNICTL_* overrides.

    Keeps a developer's own ``furnictl.toml`` or environment out of the
    assertions on default pricing constants.
    """
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("FURNICTL_CONFIG", raising=False)
    for var in ("FURNICTL_JSON_OUTPUT", "FURNICTL_QUIET", "FURNICTL_VERBOSE"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def settings(tmp_path: Path) -> FurniSettings:
    """Default settings (no config file on the walk-up path)."""
    return FurniSettings.from_cli(search_root=tmp_path)


@pytest.fixture
def address() -> dict[str, str]:
    """A shipping address that passes every checkout check."""
    return {
        "fullName": "Asha Rao",
        "street": "42 Baner Road",
        "city": "Pune",
        "state": "MH",
        "zipCode": "411045",
        "phone": "9876543210",
    }


@pytest.fixture
def dashboard() -> dict[str, Any]:
    """A small admin dashboard document covering every analytics input."""
    return {
        "products": [
            {"id": "p1", "name": "Oak Desk", "price": 4500, "stock_quantity": 2},
            {"id": "p2", "name": "Teak Chair", "price": 1800, "stock_quantity": 40},
            {"id": "p3", "name": "Walnut Shelf", "price": 0.5, "stock_quantity": 5},
        ],
        "orders": [
            {
                "id": "o1",
                "order_number": "FN-1001",
                "status": "delivered",
                "total_amount": 4500,
                "created_at": "2025-01-01T00:00:00Z",
            },
            {
                "id": "o2",
                "order_number": "FN-1002",
                "status": "placed",
                "total_amount": 1800,
                "created_at": "2025-01-01T00:00:00Z",
            },
            {
                "id": "o3",
                "order_number": "FN-1003",
                "status": "cancelled",
                "total_amount": 900,
                "created_at": "2025-01-02T12:00:00Z",
            },
            {
                "id": "o4",
                "order_number": "FN-1004",
                "status": "delivered",
                "total_amount": "2500",
                "created_at": "2025-01-02T18:00:00Z",
            },
        ],
        "assignments": [
            {
                "id": "a1",
                "partner_id": "dp1",
                "delivery_status": "delivered",
                "created_at": "2025-01-01T00:00:00Z",
            },
            {
                "id": "a2",
                "partner_id": "dp1",
                "delivery_status": "in_transit",
                "created_at": "2025-01-02T20:00:00Z",
            },
        ],
        "partners": [{"id": "dp1", "name": "Ravi"}, {"id": "dp2", "name": "Meena"}],
        "order_items": [
            {"product_name": "Oak Desk", "quantity": 1, "unit_price": 4500},
            {"product_name": "Teak Chair", "quantity": 3, "unit_price": 1800},
            {"product_name": None, "quantity": 1, "unit_price": 100},
        ],
        "jobs": [
            {"status": "delivered", "payout": 120},
            {"status": "delivered", "payout": -30},
            {"status": "in_transit", "payout": 80},
        ],
    }


@pytest.fixture
def write_doc(tmp_path: Path) -> Callable[[str, Any], str]:
    """Write a JSON document under tmp_path and return its path as a CLI argument."""

    def _write(name: str, payload: Any) -> str:
        path = tmp_path / name
        path.write_text(json.dumps(payload), encoding="utf-8")
        return str(path)

    return _write
