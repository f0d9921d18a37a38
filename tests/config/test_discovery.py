"""Tests for config discovery and loading."""

from __future__ import annotations

from pathlib import Path

import click
import pytest

from furnictl.config.discovery import CONFIG_FILENAME, find_config, read_config_file
from furnictl.config.models import FurniConfig


class TestFindConfig:
    def test_finds_in_current_dir(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text("[checkout]\ntax_rate = 0.1\n")
        assert find_config(tmp_path) == config_file

    def test_walks_up(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text("")
        child = tmp_path / "a" / "b" / "c"
        child.mkdir(parents=True)
        assert find_config(child) == config_file

    def test_returns_none_when_not_found(self, tmp_path: Path) -> None:
        child = tmp_path / "empty"
        child.mkdir()
        assert find_config(child) is None

    def test_env_var_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        config_file = tmp_path / "custom.toml"
        config_file.write_text("")
        monkeypatch.setenv("FURNICTL_CONFIG", str(config_file))
        assert find_config(tmp_path / "elsewhere") == config_file

    def test_env_var_missing_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("")
        monkeypatch.setenv("FURNICTL_CONFIG", str(tmp_path / "gone.toml"))
        assert find_config(tmp_path) is None


class TestReadConfigFile:
    def test_returns_only_set_keys(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text("[analytics]\nstale_order_hours = 12\n")
        assert read_config_file(path) == {"analytics": {"stale_order_hours": 12}}

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text("")
        assert read_config_file(path) == {}

    def test_syntax_error(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text("[checkout\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            read_config_file(path)

    def test_out_of_range_value(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text("[analytics]\ntop_products_limit = 0\n")
        with pytest.raises(click.ClickException, match="Invalid config"):
            read_config_file(path)

class TestModels:
    def test_negative_tax_rate_rejected(self) -> None:
        with pytest.raises(ValueError):
            FurniConfig.model_validate({"checkout": {"tax_rate": -0.1}})

    def test_unknown_tier_rejected(self) -> None:
        with pytest.raises(ValueError):
            FurniConfig.model_validate({"checkout": {"default_shipping_tier": "drone"}})
