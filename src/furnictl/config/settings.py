"""FurniSettings: one frozen object holding flags, env overrides, and TOML sections.

Later entries lose to earlier ones:

1. keyword arguments (the root command's flags)
2. ``FURNICTL_*`` environment variables, ``__`` between section and key
   (``FURNICTL_CHECKOUT__TAX_RATE=0.05``)
3. the ``furnictl.toml`` chosen by :func:`~furnictl.config.discovery.find_config`
   or ``--config``
4. defaults on the section models, which match the storefront constants
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from furnictl.config.discovery import find_config, read_config_file
from furnictl.config.models import AnalyticsConfig, CheckoutConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Sections set in the selected ``furnictl.toml`` (nothing when there is none)."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data = read_config_file(toml_path) if toml_path else {}

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


class FurniSettings(BaseSettings):
    """Everything a service needs to know about the current invocation.

    Built once by the root command and shared through
    :class:`~furnictl.commands._context.AppContext`.

    Attributes:
        config_path: The ``furnictl.toml`` that was loaded, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "FURNICTL_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    checkout: CheckoutConfig = Field(default_factory=CheckoutConfig)
    analytics: AnalyticsConfig = Field(default_factory=AnalyticsConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Rank init kwargs over env vars over the TOML file.

        The file is whichever one :meth:`from_cli` resolved and passed in as
        ``config_path``.
        """
        toml_path = getattr(init_settings, "init_kwargs", {}).get("config_path")
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        search_root: Path | None = None,
        **cli_flags: Any,
    ) -> FurniSettings:
        """Resolve the config file, then build settings with *cli_flags* on top.

        An explicit *config_path* that does not exist means "defaults only";
        it does not fall back to discovery from *search_root*.
        """
        if config_path:
            explicit = Path(config_path)
            toml_path = explicit if explicit.is_file() else None
        else:
            toml_path = find_config(search_root)
        return cls(config_path=toml_path, **cli_flags)
