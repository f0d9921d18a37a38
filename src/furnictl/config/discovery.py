"""Locating and reading ``furnictl.toml``.

The file is looked up the way git finds ``.git/``: the starting directory
first, then each parent.  ``FURNICTL_CONFIG`` pins an explicit file and
disables the walk.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import ValidationError

from furnictl.config.models import FurniConfig

CONFIG_FILENAME = "furnictl.toml"
CONFIG_ENV_VAR = "FURNICTL_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Nearest ``furnictl.toml`` at or above *start* (default: cwd).

    When ``FURNICTL_CONFIG`` is set it wins outright, and a path that does
    not exist means "no config" rather than falling back to the walk.
    """
    pinned = os.environ.get(CONFIG_ENV_VAR)
    if pinned:
        path = Path(pinned)
        return path if path.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def read_config_file(path: Path) -> dict[str, Any]:
    """Parse and validate *path*, returning only the keys it sets.

    Both TOML syntax errors and out-of-range values surface as a
    ``click.ClickException`` naming the file.
    """
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise click.ClickException(f"Invalid TOML in {path}: {exc}") from exc
    try:
        config = FurniConfig.model_validate(data)
    except ValidationError as exc:
        raise click.ClickException(f"Invalid config in {path}: {exc}") from exc
    return config.model_dump(exclude_unset=True)
