"""Subcommand modules for furnictl.

Provides register_commands() which uses deferred imports to keep
``furnictl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group.

    3 groups (have subcommands) + 1 standalone command.
    """
    # --- Groups ---
    from furnictl.commands.analytics import analytics
    from furnictl.commands.catalog import catalog
    from furnictl.commands.checkout import checkout

    cli.add_command(checkout)
    cli.add_command(analytics)
    cli.add_command(catalog)

    # --- Standalone commands ---
    from furnictl.commands.promotions import promotions

    cli.add_command(promotions)
