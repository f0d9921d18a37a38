"""Rich Console factory and theme for furnictl output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

FURNI_THEME = Theme(
    {
        "furni.ok": "bold green",
        "furni.error": "bold red",
        "furni.warning": "bold yellow",
        "furni.op": "bold cyan",
        "furni.key": "dim",
        "furni.amount": "bold",
        "furni.discount": "green",
        "furni.total": "bold magenta",
        "furni.flag.on": "bold red",
        "furni.flag.off": "dim",
        "furni.status.delivered": "green",
        "furni.status.cancelled": "red",
        "furni.status.pending": "yellow",
        "furni.status.placed": "cyan",
    }
)

_STATUS_STYLES: dict[str, str] = {
    "delivered": "furni.status.delivered",
    "cancelled": "furni.status.cancelled",
    "pending": "furni.status.pending",
    "placed": "furni.status.placed",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=FURNI_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_status(status: str) -> str:
    """Return the Rich style name for an order status."""
    return _STATUS_STYLES.get(status, "")


def money(value: object) -> str:
    """Format an amount with thousands separators and two decimals."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return str(value)
    return f"{value:,.2f}"
