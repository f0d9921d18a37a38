"""Click command classes that carry an ``--examples`` flag.

``--help`` stays short; ``--examples`` prints sample invocations and the
shape of the JSON documents they read, then exits.
"""

from __future__ import annotations

from typing import Any

import click


def _print_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return
    examples = getattr(ctx.command, "examples", None) or ""
    click.echo(f"Examples for '{ctx.command_path}':\n")
    click.echo(examples)
    ctx.exit(0)


class _ExamplesMixin:
    """Store ``examples`` and register the eager flag when there are any."""

    params: list[click.Parameter]

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    is_eager=True,
                    expose_value=False,
                    callback=_print_examples,
                    help="Show usage examples and exit.",
                )
            )


class FurniCommand(_ExamplesMixin, click.Command):
    """A command accepting ``examples=``."""


class FurniGroup(_ExamplesMixin, click.Group):
    """A group accepting ``examples=``; its subcommands are FurniCommands."""

    command_class = FurniCommand
