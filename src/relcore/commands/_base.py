"""Click classes that carry usage examples.

``--help`` stays short; ``--examples`` prints ready-to-paste invocations
and exits before any argument validation or store access.
"""

from __future__ import annotations

from typing import Any

import click


class _ExamplesMixin:
    """Adds an eager ``--examples`` flag when an ``examples`` text is given."""

    examples: str | None

    def _install_examples(self, examples: str | None) -> None:
        self.examples = examples
        if not examples:
            return
        self.params.append(  # type: ignore[attr-defined]
            click.Option(
                ["--examples"],
                is_flag=True,
                expose_value=False,
                is_eager=True,
                callback=self._print_examples,
                help="Show usage examples and exit.",
            )
        )

    def _print_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n\n{self.examples}")
        ctx.exit(0)


class RelCommand(_ExamplesMixin, click.Command):
    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._install_examples(examples)


class RelGroup(_ExamplesMixin, click.Group):
    """Group whose subcommands default to :class:`RelCommand`."""

    command_class = RelCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._install_examples(examples)
