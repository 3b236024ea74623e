"""Command group: account pronouns."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from relcore.commands._base import RelGroup

if TYPE_CHECKING:
    from relcore.commands._context import AppContext

_PRONOUN_EXAMPLES = """\
  relcore pronoun create "xe/xem"
  relcore pronoun destroy 4"""


@click.group(cls=RelGroup, examples=_PRONOUN_EXAMPLES)
def pronoun() -> None:
    """Manage the pronouns offered by the account (administrators)."""


@pronoun.command(examples='  relcore pronoun create "xe/xem"')
@click.argument("name")
@click.pass_obj
def create(app: AppContext, name: str) -> None:
    """Add a pronoun to the account."""
    from relcore.services.reference_data import CreatePronoun

    app.emit(app.run(CreatePronoun, name=name))


@pronoun.command(examples="  relcore pronoun destroy 4")
@click.argument("pronoun_id", type=int)
@click.pass_obj
def destroy(app: AppContext, pronoun_id: int) -> None:
    """Remove a pronoun; contacts using it are left without one."""
    from relcore.services.reference_data import DestroyPronoun

    app.emit(app.run(DestroyPronoun, pronoun_id=pronoun_id))
