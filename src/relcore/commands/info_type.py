"""Command group: contact information types."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from relcore.commands._base import RelGroup

if TYPE_CHECKING:
    from relcore.commands._context import AppContext

_TYPE_EXAMPLES = """\
  relcore info-type create "Mastodon" --protocol "https://"
  relcore info-type destroy 5"""


@click.group("info-type", cls=RelGroup, examples=_TYPE_EXAMPLES)
def info_type() -> None:
    """Manage contact information types (administrators)."""


@info_type.command(examples='  relcore info-type create "Mastodon" --protocol "https://"')
@click.argument("name")
@click.option("--protocol", default=None, help="Link prefix, e.g. mailto: or tel:.")
@click.pass_obj
def create(app: AppContext, name: str, protocol: str | None) -> None:
    """Add a contact information type to the account."""
    from relcore.services.reference_data import CreateContactInformationType

    app.emit(app.run(CreateContactInformationType, name=name, protocol=protocol))


@info_type.command(examples="  relcore info-type destroy 5")
@click.argument("type_id", type=int)
@click.pass_obj
def destroy(app: AppContext, type_id: int) -> None:
    """Remove a type together with the contact information using it."""
    from relcore.services.reference_data import DestroyContactInformationType

    app.emit(app.run(DestroyContactInformationType, contact_information_type_id=type_id))
