"""Command group: contact information (emails, phone numbers, ...)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from relcore.commands._base import RelGroup

if TYPE_CHECKING:
    from relcore.commands._context import AppContext

_INFO_EXAMPLES = """\
  relcore contact-info add 3 12 --type 1 "marie@example.test"
  relcore contact-info update 3 12 40 --type 2 "+33 1 23 45 67 89"
  relcore contact-info remove 3 12 40"""


@click.group("contact-info", cls=RelGroup, examples=_INFO_EXAMPLES)
def contact_info() -> None:
    """Attach contact information to contacts."""


@contact_info.command(
    examples="""\
  relcore contact-info add 3 12 --type 1 "marie@example.test" """
)
@click.argument("vault_id", type=int)
@click.argument("contact_id", type=int)
@click.argument("data")
@click.option("--type", "type_id", type=int, required=True, help="Contact information type ID.")
@click.pass_obj
def add(app: AppContext, vault_id: int, contact_id: int, data: str, type_id: int) -> None:
    """Add a piece of contact information to a contact."""
    from relcore.services.contact_information import CreateContactInformation

    app.emit(
        app.run(
            CreateContactInformation,
            vault_id=vault_id,
            contact_id=contact_id,
            contact_information_type_id=type_id,
            data=data,
        )
    )


@contact_info.command(
    examples="""\
  relcore contact-info update 3 12 40 --type 2 "+33 1 23 45 67 89" """
)
@click.argument("vault_id", type=int)
@click.argument("contact_id", type=int)
@click.argument("contact_information_id", type=int)
@click.argument("data")
@click.option("--type", "type_id", type=int, required=True, help="Contact information type ID.")
@click.pass_obj
def update(
    app: AppContext,
    vault_id: int,
    contact_id: int,
    contact_information_id: int,
    data: str,
    type_id: int,
) -> None:
    """Replace a piece of contact information."""
    from relcore.services.contact_information import UpdateContactInformation

    app.emit(
        app.run(
            UpdateContactInformation,
            vault_id=vault_id,
            contact_id=contact_id,
            contact_information_id=contact_information_id,
            contact_information_type_id=type_id,
            data=data,
        )
    )


@contact_info.command(
    examples="""\
  relcore contact-info remove 3 12 40"""
)
@click.argument("vault_id", type=int)
@click.argument("contact_id", type=int)
@click.argument("contact_information_id", type=int)
@click.pass_obj
def remove(app: AppContext, vault_id: int, contact_id: int, contact_information_id: int) -> None:
    """Remove a piece of contact information."""
    from relcore.services.contact_information import DestroyContactInformation

    app.emit(
        app.run(
            DestroyContactInformation,
            vault_id=vault_id,
            contact_id=contact_id,
            contact_information_id=contact_information_id,
        )
    )
