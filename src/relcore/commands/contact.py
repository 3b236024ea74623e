"""Command group: contacts inside a vault."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from relcore.commands._base import RelGroup

if TYPE_CHECKING:
    from relcore.commands._context import AppContext

_CONTACT_EXAMPLES = """\
  relcore contact create 3 "Marie" --last-name "Curie"
  relcore contact update 3 12 "Marie" --last-name "Sklodowska-Curie"
  relcore contact set-pronoun 3 12 --pronoun 2
  relcore contact destroy 3 12"""


@click.group(cls=RelGroup, examples=_CONTACT_EXAMPLES)
def contact() -> None:
    """Create and edit contacts (vault editors)."""


@contact.command(
    examples="""\
  relcore contact create 3 "Marie"
  relcore contact create 3 "Marie" --last-name "Curie" --pronoun 2"""
)
@click.argument("vault_id", type=int)
@click.argument("first_name")
@click.option("--last-name", default=None, help="Last name.")
@click.option("--pronoun", "pronoun_id", type=int, default=None, help="Pronoun ID.")
@click.pass_obj
def create(
    app: AppContext,
    vault_id: int,
    first_name: str,
    last_name: str | None,
    pronoun_id: int | None,
) -> None:
    """Create a contact in a vault."""
    from relcore.services.contacts import CreateContact

    app.emit(
        app.run(
            CreateContact,
            vault_id=vault_id,
            first_name=first_name,
            last_name=last_name,
            pronoun_id=pronoun_id,
        )
    )


@contact.command(
    examples="""\
  relcore contact update 3 12 "Marie" --last-name "Curie" """
)
@click.argument("vault_id", type=int)
@click.argument("contact_id", type=int)
@click.argument("first_name")
@click.option("--last-name", default=None, help="Last name.")
@click.pass_obj
def update(
    app: AppContext,
    vault_id: int,
    contact_id: int,
    first_name: str,
    last_name: str | None,
) -> None:
    """Rename a contact."""
    from relcore.services.contacts import UpdateContact

    app.emit(
        app.run(
            UpdateContact,
            vault_id=vault_id,
            contact_id=contact_id,
            first_name=first_name,
            last_name=last_name,
        )
    )


@contact.command(
    examples="""\
  relcore contact destroy 3 12"""
)
@click.argument("vault_id", type=int)
@click.argument("contact_id", type=int)
@click.pass_obj
def destroy(app: AppContext, vault_id: int, contact_id: int) -> None:
    """Destroy a contact and its contact information."""
    from relcore.services.contacts import DestroyContact

    app.emit(app.run(DestroyContact, vault_id=vault_id, contact_id=contact_id))


@contact.command(
    "set-pronoun",
    examples="""\
  relcore contact set-pronoun 3 12 --pronoun 2""",
)
@click.argument("vault_id", type=int)
@click.argument("contact_id", type=int)
@click.option("--pronoun", "pronoun_id", type=int, required=True, help="Pronoun ID.")
@click.pass_obj
def set_pronoun(app: AppContext, vault_id: int, contact_id: int, pronoun_id: int) -> None:
    """Set the pronoun of a contact."""
    from relcore.services.contacts import SetPronoun

    app.emit(
        app.run(SetPronoun, vault_id=vault_id, contact_id=contact_id, pronoun_id=pronoun_id)
    )


@contact.command(
    "remove-pronoun",
    examples="""\
  relcore contact remove-pronoun 3 12""",
)
@click.argument("vault_id", type=int)
@click.argument("contact_id", type=int)
@click.pass_obj
def remove_pronoun(app: AppContext, vault_id: int, contact_id: int) -> None:
    """Clear the pronoun of a contact."""
    from relcore.services.contacts import RemovePronoun

    app.emit(app.run(RemovePronoun, vault_id=vault_id, contact_id=contact_id))
