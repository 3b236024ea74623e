"""Command group: tenant accounts."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from relcore.commands._base import RelGroup

if TYPE_CHECKING:
    from relcore.commands._context import AppContext
    from relcore.infrastructure.store import Store

_ACCOUNT_EXAMPLES = """\
  relcore account register "Acme" --admin-name "Ada" --admin-email ada@acme.test
  relcore --account 1 --author 1 account destroy"""


def _register(store: Store, **kwargs: Any) -> dict[str, Any]:
    from relcore.services.registration import register_account

    account, admin = register_account(store, **kwargs)
    return {**account.model_dump(mode="json"), "administrator_id": admin.id}


@click.group(cls=RelGroup, examples=_ACCOUNT_EXAMPLES)
def account() -> None:
    """Register and destroy tenant accounts."""


@account.command(
    examples="""\
  relcore account register "Acme" --admin-name "Ada" --admin-email ada@acme.test
  relcore --json account register "Acme" --admin-name Ada --admin-email ada@acme.test"""
)
@click.argument("name")
@click.option("--admin-name", required=True, help="Name of the first administrator.")
@click.option("--admin-email", required=True, help="Email of the first administrator.")
@click.pass_obj
def register(app: AppContext, name: str, admin_name: str, admin_email: str) -> None:
    """Create an account with its first administrator."""
    app.emit(
        app.invoke(
            "account_registered",
            _register,
            name=name,
            admin_name=admin_name,
            admin_email=admin_email,
        )
    )


@account.command(
    examples="""\
  relcore --account 1 --author 1 account destroy"""
)
@click.confirmation_option(prompt="Destroy the account and everything it owns?")
@click.pass_obj
def destroy(app: AppContext) -> None:
    """Destroy the --account tenant and everything it owns (administrators only)."""
    from relcore.services.accounts import DestroyAccount

    app.emit(app.run(DestroyAccount))
