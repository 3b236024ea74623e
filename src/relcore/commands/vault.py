"""Command group: vaults and vault access."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from relcore.commands._base import RelGroup

if TYPE_CHECKING:
    from relcore.commands._context import AppContext

_PERMISSION = click.Choice(["view", "edit", "manage"])

_VAULT_EXAMPLES = """\
  relcore vault create "Family" --description "Close relatives"
  relcore vault grant 3 --user 2 --permission edit
  relcore vault access 3 --user 2 --permission view
  relcore vault revoke 3 --user 2"""


@click.group(cls=RelGroup, examples=_VAULT_EXAMPLES)
def vault() -> None:
    """Create vaults and manage who can access them."""


@vault.command(
    examples="""\
  relcore vault create "Family"
  relcore --account 1 --author 1 vault create "Work" --description "Colleagues" """
)
@click.argument("name")
@click.option("--description", default=None, help="Vault description.")
@click.pass_obj
def create(app: AppContext, name: str, description: str | None) -> None:
    """Create a vault; you become its manager."""
    from relcore.services.vaults import CreateVault

    app.emit(app.run(CreateVault, name=name, description=description))


@vault.command(
    examples="""\
  relcore vault update 3 "Family & friends" """
)
@click.argument("vault_id", type=int)
@click.argument("name")
@click.option("--description", default=None, help="Vault description.")
@click.pass_obj
def update(app: AppContext, vault_id: int, name: str, description: str | None) -> None:
    """Rename a vault (managers only)."""
    from relcore.services.vaults import UpdateVault

    app.emit(app.run(UpdateVault, vault_id=vault_id, name=name, description=description))


@vault.command(
    examples="""\
  relcore vault destroy 3 --yes"""
)
@click.argument("vault_id", type=int)
@click.confirmation_option(prompt="Destroy the vault and all of its contacts?")
@click.pass_obj
def destroy(app: AppContext, vault_id: int) -> None:
    """Destroy a vault with its contacts (managers only)."""
    from relcore.services.vaults import DestroyVault

    app.emit(app.run(DestroyVault, vault_id=vault_id))


@vault.command(
    examples="""\
  relcore vault grant 3 --user 2 --permission edit"""
)
@click.argument("vault_id", type=int)
@click.option("--user", "user_id", type=int, required=True, help="User to grant access to.")
@click.option("--permission", type=_PERMISSION, default="view", show_default=True)
@click.pass_obj
def grant(app: AppContext, vault_id: int, user_id: int, permission: str) -> None:
    """Give a user of the account access to a vault."""
    from relcore.services.vaults import GrantVaultAccess

    app.emit(
        app.run(GrantVaultAccess, vault_id=vault_id, user_id=user_id, permission=permission)
    )


@vault.command(
    examples="""\
  relcore vault access 3 --user 2 --permission manage"""
)
@click.argument("vault_id", type=int)
@click.option("--user", "user_id", type=int, required=True, help="Member to change.")
@click.option("--permission", type=_PERMISSION, required=True)
@click.pass_obj
def access(app: AppContext, vault_id: int, user_id: int, permission: str) -> None:
    """Change the permission a member holds on a vault."""
    from relcore.services.vaults import ChangeVaultAccess

    app.emit(
        app.run(ChangeVaultAccess, vault_id=vault_id, user_id=user_id, permission=permission)
    )


@vault.command(
    examples="""\
  relcore vault revoke 3 --user 2"""
)
@click.argument("vault_id", type=int)
@click.option("--user", "user_id", type=int, required=True, help="Member to remove.")
@click.pass_obj
def revoke(app: AppContext, vault_id: int, user_id: int) -> None:
    """Remove a member from a vault."""
    from relcore.services.vaults import RemoveVaultAccess

    app.emit(app.run(RemoveVaultAccess, vault_id=vault_id, user_id=user_id))
