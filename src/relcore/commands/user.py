"""Command group: account members."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from relcore.commands._base import RelGroup

if TYPE_CHECKING:
    from relcore.commands._context import AppContext
    from relcore.infrastructure.store import Store

_USER_EXAMPLES = """\
  relcore --account 1 user add "Grace" grace@acme.test
  relcore --account 1 user add "Linus" linus@acme.test --administrator
  relcore --account 1 --author 1 user destroy 2"""


def _add(store: Store, **kwargs: Any) -> dict[str, Any]:
    from relcore.services.registration import add_user

    return add_user(store, **kwargs).model_dump(mode="json")


@click.group(cls=RelGroup, examples=_USER_EXAMPLES)
def user() -> None:
    """Add and destroy account members."""


@user.command(
    examples="""\
  relcore --account 1 user add "Grace" grace@acme.test
  relcore --account 1 user add "Linus" linus@acme.test --administrator"""
)
@click.argument("name")
@click.argument("email")
@click.option("--administrator", is_flag=True, help="Make the user an account administrator.")
@click.pass_obj
def add(app: AppContext, name: str, email: str, administrator: bool) -> None:
    """Add a user to the --account tenant."""
    if app.settings.account_id is None:
        raise click.UsageError("--account is required.")
    app.emit(
        app.invoke(
            "user_added",
            _add,
            account_id=app.settings.account_id,
            name=name,
            email=email,
            administrator=administrator,
        )
    )


@user.command(
    examples="""\
  relcore --account 1 --author 1 user destroy 2"""
)
@click.argument("user_id", type=int)
@click.pass_obj
def destroy(app: AppContext, user_id: int) -> None:
    """Destroy a user; vaults they manage alone are destroyed with them."""
    from relcore.services.users import DestroyUser

    app.emit(app.run(DestroyUser, user_id=user_id))
