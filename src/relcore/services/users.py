"""User management — destroying a user and sweeping the vaults they abandon."""

from __future__ import annotations

from typing import Annotated, Any

from relcore.infrastructure.database.schema import users
from relcore.services.base import BaseService, ServiceContext, register_service, require
from relcore.services.cascade import sweep_managed_vaults
from relcore.services.errors import DomainFailure
from relcore.services.permissions import AuthorBelongsToAccount, AuthorIsAccountAdministrator
from relcore.services.rules import Exists, Id, ServiceInput


class DestroyUserInput(ServiceInput):
    user_id: Annotated[Id, Exists("users")]


@register_service
class DestroyUser(BaseService):
    """Destroy a user of the account.

    Every vault the user manages alone is destroyed with them (contacts
    included). Vaults that keep another MANAGE holder are left untouched.
    Nobody can destroy themselves, whatever their role.
    """

    action = "user_destroyed"
    Input = DestroyUserInput
    permissions = (
        AuthorBelongsToAccount(),
        AuthorIsAccountAdministrator(),
    )

    def __init__(self, store: Any) -> None:
        super().__init__(store)
        self.destroyed_vault_ids: list[int] = []
        self._user_name = ""

    def check_preconditions(self, data: DestroyUserInput) -> None:
        if data.user_id == data.author_id:
            raise DomainFailure("You can't delete yourself.")

    def handle(self, ctx: ServiceContext, data: DestroyUserInput) -> None:
        user = require(ctx.txn, users, data.user_id, account_id=ctx.account.id)
        self._user_name = user.name

        # Sweep against the pre-deletion membership snapshot, then delete.
        self.destroyed_vault_ids = sweep_managed_vaults(ctx.txn, user.id)
        ctx.txn.delete(users, user.id)

    def audit_objects(
        self, ctx: ServiceContext, data: DestroyUserInput, result: None
    ) -> dict[str, Any]:
        return {
            "user_id": data.user_id,
            "user_name": self._user_name,
            "destroyed_vault_ids": self.destroyed_vault_ids,
        }

    def result_data(self, result: None) -> dict[str, Any]:
        return {"destroyed_vault_ids": self.destroyed_vault_ids}
