"""Account management."""

from __future__ import annotations

from relcore.infrastructure.database.schema import accounts
from relcore.services.base import BaseService, ServiceContext, register_service
from relcore.services.permissions import AuthorBelongsToAccount, AuthorIsAccountAdministrator
from relcore.services.rules import ServiceInput


@register_service
class DestroyAccount(BaseService):
    """Destroy the account and everything it owns (users, vaults, contacts)."""

    action = "account_destroyed"
    Input = ServiceInput
    permissions = (
        AuthorBelongsToAccount(),
        AuthorIsAccountAdministrator(),
    )

    def handle(self, ctx: ServiceContext, data: ServiceInput) -> None:
        ctx.txn.delete(accounts, ctx.account.id)

    def audit_objects(self, ctx: ServiceContext, data: ServiceInput, result: None) -> dict:
        return {"account_name": ctx.account.name}
