"""Vault commands: lifecycle and access management.

The creator of a vault becomes its first manager. Access commands write
the User–Vault permission attribute directly; they refuse to leave a
vault with no MANAGE holder.
"""

from __future__ import annotations

from typing import Annotated, Any

from relcore.domain.entities import Vault, VaultMembership
from relcore.domain.permissions import PermissionLevel
from relcore.domain.timestamps import now_iso
from relcore.infrastructure.database.schema import users, vaults
from relcore.services.base import BaseService, ServiceContext, register_service, require
from relcore.services.cascade import would_orphan
from relcore.services.errors import DomainFailure, NotFoundFailure
from relcore.services.permissions import AuthorBelongsToAccount, AuthorHasVaultPermission
from relcore.services.rules import Exists, Id, Name, ServiceInput, Text, VaultInput

_MANAGERS = (
    AuthorBelongsToAccount(),
    AuthorHasVaultPermission(PermissionLevel.MANAGE),
)


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


class CreateVaultInput(ServiceInput):
    name: Name
    description: Text | None = None


class UpdateVaultInput(VaultInput):
    name: Name
    description: Text | None = None


class VaultMemberInput(VaultInput):
    user_id: Annotated[Id, Exists("users")]


class VaultAccessInput(VaultMemberInput):
    permission: PermissionLevel


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


@register_service
class CreateVault(BaseService):
    """Create a vault in the account; the author becomes its manager."""

    action = "vault_created"
    Input = CreateVaultInput
    permissions = (AuthorBelongsToAccount(),)

    def handle(self, ctx: ServiceContext, data: CreateVaultInput) -> Vault:
        now = now_iso()
        vault_id = ctx.txn.insert(
            vaults,
            account_id=ctx.account.id,
            name=data.name,
            description=data.description,
            created_at=now,
            updated_at=now,
        )
        ctx.txn.set_membership(ctx.author.id, vault_id, PermissionLevel.MANAGE)
        return Vault.model_validate(ctx.txn.find(vaults, vault_id))

    def resource_refs(
        self, ctx: ServiceContext, data: CreateVaultInput, result: Vault
    ) -> dict[str, int]:
        return {"vault_id": result.id}

    def audit_objects(
        self, ctx: ServiceContext, data: CreateVaultInput, result: Vault
    ) -> dict[str, Any]:
        return {"vault_name": result.name}


@register_service
class UpdateVault(BaseService):
    action = "vault_updated"
    Input = UpdateVaultInput
    permissions = _MANAGERS

    def handle(self, ctx: ServiceContext, data: UpdateVaultInput) -> Vault:
        assert ctx.vault is not None
        ctx.txn.update(
            vaults,
            ctx.vault.id,
            name=data.name,
            description=data.description,
            updated_at=now_iso(),
        )
        return Vault.model_validate(ctx.txn.find(vaults, ctx.vault.id))

    def audit_objects(
        self, ctx: ServiceContext, data: UpdateVaultInput, result: Vault
    ) -> dict[str, Any]:
        assert ctx.vault is not None
        return {"old_name": ctx.vault.name, "vault_name": result.name}


@register_service
class DestroyVault(BaseService):
    """Destroy a vault with its contacts and memberships."""

    action = "vault_destroyed"
    Input = VaultInput
    permissions = _MANAGERS

    def handle(self, ctx: ServiceContext, data: VaultInput) -> None:
        assert ctx.vault is not None
        ctx.txn.delete(vaults, ctx.vault.id)

    def audit_objects(self, ctx: ServiceContext, data: VaultInput, result: None) -> dict[str, Any]:
        assert ctx.vault is not None
        return {"vault_name": ctx.vault.name}


# ---------------------------------------------------------------------------
# Access
# ---------------------------------------------------------------------------


class _VaultAccessService(BaseService):
    permissions = _MANAGERS

    def _target(self, ctx: ServiceContext, data: VaultMemberInput) -> Any:
        return require(ctx.txn, users, data.user_id, account_id=ctx.account.id)

    def _require_membership(self, ctx: ServiceContext, user_id: int) -> PermissionLevel:
        assert ctx.vault is not None
        level = ctx.txn.membership(user_id, ctx.vault.id)
        if level is None:
            raise NotFoundFailure("vault_membership", user_id)
        return level

    def _guard_last_manager(self, ctx: ServiceContext, user_id: int) -> None:
        assert ctx.vault is not None
        if would_orphan(ctx.txn, user_id, ctx.vault.id):
            raise DomainFailure("A vault must keep at least one manager.")


@register_service
class GrantVaultAccess(_VaultAccessService):
    """Give a user of the account access to the vault."""

    action = "vault_access_granted"
    Input = VaultAccessInput

    def handle(self, ctx: ServiceContext, data: VaultAccessInput) -> VaultMembership:
        assert ctx.vault is not None
        target = self._target(ctx, data)
        if ctx.txn.membership(target.id, ctx.vault.id) is not None:
            raise DomainFailure("This user already has access to the vault.")
        ctx.txn.set_membership(target.id, ctx.vault.id, data.permission)
        return VaultMembership(
            user_id=target.id, vault_id=ctx.vault.id, permission=data.permission
        )

    def audit_objects(
        self, ctx: ServiceContext, data: VaultAccessInput, result: VaultMembership
    ) -> dict[str, Any]:
        return {"user_id": result.user_id, "permission": result.permission.value}


@register_service
class ChangeVaultAccess(_VaultAccessService):
    """Change the permission a member holds on the vault."""

    action = "vault_access_permission_changed"
    Input = VaultAccessInput

    def __init__(self, store: Any) -> None:
        super().__init__(store)
        self._previous: PermissionLevel | None = None

    def handle(self, ctx: ServiceContext, data: VaultAccessInput) -> VaultMembership:
        assert ctx.vault is not None
        target = self._target(ctx, data)
        self._previous = self._require_membership(ctx, target.id)
        if data.permission is not PermissionLevel.MANAGE:
            self._guard_last_manager(ctx, target.id)
        ctx.txn.set_membership(target.id, ctx.vault.id, data.permission)
        return VaultMembership(
            user_id=target.id, vault_id=ctx.vault.id, permission=data.permission
        )

    def audit_objects(
        self, ctx: ServiceContext, data: VaultAccessInput, result: VaultMembership
    ) -> dict[str, Any]:
        assert self._previous is not None
        return {
            "user_id": result.user_id,
            "old_permission": self._previous.value,
            "permission": result.permission.value,
        }


@register_service
class RemoveVaultAccess(_VaultAccessService):
    """Remove a member from the vault."""

    action = "vault_access_removed"
    Input = VaultMemberInput

    def handle(self, ctx: ServiceContext, data: VaultMemberInput) -> None:
        assert ctx.vault is not None
        target = self._target(ctx, data)
        self._require_membership(ctx, target.id)
        self._guard_last_manager(ctx, target.id)
        ctx.txn.remove_membership(target.id, ctx.vault.id)

    def audit_objects(
        self, ctx: ServiceContext, data: VaultMemberInput, result: None
    ) -> dict[str, Any]:
        return {"user_id": data.user_id}

    def result_data(self, result: None) -> dict[str, Any]:
        return {"removed": True}
