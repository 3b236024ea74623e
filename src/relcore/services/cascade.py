"""Vault lifecycle cascade applied when a user is removed.

A vault with no MANAGE holder left is abandoned. The sweep must run
against the membership snapshot taken *before* the user row is deleted:
once the user is gone its MANAGE grants disappear with it and the
"other managers" count can no longer be related to the departing user.

Only the exact stored MANAGE level counts as a manager. EDIT and VIEW
members never keep a vault alive, and nobody is promoted.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from relcore.domain.permissions import PermissionLevel
from relcore.infrastructure.database.schema import vaults

if TYPE_CHECKING:
    from relcore.infrastructure.store import StoreTransaction

logger = logging.getLogger(__name__)


def sweep_managed_vaults(txn: StoreTransaction, user_id: int) -> list[int]:
    """Delete every vault *user_id* manages alone. Returns the deleted vault ids.

    Must be called inside the same transaction that later deletes the
    user, before that deletion. Contacts and memberships of a deleted
    vault follow through foreign-key cascades.
    """
    deleted: list[int] = []
    for vault_id in txn.vault_ids_with_permission(user_id, PermissionLevel.MANAGE):
        other_managers = txn.count_members_with_permission(
            vault_id,
            PermissionLevel.MANAGE,
            excluding_user_id=user_id,
        )
        if other_managers > 0:
            continue
        txn.delete(vaults, vault_id)
        deleted.append(vault_id)
        logger.debug("Vault %d abandoned by user %d; deleted", vault_id, user_id)
    return deleted


def would_orphan(txn: StoreTransaction, user_id: int, vault_id: int) -> bool:
    """Whether removing *user_id*'s MANAGE grant leaves *vault_id* without a manager."""
    if txn.membership(user_id, vault_id) is not PermissionLevel.MANAGE:
        return False
    remaining = txn.count_members_with_permission(
        vault_id,
        PermissionLevel.MANAGE,
        excluding_user_id=user_id,
    )
    return remaining == 0
