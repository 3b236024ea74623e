"""Account registration — creating tenants and their members.

Registration sits outside the command kernel: there is no tenant or
actor to validate against yet. Each helper runs in one Store transaction
and emits no side effects.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from relcore.domain.entities import Account, User
from relcore.domain.timestamps import now_iso
from relcore.infrastructure.database.schema import (
    accounts,
    contact_information_types,
    pronouns,
    users,
)
from relcore.services.errors import DomainFailure, NotFoundFailure
from relcore.services.rules import Id, Name, validate_input

if TYPE_CHECKING:
    from relcore.infrastructure.store import Store, StoreTransaction

logger = logging.getLogger(__name__)


class RegisterAccountInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: Name
    admin_name: Name
    admin_email: Name


class AddUserInput(BaseModel):
    """There is no actor yet, so the account is looked up, not authorized."""

    model_config = ConfigDict(frozen=True)

    account_id: Id
    name: Name
    email: Name
    administrator: bool = False


def register_account(
    store: Store,
    name: str,
    *,
    admin_name: str,
    admin_email: str,
) -> tuple[Account, User]:
    """Create an account, its first administrator, and default reference data."""
    cfg = store.settings.registration
    raw = {"name": name, "admin_name": admin_name, "admin_email": admin_email}

    with store.transaction() as txn:
        data = validate_input(RegisterAccountInput, raw, txn)
        account_id = txn.insert(accounts, name=data.name, created_at=now_iso())
        user = _insert_user(txn, account_id, data.admin_name, data.admin_email, administrator=True)
        for pronoun in cfg.default_pronouns:
            txn.insert(pronouns, account_id=account_id, name=pronoun)
        for type_name in cfg.default_contact_information_types:
            txn.insert(contact_information_types, account_id=account_id, name=type_name)
        account = Account.model_validate(txn.find(accounts, account_id))

    logger.debug("Registered account %d with administrator %d", account.id, user.id)
    return account, user


def add_user(
    store: Store,
    account_id: int,
    name: str,
    email: str,
    *,
    administrator: bool = False,
) -> User:
    """Add a member to an existing account."""
    raw = {"account_id": account_id, "name": name, "email": email, "administrator": administrator}
    with store.transaction() as txn:
        data = validate_input(AddUserInput, raw, txn)
        if txn.find(accounts, data.account_id) is None:
            raise NotFoundFailure("account", data.account_id)
        return _insert_user(
            txn, data.account_id, data.name, data.email, administrator=data.administrator
        )


def _insert_user(
    txn: StoreTransaction,
    account_id: int,
    name: str,
    email: str,
    *,
    administrator: bool,
) -> User:
    normalized = email.lower()
    if txn.exists("users", "email", normalized):
        msg = f"A user with email {normalized!r} already exists."
        raise DomainFailure(msg)
    user_id = txn.insert(
        users,
        account_id=account_id,
        name=name,
        email=normalized,
        is_account_administrator=int(administrator),
        created_at=now_iso(),
    )
    return User.model_validate(txn.find(users, user_id))

