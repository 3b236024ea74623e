"""Tests for DestroyAccount."""

from __future__ import annotations

import pytest
from sqlalchemy import func, select

from relcore.domain.entities import Account, User
from relcore.infrastructure.database.schema import accounts, contacts, pronouns, users, vaults
from relcore.infrastructure.store import Store
from relcore.services.accounts import DestroyAccount
from relcore.services.errors import PermissionFailure
from tests.conftest import audit_rows, make_contact, make_user, make_vault, objects_of, run_ok


def _count(store: Store, table) -> int:
    with store.engine.connect() as conn:
        return conn.execute(select(func.count()).select_from(table)).scalar_one()


class TestDestroyAccount:
    def test_removes_everything_owned(self, store: Store, tenant: tuple[Account, User]) -> None:
        account, admin = tenant
        member = make_user(store, account, "Bob")
        vault = make_vault(store, account, member)
        make_contact(store, account, member, vault)

        run_ok(store, DestroyAccount, account_id=account.id, author_id=admin.id)

        for table in (accounts, users, vaults, contacts, pronouns):
            assert _count(store, table) == 0

    def test_audit_outlives_account(self, store: Store, tenant: tuple[Account, User]) -> None:
        account, admin = tenant
        run_ok(store, DestroyAccount, account_id=account.id, author_id=admin.id)
        (row,) = audit_rows(store, "account_destroyed")
        assert row.account_id == account.id
        assert row.author_name == "Ada"
        assert objects_of(row) == {"account_name": "Acme"}

    def test_other_accounts_untouched(self, store: Store, tenant: tuple[Account, User]) -> None:
        from relcore.services.registration import register_account

        account, admin = tenant
        other, _ = register_account(
            store, "Globex", admin_name="Hank", admin_email="hank@globex.test"
        )
        run_ok(store, DestroyAccount, account_id=account.id, author_id=admin.id)
        with store.engine.connect() as conn:
            remaining = conn.execute(select(accounts.c.id)).scalars().all()
        assert remaining == [other.id]

    def test_members_cannot_destroy(self, store: Store, tenant: tuple[Account, User]) -> None:
        account, _ = tenant
        member = make_user(store, account, "Bob")
        with pytest.raises(PermissionFailure):
            run_ok(store, DestroyAccount, account_id=account.id, author_id=member.id)
        assert _count(store, accounts) == 1
