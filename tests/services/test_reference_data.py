"""Tests for pronoun and contact information type commands."""

from __future__ import annotations

import pytest
from sqlalchemy import select

from relcore.domain.entities import Account, User
from relcore.infrastructure.database.schema import contact_information, contacts, pronouns
from relcore.infrastructure.store import Store
from relcore.services.contact_information import CreateContactInformation
from relcore.services.contacts import SetPronoun
from relcore.services.errors import NotFoundFailure, PermissionFailure
from relcore.services.reference_data import (
    CreateContactInformationType,
    CreatePronoun,
    DestroyContactInformationType,
    DestroyPronoun,
)
from tests.conftest import (
    audit_rows,
    info_type_id,
    make_contact,
    make_user,
    make_vault,
    objects_of,
    pronoun_id,
    run_ok,
)


class TestPronouns:
    def test_create(self, store: Store, tenant: tuple[Account, User]) -> None:
        account, admin = tenant
        pronoun = run_ok(
            store, CreatePronoun, account_id=account.id, author_id=admin.id, name="xe/xem"
        )
        assert pronoun.account_id == account.id
        assert pronoun.name == "xe/xem"
        (row,) = audit_rows(store, "pronoun_created")
        assert row.vault_id is None
        assert objects_of(row) == {"pronoun_id": pronoun.id, "pronoun_name": "xe/xem"}

    def test_members_cannot_create(self, store: Store, tenant: tuple[Account, User]) -> None:
        account, _ = tenant
        member = make_user(store, account, "Bob")
        with pytest.raises(PermissionFailure):
            run_ok(store, CreatePronoun, account_id=account.id, author_id=member.id, name="x")

    def test_destroy_clears_contacts(self, store: Store, tenant: tuple[Account, User]) -> None:
        account, admin = tenant
        vault = make_vault(store, account, admin)
        contact = make_contact(store, account, admin, vault)
        they = pronoun_id(store, account)
        run_ok(
            store,
            SetPronoun,
            account_id=account.id,
            author_id=admin.id,
            vault_id=vault.id,
            contact_id=contact.id,
            pronoun_id=they,
        )

        run_ok(store, DestroyPronoun, account_id=account.id, author_id=admin.id, pronoun_id=they)

        with store.engine.connect() as conn:
            assert conn.execute(select(pronouns).where(pronouns.c.id == they)).first() is None
            assert (
                conn.execute(
                    select(contacts.c.pronoun_id).where(contacts.c.id == contact.id)
                ).scalar_one()
                is None
            )

    def test_cannot_destroy_other_accounts_pronoun(
        self, store: Store, tenant: tuple[Account, User]
    ) -> None:
        from relcore.services.registration import register_account

        account, admin = tenant
        other, _ = register_account(
            store, "Globex", admin_name="Hank", admin_email="hank@globex.test"
        )
        with pytest.raises(NotFoundFailure):
            run_ok(
                store,
                DestroyPronoun,
                account_id=account.id,
                author_id=admin.id,
                pronoun_id=pronoun_id(store, other),
            )


class TestContactInformationTypes:
    def test_create(self, store: Store, tenant: tuple[Account, User]) -> None:
        account, admin = tenant
        info_type = run_ok(
            store,
            CreateContactInformationType,
            account_id=account.id,
            author_id=admin.id,
            name="Mastodon",
            protocol="https://",
        )
        assert info_type.protocol == "https://"
        assert len(audit_rows(store, "contact_information_type_created")) == 1

    def test_destroy_removes_entries(self, store: Store, tenant: tuple[Account, User]) -> None:
        account, admin = tenant
        vault = make_vault(store, account, admin)
        contact = make_contact(store, account, admin, vault)
        email = info_type_id(store, account)
        run_ok(
            store,
            CreateContactInformation,
            account_id=account.id,
            author_id=admin.id,
            vault_id=vault.id,
            contact_id=contact.id,
            contact_information_type_id=email,
            data="marie@example.test",
        )

        run_ok(
            store,
            DestroyContactInformationType,
            account_id=account.id,
            author_id=admin.id,
            contact_information_type_id=email,
        )

        with store.engine.connect() as conn:
            assert conn.execute(select(contact_information)).fetchall() == []
        (row,) = audit_rows(store, "contact_information_type_destroyed")
        assert objects_of(row) == {"contact_information_type_id": email, "name": "email"}
