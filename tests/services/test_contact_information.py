"""Tests for contact information commands."""

from __future__ import annotations

from typing import Any

import pytest
from sqlalchemy import select

from relcore.domain.entities import Account, ContactInformation, User, Vault
from relcore.infrastructure.database.schema import contact_information
from relcore.infrastructure.store import Store
from relcore.services.contact_information import (
    CreateContactInformation,
    DestroyContactInformation,
    UpdateContactInformation,
)
from relcore.services.errors import NotFoundFailure
from tests.conftest import contact_rows, info_type_id, make_contact, make_vault, objects_of, run_ok


@pytest.fixture
def vault(store: Store, tenant: tuple[Account, User]) -> Vault:
    account, admin = tenant
    return make_vault(store, account, admin)


@pytest.fixture
def refs(store: Store, tenant: tuple[Account, User], vault: Vault) -> dict[str, Any]:
    account, admin = tenant
    contact = make_contact(store, account, admin, vault)
    return {
        "account_id": account.id,
        "author_id": admin.id,
        "vault_id": vault.id,
        "contact_id": contact.id,
    }


def _add(store: Store, refs: dict[str, Any], type_id: int, data: str) -> ContactInformation:
    return run_ok(
        store, CreateContactInformation, contact_information_type_id=type_id, data=data, **refs
    )


class TestContactInformation:
    def test_create(self, store: Store, tenant: tuple[Account, User], refs: dict) -> None:
        account, _ = tenant
        email = info_type_id(store, account, "email")
        info = _add(store, refs, email, " marie@example.test ")
        assert info.data == "marie@example.test"
        assert info.type_id == email
        (log,) = contact_rows(store, "contact_information_created")
        assert log.contact_id == refs["contact_id"]
        assert objects_of(log) == {"contact_information_type_id": email}

    def test_update(self, store: Store, tenant: tuple[Account, User], refs: dict) -> None:
        account, _ = tenant
        info = _add(store, refs, info_type_id(store, account, "email"), "a@example.test")
        phone = info_type_id(store, account, "phone")
        updated = run_ok(
            store,
            UpdateContactInformation,
            contact_information_id=info.id,
            contact_information_type_id=phone,
            data="+33 1 23 45 67 89",
            **refs,
        )
        assert updated.type_id == phone
        assert updated.data == "+33 1 23 45 67 89"

    def test_destroy(self, store: Store, tenant: tuple[Account, User], refs: dict) -> None:
        account, _ = tenant
        email = info_type_id(store, account, "email")
        info = _add(store, refs, email, "a@example.test")
        run_ok(store, DestroyContactInformation, contact_information_id=info.id, **refs)
        with store.engine.connect() as conn:
            assert conn.execute(select(contact_information)).fetchall() == []
        (log,) = contact_rows(store, "contact_information_destroyed")
        assert objects_of(log) == {"contact_information_type_id": email}

    def test_type_must_belong_to_account(
        self, store: Store, tenant: tuple[Account, User], refs: dict
    ) -> None:
        from relcore.services.registration import register_account

        other, _ = register_account(
            store, "Globex", admin_name="Hank", admin_email="hank@globex.test"
        )
        with pytest.raises(NotFoundFailure) as exc_info:
            _add(store, refs, info_type_id(store, other), "x@example.test")
        assert exc_info.value.entity_type == "contact_information_type"

    def test_entry_must_belong_to_contact(
        self, store: Store, tenant: tuple[Account, User], vault: Vault, refs: dict
    ) -> None:
        account, admin = tenant
        info = _add(store, refs, info_type_id(store, account), "a@example.test")
        sibling = make_contact(store, account, admin, vault, "Pierre")

        with pytest.raises(NotFoundFailure) as exc_info:
            run_ok(
                store,
                DestroyContactInformation,
                contact_information_id=info.id,
                **{**refs, "contact_id": sibling.id},
            )
        assert exc_info.value.entity_type == "contact_information"
        with store.engine.connect() as conn:
            assert len(conn.execute(select(contact_information)).fetchall()) == 1
