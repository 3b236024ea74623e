"""Contact commands. Every contact lives in exactly one vault."""

from __future__ import annotations

from typing import Annotated, Any

from relcore.domain.entities import Contact
from relcore.domain.permissions import PermissionLevel
from relcore.domain.timestamps import now_iso
from relcore.infrastructure.database.schema import contacts, pronouns
from relcore.services.base import BaseService, ServiceContext, register_service, require
from relcore.services.permissions import AuthorBelongsToAccount, AuthorHasVaultPermission
from relcore.services.rules import ContactInput, Exists, Id, Name, VaultInput

_EDITORS = (
    AuthorBelongsToAccount(),
    AuthorHasVaultPermission(PermissionLevel.EDIT),
)


class CreateContactInput(VaultInput):
    first_name: Name
    last_name: Name | None = None
    pronoun_id: Annotated[Id | None, Exists("pronouns")] = None


class UpdateContactInput(ContactInput):
    first_name: Name
    last_name: Name | None = None


class SetPronounInput(ContactInput):
    pronoun_id: Annotated[Id, Exists("pronouns")]


def _load_contact(ctx: ServiceContext, contact_id: int) -> Contact:
    """The contact, provided it belongs to the context vault."""
    assert ctx.vault is not None
    return Contact.model_validate(require(ctx.txn, contacts, contact_id, vault_id=ctx.vault.id))


def _contact_objects(contact: Contact) -> dict[str, Any]:
    return {"contact_name": " ".join(filter(None, [contact.first_name, contact.last_name]))}


@register_service
class CreateContact(BaseService):
    action = "contact_created"
    Input = CreateContactInput
    permissions = _EDITORS

    def handle(self, ctx: ServiceContext, data: CreateContactInput) -> Contact:
        assert ctx.vault is not None
        if data.pronoun_id is not None:
            require(ctx.txn, pronouns, data.pronoun_id, account_id=ctx.account.id)
        now = now_iso()
        contact_id = ctx.txn.insert(
            contacts,
            vault_id=ctx.vault.id,
            first_name=data.first_name,
            last_name=data.last_name,
            pronoun_id=data.pronoun_id,
            created_at=now,
            updated_at=now,
        )
        return Contact.model_validate(ctx.txn.find(contacts, contact_id))

    def resource_refs(
        self, ctx: ServiceContext, data: CreateContactInput, result: Contact
    ) -> dict[str, int]:
        return {"vault_id": result.vault_id, "contact_id": result.id}

    def audit_objects(
        self, ctx: ServiceContext, data: CreateContactInput, result: Contact
    ) -> dict[str, Any]:
        return _contact_objects(result)


@register_service
class UpdateContact(BaseService):
    action = "contact_updated"
    Input = UpdateContactInput
    permissions = _EDITORS

    def handle(self, ctx: ServiceContext, data: UpdateContactInput) -> Contact:
        contact = _load_contact(ctx, data.contact_id)
        ctx.txn.update(
            contacts,
            contact.id,
            first_name=data.first_name,
            last_name=data.last_name,
            updated_at=now_iso(),
        )
        return Contact.model_validate(ctx.txn.find(contacts, contact.id))

    def audit_objects(
        self, ctx: ServiceContext, data: UpdateContactInput, result: Contact
    ) -> dict[str, Any]:
        return _contact_objects(result)


@register_service
class DestroyContact(BaseService):
    """Destroy a contact together with its contact information."""

    action = "contact_destroyed"
    Input = ContactInput
    permissions = _EDITORS

    def __init__(self, store: Any) -> None:
        super().__init__(store)
        self._contact: Contact | None = None

    def handle(self, ctx: ServiceContext, data: ContactInput) -> None:
        self._contact = _load_contact(ctx, data.contact_id)
        ctx.txn.delete(contacts, self._contact.id)

    def audit_objects(
        self, ctx: ServiceContext, data: ContactInput, result: None
    ) -> dict[str, Any]:
        assert self._contact is not None
        return _contact_objects(self._contact)


@register_service
class SetPronoun(BaseService):
    """Set the pronoun of a contact. The pronoun must belong to the account."""

    action = "pronoun_set"
    Input = SetPronounInput
    permissions = _EDITORS

    def __init__(self, store: Any) -> None:
        super().__init__(store)
        self._pronoun_name = ""

    def handle(self, ctx: ServiceContext, data: SetPronounInput) -> Contact:
        contact = _load_contact(ctx, data.contact_id)
        pronoun = require(ctx.txn, pronouns, data.pronoun_id, account_id=ctx.account.id)
        self._pronoun_name = pronoun.name
        ctx.txn.update(contacts, contact.id, pronoun_id=pronoun.id, updated_at=now_iso())
        return Contact.model_validate(ctx.txn.find(contacts, contact.id))

    def audit_objects(
        self, ctx: ServiceContext, data: SetPronounInput, result: Contact
    ) -> dict[str, Any]:
        return {"pronoun_id": data.pronoun_id, "pronoun_name": self._pronoun_name}


@register_service
class RemovePronoun(BaseService):
    action = "pronoun_unset"
    Input = ContactInput
    permissions = _EDITORS

    def handle(self, ctx: ServiceContext, data: ContactInput) -> Contact:
        contact = _load_contact(ctx, data.contact_id)
        ctx.txn.update(contacts, contact.id, pronoun_id=None, updated_at=now_iso())
        return Contact.model_validate(ctx.txn.find(contacts, contact.id))
