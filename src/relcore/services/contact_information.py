"""Contact information commands (an email address, a phone number, ...)."""

from __future__ import annotations

from typing import Annotated, Any

from relcore.domain.entities import ContactInformation
from relcore.domain.permissions import PermissionLevel
from relcore.domain.timestamps import now_iso
from relcore.infrastructure.database.schema import (
    contact_information,
    contact_information_types,
    contacts,
)
from relcore.services.base import BaseService, ServiceContext, register_service, require
from relcore.services.permissions import AuthorBelongsToAccount, AuthorHasVaultPermission
from relcore.services.rules import ContactInput, Exists, Id, Name

_EDITORS = (
    AuthorBelongsToAccount(),
    AuthorHasVaultPermission(PermissionLevel.EDIT),
)


class CreateContactInformationInput(ContactInput):
    contact_information_type_id: Annotated[Id, Exists("contact_information_types")]
    data: Name


class ContactInformationInput(ContactInput):
    contact_information_id: Annotated[Id, Exists("contact_information")]


class UpdateContactInformationInput(ContactInformationInput):
    contact_information_type_id: Annotated[Id, Exists("contact_information_types")]
    data: Name


class _ContactInformationService(BaseService):
    permissions = _EDITORS

    def _check_contact(self, ctx: ServiceContext, contact_id: int) -> None:
        assert ctx.vault is not None
        require(ctx.txn, contacts, contact_id, vault_id=ctx.vault.id)

    def _check_type(self, ctx: ServiceContext, type_id: int) -> None:
        require(ctx.txn, contact_information_types, type_id, account_id=ctx.account.id)

    def _load(self, ctx: ServiceContext, data: ContactInformationInput) -> ContactInformation:
        self._check_contact(ctx, data.contact_id)
        row = require(
            ctx.txn, contact_information, data.contact_information_id, contact_id=data.contact_id
        )
        return ContactInformation.model_validate(row)

    def audit_objects(
        self, ctx: ServiceContext, data: Any, result: ContactInformation | None
    ) -> dict[str, Any]:
        return {"contact_information_type_id": data.contact_information_type_id}


@register_service
class CreateContactInformation(_ContactInformationService):
    action = "contact_information_created"
    Input = CreateContactInformationInput

    def handle(
        self, ctx: ServiceContext, data: CreateContactInformationInput
    ) -> ContactInformation:
        self._check_contact(ctx, data.contact_id)
        self._check_type(ctx, data.contact_information_type_id)
        now = now_iso()
        info_id = ctx.txn.insert(
            contact_information,
            contact_id=data.contact_id,
            type_id=data.contact_information_type_id,
            data=data.data,
            created_at=now,
            updated_at=now,
        )
        return ContactInformation.model_validate(ctx.txn.find(contact_information, info_id))


@register_service
class UpdateContactInformation(_ContactInformationService):
    action = "contact_information_updated"
    Input = UpdateContactInformationInput

    def handle(
        self, ctx: ServiceContext, data: UpdateContactInformationInput
    ) -> ContactInformation:
        info = self._load(ctx, data)
        self._check_type(ctx, data.contact_information_type_id)
        ctx.txn.update(
            contact_information,
            info.id,
            type_id=data.contact_information_type_id,
            data=data.data,
            updated_at=now_iso(),
        )
        return ContactInformation.model_validate(ctx.txn.find(contact_information, info.id))


@register_service
class DestroyContactInformation(_ContactInformationService):
    action = "contact_information_destroyed"
    Input = ContactInformationInput

    def __init__(self, store: Any) -> None:
        super().__init__(store)
        self._type_id = 0

    def handle(self, ctx: ServiceContext, data: ContactInformationInput) -> None:
        info = self._load(ctx, data)
        self._type_id = info.type_id
        ctx.txn.delete(contact_information, info.id)

    def audit_objects(
        self, ctx: ServiceContext, data: ContactInformationInput, result: None
    ) -> dict[str, Any]:
        return {"contact_information_type_id": self._type_id}
