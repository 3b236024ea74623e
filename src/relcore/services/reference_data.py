"""Account-level reference data: pronouns and contact information types.

Only account administrators may change reference data.
"""

from __future__ import annotations

from typing import Annotated, Any

from relcore.domain.entities import ContactInformationType, Pronoun
from relcore.infrastructure.database.schema import contact_information_types, pronouns
from relcore.services.base import BaseService, ServiceContext, register_service, require
from relcore.services.permissions import AuthorBelongsToAccount, AuthorIsAccountAdministrator
from relcore.services.rules import Exists, Id, Name, ServiceInput

_ADMINISTRATORS = (
    AuthorBelongsToAccount(),
    AuthorIsAccountAdministrator(),
)


class CreatePronounInput(ServiceInput):
    name: Name


class DestroyPronounInput(ServiceInput):
    pronoun_id: Annotated[Id, Exists("pronouns")]


class CreateContactInformationTypeInput(ServiceInput):
    name: Name
    protocol: Name | None = None


class DestroyContactInformationTypeInput(ServiceInput):
    contact_information_type_id: Annotated[Id, Exists("contact_information_types")]


@register_service
class CreatePronoun(BaseService):
    action = "pronoun_created"
    Input = CreatePronounInput
    permissions = _ADMINISTRATORS

    def handle(self, ctx: ServiceContext, data: CreatePronounInput) -> Pronoun:
        pronoun_id = ctx.txn.insert(pronouns, account_id=ctx.account.id, name=data.name)
        return Pronoun.model_validate(ctx.txn.find(pronouns, pronoun_id))

    def audit_objects(
        self, ctx: ServiceContext, data: CreatePronounInput, result: Pronoun
    ) -> dict[str, Any]:
        return {"pronoun_id": result.id, "pronoun_name": result.name}


@register_service
class DestroyPronoun(BaseService):
    """Destroy a pronoun. Contacts using it are left without one."""

    action = "pronoun_destroyed"
    Input = DestroyPronounInput
    permissions = _ADMINISTRATORS

    def handle(self, ctx: ServiceContext, data: DestroyPronounInput) -> Pronoun:
        pronoun = Pronoun.model_validate(
            require(ctx.txn, pronouns, data.pronoun_id, account_id=ctx.account.id)
        )
        ctx.txn.delete(pronouns, pronoun.id)
        return pronoun

    def audit_objects(
        self, ctx: ServiceContext, data: DestroyPronounInput, result: Pronoun
    ) -> dict[str, Any]:
        return {"pronoun_id": result.id, "pronoun_name": result.name}


@register_service
class CreateContactInformationType(BaseService):
    action = "contact_information_type_created"
    Input = CreateContactInformationTypeInput
    permissions = _ADMINISTRATORS

    def handle(
        self, ctx: ServiceContext, data: CreateContactInformationTypeInput
    ) -> ContactInformationType:
        type_id = ctx.txn.insert(
            contact_information_types,
            account_id=ctx.account.id,
            name=data.name,
            protocol=data.protocol,
        )
        return ContactInformationType.model_validate(
            ctx.txn.find(contact_information_types, type_id)
        )

    def audit_objects(
        self, ctx: ServiceContext, data: Any, result: ContactInformationType
    ) -> dict[str, Any]:
        return {"contact_information_type_id": result.id, "name": result.name}


@register_service
class DestroyContactInformationType(BaseService):
    """Destroy a type together with every contact information using it."""

    action = "contact_information_type_destroyed"
    Input = DestroyContactInformationTypeInput
    permissions = _ADMINISTRATORS

    def handle(
        self, ctx: ServiceContext, data: DestroyContactInformationTypeInput
    ) -> ContactInformationType:
        info_type = ContactInformationType.model_validate(
            require(
                ctx.txn,
                contact_information_types,
                data.contact_information_type_id,
                account_id=ctx.account.id,
            )
        )
        ctx.txn.delete(contact_information_types, info_type.id)
        return info_type

    def audit_objects(
        self, ctx: ServiceContext, data: Any, result: ContactInformationType
    ) -> dict[str, Any]:
        return {"contact_information_type_id": result.id, "name": result.name}
