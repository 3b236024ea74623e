"""Entity models returned by services.

Each model is a frozen snapshot built from a store row
(``Model.model_validate(row)``). Nothing here is cached between
commands; services read fresh rows inside their own transaction.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from relcore.domain.permissions import PermissionLevel

_ROW_CONFIG = ConfigDict(frozen=True, from_attributes=True)


class Account(BaseModel):
    """Tenant boundary."""

    model_config = _ROW_CONFIG

    id: int
    name: str
    created_at: str


class User(BaseModel):
    """Account member and command actor."""

    model_config = _ROW_CONFIG

    id: int
    account_id: int
    name: str
    email: str
    is_account_administrator: bool
    created_at: str


class Vault(BaseModel):
    """Collaboration space holding contacts."""

    model_config = _ROW_CONFIG

    id: int
    account_id: int
    name: str
    description: str | None = None
    created_at: str
    updated_at: str


class VaultMembership(BaseModel):
    """Join entity between a User and a Vault with its permission level."""

    model_config = _ROW_CONFIG

    user_id: int
    vault_id: int
    permission: PermissionLevel


class Pronoun(BaseModel):
    model_config = _ROW_CONFIG

    id: int
    account_id: int
    name: str


class ContactInformationType(BaseModel):
    model_config = _ROW_CONFIG

    id: int
    account_id: int
    name: str
    protocol: str | None = None


class Contact(BaseModel):
    """Person tracked inside a vault."""

    model_config = _ROW_CONFIG

    id: int
    vault_id: int
    first_name: str
    last_name: str | None = None
    pronoun_id: int | None = None
    created_at: str
    updated_at: str


class ContactInformation(BaseModel):
    """One typed piece of contact data (email address, phone number, ...)."""

    model_config = _ROW_CONFIG

    id: int
    contact_id: int
    type_id: int
    data: str
    created_at: str
    updated_at: str
