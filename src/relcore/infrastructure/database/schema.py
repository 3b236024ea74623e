"""SQLAlchemy Core table definitions for the relcore database.

Ownership is expressed through ``ON DELETE CASCADE`` foreign keys so that
removing an account, vault, user, or contact takes its owned rows with
it inside the same transaction. Audit and contact logs carry no foreign
keys: they describe entities that may no longer exist.
"""

from __future__ import annotations

from sqlalchemy import (
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    PrimaryKeyConstraint,
    Table,
    Text,
)

metadata = MetaData()

accounts = Table(
    "accounts",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", Text, nullable=False),
    Column("created_at", Text, nullable=False),
)

users = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "account_id",
        Integer,
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("name", Text, nullable=False),
    Column("email", Text, nullable=False, unique=True),
    Column("is_account_administrator", Integer, default=0, server_default="0"),
    Column("created_at", Text, nullable=False),
)

vaults = Table(
    "vaults",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "account_id",
        Integer,
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("name", Text, nullable=False),
    Column("description", Text),
    Column("created_at", Text, nullable=False),
    Column("updated_at", Text, nullable=False),
)

# Join entity: one row per membership, the permission lives on the relation.
user_vault = Table(
    "user_vault",
    metadata,
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column("vault_id", Integer, ForeignKey("vaults.id", ondelete="CASCADE"), nullable=False),
    Column("permission", Text, nullable=False),  # PermissionLevel value
    PrimaryKeyConstraint("user_id", "vault_id"),
)

pronouns = Table(
    "pronouns",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "account_id",
        Integer,
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("name", Text, nullable=False),
)

contact_information_types = Table(
    "contact_information_types",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "account_id",
        Integer,
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("name", Text, nullable=False),
    Column("protocol", Text),  # e.g. mailto:, tel:
)

contacts = Table(
    "contacts",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("vault_id", Integer, ForeignKey("vaults.id", ondelete="CASCADE"), nullable=False),
    Column("first_name", Text, nullable=False),
    Column("last_name", Text),
    Column("pronoun_id", Integer, ForeignKey("pronouns.id", ondelete="SET NULL")),
    Column("created_at", Text, nullable=False),
    Column("updated_at", Text, nullable=False),
)

contact_information = Table(
    "contact_information",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "contact_id",
        Integer,
        ForeignKey("contacts.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "type_id",
        Integer,
        ForeignKey("contact_information_types.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("data", Text, nullable=False),
    Column("created_at", Text, nullable=False),
    Column("updated_at", Text, nullable=False),
)

audit_logs = Table(
    "audit_logs",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("account_id", Integer, nullable=False),
    Column("author_id", Integer),
    Column("author_name", Text, nullable=False),
    Column("vault_id", Integer),
    Column("action_name", Text, nullable=False),
    Column("objects", Text, nullable=False),  # JSON object
    Column("created_at", Text, nullable=False),
)

contact_logs = Table(
    "contact_logs",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("account_id", Integer, nullable=False),
    Column("contact_id", Integer, nullable=False),
    Column("vault_id", Integer),
    Column("author_id", Integer),
    Column("author_name", Text, nullable=False),
    Column("action_name", Text, nullable=False),
    Column("objects", Text, nullable=False),  # JSON object
    Column("created_at", Text, nullable=False),
)

event_wal = Table(
    "event_wal",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("hook_name", Text, nullable=False),
    Column("payload", Text, nullable=False),  # JSON
    Column("status", Text, nullable=False),
    Column("error", Text),
    Column("retries", Integer, default=0, server_default="0"),
    Column("created", Text, nullable=False),
    Column("completed", Text),
)

# ---------------------------------------------------------------------------
# Indexes for scoped lookups
# ---------------------------------------------------------------------------

Index("ix_users_account", users.c.account_id)
Index("ix_vaults_account", vaults.c.account_id)
Index("ix_user_vault_vault_permission", user_vault.c.vault_id, user_vault.c.permission)
Index("ix_contacts_vault", contacts.c.vault_id)
Index("ix_contact_information_contact", contact_information.c.contact_id)
Index("ix_audit_logs_account", audit_logs.c.account_id)
Index("ix_contact_logs_contact", contact_logs.c.contact_id)
Index("ix_event_wal_status", event_wal.c.status)
