"""SQLite database engine and schema via SQLAlchemy Core."""

from relcore.infrastructure.database.engine import create_db_engine, init_database
from relcore.infrastructure.database.schema import (
    accounts,
    audit_logs,
    contact_information,
    contact_information_types,
    contact_logs,
    contacts,
    event_wal,
    metadata,
    pronouns,
    user_vault,
    users,
    vaults,
)

__all__ = [
    "accounts",
    "audit_logs",
    "contact_information",
    "contact_information_types",
    "contact_logs",
    "contacts",
    "create_db_engine",
    "event_wal",
    "init_database",
    "metadata",
    "pronouns",
    "user_vault",
    "users",
    "vaults",
]
