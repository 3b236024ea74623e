"""Shared pytest fixtures and test helpers for relcore tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner
from sqlalchemy import select
from sqlalchemy.engine import Engine

from relcore.config.settings import RelSettings
from relcore.domain.entities import Account, Contact, User, Vault
from relcore.domain.permissions import PermissionLevel
from relcore.infrastructure.database.engine import init_database
from relcore.infrastructure.database.schema import (
    audit_logs,
    contact_information_types,
    contact_logs,
    pronouns,
)
from relcore.infrastructure.store import Store
from relcore.services.registration import add_user, register_account


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def db_engine(tmp_path: Path) -> Engine:
    """Initialized SQLite engine with all tables created."""
    engine = init_database(tmp_path)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def store(tmp_path: Path) -> Store:
    """Store on a temp directory with a synchronous event bus.

    Side effects run inline, so audit and contact logs are readable as
    soon as a command returns.
    """
    settings = RelSettings.from_cli(data_root=tmp_path)
    s = Store(settings)
    s.init_event_bus(sync=True)
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def bare_store(tmp_path: Path) -> Store:
    """Store without an event bus: commands run but emit nothing."""
    settings = RelSettings.from_cli(data_root=tmp_path)
    s = Store(settings)
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def tenant(store: Store) -> tuple[Account, User]:
    """A registered account and its administrator."""
    return register_account(store, "Acme", admin_name="Ada", admin_email="ada@acme.test")


@pytest.fixture
def _isolated_store(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp directory so the CLI creates an isolated store.

    Use via ``@pytest.mark.usefixtures("_isolated_store")`` on command test
    classes.
    """
    monkeypatch.chdir(tmp_path)
    for name in ("RELCORE_DATA_ROOT", "RELCORE_CONFIG", "RELCORE_ACCOUNT_ID", "RELCORE_AUTHOR_ID"):
        monkeypatch.delenv(name, raising=False)


# ---------------------------------------------------------------------------
# Shared test helpers (used across service test modules)
# ---------------------------------------------------------------------------


def make_user(store: Store, account: Account, name: str, *, administrator: bool = False) -> User:
    """Add a user to *account* with a unique email derived from *name*."""
    email = f"{name.lower().replace(' ', '.')}@{account.id}.test"
    return add_user(store, account.id, name, email, administrator=administrator)


def run_ok(store: Store, service_cls: type, **data: Any) -> Any:
    """Execute a service, returning its result (failures propagate)."""
    return service_cls(store).execute(data)


def make_vault(store: Store, account: Account, author: User, name: str = "Family") -> Vault:
    """Create a vault through CreateVault; *author* becomes its manager."""
    from relcore.services.vaults import CreateVault

    return run_ok(store, CreateVault, account_id=account.id, author_id=author.id, name=name)


def grant(
    store: Store,
    account: Account,
    manager: User,
    vault: Vault,
    user: User,
    level: PermissionLevel,
) -> None:
    """Grant *user* access to *vault* on behalf of *manager*."""
    from relcore.services.vaults import GrantVaultAccess

    run_ok(
        store,
        GrantVaultAccess,
        account_id=account.id,
        author_id=manager.id,
        vault_id=vault.id,
        user_id=user.id,
        permission=level.value,
    )


def make_contact(
    store: Store, account: Account, author: User, vault: Vault, first_name: str = "Marie"
) -> Contact:
    from relcore.services.contacts import CreateContact

    return run_ok(
        store,
        CreateContact,
        account_id=account.id,
        author_id=author.id,
        vault_id=vault.id,
        first_name=first_name,
    )


def pronoun_id(store: Store, account: Account, name: str = "they/them") -> int:
    """Id of a seeded pronoun of *account*."""
    with store.transaction() as txn:
        return txn.conn.execute(
            select(pronouns.c.id).where(
                pronouns.c.account_id == account.id, pronouns.c.name == name
            )
        ).scalar_one()


def info_type_id(store: Store, account: Account, name: str = "email") -> int:
    """Id of a seeded contact information type of *account*."""
    with store.transaction() as txn:
        return txn.conn.execute(
            select(contact_information_types.c.id).where(
                contact_information_types.c.account_id == account.id,
                contact_information_types.c.name == name,
            )
        ).scalar_one()


def audit_rows(store: Store, action_name: str | None = None) -> list[Any]:
    """Persisted audit log rows, oldest first."""
    stmt = select(audit_logs).order_by(audit_logs.c.id)
    if action_name is not None:
        stmt = stmt.where(audit_logs.c.action_name == action_name)
    with store.engine.connect() as conn:
        return list(conn.execute(stmt).fetchall())


def contact_rows(store: Store, action_name: str | None = None) -> list[Any]:
    """Persisted contact log rows, oldest first."""
    stmt = select(contact_logs).order_by(contact_logs.c.id)
    if action_name is not None:
        stmt = stmt.where(contact_logs.c.action_name == action_name)
    with store.engine.connect() as conn:
        return list(conn.execute(stmt).fetchall())


def objects_of(row: Any) -> dict[str, Any]:
    return json.loads(row.objects)
