"""Store — the Entity Store behind every command.

The Store is the single dependency injected into every service. It owns
the database engine and the side-effect emitter. The
:meth:`Store.transaction` context manager yields a :class:`StoreTransaction`
exposing the scoped lookups and relationship-attribute queries the
command kernel relies on:

- **Scoped lookups**: ``find_scoped(table, id, account_id=...)`` only
  resolves a row when every scope column matches, which is how tenant
  isolation and parent chains (contact → vault) are enforced.
- **Membership attribute**: the User–Vault permission is read and written
  directly on the ``user_vault`` join table.
- **Atomicity**: native SQLAlchemy ``engine.begin()`` — commit on success,
  rollback on any exception. No entity state survives the transaction.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, func, insert, select, update

from relcore.domain.permissions import PermissionLevel
from relcore.infrastructure.database.engine import init_database
from relcore.infrastructure.database.schema import metadata, user_vault

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy import Connection, Row, Table
    from sqlalchemy.engine import Engine

    from relcore.config.settings import RelSettings
    from relcore.plugins.emitter import SideEffectEmitter
    from relcore.plugins.event_bus import EventBus

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# StoreTransaction — yielded to callers within transaction()
# ---------------------------------------------------------------------------


@dataclass
class StoreTransaction:
    """Active transaction context over a single DB connection.

    Every read and write of a command goes through the same connection so
    the whole command commits or rolls back as one unit.
    """

    conn: Connection

    # ------------------------------------------------------------------
    # Generic entity access
    # ------------------------------------------------------------------

    def find(self, table: Table, entity_id: int) -> Row[Any] | None:
        """Fetch a row by primary key, or None."""
        return self.conn.execute(select(table).where(table.c.id == entity_id)).first()

    def find_scoped(self, table: Table, entity_id: int, **scope: int) -> Row[Any] | None:
        """Fetch a row by primary key only if every *scope* column matches.

        Examples::

            txn.find_scoped(users, 7, account_id=1)
            txn.find_scoped(contacts, 12, vault_id=3)
        """
        stmt = select(table).where(table.c.id == entity_id)
        for column, value in scope.items():
            stmt = stmt.where(table.c[column] == value)
        return self.conn.execute(stmt).first()

    def exists(self, table_name: str, column: str, value: Any) -> bool:
        """Referential-integrity check: does any row hold *value* in *column*?"""
        table = metadata.tables[table_name]
        row = self.conn.execute(select(table.c[column]).where(table.c[column] == value)).first()
        return row is not None

    def insert(self, table: Table, **values: Any) -> int:
        """Insert a row and return its generated primary key."""
        result = self.conn.execute(insert(table).values(**values))
        assert result.inserted_primary_key is not None
        return int(result.inserted_primary_key[0])

    def update(self, table: Table, entity_id: int, **values: Any) -> None:
        """Update columns of the row with primary key *entity_id*."""
        self.conn.execute(update(table).where(table.c.id == entity_id).values(**values))

    def delete(self, table: Table, entity_id: int) -> bool:
        """Delete a row (owned rows follow via FK cascades). Returns True if removed."""
        result = self.conn.execute(delete(table).where(table.c.id == entity_id))
        return result.rowcount > 0

    # ------------------------------------------------------------------
    # User–Vault relationship attribute
    # ------------------------------------------------------------------

    def membership(self, user_id: int, vault_id: int) -> PermissionLevel | None:
        """The permission *user_id* holds on *vault_id*, or None if not a member."""
        value = self.conn.execute(
            select(user_vault.c.permission).where(
                user_vault.c.user_id == user_id,
                user_vault.c.vault_id == vault_id,
            )
        ).scalar_one_or_none()
        return PermissionLevel(value) if value is not None else None

    def set_membership(self, user_id: int, vault_id: int, level: PermissionLevel) -> None:
        """Create or overwrite the membership attribute for (user, vault)."""
        if self.membership(user_id, vault_id) is None:
            self.conn.execute(
                insert(user_vault).values(
                    user_id=user_id, vault_id=vault_id, permission=level.value
                )
            )
        else:
            self.conn.execute(
                update(user_vault)
                .where(user_vault.c.user_id == user_id, user_vault.c.vault_id == vault_id)
                .values(permission=level.value)
            )

    def remove_membership(self, user_id: int, vault_id: int) -> bool:
        """Drop the (user, vault) membership. Returns True if one existed."""
        result = self.conn.execute(
            delete(user_vault).where(
                user_vault.c.user_id == user_id,
                user_vault.c.vault_id == vault_id,
            )
        )
        return result.rowcount > 0

    def vault_ids_with_permission(self, user_id: int, level: PermissionLevel) -> list[int]:
        """Vaults where *user_id*'s stored permission equals *level* exactly."""
        rows = self.conn.execute(
            select(user_vault.c.vault_id)
            .where(user_vault.c.user_id == user_id, user_vault.c.permission == level.value)
            .order_by(user_vault.c.vault_id)
        ).fetchall()
        return [row.vault_id for row in rows]

    def count_members_with_permission(
        self,
        vault_id: int,
        level: PermissionLevel,
        *,
        excluding_user_id: int | None = None,
    ) -> int:
        """Count members of *vault_id* whose stored permission equals *level*.

        Only the exact stored level is counted: a MANAGE count never
        includes EDIT or VIEW holders.
        """
        stmt = (
            select(func.count())
            .select_from(user_vault)
            .where(user_vault.c.vault_id == vault_id, user_vault.c.permission == level.value)
        )
        if excluding_user_id is not None:
            stmt = stmt.where(user_vault.c.user_id != excluding_user_id)
        return int(self.conn.execute(stmt).scalar_one())

    def members(self, vault_id: int) -> list[Row[Any]]:
        """All membership rows of a vault, ordered by user id."""
        return list(
            self.conn.execute(
                select(user_vault)
                .where(user_vault.c.vault_id == vault_id)
                .order_by(user_vault.c.user_id)
            ).fetchall()
        )


# ---------------------------------------------------------------------------
# Store — the repository
# ---------------------------------------------------------------------------


class Store:
    """Repository encapsulating database access and side-effect emission.

    Constructed once at CLI startup from :class:`RelSettings` and stored
    on the CLI context. Services receive the Store via their
    :class:`BaseService` constructor.
    """

    def __init__(self, settings: RelSettings) -> None:
        self._settings = settings
        self._engine: Engine = init_database(
            self.root,
            settings.database.filename,
            busy_timeout=settings.database.busy_timeout,
        )
        self._event_bus: EventBus | None = None
        self._emitter: SideEffectEmitter | None = None

    @property
    def root(self) -> Path:
        """The data root directory."""
        return self._settings.data_root

    @property
    def engine(self) -> Engine:
        """The underlying SQLAlchemy engine (for direct access when needed)."""
        return self._engine

    @property
    def settings(self) -> RelSettings:
        """The resolved settings for this store."""
        return self._settings

    @property
    def event_bus(self) -> EventBus | None:
        """The plugin event bus (None if not initialized)."""
        return self._event_bus

    @property
    def emitter(self) -> SideEffectEmitter | None:
        """The side-effect emitter (None if the event bus is not initialized)."""
        return self._emitter

    def init_event_bus(self, *, sync: bool = False) -> None:
        """Initialize the plugin event bus and the side-effect emitter.

        Creates a PluginManager, discovers entry-point plugins, registers
        the built-in activity-log plugin, and wires up the EventBus.
        """
        from relcore.plugins.builtins.activity_log import ActivityLogPlugin
        from relcore.plugins.emitter import SideEffectEmitter
        from relcore.plugins.event_bus import EventBus
        from relcore.plugins.manager import PluginManager

        pm = PluginManager()
        pm.discover_and_load()
        pm.register_plugin(ActivityLogPlugin(self._engine), name="activity-log-builtin")

        cfg = self._settings.events
        self._event_bus = EventBus(
            self._engine,
            pm,
            sync=sync or cfg.sync,
            max_retries=cfg.max_retries,
            max_workers=cfg.max_workers,
        )
        self._emitter = SideEffectEmitter(self._event_bus)

    def close(self) -> None:
        """Wait for in-flight side effects and release the engine."""
        if self._event_bus is not None:
            self._event_bus.shutdown()
        self._engine.dispose()

    @contextmanager
    def transaction(self) -> Iterator[StoreTransaction]:
        """Atomic unit of work for one command.

        Usage::

            with store.transaction() as txn:
                vault = txn.find_scoped(vaults, vault_id, account_id=account_id)
                txn.set_membership(user_id, vault_id, PermissionLevel.EDIT)
                # Commits on success, rolls back on any exception.
        """
        with self._engine.begin() as conn:
            yield StoreTransaction(conn=conn)
