"""SQLite engine for the Entity Store.

The database lives at ``{data_root}/.relcore/{filename}``. Every
connection runs in WAL mode with foreign keys enforced (ownership
cascades depend on them). pysqlite's own transaction handling is turned
off; SQLAlchemy's ``begin`` event issues ``BEGIN IMMEDIATE`` instead, so
a command holds the write lock from its first read to its commit and the
manager-count-then-delete sweep cannot interleave with another writer.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Connection, Engine

from relcore.infrastructure.database.schema import metadata

DATA_DIRNAME = ".relcore"
DEFAULT_DB_FILENAME = "relcore.db"
DEFAULT_BUSY_TIMEOUT = 30.0

_CONNECT_PRAGMAS = ("PRAGMA journal_mode=WAL", "PRAGMA foreign_keys=ON")


def _on_connect(dbapi_conn: Any, _record: Any) -> None:
    dbapi_conn.isolation_level = None
    cursor = dbapi_conn.cursor()
    try:
        for pragma in _CONNECT_PRAGMAS:
            cursor.execute(pragma)
    finally:
        cursor.close()


def _on_begin(conn: Connection) -> None:
    conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_db_engine(db_path: Path, *, busy_timeout: float = DEFAULT_BUSY_TIMEOUT) -> Engine:
    """Engine for *db_path*; writers wait up to *busy_timeout* seconds for the lock."""
    engine = create_engine(
        f"sqlite:///{db_path}",
        connect_args={"timeout": busy_timeout},
    )
    event.listen(engine, "connect", _on_connect)
    event.listen(engine, "begin", _on_begin)
    return engine


def init_database(
    data_root: Path,
    filename: str = DEFAULT_DB_FILENAME,
    *,
    busy_timeout: float = DEFAULT_BUSY_TIMEOUT,
) -> Engine:
    """Open (creating if needed) the database under *data_root* with all tables.

    Safe to call against an existing database; missing tables are added,
    existing ones are left alone.
    """
    data_dir = data_root / DATA_DIRNAME
    data_dir.mkdir(parents=True, exist_ok=True)
    engine = create_db_engine(data_dir / filename, busy_timeout=busy_timeout)
    metadata.create_all(engine)
    return engine
