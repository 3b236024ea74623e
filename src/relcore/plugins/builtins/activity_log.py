"""Built-in plugin persisting audit and contact activity records."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import insert

from relcore.infrastructure.database.schema import audit_logs, contact_logs
from relcore.plugins.hookspecs import hookimpl

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)


class ActivityLogPlugin:
    """Writes ``post_audit_log`` / ``post_contact_log`` events to their tables.

    Runs on the event bus worker threads, each write in its own short
    transaction.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @hookimpl
    def post_audit_log(
        self,
        action_name: str,
        account_id: int,
        author_id: int | None,
        author_name: str,
        vault_id: int | None,
        objects: dict[str, Any],
        created_at: str,
    ) -> None:
        with self._engine.begin() as conn:
            conn.execute(
                insert(audit_logs).values(
                    account_id=account_id,
                    author_id=author_id,
                    author_name=author_name,
                    vault_id=vault_id,
                    action_name=action_name,
                    objects=json.dumps(objects),
                    created_at=created_at,
                )
            )
        logger.debug("Audit log recorded: %s (account %s)", action_name, account_id)

    @hookimpl
    def post_contact_log(
        self,
        action_name: str,
        account_id: int,
        author_id: int | None,
        author_name: str,
        vault_id: int | None,
        contact_id: int,
        objects: dict[str, Any],
        created_at: str,
    ) -> None:
        with self._engine.begin() as conn:
            conn.execute(
                insert(contact_logs).values(
                    account_id=account_id,
                    contact_id=contact_id,
                    vault_id=vault_id,
                    author_id=author_id,
                    author_name=author_name,
                    action_name=action_name,
                    objects=json.dumps(objects),
                    created_at=created_at,
                )
            )
        logger.debug("Contact log recorded: %s (contact %s)", action_name, contact_id)
