"""Write-ahead side-effect dispatch.

A dispatched hook call is first stored in ``event_wal`` as ``pending``
and only then handed to a worker thread (or run inline in sync mode). A
crash between commit and hook execution therefore leaves a row that
``relcore events drain`` can replay. Hook failures never propagate: the
row moves to ``failed`` and, once it has used up its attempts, to
``dead_letter``.
"""

from __future__ import annotations

import json
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from sqlalchemy import insert, select, update

from relcore.domain.timestamps import now_iso
from relcore.infrastructure.database.schema import event_wal

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from relcore.plugins.manager import PluginManager

logger = logging.getLogger(__name__)

# Upper bound on how long shutdown/drain wait for in-flight hook calls.
_WAIT_SECONDS = 30


class EventStatus(StrEnum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    DEAD_LETTER = "dead_letter"


_REPLAYABLE = (EventStatus.PENDING, EventStatus.FAILED)


class EventBus:
    """Dispatches pluggy hooks through the ``event_wal`` table.

    ``max_retries`` counts failed attempts: the attempt that reaches it
    dead-letters the event. Rows are ordered by id, so the WAL preserves
    dispatch order even when several workers run hooks concurrently.
    """

    def __init__(
        self,
        engine: Engine,
        plugin_manager: PluginManager,
        *,
        sync: bool = False,
        max_retries: int = 3,
        max_workers: int = 2,
    ) -> None:
        self._engine = engine
        self._pm = plugin_manager
        self._max_retries = max_retries
        self._sync = sync
        self._closed = False
        self._executor = None if sync else ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="relcore-events"
        )
        self._lock = threading.Lock()
        self._in_flight: set[Future[EventStatus]] = set()

    @property
    def is_sync(self) -> bool:
        return self._sync

    @property
    def is_closed(self) -> bool:
        return self._closed

    def dispatch(self, hook_name: str, payload: dict[str, Any]) -> int:
        """Record the call, then run it. Returns the WAL row id.

        After :meth:`shutdown` the call is only recorded: the row stays
        ``pending`` until ``relcore events drain`` replays it.
        """
        event_id = self._append(hook_name, payload)
        if self._closed:
            logger.warning("Event bus is shut down; event %d left pending", event_id)
        elif self._executor is None:
            self._run(event_id, hook_name, payload)
        else:
            future = self._executor.submit(self._run, event_id, hook_name, payload)
            with self._lock:
                self._in_flight.add(future)
            future.add_done_callback(self._forget)
        return event_id

    def drain(self) -> list[dict[str, Any]]:
        """Replay every pending or failed event inline, oldest first.

        Returns ``{id, hook_name, status}`` per replayed event, with the
        status it ended in.
        """
        self._settle()
        with self._engine.connect() as conn:
            rows = conn.execute(
                select(event_wal.c.id, event_wal.c.hook_name, event_wal.c.payload)
                .where(event_wal.c.status.in_([s.value for s in _REPLAYABLE]))
                .order_by(event_wal.c.id)
            ).fetchall()

        replayed = []
        for row in rows:
            status = self._run(row.id, row.hook_name, json.loads(row.payload))
            replayed.append({"id": row.id, "hook_name": row.hook_name, "status": status.value})
        return replayed

    def shutdown(self) -> None:
        """Wait for in-flight hooks and stop the worker pool."""
        self._closed = True
        self._settle()
        if self._executor is not None:
            self._executor.shutdown(wait=True)

    def _append(self, hook_name: str, payload: dict[str, Any]) -> int:
        with self._engine.begin() as conn:
            result = conn.execute(
                insert(event_wal).values(
                    hook_name=hook_name,
                    payload=json.dumps(payload),
                    status=EventStatus.PENDING.value,
                    retries=0,
                    created=now_iso(),
                )
            )
            return int(result.inserted_primary_key[0])

    def _run(self, event_id: int, hook_name: str, payload: dict[str, Any]) -> EventStatus:
        hook = getattr(self._pm.hook, hook_name, None)
        error: str | None = None
        if hook is not None:
            try:
                hook(**payload)
            except Exception as exc:
                logger.warning("Hook %s failed for event %d: %s", hook_name, event_id, exc)
                error = str(exc) or type(exc).__name__
        return self._settle_row(event_id, error)

    def _settle_row(self, event_id: int, error: str | None) -> EventStatus:
        """Store the outcome of one attempt and return the row's new status."""
        with self._engine.begin() as conn:
            if error is None:
                conn.execute(
                    update(event_wal)
                    .where(event_wal.c.id == event_id)
                    .values(status=EventStatus.COMPLETED.value, error=None, completed=now_iso())
                )
                return EventStatus.COMPLETED

            retries = conn.execute(
                select(event_wal.c.retries).where(event_wal.c.id == event_id)
            ).scalar_one() + 1
            dead = retries >= self._max_retries
            status = EventStatus.DEAD_LETTER if dead else EventStatus.FAILED
            conn.execute(
                update(event_wal)
                .where(event_wal.c.id == event_id)
                .values(
                    status=status.value,
                    error=error,
                    retries=retries,
                    completed=now_iso() if dead else None,
                )
            )
        if dead:
            logger.warning("Event %d moved to dead letter after %d attempts", event_id, retries)
        return status

    def _settle(self) -> None:
        """Block until every submitted hook call has finished."""
        with self._lock:
            in_flight = list(self._in_flight)
        _, not_done = wait(in_flight, timeout=_WAIT_SECONDS)
        if not_done:
            logger.warning("%d side effects still running after %ds", len(not_done), _WAIT_SECONDS)

    def _forget(self, future: Future[EventStatus]) -> None:
        with self._lock:
            self._in_flight.discard(future)
        if not future.cancelled() and future.exception() is not None:
            logger.warning("Event worker crashed", exc_info=future.exception())
