"""SideEffectEmitter — audit and contact activity records for commands.

The emitter turns one action descriptor into at most two independent
events on the :class:`EventBus`:

- ``post_audit_log`` for every action (account-wide activity feed).
- ``post_contact_log`` when the action references a contact.

The kernel only calls :meth:`SideEffectEmitter.emit` after the command's
transaction has committed. Emission is fire-and-forget: errors are
logged here and never reach the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from relcore.domain.timestamps import now_iso

if TYPE_CHECKING:
    from relcore.domain.entities import Account, User
    from relcore.plugins.event_bus import EventBus

logger = logging.getLogger(__name__)

AUDIT_HOOK = "post_audit_log"
CONTACT_HOOK = "post_contact_log"


@dataclass(frozen=True)
class ActionDescriptor:
    """Structured description of one committed action."""

    action_name: str
    account_id: int
    author_id: int | None
    author_name: str
    resource_refs: Mapping[str, int | None] = field(default_factory=dict)
    payload: Mapping[str, Any] = field(default_factory=dict)
    created_at: str = field(default_factory=now_iso)

    @property
    def vault_id(self) -> int | None:
        return self.resource_refs.get("vault_id")

    @property
    def contact_id(self) -> int | None:
        return self.resource_refs.get("contact_id")

    def audit_payload(self) -> dict[str, Any]:
        return {
            "action_name": self.action_name,
            "account_id": self.account_id,
            "author_id": self.author_id,
            "author_name": self.author_name,
            "vault_id": self.vault_id,
            "objects": dict(self.payload),
            "created_at": self.created_at,
        }

    def contact_payload(self) -> dict[str, Any]:
        return {**self.audit_payload(), "contact_id": self.contact_id}


class SideEffectEmitter:
    """Schedule audit/contact log records on the event bus."""

    def __init__(self, bus: EventBus) -> None:
        self._bus = bus

    @property
    def bus(self) -> EventBus:
        return self._bus

    def emit(
        self,
        action_name: str,
        actor: User,
        tenant: Account,
        resource_refs: Mapping[str, int | None] | None = None,
        payload: Mapping[str, Any] | None = None,
    ) -> list[int]:
        """Schedule the records for one action. Returns the WAL event ids.

        INVARIANT: never raises — a failed dispatch is a warning only.
        """
        descriptor = ActionDescriptor(
            action_name=action_name,
            account_id=tenant.id,
            author_id=actor.id,
            author_name=actor.name,
            resource_refs=dict(resource_refs or {}),
            payload=dict(payload or {}),
        )
        return self.emit_descriptor(descriptor)

    def emit_descriptor(self, descriptor: ActionDescriptor) -> list[int]:
        """Dispatch a prepared descriptor (see :meth:`emit`)."""
        event_ids: list[int] = []
        try:
            event_ids.append(self._bus.dispatch(AUDIT_HOOK, descriptor.audit_payload()))
            if descriptor.contact_id is not None:
                event_ids.append(self._bus.dispatch(CONTACT_HOOK, descriptor.contact_payload()))
        except Exception:
            logger.warning(
                "Side-effect emission failed for %s",
                descriptor.action_name,
                exc_info=True,
            )
        return event_ids
