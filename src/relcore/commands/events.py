"""Command group: side-effect event bus maintenance."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from relcore.commands._base import RelGroup

if TYPE_CHECKING:
    from relcore.commands._context import AppContext


@click.group(cls=RelGroup, examples="  relcore events drain")
def events() -> None:
    """Inspect and replay side effects."""


@events.command(examples="  relcore events drain\n  relcore --json events drain")
@click.pass_obj
def drain(app: AppContext) -> None:
    """Replay pending and failed side effects synchronously."""
    from relcore.services.result import ServiceResult

    bus = app.store.event_bus
    assert bus is not None
    replayed = bus.drain()
    dead = [event["id"] for event in replayed if event["status"] == "dead_letter"]
    app.emit(
        ServiceResult.success(
            "events_drain",
            {"replayed": len(replayed), "dead_letter": len(dead), "events": replayed},
            warnings=[f"Event {event_id} moved to dead letter" for event_id in dead],
        )
    )
