"""Timestamps stored on entity and log rows."""

from __future__ import annotations

from datetime import UTC, datetime


def now_iso() -> str:
    """Timezone-aware UTC now, ISO 8601 encoded (the TEXT column format)."""
    return datetime.now(UTC).isoformat()
