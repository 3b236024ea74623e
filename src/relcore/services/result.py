"""Outcome envelope handed from the kernel to its adapters.

``execute`` raises; ``run`` never does. It folds either outcome into a
:class:`ServiceResult` so the CLI can pick an exit code and a renderer
without catching kernel exceptions itself.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ServiceError(BaseModel):
    """Failure description: a stable ``code`` plus failure-specific ``detail``.

    ``detail`` holds ``fields`` for validation failures, ``check`` for
    permission failures and ``entity_type``/``entity_id`` for not-found.
    """

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """What a caller sees after invoking an action.

    ``op`` is the action name (``"vault_access_granted"``), so output can be
    rendered per action. ``meta`` carries the span tree when telemetry is on.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def success(
        cls, op: str, data: dict[str, Any] | None = None, *, warnings: list[str] | None = None
    ) -> ServiceResult:
        return cls(ok=True, op=op, data=data or {}, warnings=warnings or [])

    @classmethod
    def failure(cls, op: str, error: ServiceError) -> ServiceResult:
        return cls(ok=False, op=op, error=error)
