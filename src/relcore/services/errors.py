"""Typed failures raised by the command kernel.

All four are raised synchronously from ``BaseService.execute`` and
reach the caller unchanged; the kernel never retries or recovers.
Each failure knows how to describe itself as a :class:`ServiceError`.
"""

from __future__ import annotations

from typing import Any, ClassVar

from relcore.services.result import ServiceError


class ServiceFailure(Exception):
    """Base class for every kernel failure."""

    code: ClassVar[str] = "SERVICE_FAILURE"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @property
    def detail(self) -> dict[str, Any]:
        return {}

    def to_error(self) -> ServiceError:
        return ServiceError(code=self.code, message=self.message, detail=self.detail)


class ValidationFailure(ServiceFailure):
    """Malformed, missing, or dangling input. Lists every violated field."""

    code = "VALIDATION_FAILED"

    def __init__(self, fields: dict[str, list[str]]) -> None:
        self.fields = fields
        summary = "; ".join(f"{name}: {', '.join(msgs)}" for name, msgs in fields.items())
        super().__init__(f"Invalid input — {summary}")

    @property
    def detail(self) -> dict[str, Any]:
        return {"fields": self.fields}


class PermissionFailure(ServiceFailure):
    """The actor lacks a declared capability."""

    code = "PERMISSION_DENIED"

    def __init__(self, check: str) -> None:
        self.check = check
        super().__init__(f"Not enough permission: {check}")

    @property
    def detail(self) -> dict[str, Any]:
        return {"check": self.check}


class NotFoundFailure(ServiceFailure):
    """A reference does not resolve within its tenant or parent chain."""

    code = "NOT_FOUND"

    def __init__(self, entity_type: str, entity_id: Any) -> None:
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"No {entity_type} found with ID: {entity_id}")

    @property
    def detail(self) -> dict[str, Any]:
        return {"entity_type": self.entity_type, "entity_id": self.entity_id}


class DomainFailure(ServiceFailure):
    """Business-rule violation that is not expressible as input validation."""

    code = "DOMAIN_ERROR"

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)
