"""BaseService — the command execution kernel.

Every mutating operation is a BaseService subclass that declares data,
not control flow:

- ``action``: the audit action name (also the registry key).
- ``Input``: pydantic schema checked by the Rule Validator.
- ``permissions``: ordered permission checks.
- ``handle()``: the domain mutation itself.

``execute()`` drives each invocation through one state machine::

    CREATED → VALIDATED → AUTHORIZED → EXECUTED → COMPLETED
        └──────────┴───────────┴──────────→ FAILED

Validation, tenant resolution, authorization and the mutation all run
inside a single Store transaction, so any failure rolls back every
write. Side effects are emitted only after that transaction commits.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any, ClassVar, TypeVar

import structlog
from pydantic import BaseModel

from relcore.domain.entities import Account, User, Vault
from relcore.infrastructure.database.schema import accounts, users, vaults
from relcore.services.errors import NotFoundFailure, ServiceFailure
from relcore.services.permissions import PermissionCheck, authorize
from relcore.services.result import ServiceResult
from relcore.services.rules import ServiceInput, validate_input
from relcore.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from sqlalchemy import Row, Table

    from relcore.infrastructure.store import Store, StoreTransaction

logger = logging.getLogger(__name__)
log = structlog.get_logger(__name__)


class ServiceState(StrEnum):
    """Lifecycle of one service invocation."""

    CREATED = "created"
    VALIDATED = "validated"
    AUTHORIZED = "authorized"
    EXECUTED = "executed"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class ServiceContext:
    """Tenant-resolved context handed to permission checks and ``handle()``."""

    txn: StoreTransaction
    account: Account
    author: User
    vault: Vault | None = None


def require(txn: StoreTransaction, table: Table, entity_id: int, **scope: int) -> Row[Any]:
    """Scoped lookup that raises :class:`NotFoundFailure` when the chain is broken."""
    row = txn.find_scoped(table, entity_id, **scope)
    if row is None:
        raise NotFoundFailure(table.name.removesuffix("s"), entity_id)
    return row


# ---------------------------------------------------------------------------
# Service registry
# ---------------------------------------------------------------------------

SERVICE_REGISTRY: dict[str, type[BaseService]] = {}


S = TypeVar("S", bound="BaseService")


def register_service(cls: type[S]) -> type[S]:
    """Class decorator: register a service under its ``action`` name."""
    if not cls.action:
        msg = f"Service {cls.__name__} must declare an action name"
        raise ValueError(msg)
    existing = SERVICE_REGISTRY.get(cls.action)
    if existing is not None and existing is not cls:
        msg = f"Action {cls.action!r} is already registered by {existing.__name__}"
        raise ValueError(msg)
    SERVICE_REGISTRY[cls.action] = cls
    return cls


def get_service(action: str) -> type[BaseService]:
    """Look up the service class registered for *action*.

    Raises:
        KeyError: If no service is registered under that name.
    """
    # Importing the catalogue populates the registry.
    import relcore.services.catalog  # noqa: F401

    try:
        return SERVICE_REGISTRY[action]
    except KeyError:
        msg = f"No service registered for action={action!r}"
        raise KeyError(msg) from None


def registered_actions() -> list[str]:
    """Sorted action names of every registered service."""
    import relcore.services.catalog  # noqa: F401

    return sorted(SERVICE_REGISTRY)


# ---------------------------------------------------------------------------
# BaseService
# ---------------------------------------------------------------------------


class BaseService:
    """Abstract base for every command.

    Usage::

        @register_service
        class SetPronoun(BaseService):
            action = "pronoun_set"
            Input = SetPronounInput
            permissions = (
                AuthorBelongsToAccount(),
                AuthorHasVaultPermission(PermissionLevel.EDIT),
            )

            def handle(self, ctx, data):
                ...

        SetPronoun(store).execute({...})
    """

    action: ClassVar[str] = ""
    Input: ClassVar[type[ServiceInput]] = ServiceInput
    permissions: ClassVar[tuple[PermissionCheck, ...]] = ()

    def __init__(self, store: Store) -> None:
        self._store = store
        self.state = ServiceState.CREATED

    # ------------------------------------------------------------------
    # Invocation
    # ------------------------------------------------------------------

    def execute(self, data: Mapping[str, Any]) -> Any:
        """Run the full pipeline and return the service result.

        Raises:
            ValidationFailure: invalid input (nothing was written).
            DomainFailure: a business rule refused the request.
            NotFoundFailure: a reference is outside the tenant/parent chain.
            PermissionFailure: the actor lacks a declared capability.
        """
        self.state = ServiceState.CREATED
        try:
            with self._store.transaction() as txn:
                with trace_span("validate"):
                    payload = validate_input(self.Input, data, txn)
                    self.check_preconditions(payload)
                self.state = ServiceState.VALIDATED

                with trace_span("authorize"):
                    ctx = self._resolve_context(txn, payload)
                    authorize(self.permissions, ctx)
                self.state = ServiceState.AUTHORIZED

                with trace_span("handle"):
                    result = self.handle(ctx, payload)
        except ServiceFailure as exc:
            log.info(
                "service.failed",
                action=self.action,
                stage=self.state.value,
                code=exc.code,
                message=exc.message,
            )
            self.state = ServiceState.FAILED
            raise
        except Exception:
            self.state = ServiceState.FAILED
            raise
        self.state = ServiceState.EXECUTED

        with trace_span("emit"):
            self._emit(ctx, payload, result)
        self.state = ServiceState.COMPLETED

        log.debug(
            "service.completed",
            action=self.action,
            account_id=ctx.account.id,
            author_id=ctx.author.id,
        )
        return result

    @traced
    def run(self, data: Mapping[str, Any]) -> ServiceResult:
        """Adapter entry point: execute and wrap the outcome in a ServiceResult."""
        try:
            result = self.execute(data)
        except ServiceFailure as exc:
            return ServiceResult.failure(self.action, exc.to_error())
        return ServiceResult.success(self.action, self.result_data(result))

    # ------------------------------------------------------------------
    # Hooks for subclasses
    # ------------------------------------------------------------------

    def check_preconditions(self, data: Any) -> None:
        """Role-independent business rules on the validated input."""

    def handle(self, ctx: ServiceContext, data: Any) -> Any:
        """Perform the domain mutation. Runs inside the command transaction."""
        raise NotImplementedError

    def resource_refs(self, ctx: ServiceContext, data: Any, result: Any) -> dict[str, int]:
        """Resources the action concerns. A ``contact_id`` adds a contact log."""
        refs: dict[str, int] = {}
        if ctx.vault is not None:
            refs["vault_id"] = ctx.vault.id
        contact_id = getattr(data, "contact_id", None)
        if contact_id is not None:
            refs["contact_id"] = contact_id
        return refs

    def audit_objects(self, ctx: ServiceContext, data: Any, result: Any) -> dict[str, Any]:
        """Free-form payload stored with the audit record."""
        return {}

    def result_data(self, result: Any) -> dict[str, Any]:
        """Serialize the service result for a ServiceResult payload."""
        if isinstance(result, BaseModel):
            return result.model_dump(mode="json")
        if isinstance(result, dict):
            return result
        return {}

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _resolve_context(self, txn: StoreTransaction, data: ServiceInput) -> ServiceContext:
        """Load the tenant, the actor within it, and the vault within it."""
        account = Account.model_validate(require(txn, accounts, data.account_id))
        author = User.model_validate(
            require(txn, users, data.author_id, account_id=account.id)
        )

        vault: Vault | None = None
        vault_id = getattr(data, "vault_id", None)
        if vault_id is not None:
            vault = Vault.model_validate(require(txn, vaults, vault_id, account_id=account.id))

        return ServiceContext(txn=txn, account=account, author=author, vault=vault)

    def _emit(self, ctx: ServiceContext, data: Any, result: Any) -> None:
        """Hand the committed action to the side-effect emitter."""
        emitter = self._store.emitter
        if emitter is None:
            logger.debug("No emitter configured; skipping side effects for %s", self.action)
            return
        emitter.emit(
            self.action,
            ctx.author,
            ctx.account,
            self.resource_refs(ctx, data, result),
            self.audit_objects(ctx, data, result),
        )
