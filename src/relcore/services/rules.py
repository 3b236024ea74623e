"""Rule Validator — declarative input schemas for services.

Every service declares a pydantic ``Input`` model:

- **required**: a field without a default.
- **type**: the field annotation (pydantic lax coercion, so ``"42"`` is
  accepted for an ``int``).
- **exists**: ``Annotated[Id, Exists("users")]`` — the value must match
  a row of the named table in the given column.

:func:`validate_input` reports every violated field at once. Existence
checks only confirm referential integrity; they never consider the
tenant or the actor. Scoping is resolved later by the kernel and the
service body.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Annotated, Any, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    TypeAdapter,
    ValidationError,
)

from relcore.services.errors import ValidationFailure

if TYPE_CHECKING:
    from relcore.infrastructure.store import StoreTransaction


@dataclass(frozen=True)
class Exists:
    """Constraint: the value must exist in ``table.column``."""

    table: str
    column: str = "id"

    def message(self, field_name: str) -> str:
        return f"The selected {field_name} is invalid."


# SQLite INTEGER is a signed 64-bit value; anything wider cannot be bound.
MAX_ID = 2**63 - 1
Id = Annotated[int, Field(ge=1, le=MAX_ID)]


# ---------------------------------------------------------------------------
# Base input schemas
# ---------------------------------------------------------------------------


class ServiceInput(BaseModel):
    """Fields every command carries: the tenant and the actor."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    account_id: Annotated[Id, Exists("accounts")]
    author_id: Annotated[Id, Exists("users")]


class VaultInput(ServiceInput):
    """Input for commands operating inside a vault."""

    vault_id: Annotated[Id, Exists("vaults")]


class ContactInput(VaultInput):
    """Input for commands operating on one contact of a vault."""

    contact_id: Annotated[Id, Exists("contacts")]


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def existence_constraints(model_cls: type[BaseModel]) -> dict[str, Exists]:
    """Map field name → :class:`Exists` constraint declared on *model_cls*."""
    constraints: dict[str, Exists] = {}
    for name, info in model_cls.model_fields.items():
        for item in info.metadata:
            if isinstance(item, Exists):
                constraints[name] = item
    return constraints


def _format_error(field_name: str, error_type: str, message: str) -> str:
    if error_type == "missing":
        return f"The {field_name} field is required."
    return message


T = TypeVar("T", bound=BaseModel)


def validate_input(
    model_cls: type[T],
    data: Mapping[str, Any],
    txn: StoreTransaction,
) -> T:
    """Validate *data* against *model_cls* and its existence constraints.

    Raises:
        ValidationFailure: listing every violated field.
    """
    errors: dict[str, list[str]] = {}
    model: T | None = None

    try:
        model = model_cls.model_validate(dict(data))
    except ValidationError as exc:
        for err in exc.errors():
            loc = err["loc"]
            field_name = str(loc[0]) if loc else "__root__"
            errors.setdefault(field_name, []).append(
                _format_error(field_name, err["type"], err["msg"])
            )

    for field_name, constraint in existence_constraints(model_cls).items():
        if field_name in errors:
            continue
        if model is not None:
            value = getattr(model, field_name)
        elif field_name in data:
            info = model_cls.model_fields[field_name]
            adapter = TypeAdapter(Annotated[info.annotation, *info.metadata])
            value = adapter.validate_python(data[field_name])
        else:
            continue
        if value is None:
            continue
        if not txn.exists(constraint.table, constraint.column, value):
            errors.setdefault(field_name, []).append(constraint.message(field_name))

    if errors:
        raise ValidationFailure(errors)
    assert model is not None
    return model


# Common field shapes
Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
Text = Annotated[str, StringConstraints(strip_whitespace=True, max_length=65535)]
