"""Permission Evaluator — declared, ordered capability checks.

Services declare their checks as data::

    permissions = (
        AuthorBelongsToAccount(),
        AuthorHasVaultPermission(PermissionLevel.EDIT),
    )

:func:`authorize` evaluates them in order against a resolved
:class:`ServiceContext` and stops at the first failure. Checks only read
state; they never write.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from relcore.domain.permissions import PermissionLevel
from relcore.services.errors import PermissionFailure

if TYPE_CHECKING:
    from relcore.services.base import ServiceContext

_VAULT_CHECK_NAMES: dict[PermissionLevel, str] = {
    PermissionLevel.VIEW: "author_must_be_in_vault",
    PermissionLevel.EDIT: "author_must_be_vault_editor",
    PermissionLevel.MANAGE: "author_must_be_vault_manager",
}


class PermissionCheck:
    """A named check evaluated against a :class:`ServiceContext`."""

    name: ClassVar[str] = "permission_check"

    @property
    def check_name(self) -> str:
        return self.name

    def evaluate(self, ctx: ServiceContext) -> bool:
        raise NotImplementedError


@dataclass(frozen=True)
class AuthorBelongsToAccount(PermissionCheck):
    """The actor's account is the declared tenant."""

    name: ClassVar[str] = "author_must_belong_to_account"

    def evaluate(self, ctx: ServiceContext) -> bool:
        return ctx.author.account_id == ctx.account.id


@dataclass(frozen=True)
class AuthorIsAccountAdministrator(PermissionCheck):
    """The actor holds the administrator role in the tenant."""

    name: ClassVar[str] = "author_must_be_account_administrator"

    def evaluate(self, ctx: ServiceContext) -> bool:
        return ctx.author.account_id == ctx.account.id and ctx.author.is_account_administrator


@dataclass(frozen=True)
class AuthorHasVaultPermission(PermissionCheck):
    """The actor's membership on the context vault satisfies *level*.

    Fails closed when the command carries no vault.
    """

    level: PermissionLevel

    @property
    def check_name(self) -> str:
        return _VAULT_CHECK_NAMES[self.level]

    def evaluate(self, ctx: ServiceContext) -> bool:
        if ctx.vault is None:
            return False
        granted = ctx.txn.membership(ctx.author.id, ctx.vault.id)
        return granted is not None and granted.satisfies(self.level)


def authorize(checks: Iterable[PermissionCheck], ctx: ServiceContext) -> None:
    """Evaluate *checks* in order.

    Raises:
        PermissionFailure: naming the first check that did not pass.
    """
    for check in checks:
        if not check.evaluate(ctx):
            raise PermissionFailure(check.check_name)
