"""Vault permission levels.

A User–Vault membership stores exactly one granted level. For
authorization the levels are ordered VIEW < EDIT < MANAGE, so a higher
grant satisfies any lower requirement. The stored value is never
expanded into the implied levels.
"""

from __future__ import annotations

from enum import StrEnum


class PermissionLevel(StrEnum):
    """Permission attached to a User–Vault membership."""

    VIEW = "view"
    EDIT = "edit"
    MANAGE = "manage"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    def satisfies(self, required: PermissionLevel) -> bool:
        """Whether this granted level meets *required* under the ordering.

        Examples:
            >>> PermissionLevel.MANAGE.satisfies(PermissionLevel.EDIT)
            True
            >>> PermissionLevel.VIEW.satisfies(PermissionLevel.EDIT)
            False
        """
        return self.rank >= required.rank


_RANKS: dict[PermissionLevel, int] = {
    PermissionLevel.VIEW: 1,
    PermissionLevel.EDIT: 2,
    PermissionLevel.MANAGE: 3,
}
