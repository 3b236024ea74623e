"""Pluggy hook specifications for relcore side effects.

Both hooks are dispatched asynchronously via the WAL-backed EventBus,
strictly after the command that produced them has committed.
"""

from __future__ import annotations

from typing import Any

import pluggy

PROJECT_NAME = "relcore"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class RelcoreHookSpec:
    """Hook specifications for the relcore plugin system."""

    @hookspec
    def post_audit_log(
        self,
        action_name: str,
        account_id: int,
        author_id: int | None,
        author_name: str,
        vault_id: int | None,
        objects: dict[str, Any],
        created_at: str,
    ) -> None:
        """Called once for every successful command (account-wide feed)."""

    @hookspec
    def post_contact_log(
        self,
        action_name: str,
        account_id: int,
        author_id: int | None,
        author_name: str,
        vault_id: int | None,
        contact_id: int,
        objects: dict[str, Any],
        created_at: str,
    ) -> None:
        """Called once for every successful command that touched a contact."""
