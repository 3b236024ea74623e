"""Subcommand modules for relcore.

Provides register_commands() which uses deferred imports to keep
``relcore --help`` fast as the codebase grows.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group."""
    # --- Groups ---
    from relcore.commands.account import account
    from relcore.commands.contact import contact
    from relcore.commands.contact_info import contact_info
    from relcore.commands.events import events
    from relcore.commands.info_type import info_type
    from relcore.commands.pronoun import pronoun
    from relcore.commands.user import user
    from relcore.commands.vault import vault

    cli.add_command(account)
    cli.add_command(user)
    cli.add_command(vault)
    cli.add_command(contact)
    cli.add_command(contact_info)
    cli.add_command(pronoun)
    cli.add_command(info_type)
    cli.add_command(events)

    # --- Standalone commands ---
    from relcore.commands.run import run

    cli.add_command(run)
