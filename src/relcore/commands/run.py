"""Command: dispatch any registered service by action name."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from relcore.commands._base import RelCommand

if TYPE_CHECKING:
    from relcore.commands._context import AppContext


def _parse_assignments(values: tuple[str, ...]) -> dict[str, str]:
    fields: dict[str, str] = {}
    for item in values:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            msg = f"Expected key=value, got {item!r}"
            raise click.BadParameter(msg, param_hint="'-s' / '--set'")
        fields[key.strip()] = value
    return fields


@click.command(
    cls=RelCommand,
    examples="""\
  relcore run vault_created -s name=Family
  relcore run pronoun_set -s vault_id=3 -s contact_id=12 -s pronoun_id=2
  relcore --account 1 --author 1 run user_destroyed -s user_id=2
  relcore run --list""",
)
@click.argument("action", required=False)
@click.option("-s", "--set", "assignments", multiple=True, help="Input field as key=value.")
@click.option("--list", "list_actions", is_flag=True, help="List registered actions.")
@click.pass_obj
def run(
    app: AppContext,
    action: str | None,
    assignments: tuple[str, ...],
    list_actions: bool,
) -> None:
    """Execute the service registered under ACTION.

    Values are passed as strings; the input schema coerces them.
    """
    from relcore.services.base import get_service, registered_actions

    if list_actions:
        for name in registered_actions():
            click.echo(name)
        return
    if action is None:
        raise click.UsageError("Missing argument 'ACTION'.")

    try:
        service_cls = get_service(action)
    except KeyError as exc:
        raise click.UsageError(exc.args[0]) from None
    app.emit(app.run(service_cls, **_parse_assignments(assignments)))
