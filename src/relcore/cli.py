"""The ``relcore`` entry point: global flags, settings and subcommands."""

from __future__ import annotations

import click

from relcore import __version__
from relcore.commands import register_commands
from relcore.commands._base import RelGroup
from relcore.commands._context import AppContext
from relcore.config.settings import RelSettings

_EXAMPLES = """\
  relcore account register "Acme" --admin-name "Ada" --admin-email ada@acme.test
  relcore --account 1 --author 1 vault create "Family"
  relcore --json --account 1 --author 1 contact create 3 "Marie" --last-name "Curie"
  relcore events drain"""


@click.group(cls=RelGroup, invoke_without_command=True, examples=_EXAMPLES)
@click.version_option(version=__version__, prog_name="relcore")
@click.option("--json", "json_output", is_flag=True, help="Print results as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Print only ids or a status word.")
@click.option("-v", "--verbose", is_flag=True, help="Show timings, error detail and debug logs.")
@click.option("--log-json", is_flag=True, help="Emit logs to stderr as JSON lines.")
@click.option("-c", "--config", "config_path", default=None, help="Use this relcore.toml.")
@click.option("--sync", is_flag=True, help="Run side effects inline instead of on workers.")
@click.option("--account", "account_id", type=int, default=None, help="Tenant account id.")
@click.option("--author", "author_id", type=int, default=None, help="Acting user id.")
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: str | None,
    account_id: int | None,
    author_id: int | None,
    **flags: bool,
) -> None:
    """relcore: multi-tenant contacts, vaults and permissions."""
    # A flag left off becomes None so RELCORE_* variables and the TOML file apply.
    settings = RelSettings.from_cli(
        config_path=config_path,
        account_id=account_id,
        author_id=author_id,
        **{name: True if on else None for name, on in flags.items()},
    )
    ctx.obj = AppContext(settings)
    ctx.call_on_close(ctx.obj.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
