"""Tests for ``relcore events drain`` and async dispatch from the CLI."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner
from sqlalchemy import select

from relcore.cli import cli
from relcore.infrastructure.database.engine import init_database
from relcore.infrastructure.database.schema import audit_logs


def _register(cli_runner: CliRunner, *flags: str) -> None:
    result = cli_runner.invoke(
        cli,
        [*flags, "account", "register", "Acme", "--admin-name", "Ada", "--admin-email", "a@x.io"],
    )
    assert result.exit_code == 0, result.output


@pytest.mark.usefixtures("_isolated_store")
class TestEventsCommands:
    def test_drain_nothing_pending(self, cli_runner: CliRunner) -> None:
        _register(cli_runner, "--sync")
        result = cli_runner.invoke(cli, ["--json", "events", "drain"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)["data"]
        assert data["replayed"] == 0
        assert data["dead_letter"] == 0

    def test_drain_rich(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["events", "drain"])
        assert result.exit_code == 0, result.output
        assert "events_drain" in result.output
        assert "replayed: 0" in result.output

    def test_async_side_effects_complete_before_exit(
        self, cli_runner: CliRunner, tmp_path
    ) -> None:
        _register(cli_runner)
        result = cli_runner.invoke(
            cli, ["--account", "1", "--author", "1", "vault", "create", "Family"]
        )
        assert result.exit_code == 0, result.output

        engine = init_database(tmp_path)
        try:
            with engine.connect() as conn:
                actions = conn.execute(select(audit_logs.c.action_name)).scalars().all()
        finally:
            engine.dispose()
        assert actions == ["vault_created"]
