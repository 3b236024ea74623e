"""Tests for the vault command group."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from relcore.cli import cli

ADA = ["--json", "--sync", "--account", "1", "--author", "1"]
BOB = ["--json", "--sync", "--account", "1", "--author", "2"]


@pytest.fixture
def tenant_cli(cli_runner: CliRunner) -> CliRunner:
    """Account 1 with administrator Ada (user 1) and member Bob (user 2)."""
    cli_runner.invoke(
        cli,
        ["--sync", "account", "register", "Acme", "--admin-name", "Ada", "--admin-email", "a@x"],
    )
    cli_runner.invoke(cli, ["--sync", "--account", "1", "user", "add", "Bob", "b@x.io"])
    return cli_runner


def _ok(result) -> dict:
    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["ok"] is True
    return payload["data"]


def _error(result) -> dict:
    assert result.exit_code == 1, result.output
    payload = json.loads(result.stderr)
    assert payload["ok"] is False
    return payload["error"]


@pytest.mark.usefixtures("_isolated_store")
class TestVaultCommands:
    def test_create(self, tenant_cli: CliRunner) -> None:
        data = _ok(
            tenant_cli.invoke(cli, [*ADA, "vault", "create", "Family", "--description", "Kin"])
        )
        assert data["id"] == 1
        assert data["name"] == "Family"
        assert data["description"] == "Kin"

    def test_create_quiet_prints_id(self, tenant_cli: CliRunner) -> None:
        result = tenant_cli.invoke(
            cli, ["-q", "--sync", "--account", "1", "--author", "1", "vault", "create", "Family"]
        )
        assert result.exit_code == 0
        assert result.stdout.strip() == "1"

    def test_create_without_tenant_is_validation_error(self, tenant_cli: CliRunner) -> None:
        error = _error(tenant_cli.invoke(cli, ["--json", "--sync", "vault", "create", "Family"]))
        assert error["code"] == "VALIDATION_FAILED"
        assert set(error["detail"]["fields"]) == {"account_id", "author_id"}

    def test_create_blank_name(self, tenant_cli: CliRunner) -> None:
        error = _error(tenant_cli.invoke(cli, [*ADA, "vault", "create", "   "]))
        assert error["code"] == "VALIDATION_FAILED"
        assert "name" in error["detail"]["fields"]

    def test_env_defaults(self, tenant_cli: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RELCORE_ACCOUNT_ID", "1")
        monkeypatch.setenv("RELCORE_AUTHOR_ID", "1")
        data = _ok(tenant_cli.invoke(cli, ["--json", "--sync", "vault", "create", "Family"]))
        assert data["account_id"] == 1

    def test_grant_change_revoke(self, tenant_cli: CliRunner) -> None:
        _ok(tenant_cli.invoke(cli, [*ADA, "vault", "create", "Family"]))

        granted = _ok(tenant_cli.invoke(cli, [*ADA, "vault", "grant", "1", "--user", "2"]))
        assert granted == {"user_id": 2, "vault_id": 1, "permission": "view"}

        changed = _ok(
            tenant_cli.invoke(
                cli, [*ADA, "vault", "access", "1", "--user", "2", "--permission", "manage"]
            )
        )
        assert changed["permission"] == "manage"

        # Bob now manages the vault and can rename it.
        renamed = _ok(tenant_cli.invoke(cli, [*BOB, "vault", "update", "1", "Kin"]))
        assert renamed["name"] == "Kin"

        removed = _ok(tenant_cli.invoke(cli, [*BOB, "vault", "revoke", "1", "--user", "1"]))
        assert removed == {"removed": True}

    def test_grant_rich_table(self, tenant_cli: CliRunner) -> None:
        tenant_cli.invoke(cli, [*ADA, "vault", "create", "Family"])
        result = tenant_cli.invoke(
            cli,
            ["--sync", "--account", "1", "--author", "1", "vault", "grant", "1", "--user", "2",
             "--permission", "edit"],
        )
        assert result.exit_code == 0, result.output
        assert "vault_access_granted" in result.output
        assert "edit" in result.output

    def test_invalid_permission_choice(self, tenant_cli: CliRunner) -> None:
        result = tenant_cli.invoke(
            cli, [*ADA, "vault", "grant", "1", "--user", "2", "--permission", "owner"]
        )
        assert result.exit_code == 2

    def test_viewer_cannot_destroy(self, tenant_cli: CliRunner) -> None:
        tenant_cli.invoke(cli, [*ADA, "vault", "create", "Family"])
        tenant_cli.invoke(cli, [*ADA, "vault", "grant", "1", "--user", "2"])
        error = _error(tenant_cli.invoke(cli, [*BOB, "vault", "destroy", "1", "--yes"]))
        assert error["code"] == "PERMISSION_DENIED"

    def test_destroy(self, tenant_cli: CliRunner) -> None:
        tenant_cli.invoke(cli, [*ADA, "vault", "create", "Family"])
        result = tenant_cli.invoke(cli, [*ADA, "vault", "destroy", "1", "--yes"])
        assert result.exit_code == 0, result.output
        error = _error(tenant_cli.invoke(cli, [*ADA, "vault", "update", "1", "Gone"]))
        assert error["code"] in ("NOT_FOUND", "VALIDATION_FAILED")

    def test_failure_rich_goes_to_stderr(self, tenant_cli: CliRunner) -> None:
        result = tenant_cli.invoke(
            cli, ["--sync", "--account", "1", "--author", "2", "vault", "update", "9", "X"]
        )
        assert result.exit_code == 1
        assert result.stdout == ""
        assert "ERROR" in result.stderr
