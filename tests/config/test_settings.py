"""Tests for RelSettings resolution."""

from __future__ import annotations

from pathlib import Path

import click
import pytest
from pydantic import ValidationError

from relcore.config.settings import RelSettings


@pytest.fixture(autouse=True)
def _clean_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    for name in (
        "RELCORE_CONFIG",
        "RELCORE_DATA_ROOT",
        "RELCORE_ACCOUNT_ID",
        "RELCORE_AUTHOR_ID",
        "RELCORE_SYNC",
    ):
        monkeypatch.delenv(name, raising=False)


class TestDefaults:
    def test_code_defaults(self, tmp_path: Path) -> None:
        settings = RelSettings.from_cli()
        assert settings.data_root == tmp_path
        assert settings.config_path is None
        assert settings.sync is False
        assert settings.account_id is None
        assert settings.events.max_retries == 3
        assert settings.database.filename == "relcore.db"
        assert settings.registration.default_pronouns == ["he/him", "she/her", "they/them"]

    def test_frozen(self) -> None:
        settings = RelSettings.from_cli()
        with pytest.raises(ValidationError):
            settings.sync = True  # type: ignore[misc]


class TestToml:
    def test_walk_up_discovery(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "relcore.toml").write_text(
            "[events]\nsync = true\nmax_retries = 5\n", encoding="utf-8"
        )
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)

        settings = RelSettings.from_cli()
        assert settings.config_path == tmp_path / "relcore.toml"
        assert settings.data_root == tmp_path
        assert settings.events.sync is True
        assert settings.events.max_retries == 5

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        other = tmp_path / "elsewhere"
        other.mkdir()
        config = other / "custom.toml"
        config.write_text('[database]\nfilename = "custom.db"\n', encoding="utf-8")

        settings = RelSettings.from_cli(config_path=str(config))
        assert settings.config_path == config
        assert settings.data_root == other
        assert settings.database.filename == "custom.db"

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "relcore.toml").write_text("[events\n", encoding="utf-8")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            RelSettings.from_cli()

    def test_invalid_value_rejected(self, tmp_path: Path) -> None:
        (tmp_path / "relcore.toml").write_text("[events]\nmax_workers = 0\n", encoding="utf-8")
        with pytest.raises(ValidationError):
            RelSettings.from_cli()


class TestPriority:
    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "relcore.toml").write_text("account_id = 1\n", encoding="utf-8")
        monkeypatch.setenv("RELCORE_ACCOUNT_ID", "2")
        assert RelSettings.from_cli().account_id == 2

    def test_cli_overrides_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RELCORE_ACCOUNT_ID", "2")
        assert RelSettings.from_cli(account_id=3).account_id == 3

    def test_none_flags_fall_through(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RELCORE_SYNC", "true")
        settings = RelSettings.from_cli(sync=None, account_id=None)
        assert settings.sync is True
        assert settings.account_id is None

    def test_env_data_root(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        target = tmp_path / "data"
        monkeypatch.setenv("RELCORE_DATA_ROOT", str(target))
        assert RelSettings.from_cli().data_root == target

    def test_explicit_data_root_wins(self, tmp_path: Path) -> None:
        (tmp_path / "relcore.toml").write_text("", encoding="utf-8")
        target = tmp_path / "data"
        assert RelSettings.from_cli(data_root=target).data_root == target
