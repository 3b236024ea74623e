"""Resolved runtime settings.

Sources, strongest first:

1. keyword arguments (the CLI's global flags)
2. ``RELCORE_*`` environment variables (``RELCORE_EVENTS__SYNC=1``)
3. the discovered ``relcore.toml``
4. defaults from :mod:`relcore.config.models`

The data root follows the config file: a ``relcore.toml`` found three
directories up puts the database next to it, not in the cwd.
"""

from __future__ import annotations

import tomllib
from contextvars import ContextVar
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, TomlConfigSettingsSource

from relcore.config.discovery import find_config
from relcore.config.models import DatabaseConfig, EventsConfig, RegistrationConfig

# TOML file for the RelSettings instance currently being built.
_pending_toml: ContextVar[Path | None] = ContextVar("relcore_pending_toml", default=None)


class _TomlSource(TomlConfigSettingsSource):
    """pydantic-settings TOML source that reports syntax errors as usage errors."""

    def __init__(self, settings_cls: type[BaseSettings], path: Path | None) -> None:
        try:
            super().__init__(settings_cls, toml_file=path)
        except tomllib.TOMLDecodeError as exc:
            msg = f"Invalid TOML in {path}: {exc}"
            raise click.ClickException(msg) from exc


class RelSettings(BaseSettings):
    """Everything a Store and the CLI need to know, frozen after construction.

    ``account_id``/``author_id`` are the default tenant and actor applied to
    every command (``--account``/``--author``).
    """

    model_config = {
        "frozen": True,
        "env_prefix": "RELCORE_",
        "env_nested_delimiter": "__",
    }

    data_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False
    sync: bool = False
    account_id: int | None = None
    author_id: int | None = None

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    events: EventsConfig = Field(default_factory=EventsConfig)
    registration: RegistrationConfig = Field(default_factory=RegistrationConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings, env_settings, _TomlSource(settings_cls, _pending_toml.get()))

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        data_root: Path | None = None,
        **cli_flags: Any,
    ) -> RelSettings:
        """Build settings for one CLI invocation.

        *config_path* (``--config``) replaces discovery; a path that does not
        exist means "no config file". Flags passed as None are left to the
        weaker sources.
        """
        if config_path:
            explicit = Path(config_path)
            toml_path = explicit if explicit.is_file() else None
        else:
            toml_path = find_config(data_root)

        overrides = {name: value for name, value in cli_flags.items() if value is not None}
        root = data_root or (toml_path.parent if toml_path is not None else None)
        if root is not None:
            overrides["data_root"] = root

        token = _pending_toml.set(toml_path)
        try:
            return cls(config_path=toml_path, **overrides)
        finally:
            _pending_toml.reset(token)
