"""Sections of ``relcore.toml``.

Every field has a default, so the file only needs the keys being changed
and an empty or missing file is valid.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class _Section(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}


class DatabaseConfig(_Section):
    filename: str = "relcore.db"
    # Seconds a writer waits on a locked database before giving up.
    busy_timeout: float = Field(default=30.0, gt=0)


class EventsConfig(_Section):
    """Side-effect dispatch: worker pool size and retry budget."""

    sync: bool = False
    max_retries: int = Field(default=3, ge=1)
    max_workers: int = Field(default=2, ge=1)


class RegistrationConfig(_Section):
    """Reference rows every newly registered account starts with."""

    default_pronouns: list[str] = Field(default_factory=lambda: ["he/him", "she/her", "they/them"])
    default_contact_information_types: list[str] = Field(
        default_factory=lambda: ["email", "phone"]
    )


class RelConfig(_Section):
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    events: EventsConfig = Field(default_factory=EventsConfig)
    registration: RegistrationConfig = Field(default_factory=RegistrationConfig)
