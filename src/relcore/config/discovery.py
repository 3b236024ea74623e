"""Locate and parse ``relcore.toml``.

An explicit ``RELCORE_CONFIG`` path wins outright (even when it points
nowhere); otherwise the nearest ``relcore.toml`` in the start directory or
any ancestor is used, the way git looks for ``.git/``.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path

from relcore.config.models import RelConfig

CONFIG_FILENAME = "relcore.toml"
CONFIG_ENV_VAR = "RELCORE_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Path of the config file that applies to *start* (default: cwd), or None."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        candidate = Path(override)
        return candidate if candidate.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Path | None = None, cwd: Path | None = None) -> RelConfig:
    """Parse and validate *path* (discovered from *cwd* when omitted).

    No file at all means a pure-defaults :class:`RelConfig`.
    """
    path = path or find_config(cwd)
    if path is None:
        return RelConfig()
    with path.open("rb") as fh:
        return RelConfig.model_validate(tomllib.load(fh))
