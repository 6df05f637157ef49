"""
himawari Configuration Management

This file handles the handful of settings the wallpaper pipeline needs: where the NICT
image service lives, where the downloaded image is stored, and how long to wait on the
network and on desktop commands before giving up.

There is no configuration file. Defaults live on the HimawariConfig dataclass and any
of them can be overridden by an environment variable with the same name as the field,
e.g. HIMAWARI_IMAGE_PATH=~/wallpapers/earth.png. Command line options take precedence
over both (see cli.py).
"""

import os
from dataclasses import dataclass
from dataclasses import fields
from dataclasses import replace
from pathlib import Path
from typing import Mapping


class HimawariConfigError(Exception):
    """Raise when an issue occurs with handling himawari configuration."""

    pass


@dataclass
class HimawariConfig:
    """
    Dataclass to represent configuration variables for himawari. Application code
    references the identifiers on this dataclass instead of touching environment
    variables or hard coded paths directly.
    """

    HIMAWARI_BASE_URL: str = "https://himawari8-dl.nict.go.jp/himawari8/img/D531106"
    HIMAWARI_IMAGE_PATH: Path = Path("~/Pictures/Wallpapers/himawari8_latest.png")
    HIMAWARI_TIMEOUT: float = 30.0
    HIMAWARI_COMMAND_TIMEOUT: float = 15.0

    def __post_init__(self):
        """
        Values may arrive as strings from the environment or the command line, so coerce
        them to the types the rest of the application expects.
        """

        self.HIMAWARI_BASE_URL = str(self.HIMAWARI_BASE_URL).rstrip("/")
        if not self.HIMAWARI_BASE_URL:
            raise HimawariConfigError("HIMAWARI_BASE_URL must not be empty.")

        self.HIMAWARI_IMAGE_PATH = Path(self.HIMAWARI_IMAGE_PATH).expanduser().absolute()

        for name in ("HIMAWARI_TIMEOUT", "HIMAWARI_COMMAND_TIMEOUT"):
            try:
                value = float(getattr(self, name))
            except (TypeError, ValueError):
                raise HimawariConfigError(
                    f"{name} must be a number of seconds, got {getattr(self, name)!r}."
                )
            if value <= 0:
                raise HimawariConfigError(f"{name} must be positive, got {value}.")
            setattr(self, name, value)

    @property
    def json_url(self) -> str:
        """Location of the small JSON document describing the latest image."""

        return f"{self.HIMAWARI_BASE_URL}/latest.json"

    @property
    def image_url_template(self) -> str:
        """Base of the date partitioned image paths (1x1 tiles of 550px)."""

        return f"{self.HIMAWARI_BASE_URL}/1d/550"

    def override(self, **kwargs) -> "HimawariConfig":
        """
        Return a copy with the non-None keyword arguments applied. Used by the CLI so that
        options left unset fall through to the environment/default value.
        """

        changes = {key: value for key, value in kwargs.items() if value is not None}
        return replace(self, **changes)


def load_config(environ: Mapping[str, str] = None) -> HimawariConfig:
    """
    Build a HimawariConfig from defaults, overridden by any HIMAWARI_* environment
    variables that are set. Raise HimawariConfigError for values that can't be used.
    """

    if environ is None:
        environ = os.environ

    overrides = {
        field.name: environ[field.name]
        for field in fields(HimawariConfig)
        if environ.get(field.name)
    }

    return HimawariConfig(**overrides)
