"""
Configuration loader — environment settings and the package catalog.

The installer takes no flags. Everything it can be told comes from
environment variables, validated into a Settings model here. The
per-manager dependency lists are read from the bundled packages.yml
and validated against the PackageCatalog schema.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

import yaml
from pydantic import BaseModel, ValidationError, field_validator

from mango_setup.core.data import DEFAULT_CONFIG_SOURCE, PACKAGES_CATALOG
from mango_setup.core.models.package import PackageCatalog

logger = logging.getLogger(__name__)

NOCTALIA_RELEASE_URL = (
    "https://github.com/noctalia-dev/noctalia-shell/releases/latest/download/"
    "noctalia-latest.tar.gz"
)

ENV_MANGOWC_REPO = "MANGOWC_REPO"
ENV_NOCTALIA_REPO = "NOCTALIA_REPO"
ENV_CONFIG_SOURCE = "MANGO_CONFIG_SOURCE"
ENV_RELEASE_URL = "NOCTALIA_RELEASE_URL"


class ConfigError(Exception):
    """Raised when settings or the package catalog are invalid."""


class Settings(BaseModel):
    """Everything the installer needs to know about its environment."""

    home: Path
    config_source: Path = DEFAULT_CONFIG_SOURCE
    mangowc_repo: str | None = None
    noctalia_repo: str | None = None
    noctalia_release_url: str = NOCTALIA_RELEASE_URL

    @field_validator("mangowc_repo", "noctalia_repo", mode="before")
    @classmethod
    def _blank_is_unset(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    @field_validator("noctalia_release_url")
    @classmethod
    def _https_only(cls, value: str) -> str:
        if not value.startswith("https://"):
            raise ValueError("release URL must use https://")
        return value

    @property
    def config_dest_dir(self) -> Path:
        return self.home / ".config" / "mango"

    @property
    def config_dest_file(self) -> Path:
        return self.config_dest_dir / "config.conf"

    @property
    def noctalia_dir(self) -> Path:
        return self.home / ".config" / "quickshell" / "noctalia-shell"

    def to_dict(self) -> dict:
        return {
            "config_source": str(self.config_source),
            "config_dest_file": str(self.config_dest_file),
            "noctalia_dir": str(self.noctalia_dir),
            "mangowc_repo": self.mangowc_repo,
            "noctalia_repo": self.noctalia_repo,
            "noctalia_release_url": self.noctalia_release_url,
        }


def load_settings(
    environ: Mapping[str, str] | None = None,
    home: Path | None = None,
) -> Settings:
    """Build Settings from environment variables.

    Args:
        environ: Environment mapping (default: ``os.environ``).
        home: Home directory override (default: ``$HOME``).

    Raises:
        ConfigError: If a variable holds an invalid value.
    """
    env = os.environ if environ is None else environ
    data: dict = {
        "home": home or Path(env.get("HOME") or Path.home()),
        "mangowc_repo": env.get(ENV_MANGOWC_REPO),
        "noctalia_repo": env.get(ENV_NOCTALIA_REPO),
    }
    if env.get(ENV_CONFIG_SOURCE):
        data["config_source"] = Path(env[ENV_CONFIG_SOURCE]).expanduser()
    if env.get(ENV_RELEASE_URL):
        data["noctalia_release_url"] = env[ENV_RELEASE_URL]

    try:
        settings = Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings: {e}") from e

    logger.debug("Settings: %s", settings.to_dict())
    return settings


def load_catalog(path: Path | None = None) -> PackageCatalog:
    """Load and validate the package catalog.

    Args:
        path: Catalog file (default: the bundled packages.yml).

    Raises:
        ConfigError: If the file is missing or invalid.
    """
    path = path or PACKAGES_CATALOG
    if not path.is_file():
        raise ConfigError(f"Package catalog not found: {path}")

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        catalog = PackageCatalog.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid package catalog: {e}") from e

    logger.debug("Loaded package catalog for %d managers", len(catalog.managers))
    return catalog
