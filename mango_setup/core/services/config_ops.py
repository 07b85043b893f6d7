"""Config deployer — copy the bundled MangoWC config into ~/.config/mango."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from mango_setup.core.config.loader import Settings
from mango_setup.core.models.package import InstallError

logger = logging.getLogger(__name__)

CONFIG_FILE_MODE = 0o644


def require_config_source(settings: Settings) -> Path:
    """Fail before anything is installed if the config file is missing."""
    if not settings.config_source.is_file():
        raise InstallError(f"Required file not found: {settings.config_source}")
    return settings.config_source


def deploy_config(settings: Settings) -> Path:
    """Copy the config to its destination with mode 0644. Returns the destination."""
    source = require_config_source(settings)
    dest = settings.config_dest_file
    logger.info("Installing config.conf to %s", dest)

    try:
        settings.config_dest_dir.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, dest)
        dest.chmod(CONFIG_FILE_MODE)
    except OSError as e:
        raise InstallError(f"Cannot install {dest}: {e}") from e

    return dest
