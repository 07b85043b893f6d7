"""
Bundled data files.

``packages.yml`` — per-manager dependency lists (see config.loader).
``config.conf``  — the MangoWC config deployed to ~/.config/mango.
"""

from __future__ import annotations

from pathlib import Path

DATA_DIR = Path(__file__).parent

PACKAGES_CATALOG = DATA_DIR / "packages.yml"
DEFAULT_CONFIG_SOURCE = DATA_DIR / "config.conf"
