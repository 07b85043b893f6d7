"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from mango_setup.adapters.mock import MockRunner
from mango_setup.core.config.loader import Settings, load_catalog
from mango_setup.core.models.package import PackageCatalog
from mango_setup.core.services.package_manager import PackageManagerAdapter


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """A throwaway home directory."""
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    return home_dir


@pytest.fixture
def config_source(tmp_path: Path) -> Path:
    """A config.conf to deploy."""
    source = tmp_path / "config.conf"
    source.write_text("borderpx=3\n")
    return source


@pytest.fixture
def settings(home: Path, config_source: Path) -> Settings:
    return Settings(home=home, config_source=config_source)


@pytest.fixture
def catalog() -> PackageCatalog:
    return load_catalog()


@pytest.fixture
def runner() -> MockRunner:
    return MockRunner()


@pytest.fixture
def apt(runner: MockRunner) -> PackageManagerAdapter:
    return PackageManagerAdapter("apt", runner)


@pytest.fixture
def pacman(runner: MockRunner) -> PackageManagerAdapter:
    return PackageManagerAdapter("pacman", runner)
