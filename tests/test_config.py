"""
Tests for settings and package catalog loading.
"""

import textwrap
from pathlib import Path

import pytest

from mango_setup.core.config.loader import (
    NOCTALIA_RELEASE_URL,
    ConfigError,
    load_catalog,
    load_settings,
)
from mango_setup.core.data import DEFAULT_CONFIG_SOURCE
from mango_setup.core.models.package import PackageManager


class TestLoadSettings:
    def test_defaults(self, home):
        settings = load_settings(environ={}, home=home)
        assert settings.mangowc_repo is None
        assert settings.noctalia_repo is None
        assert settings.config_source == DEFAULT_CONFIG_SOURCE
        assert settings.noctalia_release_url == NOCTALIA_RELEASE_URL

    def test_paths_follow_home(self, home):
        settings = load_settings(environ={}, home=home)
        assert settings.config_dest_file == home / ".config/mango/config.conf"
        assert settings.noctalia_dir == home / ".config/quickshell/noctalia-shell"

    def test_home_from_environment(self, tmp_path):
        settings = load_settings(environ={"HOME": str(tmp_path)})
        assert settings.home == tmp_path

    def test_repos_from_environment(self, home):
        settings = load_settings(
            environ={
                "MANGOWC_REPO": "https://example.invalid/mangowc.git",
                "NOCTALIA_REPO": "https://example.invalid/noctalia.git",
            },
            home=home,
        )
        assert settings.mangowc_repo == "https://example.invalid/mangowc.git"
        assert settings.noctalia_repo == "https://example.invalid/noctalia.git"

    def test_blank_repo_is_unset(self, home):
        settings = load_settings(environ={"MANGOWC_REPO": "  ", "NOCTALIA_REPO": ""}, home=home)
        assert settings.mangowc_repo is None
        assert settings.noctalia_repo is None

    def test_config_source_override(self, home, tmp_path):
        src = tmp_path / "mine.conf"
        settings = load_settings(environ={"MANGO_CONFIG_SOURCE": str(src)}, home=home)
        assert settings.config_source == src

    def test_release_url_must_be_https(self, home):
        with pytest.raises(ConfigError, match="https"):
            load_settings(environ={"NOCTALIA_RELEASE_URL": "http://insecure/x.tar.gz"}, home=home)

    def test_to_dict(self, home):
        data = load_settings(environ={}, home=home).to_dict()
        assert data["mangowc_repo"] is None
        assert data["config_dest_file"].endswith("config.conf")


class TestLoadCatalog:
    def test_bundled_catalog(self):
        catalog = load_catalog()
        assert set(catalog.managers) == set(PackageManager)

    def test_pacman_aliases(self):
        pacman = load_catalog().for_manager("pacman")
        specs = {spec.name: spec for spec in pacman.mandatory}
        assert specs["wlroots"].versioned
        assert specs["libseat"].candidates == ["libseat", "seatd"]
        assert not specs["cairo"].needs_resolution

    def test_zypper_pattern(self):
        assert load_catalog().for_manager("zypper").patterns == ["devel_basis"]

    def test_optional_lists(self):
        catalog = load_catalog()
        assert "libscenefx-dev" in catalog.for_manager("apt").optional
        assert "scenefx-git" in catalog.for_manager("pacman").optional

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_catalog(tmp_path / "nope.yml")

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "bad.yml"
        path.write_text("managers: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_catalog(path)

    def test_not_a_mapping(self, tmp_path: Path):
        path = tmp_path / "list.yml"
        path.write_text("- apt\n- dnf\n")
        with pytest.raises(ConfigError, match="Expected a YAML mapping"):
            load_catalog(path)

    def test_unknown_manager(self, tmp_path: Path):
        path = tmp_path / "apk.yml"
        path.write_text(textwrap.dedent("""\
            managers:
              apk:
                mandatory: [git]
        """))
        with pytest.raises(ConfigError, match="Invalid package catalog"):
            load_catalog(path)

    def test_manager_without_entry(self, tmp_path: Path):
        from mango_setup.core.models.package import UnsupportedPackageManagerError

        path = tmp_path / "apt-only.yml"
        path.write_text("managers:\n  apt:\n    mandatory: [git]\n")
        catalog = load_catalog(path)
        with pytest.raises(UnsupportedPackageManagerError):
            catalog.for_manager("dnf")
