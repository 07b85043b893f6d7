"""
Tests for the config deployer.
"""

import stat

import pytest

from mango_setup.core.config.loader import Settings
from mango_setup.core.models.package import InstallError
from mango_setup.core.services.config_ops import deploy_config, require_config_source


class TestRequireConfigSource:
    def test_present(self, settings):
        assert require_config_source(settings) == settings.config_source

    def test_missing(self, home, tmp_path):
        settings = Settings(home=home, config_source=tmp_path / "nope.conf")
        with pytest.raises(InstallError, match="Required file not found"):
            require_config_source(settings)


class TestDeployConfig:
    def test_creates_directory_and_copies(self, settings):
        assert not settings.config_dest_dir.exists()
        dest = deploy_config(settings)
        assert dest == settings.home / ".config" / "mango" / "config.conf"
        assert dest.read_text() == "borderpx=3\n"

    def test_mode_0644(self, settings, config_source):
        config_source.chmod(0o600)
        dest = deploy_config(settings)
        assert stat.S_IMODE(dest.stat().st_mode) == 0o644

    def test_overwrites_existing(self, settings):
        settings.config_dest_dir.mkdir(parents=True)
        settings.config_dest_file.write_text("old\n")
        deploy_config(settings)
        assert settings.config_dest_file.read_text() == "borderpx=3\n"

    def test_bundled_config_deploys(self, home):
        dest = deploy_config(Settings(home=home))
        assert "exec-once" in dest.read_text()
