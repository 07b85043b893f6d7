"""
Tests for the compositor installer fallback chain.
"""

from pathlib import Path

import pytest

from mango_setup.adapters.mock import MockRunner
from mango_setup.core.models.package import InstallError
from mango_setup.core.services.compositor_ops import (
    build_from_source,
    install_compositor,
)
from mango_setup.core.services.package_manager import PackageManagerAdapter

REPO = "https://example.invalid/mangowc.git"


class TestAlreadyInstalled:
    @pytest.mark.parametrize("manager", ["apt", "dnf", "pacman", "zypper"])
    def test_no_install_attempted(self, manager):
        runner = MockRunner(available={"mangowc", "yay"})
        adapter = PackageManagerAdapter(manager, runner)
        result = install_compositor(adapter, REPO)
        assert result.strategy == "already-installed"
        assert runner.call_count == 0


class TestManagedPaths:
    def test_repository_package(self, runner, apt):
        result = install_compositor(apt, None)
        assert result.strategy == "repository"
        assert runner.called("apt-get install -y mangowc")
        assert not runner.called("git clone")

    def test_repository_install_failure_is_fatal(self, runner, apt):
        runner.set_failure("apt-get install -y mangowc")
        with pytest.raises(InstallError):
            install_compositor(apt, REPO)
        assert not runner.called("git clone")

    def test_aur_on_pacman(self):
        runner = MockRunner(available={"yay"})
        runner.set_failure("pacman -Si mangowc")
        pacman = PackageManagerAdapter("pacman", runner)
        result = install_compositor(pacman, REPO)
        assert result.strategy == "aur"
        assert runner.called("yay -S")
        assert runner.lines[-1].endswith("mangowc-git")
        assert not runner.called("git clone")

    def test_aur_not_tried_on_apt(self):
        runner = MockRunner(available={"yay"})
        runner.set_failure("apt-cache show mangowc")
        apt = PackageManagerAdapter("apt", runner)
        with pytest.raises(InstallError):
            install_compositor(apt, None)
        assert not runner.called("yay")


class TestSourceBuild:
    def test_missing_repo_names_env_var(self, runner, pacman):
        runner.set_failure("pacman -Si mangowc")
        with pytest.raises(InstallError, match="MANGOWC_REPO"):
            install_compositor(pacman, None)
        assert not runner.called("git clone")

    def test_failed_aur_falls_through_to_source(self):
        runner = MockRunner(available={"paru"})
        runner.set_failure("pacman -Si mangowc")
        runner.set_failure("paru")
        pacman = PackageManagerAdapter("pacman", runner)
        result = install_compositor(pacman, REPO)
        assert result.strategy == "source"
        assert runner.called(f"git clone --depth=1 {REPO}")

    def test_build_sequence(self, runner):
        build_from_source(runner, REPO)
        clone, setup, compile_, install = runner.call_log
        assert clone.command[:4] == ["git", "clone", "--depth=1", REPO]
        repo_dir = clone.command[4]
        assert setup.command == ["meson", "setup", "build"]
        assert compile_.command == ["ninja", "-C", "build"]
        assert install.command == ["ninja", "-C", "build", "install"]
        assert {setup.cwd, compile_.cwd, install.cwd} == {repo_dir}
        assert install.privileged and not compile_.privileged

    def test_temp_dir_removed_on_success(self, runner):
        build_from_source(runner, REPO)
        tmp_dir = Path(runner.call_log[0].command[4]).parent
        assert not tmp_dir.exists()

    def test_temp_dir_removed_on_failure(self, runner):
        runner.set_failure("ninja -C build", error="compile error")
        with pytest.raises(InstallError, match="compile error"):
            build_from_source(runner, REPO)
        tmp_dir = Path(runner.call_log[0].command[4]).parent
        assert not tmp_dir.exists()
        assert not runner.called("ninja -C build install")

    def test_clone_failure_is_fatal(self, runner):
        runner.set_failure("git clone")
        with pytest.raises(InstallError):
            build_from_source(runner, REPO)
        assert runner.call_count == 1
