"""
Compositor installer — get a working ``mangowc`` onto the system.

Fallback order:

    1. already on PATH         → nothing to do
    2. distro repository       → mangowc
    3. AUR helper (pacman)     → mangowc-git
    4. source build            → MANGOWC_REPO, meson + ninja

Only the source build needs MANGOWC_REPO; without it an exhausted
chain is fatal with a message telling the user to set it.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path

from mango_setup.adapters.base import CommandRunner
from mango_setup.core.config.loader import ENV_MANGOWC_REPO
from mango_setup.core.models.install import StrategyResult
from mango_setup.core.models.package import InstallError, PackageManager
from mango_setup.core.services.fallback import Strategy, run_strategies
from mango_setup.core.services.package_manager import (
    PackageManagerAdapter,
    try_aur_package,
)

logger = logging.getLogger(__name__)

COMPOSITOR_BINARY = "mangowc"
COMPOSITOR_PACKAGE = "mangowc"
COMPOSITOR_AUR_PACKAGE = "mangowc-git"

MISSING_REPO_MESSAGE = (
    "Could not install mangowc from package manager/AUR. "
    f"Set {ENV_MANGOWC_REPO} to a valid git URL to build from source."
)


def _run_or_fail(runner: CommandRunner, command: list[str], **kwargs) -> None:
    receipt = runner.run(command, **kwargs)
    if not receipt.ok:
        raise InstallError(f"Command failed: {receipt.display} ({receipt.error})")


def build_from_source(runner: CommandRunner, repo_url: str) -> None:
    """Clone ``repo_url`` shallowly and build/install it with meson + ninja.

    The temporary directory is removed whether the build succeeds or not.
    """
    tmp_dir = Path(tempfile.mkdtemp(prefix="mangowc-build-"))
    repo_dir = tmp_dir / "mangowc"
    logger.info("Building MangoWC from source: %s", repo_url)
    try:
        _run_or_fail(runner, ["git", "clone", "--depth=1", repo_url, str(repo_dir)])
        _run_or_fail(runner, ["meson", "setup", "build"], cwd=str(repo_dir))
        _run_or_fail(runner, ["ninja", "-C", "build"], cwd=str(repo_dir))
        _run_or_fail(
            runner, ["ninja", "-C", "build", "install"], cwd=str(repo_dir), privileged=True
        )
    finally:
        shutil.rmtree(tmp_dir, ignore_errors=True)


def install_compositor(
    adapter: PackageManagerAdapter,
    repo_url: str | None = None,
) -> StrategyResult:
    """Install MangoWC through the first strategy that works.

    Raises:
        InstallError: When every strategy fails, or a chosen path
            breaks halfway (e.g. the package exists but won't install).
    """
    runner = adapter.runner

    def already_installed() -> StrategyResult:
        if runner.command_exists(COMPOSITOR_BINARY):
            logger.info("MangoWC is already installed")
            return StrategyResult.success("already-installed")
        return StrategyResult.skip("already-installed", "mangowc not on PATH")

    def repository() -> StrategyResult:
        if adapter.install_if_available(COMPOSITOR_PACKAGE, "MangoWC"):
            return StrategyResult.success("repository")
        return StrategyResult.failure("repository", f"{COMPOSITOR_PACKAGE} not in repositories")

    def aur() -> StrategyResult:
        if adapter.manager is not PackageManager.PACMAN:
            return StrategyResult.skip("aur", "AUR is pacman-only")
        if try_aur_package(runner, COMPOSITOR_AUR_PACKAGE):
            logger.info("MangoWC installed from AUR package")
            return StrategyResult.success("aur")
        logger.warning("Could not install %s via AUR helper", COMPOSITOR_AUR_PACKAGE)
        return StrategyResult.failure("aur", "no AUR helper succeeded")

    def source() -> StrategyResult:
        if not repo_url:
            return StrategyResult.failure("source", MISSING_REPO_MESSAGE)
        build_from_source(runner, repo_url)
        return StrategyResult.success("source", repo_url)

    result = run_strategies(
        "MangoWC",
        [
            Strategy("already-installed", already_installed),
            Strategy("repository", repository),
            Strategy("aur", aur),
            Strategy("source", source),
        ],
    )
    if not result.ok:
        raise InstallError(result.detail)
    return result
