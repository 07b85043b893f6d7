"""
Shell installer — Noctalia, the Quickshell-based desktop shell.

Fallback order:

    1. distro repository       → noctalia-shell
    2. AUR helper (pacman)     → noctalia-shell, then noctalia-shell-git
    3. NOCTALIA_REPO is set    → fresh shallow clone into the target dir
    4. otherwise               → latest release archive over HTTPS

Step 3 is destructive: whatever is in
``~/.config/quickshell/noctalia-shell`` is deleted before cloning,
including local edits. It is logged as a warning every time it runs.
"""

from __future__ import annotations

import logging
import shlex
import shutil
from pathlib import Path

from mango_setup.adapters.base import CommandRunner
from mango_setup.core.config.loader import Settings
from mango_setup.core.models.install import StrategyResult
from mango_setup.core.models.package import InstallError, PackageManager
from mango_setup.core.services.fallback import Strategy, run_strategies
from mango_setup.core.services.package_manager import (
    PackageManagerAdapter,
    try_aur_package,
)

logger = logging.getLogger(__name__)

SHELL_PACKAGE = "noctalia-shell"
SHELL_AUR_PACKAGES = ("noctalia-shell", "noctalia-shell-git")


def replace_with_clone(runner: CommandRunner, repo_url: str, target_dir: Path) -> None:
    """Delete ``target_dir`` and replace it with a shallow clone of ``repo_url``.

    Irreversible: any existing contents of ``target_dir`` are lost.
    """
    logger.info("Cloning Noctalia shell from %s", repo_url)
    try:
        if target_dir.exists() or target_dir.is_symlink():
            logger.warning(
                "Removing existing %s before cloning (local changes are lost)", target_dir
            )
            if target_dir.is_dir() and not target_dir.is_symlink():
                shutil.rmtree(target_dir)
            else:
                target_dir.unlink()
        target_dir.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise InstallError(f"Cannot prepare {target_dir} for cloning: {e}") from e

    receipt = runner.run(["git", "clone", "--depth=1", repo_url, str(target_dir)])
    if not receipt.ok:
        raise InstallError(f"git clone of {repo_url} failed: {receipt.error}")
    logger.info("Noctalia shell cloned to %s", target_dir)


def _download_pipeline(runner: CommandRunner, url: str, target_dir: Path) -> list[str]:
    """Build the ``download | tar`` command, preferring curl over wget."""
    if runner.command_exists("curl"):
        fetch = f"curl -fsSL {shlex.quote(url)}"
    elif runner.command_exists("wget"):
        fetch = f"wget -qO- {shlex.quote(url)}"
    else:
        raise InstallError("curl is required for manual Noctalia installation")

    if not runner.command_exists("tar"):
        raise InstallError("tar is required for manual Noctalia installation")

    extract = f"tar -xz --strip-components=1 -C {shlex.quote(str(target_dir))}"
    return ["bash", "-o", "pipefail", "-c", f"{fetch} | {extract}"]


def install_release_archive(runner: CommandRunner, url: str, target_dir: Path) -> None:
    """Download the release tarball and unpack it into ``target_dir``."""
    command = _download_pipeline(runner, url, target_dir)
    logger.info("Installing Noctalia shell manually to %s", target_dir)
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise InstallError(f"Cannot create {target_dir}: {e}") from e

    receipt = runner.run(command)
    if not receipt.ok:
        raise InstallError(f"Downloading {url} failed: {receipt.error}")
    logger.info("Noctalia shell installed to %s", target_dir)


def install_shell(adapter: PackageManagerAdapter, settings: Settings) -> StrategyResult:
    """Install Noctalia through the first strategy that works."""
    runner = adapter.runner
    adapter.refresh_metadata()

    def repository() -> StrategyResult:
        if adapter.install_if_available(SHELL_PACKAGE, "Noctalia shell"):
            return StrategyResult.success("repository")
        return StrategyResult.failure("repository", f"{SHELL_PACKAGE} not in repositories")

    def aur() -> StrategyResult:
        if adapter.manager is not PackageManager.PACMAN:
            return StrategyResult.skip("aur", "AUR is pacman-only")
        for package in SHELL_AUR_PACKAGES:
            if try_aur_package(runner, package):
                logger.info("Noctalia shell installed from AUR package")
                return StrategyResult.success("aur", package)
        logger.warning("Could not install noctalia-shell via AUR helper")
        return StrategyResult.failure("aur", "no AUR helper succeeded")

    def git_clone() -> StrategyResult:
        if not settings.noctalia_repo:
            return StrategyResult.skip("git-clone", "NOCTALIA_REPO not set")
        replace_with_clone(runner, settings.noctalia_repo, settings.noctalia_dir)
        return StrategyResult.success("git-clone", settings.noctalia_repo)

    def release_archive() -> StrategyResult:
        install_release_archive(runner, settings.noctalia_release_url, settings.noctalia_dir)
        return StrategyResult.success("release-archive", settings.noctalia_release_url)

    result = run_strategies(
        "Noctalia shell",
        [
            Strategy("repository", repository),
            Strategy("aur", aur),
            Strategy("git-clone", git_clone),
            Strategy("release-archive", release_archive),
        ],
    )
    if not result.ok:
        raise InstallError(result.detail or "Could not install Noctalia shell")
    return result
