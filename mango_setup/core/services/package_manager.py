"""
Package-manager adapter — apt, dnf, pacman and zypper behind one API.

Four operations matter to the installer:

    refresh_metadata   — once per run, fatal on failure
    package_exists     — repository query, never raises
    package_installed  — local database query, never raises
    install            — refresh, then install; fatal on failure

Command forms per manager live in ``_COMMANDS``. Queries run with their
output captured; refresh and install pass output through so the user
sees the package manager working.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from mango_setup.adapters.base import CommandRunner
from mango_setup.core.models.package import (
    InstallError,
    PackageManager,
    PackageSpec,
    UnsupportedPackageManagerError,
)

logger = logging.getLogger(__name__)


# ── Command table ───────────────────────────────────────────────

_COMMANDS: dict[PackageManager, dict[str, list[str]]] = {
    PackageManager.APT: {
        "refresh": ["apt-get", "update"],
        "exists": ["apt-cache", "show"],
        "installed": ["dpkg", "-s"],
        "install": ["apt-get", "install", "-y"],
        "search": ["apt-cache", "search", "--names-only"],
    },
    PackageManager.DNF: {
        "refresh": ["dnf", "makecache"],
        "exists": ["dnf", "info"],
        "installed": ["rpm", "-q"],
        "install": ["dnf", "install", "-y"],
    },
    PackageManager.PACMAN: {
        "refresh": ["pacman", "-Sy", "--noconfirm"],
        "exists": ["pacman", "-Si"],
        "installed": ["pacman", "-Q"],
        "install": ["pacman", "-S", "--needed", "--noconfirm"],
        "search": ["pacman", "-Ssq"],
    },
    PackageManager.ZYPPER: {
        "refresh": ["zypper", "--non-interactive", "refresh"],
        "exists": ["zypper", "--non-interactive", "info"],
        "installed": ["rpm", "-q"],
        "install": ["zypper", "--non-interactive", "install"],
        "install_pattern": ["zypper", "--non-interactive", "install", "-t", "pattern"],
    },
}

# Detection order: apt-get wins on hybrid systems, then the rest.
_DETECTION_ORDER: tuple[tuple[str, PackageManager], ...] = (
    ("apt-get", PackageManager.APT),
    ("dnf", PackageManager.DNF),
    ("pacman", PackageManager.PACMAN),
    ("zypper", PackageManager.ZYPPER),
)

_AUR_HELPERS: tuple[tuple[str, list[str]], ...] = (
    ("yay", ["yay", "-S", "--needed", "--noconfirm", "--answerdiff=None", "--answerclean=None"]),
    ("paru", ["paru", "-S", "--needed", "--noconfirm"]),
)


def detect_package_manager(runner: CommandRunner) -> PackageManager | None:
    """Return the first supported package manager found on PATH."""
    for program, manager in _DETECTION_ORDER:
        if runner.command_exists(program):
            logger.debug("Found %s → %s", program, manager.value)
            return manager
    return None


def command_for(manager: PackageManager | str, operation: str) -> list[str]:
    """Base argv for ``operation`` on ``manager`` (package names not included)."""
    pm = PackageManager.parse(manager)
    try:
        return list(_COMMANDS[pm][operation])
    except KeyError:
        raise UnsupportedPackageManagerError(
            f"Operation '{operation}' is not supported for {pm.value}"
        ) from None


@dataclass
class MetadataCache:
    """Whether repository metadata has been refreshed during this run."""

    refreshed: bool = False


class PackageManagerAdapter:
    """Uniform operations over the detected package manager.

    One adapter (and so one MetadataCache) is created per run and passed
    to every step; that is what keeps the metadata refresh to a single
    invocation.
    """

    def __init__(
        self,
        manager: PackageManager | str,
        runner: CommandRunner,
        cache: MetadataCache | None = None,
    ):
        self.manager = PackageManager.parse(manager)
        self.runner = runner
        self.cache = cache or MetadataCache()

    def __repr__(self) -> str:
        return f"<PackageManagerAdapter manager={self.manager.value!r}>"

    # ── Metadata ────────────────────────────────────────────────

    def refresh_metadata(self) -> None:
        """Refresh repository metadata, at most once per adapter."""
        if self.cache.refreshed:
            return
        logger.info("Refreshing %s package metadata", self.manager.value)
        receipt = self.runner.run(command_for(self.manager, "refresh"), privileged=True)
        if not receipt.ok:
            raise InstallError(
                f"Failed to refresh {self.manager.value} package metadata: {receipt.error}"
            )
        self.cache.refreshed = True

    # ── Queries ─────────────────────────────────────────────────

    def package_exists(self, name: str) -> bool:
        """Whether ``name`` is available in the configured repositories."""
        receipt = self.runner.run(
            command_for(self.manager, "exists") + [name], capture=True
        )
        if not receipt.ok:
            return False
        # Older zypper exits 0 and prints "package 'x' not found."
        if self.manager is PackageManager.ZYPPER:
            not_found = re.compile(rf"package '{re.escape(name)}' not found", re.IGNORECASE)
            return not_found.search(receipt.stdout) is None
        return True

    def package_installed(self, name: str) -> bool:
        """Whether ``name`` is present in the local package database."""
        receipt = self.runner.run(
            command_for(self.manager, "installed") + [name], capture=True
        )
        return receipt.ok

    def search(self, pattern: str) -> list[str]:
        """Package names matching a regex, best-effort.

        Only apt and pacman offer a name-regex search; the others
        return an empty list.
        """
        if "search" not in _COMMANDS[self.manager]:
            logger.debug("No name search for %s", self.manager.value)
            return []
        receipt = self.runner.run(
            command_for(self.manager, "search") + [pattern], capture=True
        )
        if not receipt.ok:
            return []
        names = []
        for line in receipt.stdout.splitlines():
            parts = line.strip().split()
            if parts:
                names.append(parts[0])
        return names

    # ── Install ─────────────────────────────────────────────────

    def install(self, *names: str) -> None:
        """Install packages in one call. Fatal if the install fails."""
        if not names:
            return
        self.refresh_metadata()
        logger.info("Installing packages: %s", " ".join(names))
        receipt = self.runner.run(
            command_for(self.manager, "install") + list(names), privileged=True
        )
        if not receipt.ok:
            raise InstallError(
                f"{self.manager.value} failed to install: {' '.join(names)} ({receipt.error})"
            )

    def install_patterns(self, *patterns: str) -> None:
        """Install zypper patterns (e.g. ``devel_basis``). Fatal on failure."""
        if not patterns:
            return
        self.refresh_metadata()
        logger.info("Installing patterns: %s", " ".join(patterns))
        receipt = self.runner.run(
            command_for(self.manager, "install_pattern") + list(patterns),
            privileged=True,
        )
        if not receipt.ok:
            raise InstallError(
                f"{self.manager.value} failed to install pattern: {' '.join(patterns)}"
            )

    def install_if_available(self, name: str, label: str) -> bool:
        """Install ``name`` when the repositories carry it.

        Returns False (with a warning) if the package does not exist.
        A package that exists but fails to install is still fatal.
        """
        if not self.package_exists(name):
            logger.warning("%s not found in %s repositories", name, self.manager.value)
            return False
        logger.info("Found %s, installing as %s", name, label)
        self.install(name)
        logger.info("%s installed from package manager", label)
        return True

    # ── Name resolution ─────────────────────────────────────────

    def resolve(self, spec: PackageSpec) -> str:
        """Resolve a PackageSpec to exactly one concrete package name."""
        if spec.versioned:
            return self._resolve_versioned(spec.name)
        if spec.candidates:
            return self._resolve_candidates(spec.name, spec.candidates)
        return spec.name

    def _resolve_candidates(self, label: str, candidates: list[str]) -> str:
        for candidate in candidates:
            if self.package_exists(candidate):
                return candidate
        raise InstallError(
            f"Could not find a package for {label} in {self.manager.value} "
            f"repositories. Tried: {' '.join(candidates)}"
        )

    def _resolve_versioned(self, name: str) -> str:
        if self.package_exists(name):
            return name

        versioned = re.compile(rf"^{re.escape(name)}0\.([0-9]+)$")
        latest, latest_minor = "", -1
        for candidate in self.search(rf"^{re.escape(name)}0\.[0-9]+$"):
            match = versioned.match(candidate)
            if match and int(match.group(1)) > latest_minor:
                latest_minor = int(match.group(1))
                latest = candidate

        if latest:
            return latest
        raise InstallError(
            f"Could not find a {name} package in {self.manager.value} "
            f"repositories (expected {name} or {name}0.x)."
        )


# ── AUR helpers ─────────────────────────────────────────────────


def try_aur_package(runner: CommandRunner, package: str) -> bool:
    """Install an AUR package via yay, or paru when yay is absent.

    Returns False when no helper is installed or the helper fails.
    Helpers refuse to run as root, so this is never privileged.
    """
    for helper, base in _AUR_HELPERS:
        if not runner.command_exists(helper):
            continue
        logger.info("Trying AUR package %s via %s", package, helper)
        receipt = runner.run(base + [package])
        if not receipt.ok:
            logger.warning("%s could not install %s: %s", helper, package, receipt.error)
        return receipt.ok
    logger.debug("No AUR helper available for %s", package)
    return False
