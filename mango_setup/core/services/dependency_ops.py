"""
Dependency installer — native build and runtime packages for MangoWC.

Mandatory packages go in one install call and any failure is fatal.
Optional packages are filtered down to the ones the repositories
actually carry; the rest are only warned about.
"""

from __future__ import annotations

import logging

from mango_setup.core.models.package import ManagerPackages
from mango_setup.core.services.package_manager import PackageManagerAdapter

logger = logging.getLogger(__name__)


def partition_available(
    adapter: PackageManagerAdapter,
    names: list[str],
) -> dict[str, list[str]]:
    """Split package names by repository availability.

    Returns:
        ``{"available": [...], "missing": [...]}``, order preserved.
    """
    available: list[str] = []
    missing: list[str] = []
    for name in names:
        if adapter.package_exists(name):
            available.append(name)
        else:
            missing.append(name)
    return {"available": available, "missing": missing}


def install_optional_packages(adapter: PackageManagerAdapter, names: list[str]) -> list[str]:
    """Install whichever optional packages exist. Returns the installed subset."""
    split = partition_available(adapter, names)

    if split["available"]:
        logger.info("Installing optional packages: %s", " ".join(split["available"]))
        adapter.install(*split["available"])

    if split["missing"]:
        logger.warning(
            "Optional packages not found in %s repositories: %s",
            adapter.manager.value,
            " ".join(split["missing"]),
        )

    return split["available"]


def install_dependencies(adapter: PackageManagerAdapter, packages: ManagerPackages) -> list[str]:
    """Install the mandatory and optional dependency lists.

    Returns:
        The concrete mandatory package names that were installed.
    """
    if packages.patterns:
        adapter.install_patterns(*packages.patterns)

    resolved = [adapter.resolve(spec) for spec in packages.mandatory]
    aliased = {
        spec.name: name
        for spec, name in zip(packages.mandatory, resolved)
        if spec.needs_resolution
    }
    if aliased:
        logger.info(
            "Using %s",
            "  ".join(f"{label}: {name}" for label, name in aliased.items()),
        )

    adapter.install(*resolved)
    install_optional_packages(adapter, packages.optional)
    return resolved
