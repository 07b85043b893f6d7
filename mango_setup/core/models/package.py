"""
Package models — package managers and the package lists they install.

The catalog itself lives in ``core/data/packages.yml``; these models are
the validated shape of that file.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field, model_validator


class InstallError(Exception):
    """A fatal installer error. Aborts the whole run with exit status 1."""


class UnsupportedPackageManagerError(InstallError):
    """Raised for any package manager tag outside the supported set."""


class PackageManager(StrEnum):
    """The package managers the installer knows how to drive."""

    APT = "apt"
    DNF = "dnf"
    PACMAN = "pacman"
    ZYPPER = "zypper"

    @classmethod
    def parse(cls, value: str | PackageManager) -> PackageManager:
        """Convert a tag into a PackageManager, failing on unknown tags."""
        try:
            return cls(value)
        except ValueError:
            raise UnsupportedPackageManagerError(
                f"Unsupported package manager: {value}"
            ) from None


class PackageSpec(BaseModel):
    """A package to install, possibly needing resolution to a concrete name.

    Plain specs install ``name`` literally. ``candidates`` picks the first
    candidate present in the repositories. ``versioned`` accepts ``name``
    itself or the newest ``<name>0.N`` variant (e.g. ``wlroots0.19``).
    """

    name: str
    candidates: list[str] = Field(default_factory=list)
    versioned: bool = False

    @model_validator(mode="before")
    @classmethod
    def _from_string(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"name": data}
        return data

    @property
    def needs_resolution(self) -> bool:
        return bool(self.candidates) or self.versioned


class ManagerPackages(BaseModel):
    """Dependency lists for one package manager."""

    patterns: list[str] = Field(default_factory=list)  # zypper only
    mandatory: list[PackageSpec] = Field(default_factory=list)
    optional: list[str] = Field(default_factory=list)


class PackageCatalog(BaseModel):
    """Dependency lists for every supported package manager."""

    managers: dict[PackageManager, ManagerPackages]

    def for_manager(self, manager: PackageManager | str) -> ManagerPackages:
        pm = PackageManager.parse(manager)
        try:
            return self.managers[pm]
        except KeyError:
            raise UnsupportedPackageManagerError(
                f"No package list defined for {pm.value}"
            ) from None
