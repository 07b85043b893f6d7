"""
Domain models — types shared by the installer services.

    from mango_setup.core.models import PackageManager, PackageSpec, Receipt
"""

from mango_setup.core.models.install import (
    CheckResult,
    InstallStep,
    StrategyResult,
    VerificationReport,
)
from mango_setup.core.models.package import (
    InstallError,
    ManagerPackages,
    PackageCatalog,
    PackageManager,
    PackageSpec,
    UnsupportedPackageManagerError,
)
from mango_setup.core.models.receipt import Receipt

__all__ = [
    # install.py
    "CheckResult",
    "InstallStep",
    "StrategyResult",
    "VerificationReport",
    # package.py
    "InstallError",
    "ManagerPackages",
    "PackageCatalog",
    "PackageManager",
    "PackageSpec",
    "UnsupportedPackageManagerError",
    # receipt.py
    "Receipt",
]
