"""
Post-install verifier — check every artifact, then decide.

All checks run even when an earlier one fails, so the report lists
every problem at once. Only non-advisory failures count.
"""

from __future__ import annotations

import logging

from mango_setup.core.config.loader import Settings
from mango_setup.core.models.install import CheckResult, VerificationReport
from mango_setup.core.services.package_manager import PackageManagerAdapter

logger = logging.getLogger(__name__)

COMPOSITOR_BINARIES = ("mangowc", "mango")
SHELL_BINARY = "noctalia-shell"
LAUNCHER_BINARY = "qs"


def check_compositor(adapter: PackageManagerAdapter) -> CheckResult:
    for binary in COMPOSITOR_BINARIES:
        if adapter.runner.command_exists(binary):
            return CheckResult("compositor", True, f"MangoWC binary check passed ({binary})")
    return CheckResult(
        "compositor",
        False,
        "MangoWC binary not found (expected 'mangowc' or 'mango' in PATH)",
    )


def check_config(settings: Settings) -> CheckResult:
    dest = settings.config_dest_file
    if dest.is_file():
        return CheckResult("config", True, f"Mango config check passed: {dest}")
    return CheckResult("config", False, f"Mango config check failed: missing {dest}")


def check_shell(adapter: PackageManagerAdapter, settings: Settings) -> list[CheckResult]:
    """Shell presence, plus the advisory launcher check for manual installs."""
    if adapter.runner.command_exists(SHELL_BINARY) or adapter.package_installed(SHELL_BINARY):
        return [CheckResult("shell", True, "Noctalia shell check passed")]

    shell_dir = settings.noctalia_dir
    if not shell_dir.is_dir():
        return [
            CheckResult(
                "shell",
                False,
                "Noctalia shell was not detected in PATH or manual install directory",
            )
        ]

    results = [CheckResult("shell", True, f"Noctalia manual install found: {shell_dir}")]
    if adapter.runner.command_exists(LAUNCHER_BINARY):
        results.append(
            CheckResult(
                "launcher", True, f"launch with: qs -p {shell_dir}", advisory=True
            )
        )
    else:
        results.append(
            CheckResult(
                "launcher",
                False,
                f"Noctalia files found at {shell_dir}, but 'qs' is not installed",
                advisory=True,
            )
        )
    return results


def run_post_install_checks(
    adapter: PackageManagerAdapter,
    settings: Settings,
) -> VerificationReport:
    """Run every check and return the aggregate report (never raises)."""
    report = VerificationReport()
    report.add(check_compositor(adapter))
    report.add(check_config(settings))
    for result in check_shell(adapter, settings):
        report.add(result)

    for check in report.checks:
        if check.passed:
            logger.info(check.message)
        elif check.advisory:
            logger.warning(check.message)
        else:
            logger.error(check.message)

    return report
