"""
Install use case — the full bootstrap, top to bottom.

    preflight   config source present? package manager detected?
    [1/5]       dependencies
    [2/5]       MangoWC
    [3/5]       config.conf
    [4/5]       Noctalia shell
    [5/5]       post-install checks

The first fatal error stops the run and is returned in
``InstallResult.error``; nothing installed before it is rolled back.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from mango_setup.adapters.base import CommandRunner
from mango_setup.core.config.loader import (
    ConfigError,
    Settings,
    load_catalog,
    load_settings,
)
from mango_setup.core.models.install import InstallStep, StrategyResult, VerificationReport
from mango_setup.core.models.package import InstallError, PackageCatalog, PackageManager
from mango_setup.core.services.compositor_ops import install_compositor
from mango_setup.core.services.config_ops import deploy_config, require_config_source
from mango_setup.core.services.dependency_ops import install_dependencies
from mango_setup.core.services.package_manager import (
    PackageManagerAdapter,
    detect_package_manager,
)
from mango_setup.core.services.shell_ops import install_shell
from mango_setup.core.services.verify_ops import run_post_install_checks

logger = logging.getLogger(__name__)

NO_MANAGER_MESSAGE = "No supported package manager found (apt, dnf, pacman, zypper)."

STEP_NAMES = (
    "Installing MangoWC dependencies",
    "Installing MangoWC",
    "Installing config.conf",
    "Setting up Noctalia",
    "Running post-install checks",
)


@dataclass
class InstallResult:
    """Result of a full install run."""

    manager: PackageManager | None = None
    steps_completed: list[str] = field(default_factory=list)
    dependencies: list[str] = field(default_factory=list)
    compositor: StrategyResult | None = None
    shell: StrategyResult | None = None
    report: VerificationReport | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "ok": self.ok,
            "manager": self.manager.value if self.manager else None,
            "steps_completed": self.steps_completed,
        }
        if self.compositor:
            result["compositor"] = self.compositor.strategy
        if self.shell:
            result["shell"] = self.shell.strategy
        if self.report:
            result["report"] = self.report.to_dict()
        if self.error:
            result["error"] = self.error
        return result


class _Progress:
    """Numbers the steps and forwards them to the caller's callback."""

    def __init__(self, on_step: Callable[[InstallStep], None] | None, total: int):
        self._on_step = on_step
        self._total = total
        self._index = 0

    def next(self, name: str) -> InstallStep:
        self._index += 1
        step = InstallStep(name=name, index=self._index, total=self._total)
        if self._on_step is not None:
            self._on_step(step)
        else:
            logger.info(step.label)
        return step


def _make_adapter(runner: CommandRunner) -> PackageManagerAdapter:
    manager = detect_package_manager(runner)
    if manager is None:
        raise InstallError(NO_MANAGER_MESSAGE)
    logger.info("Detected package manager: %s", manager.value)
    return PackageManagerAdapter(manager, runner)


def run_install(
    settings: Settings | None = None,
    runner: CommandRunner | None = None,
    catalog: PackageCatalog | None = None,
    on_step: Callable[[InstallStep], None] | None = None,
) -> InstallResult:
    """Bootstrap MangoWC and Noctalia on this host.

    Args:
        settings: Resolved settings (default: from the environment).
        runner: Command runner (default: a real ShellCommandRunner).
        catalog: Package catalog (default: the bundled packages.yml).
        on_step: Called with each InstallStep as it starts.

    Returns:
        InstallResult; ``error`` is set on any fatal failure.
    """
    result = InstallResult()

    try:
        if settings is None:
            settings = load_settings()
        if catalog is None:
            catalog = load_catalog()
        if runner is None:
            from mango_setup.adapters.shell.command import ShellCommandRunner

            runner = ShellCommandRunner()

        # ── Preflight ───────────────────────────────────────────
        require_config_source(settings)
        adapter = _make_adapter(runner)
        result.manager = adapter.manager
        packages = catalog.for_manager(adapter.manager)

        progress = _Progress(on_step, total=len(STEP_NAMES))

        # ── Steps ───────────────────────────────────────────────
        step = progress.next(f"{STEP_NAMES[0]} with {adapter.manager.value}")
        result.dependencies = install_dependencies(adapter, packages)
        result.steps_completed.append(step.name)

        step = progress.next(STEP_NAMES[1])
        result.compositor = install_compositor(adapter, settings.mangowc_repo)
        result.steps_completed.append(step.name)

        step = progress.next(STEP_NAMES[2])
        deploy_config(settings)
        result.steps_completed.append(step.name)

        step = progress.next(STEP_NAMES[3])
        result.shell = install_shell(adapter, settings)
        result.steps_completed.append(step.name)

        step = progress.next(STEP_NAMES[4])
        result.report = run_post_install_checks(adapter, settings)
        if not result.report.ok:
            raise InstallError(
                f"Post-install checks failed ({result.report.failures} issue(s))."
            )
        result.steps_completed.append(step.name)

    except (InstallError, ConfigError) as e:
        logger.debug("Install aborted: %s", e)
        result.error = str(e)
        return result

    logger.info("All tasks completed successfully")
    return result


def run_verify(
    settings: Settings | None = None,
    runner: CommandRunner | None = None,
) -> InstallResult:
    """Run only the post-install checks against the detected manager."""
    result = InstallResult()
    try:
        if settings is None:
            settings = load_settings()
        if runner is None:
            from mango_setup.adapters.shell.command import ShellCommandRunner

            runner = ShellCommandRunner()

        adapter = _make_adapter(runner)
        result.manager = adapter.manager
        result.report = run_post_install_checks(adapter, settings)
        if not result.report.ok:
            result.error = f"Post-install checks failed ({result.report.failures} issue(s))."
    except (InstallError, ConfigError) as e:
        result.error = str(e)
    return result
