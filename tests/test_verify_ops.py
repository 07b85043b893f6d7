"""
Tests for the post-install verifier.
"""

from mango_setup.adapters.mock import MockRunner
from mango_setup.core.services.package_manager import PackageManagerAdapter
from mango_setup.core.services.verify_ops import run_post_install_checks


def _adapter(runner: MockRunner, shell_package: bool = False) -> PackageManagerAdapter:
    if not shell_package:
        runner.set_failure("dpkg -s noctalia-shell")
    return PackageManagerAdapter("apt", runner)


def _deploy(settings) -> None:
    settings.config_dest_dir.mkdir(parents=True)
    settings.config_dest_file.write_text("x")


class TestVerifier:
    def test_all_pass(self, settings):
        runner = MockRunner(available={"mangowc", "noctalia-shell"})
        _deploy(settings)
        report = run_post_install_checks(_adapter(runner), settings)
        assert report.ok
        assert [c.name for c in report.checks] == ["compositor", "config", "shell"]

    def test_alternate_compositor_name(self, settings):
        runner = MockRunner(available={"mango", "noctalia-shell"})
        _deploy(settings)
        assert run_post_install_checks(_adapter(runner), settings).ok

    def test_failures_are_aggregated(self, settings):
        runner = MockRunner()
        report = run_post_install_checks(_adapter(runner), settings)
        assert not report.ok
        assert report.failures == 3
        assert [c.name for c in report.checks] == ["compositor", "config", "shell"]
        assert all(not c.passed for c in report.checks)

    def test_first_failure_does_not_stop_later_checks(self, settings):
        runner = MockRunner(available={"noctalia-shell"})
        _deploy(settings)
        report = run_post_install_checks(_adapter(runner), settings)
        assert report.failures == 1
        assert not report.get("compositor").passed
        assert report.get("config").passed
        assert report.get("shell").passed

    def test_shell_via_package_database(self, settings):
        runner = MockRunner(available={"mangowc"})
        _deploy(settings)
        report = run_post_install_checks(_adapter(runner, shell_package=True), settings)
        assert report.ok
        assert runner.called("dpkg -s noctalia-shell")

    def test_manual_install_without_launcher_is_advisory(self, settings):
        runner = MockRunner(available={"mangowc"})
        _deploy(settings)
        settings.noctalia_dir.mkdir(parents=True)
        report = run_post_install_checks(_adapter(runner), settings)
        assert report.ok
        assert report.warnings == 1
        launcher = report.get("launcher")
        assert launcher.advisory and not launcher.passed
        assert "'qs' is not installed" in launcher.message

    def test_manual_install_with_launcher(self, settings):
        runner = MockRunner(available={"mangowc", "qs"})
        _deploy(settings)
        settings.noctalia_dir.mkdir(parents=True)
        report = run_post_install_checks(_adapter(runner), settings)
        assert report.ok and report.warnings == 0
        assert f"qs -p {settings.noctalia_dir}" in report.get("launcher").message
