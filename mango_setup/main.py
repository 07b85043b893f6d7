"""
mango-setup — CLI entrypoint.

Usage:
    mango-setup                 # same as `mango-setup install`
    mango-setup install
    mango-setup verify
    mango-setup detect --json
    python -m mango_setup.main --help

All install behaviour is configured through environment variables
(MANGOWC_REPO, NOCTALIA_REPO, ...); the options below only control
how much gets logged.
"""

from __future__ import annotations

import json
import os
import sys

import click

from mango_setup import __version__
from mango_setup.core.models.install import InstallStep
from mango_setup.core.observability.logging_config import DEFAULT_LEVEL, setup_logging


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="mango-setup")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Log at INFO even when MANGO_SETUP_LOG_LEVEL is set higher.",
)
@click.option("--quiet", "-q", is_flag=True, help="Only show warnings and errors.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool, debug: bool) -> None:
    """mango-setup — install MangoWC and the Noctalia shell."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "WARNING"
    else:
        level = os.environ.get("MANGO_SETUP_LOG_LEVEL", DEFAULT_LEVEL)

    setup_logging(
        level=level,
        log_file=os.environ.get("MANGO_SETUP_LOG_FILE"),
        log_file_level=os.environ.get("MANGO_SETUP_LOG_FILE_LEVEL"),
    )

    if ctx.invoked_subcommand is None:
        ctx.invoke(install)


def _print_step(step: InstallStep) -> None:
    click.echo()
    click.secho(step.label, fg="cyan", bold=True)


@cli.command()
@click.pass_context
def install(ctx: click.Context) -> None:
    """Install dependencies, MangoWC, its config and Noctalia, then verify."""
    from mango_setup.core.use_cases.install import run_install

    result = run_install(on_step=_print_step)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red", err=True)
        sys.exit(1)

    click.echo()
    click.secho("✅ All tasks completed successfully", fg="green", bold=True)
    if not ctx.obj.get("quiet"):
        click.echo(f"   Package manager: {result.manager.value if result.manager else '?'}")
        if result.compositor:
            click.echo(f"   MangoWC via: {result.compositor.strategy}")
        if result.shell:
            click.echo(f"   Noctalia via: {result.shell.strategy}")
    click.echo()


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def verify(as_json: bool) -> None:
    """Run the post-install checks only."""
    from mango_setup.core.use_cases.install import run_verify

    result = run_verify()

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)

    if result.report:
        for check in result.report.checks:
            if check.passed:
                click.secho(f"   ✓ {check.name}", fg="green", nl=False)
            elif check.advisory:
                click.secho(f"   ⚠ {check.name}", fg="yellow", nl=False)
            else:
                click.secho(f"   ✗ {check.name}", fg="red", nl=False)
            click.echo(f"  {check.message}")

    if result.error:
        click.secho(f"❌ {result.error}", fg="red", err=True)
        sys.exit(1)

    click.secho("✅ Post-install checks passed", fg="green", bold=True)


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def detect(as_json: bool) -> None:
    """Show the detected package manager and resolved settings."""
    from mango_setup.adapters.shell.command import ShellCommandRunner
    from mango_setup.core.config.loader import ConfigError, load_settings
    from mango_setup.core.services.package_manager import detect_package_manager

    try:
        settings = load_settings()
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    manager = detect_package_manager(ShellCommandRunner())
    data = {"manager": manager.value if manager else None, **settings.to_dict()}

    if as_json:
        click.echo(json.dumps(data, indent=2))
        sys.exit(0 if manager else 1)

    if manager is None:
        click.secho("❌ No supported package manager found (apt, dnf, pacman, zypper).", fg="red")
        sys.exit(1)

    click.secho(f"📦 Package manager: {manager.value}", fg="cyan", bold=True)
    for key, value in settings.to_dict().items():
        click.echo(f"   {key}: {value if value is not None else '(unset)'}")


if __name__ == "__main__":
    cli()
