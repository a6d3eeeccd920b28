"""Click CLI with the circular dependency ``check`` subcommand."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click

from cycle_guard.analyzers import available_analyzers
from cycle_guard.circular import check as run_circular_check
from cycle_guard.config import load_config
from cycle_guard.errors import CycleGuardError
from cycle_guard.models import CheckOptions, CheckResult, Severity
from cycle_guard.workspace import find_workspace_root

_SEVERITY_COLORS = {
    Severity.CRITICAL: "red",
    Severity.HIGH: "red",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "white",
}


@click.group()
@click.version_option(version="0.1.0")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def cli(verbose: bool):
    """cycle-guard: Detect circular dependencies in a pnpm workspace."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument("cwd", type=click.Path(exists=True, file_okay=False, path_type=Path), default=".")
@click.option("--intra", is_flag=True, help="Only check intra-package (module-level) cycles")
@click.option("--inter", is_flag=True, help="Only check inter-package (workspace-level) cycles")
@click.option("--all", "check_all", is_flag=True, help="Run all checks (default)")
@click.option("--packages", "-p", multiple=True, help="Restrict intra-package scan to packages matching this glob")
@click.option("--tool", type=click.Choice(available_analyzers()), help="Use a single analyzer")
@click.option("--config", "config_path", type=click.Path(path_type=Path), help="Config file path")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def check(
    ctx: click.Context,
    cwd: Path,
    intra: bool,
    inter: bool,
    check_all: bool,
    packages: tuple[str, ...],
    tool: str | None,
    config_path: Path | None,
    as_json: bool,
):
    """Check the workspace for circular dependencies."""
    options = CheckOptions(
        cwd=cwd,
        intra=intra,
        inter=inter,
        all=check_all,
        packages=list(packages),
        tool=tool,
    )

    try:
        root = find_workspace_root(cwd)
        config = load_config(root, config_path)
        result = run_circular_check(options, config.circular)
    except CycleGuardError as e:
        raise click.ClickException(f"Failed to check circular dependencies: {e}")

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        _print_result(result)

    ctx.exit(0 if result.success else 1)


def _print_result(result: CheckResult) -> None:
    if not result.issues:
        click.echo(click.style("No circular dependencies found!", fg="green"))
        return

    click.echo(click.style(f"Found {len(result.issues)} circular dependency issue(s)\n", fg="yellow"))
    for issue in result.issues:
        marker = "✗" if issue.severity in (Severity.CRITICAL, Severity.HIGH) else "⚠"
        color = _SEVERITY_COLORS[issue.severity]
        label = click.style(f"[{issue.severity.value}]", fg=color)
        scope = f"{issue.package}: " if issue.package else ""
        click.echo(f"  {marker} {label} {scope}{issue.message}")
        if issue.fix:
            click.echo(click.style(f"    Fix: {issue.fix}", dim=True))

    stats = result.stats
    click.echo(
        f"\nSummary: {stats.total} total "
        f"({stats.critical} critical, {stats.high} high, {stats.medium} medium, {stats.low} low)"
    )


if __name__ == "__main__":
    cli()
