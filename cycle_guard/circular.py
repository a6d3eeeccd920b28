"""Circular dependency check: intra-package scan, inter-package scan, aggregation."""

from __future__ import annotations

import asyncio
import logging

from cycle_guard.analysis import (
    deduplicate_cycles,
    detect_inter_package_cycles,
    filter_packages,
    is_ignored_cycle,
    is_ignored_package_cycle,
)
from cycle_guard.analyzers import AnalyzerUnavailable, get_analyzer
from cycle_guard.config import CircularConfig
from cycle_guard.models import (
    CheckOptions,
    CheckResult,
    Issue,
    IssueType,
    PackageInfo,
    WorkspaceInfo,
)
from cycle_guard.workspace import get_workspace_info

logger = logging.getLogger(__name__)

INTRA_FIX = "Refactor to break the cycle (extract shared code, use lazy imports, or restructure modules)"
INTER_FIX = "Restructure packages to break the workspace dependency cycle"


async def run_analyzer(name: str, pkg: PackageInfo, config: CircularConfig) -> list[list[str]]:
    """Run one analyzer on one package. Any failure degrades to no cycles."""
    analyzer = get_analyzer(name)
    if isinstance(analyzer, AnalyzerUnavailable):
        logger.warning("%s unavailable for %s: %s", name, pkg.name, analyzer.reason)
        return []

    unavailable = analyzer.check_available(pkg.path)
    if unavailable is not None:
        logger.warning("%s unavailable for %s: %s", name, pkg.name, unavailable.reason)
        return []

    try:
        return await asyncio.wait_for(
            analyzer.run(pkg.path, config.analyzer_options(name), timeout=config.analyzer_timeout),
            timeout=config.analyzer_timeout,
        )
    except asyncio.TimeoutError:
        logger.warning("%s timed out after %gs for %s", name, config.analyzer_timeout, pkg.name)
    except Exception as e:
        logger.warning("%s failed for %s: %s", name, pkg.name, e)
    return []


async def run_intra_package(
    pkg: PackageInfo,
    tools: list[str],
    config: CircularConfig,
) -> list[Issue]:
    # Analyzers have different blind spots, so their findings are unioned
    all_cycles: list[list[str]] = []
    for tool in tools:
        all_cycles.extend(await run_analyzer(tool, pkg, config))

    issues: list[Issue] = []
    for cycle in deduplicate_cycles(all_cycles):
        if is_ignored_cycle(cycle, pkg.name, config.ignore_cycles):
            logger.debug("Ignoring cycle in %s: %s", pkg.name, " -> ".join(cycle))
            continue
        issues.append(classify_intra_cycle(cycle, pkg.name, config))
    return issues


def run_inter_package(packages: list[PackageInfo], config: CircularConfig) -> list[Issue]:
    issues: list[Issue] = []
    for cycle in deduplicate_cycles(detect_inter_package_cycles(packages)):
        if is_ignored_package_cycle(cycle, config.ignore_package_cycles):
            logger.debug("Ignoring package cycle: %s", " -> ".join(cycle))
            continue
        issues.append(classify_inter_cycle(cycle, config))
    return issues


def classify_intra_cycle(cycle: list[str], package: str, config: CircularConfig) -> Issue:
    return Issue(
        severity=config.intra_package_severity,
        type=IssueType.CIRCULAR_IMPORT,
        package=package,
        file=cycle[0] if cycle else None,
        message=f"Circular import chain: {' -> '.join(cycle)}",
        fix=INTRA_FIX,
    )


def classify_inter_cycle(cycle: list[str], config: CircularConfig) -> Issue:
    return Issue(
        severity=config.inter_package_severity,
        type=IssueType.CIRCULAR_WORKSPACE_DEP,
        message=f"Circular workspace dependency: {' -> '.join([*cycle, cycle[0]])}",
        fix=INTER_FIX,
    )


def select_tools(options: CheckOptions, config: CircularConfig) -> list[str]:
    if options.tool:
        return [options.tool]
    return list(config.tools)


async def run_check(
    options: CheckOptions,
    config: CircularConfig | None = None,
    workspace: WorkspaceInfo | None = None,
) -> CheckResult:
    """Run the circular dependency check.

    ``config`` defaults to ``CircularConfig()``. When ``workspace`` is not
    given it is discovered from ``options.cwd``; a discovery failure is
    raised to the caller.
    """
    config = config or CircularConfig()
    if not config.enabled:
        logger.info("Circular dependency checks disabled")
        return CheckResult.from_issues([])

    if workspace is None:
        workspace = get_workspace_info(options.cwd)

    issues: list[Issue] = []

    if options.run_intra and config.intra_package:
        targets = filter_packages(workspace.packages, options.packages, config)
        tools = select_tools(options, config)
        logger.debug("Scanning %d packages for intra-package cycles with %s", len(targets), ", ".join(tools))

        results = await asyncio.gather(
            *(run_intra_package(pkg, tools, config) for pkg in targets),
        )
        for package_issues in results:
            issues.extend(package_issues)

    if options.run_inter and config.inter_package:
        logger.debug("Scanning workspace dependency graph for inter-package cycles")
        issues.extend(run_inter_package(workspace.packages, config))

    return CheckResult.from_issues(issues)


def check(
    options: CheckOptions,
    config: CircularConfig | None = None,
    workspace: WorkspaceInfo | None = None,
) -> CheckResult:
    """Synchronous wrapper around ``run_check``."""
    return asyncio.run(run_check(options, config, workspace))
