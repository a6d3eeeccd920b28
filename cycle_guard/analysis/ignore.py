"""Package selection and ignore rules for detected cycles."""

from __future__ import annotations

import fnmatch
from collections.abc import Sequence

from cycle_guard.config import CircularConfig, IgnoreCycle
from cycle_guard.models import PackageInfo


def _matches_any(name: str, patterns: Sequence[str]) -> bool:
    return any(fnmatch.fnmatchcase(name, pattern) for pattern in patterns)


def filter_packages(
    packages: list[PackageInfo],
    cli_patterns: Sequence[str] | None,
    config: CircularConfig | None,
) -> list[PackageInfo]:
    """Select the packages to scan for intra-package cycles.

    Command-line patterns replace the configured include/exclude lists
    entirely. Otherwise includes narrow the set first and excludes are
    removed from what remains.
    """
    if cli_patterns:
        return [p for p in packages if _matches_any(p.name, cli_patterns)]

    selected = packages
    include = config.include_packages if config else []
    exclude = config.exclude_packages if config else []

    if include:
        selected = [p for p in selected if _matches_any(p.name, include)]
    if exclude:
        selected = [p for p in selected if not _matches_any(p.name, exclude)]
    return selected


def is_ignored_cycle(
    cycle: Sequence[str],
    package_name: str | None,
    rules: Sequence[IgnoreCycle],
) -> bool:
    """True when any file in the cycle matches an ignore rule in scope."""
    for rule in rules:
        if rule.package and package_name and not fnmatch.fnmatchcase(package_name, rule.package):
            continue
        if any(fnmatch.fnmatchcase(file, rule.pattern) for file in cycle):
            return True
    return False


def is_ignored_package_cycle(
    cycle: Sequence[str],
    ignore_sets: Sequence[Sequence[str]],
) -> bool:
    """True when the cycle contains every member of some ignored package set."""
    members = set(cycle)
    return any(members.issuperset(ignored) for ignored in ignore_sets)
