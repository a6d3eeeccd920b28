"""cycle-guard: circular dependency detection for pnpm workspaces."""

from __future__ import annotations

from cycle_guard.analysis import (
    deduplicate_cycles,
    detect_inter_package_cycles,
    normalize_cycle,
)
from cycle_guard.circular import check, run_check
from cycle_guard.config import CircularConfig, MonorepoConfig, load_config
from cycle_guard.models import (
    CheckOptions,
    CheckResult,
    Issue,
    IssueType,
    PackageInfo,
    Severity,
    Stats,
    WorkspaceInfo,
)

__version__ = "0.1.0"

__all__ = [
    "CheckOptions",
    "CheckResult",
    "CircularConfig",
    "Issue",
    "IssueType",
    "MonorepoConfig",
    "PackageInfo",
    "Severity",
    "Stats",
    "WorkspaceInfo",
    "check",
    "deduplicate_cycles",
    "detect_inter_package_cycles",
    "load_config",
    "normalize_cycle",
    "run_check",
]
