"""Graph building, cycle detection, normalization and ignore filtering."""

from __future__ import annotations

from cycle_guard.analysis.dependency_graph import (
    WorkspaceGraphBuilder,
    detect_inter_package_cycles,
)
from cycle_guard.analysis.graph_models import WorkspaceGraph
from cycle_guard.analysis.ignore import (
    filter_packages,
    is_ignored_cycle,
    is_ignored_package_cycle,
)
from cycle_guard.analysis.normalize import deduplicate_cycles, normalize_cycle

__all__ = [
    "WorkspaceGraph",
    "WorkspaceGraphBuilder",
    "deduplicate_cycles",
    "detect_inter_package_cycles",
    "filter_packages",
    "is_ignored_cycle",
    "is_ignored_package_cycle",
    "normalize_cycle",
]
