"""Tests for the workspace graph builder and inter-package cycle detection."""

from pathlib import Path

import pytest

from cycle_guard.models import PackageInfo
from cycle_guard.analysis.dependency_graph import (
    WorkspaceGraphBuilder,
    detect_inter_package_cycles,
)


# ── Helpers ───────────────────────────────────────────────────

def _pkg(name, deps=None, dev_deps=None):
    return PackageInfo(
        name=name,
        path=Path(f"/fake/{name}"),
        version="1.0.0",
        private=True,
        dependencies=deps or {},
        dev_dependencies=dev_deps or {},
    )


# ── Graph builder ─────────────────────────────────────────────

class TestWorkspaceGraphBuilder:
    def test_build_empty(self):
        graph = WorkspaceGraphBuilder().build([])
        assert graph.nodes == []
        assert graph.forward == {}

    def test_nodes_follow_input_order(self):
        graph = WorkspaceGraphBuilder().build([_pkg("@p/b"), _pkg("@p/a")])
        assert graph.nodes == ["@p/b", "@p/a"]
        assert graph.forward == {"@p/b": [], "@p/a": []}

    def test_workspace_edge(self):
        graph = WorkspaceGraphBuilder().build([
            _pkg("@p/a", {"@p/b": "workspace:*"}),
            _pkg("@p/b"),
        ])
        assert graph.forward == {"@p/a": ["@p/b"], "@p/b": []}

    def test_semver_never_creates_edge(self):
        graph = WorkspaceGraphBuilder().build([
            _pkg("@p/a", {"@p/b": "^1.0.0"}),
            _pkg("@p/b"),
        ])
        assert graph.forward["@p/a"] == []

    def test_dangling_workspace_reference_dropped(self):
        graph = WorkspaceGraphBuilder().build([
            _pkg("@p/a", {"@p/missing": "workspace:^"}),
        ])
        assert graph.forward["@p/a"] == []

    def test_dev_dependency_edge(self):
        graph = WorkspaceGraphBuilder().build([
            _pkg("@p/a", dev_deps={"@p/b": "workspace:~"}),
            _pkg("@p/b"),
        ])
        assert graph.forward["@p/a"] == ["@p/b"]

    def test_duplicate_edges_collapsed(self):
        graph = WorkspaceGraphBuilder().build([
            _pkg("@p/a", {"@p/b": "workspace:*"}, {"@p/b": "workspace:*"}),
            _pkg("@p/b"),
        ])
        assert graph.forward["@p/a"] == ["@p/b"]

    def test_dev_dependency_specifier_wins_on_clash(self):
        graph = WorkspaceGraphBuilder().build([
            _pkg("@p/a", {"@p/b": "workspace:*"}, {"@p/b": "^1.0.0"}),
            _pkg("@p/b"),
        ])
        assert graph.forward["@p/a"] == []


# ── Inter-package cycles ──────────────────────────────────────

class TestDetectInterPackageCycles:
    def test_linear_chain(self):
        packages = [
            _pkg("@pkg/a", {"@pkg/b": "workspace:*"}),
            _pkg("@pkg/b", {"@pkg/c": "workspace:*"}),
            _pkg("@pkg/c"),
        ]
        assert detect_inter_package_cycles(packages) == []

    def test_mutual_dependency(self):
        packages = [
            _pkg("@pkg/a", {"@pkg/b": "workspace:*"}),
            _pkg("@pkg/b", {"@pkg/a": "workspace:*"}),
        ]
        cycles = detect_inter_package_cycles(packages)
        assert len(cycles) == 1
        assert len(cycles[0]) == 2
        assert set(cycles[0]) == {"@pkg/a", "@pkg/b"}

    def test_triangle(self):
        packages = [
            _pkg("@pkg/a", {"@pkg/b": "workspace:*"}),
            _pkg("@pkg/b", {"@pkg/c": "workspace:*"}),
            _pkg("@pkg/c", {"@pkg/a": "workspace:*"}),
        ]
        cycles = detect_inter_package_cycles(packages)
        assert len(cycles) == 1
        assert len(cycles[0]) == 3
        assert set(cycles[0]) == {"@pkg/a", "@pkg/b", "@pkg/c"}

    @pytest.mark.parametrize("order", [[0, 1, 2], [2, 1, 0], [1, 2, 0]])
    def test_triangle_count_independent_of_order(self, order):
        packages = [
            _pkg("@pkg/a", {"@pkg/b": "workspace:*"}),
            _pkg("@pkg/b", {"@pkg/c": "workspace:*"}),
            _pkg("@pkg/c", {"@pkg/a": "workspace:*"}),
        ]
        cycles = detect_inter_package_cycles([packages[i] for i in order])
        assert len(cycles) == 1

    def test_ignores_non_workspace_deps(self):
        packages = [
            _pkg("@pkg/a", {"@pkg/b": "workspace:*", "lodash": "^4.17.0"}),
            _pkg("@pkg/b", {"@pkg/a": "^1.0.0", "lodash": "^4.17.0"}),
        ]
        assert detect_inter_package_cycles(packages) == []

    def test_dev_dependencies_participate(self):
        packages = [
            _pkg("@pkg/a", {"@pkg/b": "workspace:*"}),
            _pkg("@pkg/b", dev_deps={"@pkg/a": "workspace:*"}),
        ]
        assert len(detect_inter_package_cycles(packages)) == 1

    def test_disjoint_cycles(self):
        packages = [
            _pkg("@pkg/a", {"@pkg/b": "workspace:*"}),
            _pkg("@pkg/b", {"@pkg/a": "workspace:*"}),
            _pkg("@pkg/x", {"@pkg/y": "workspace:*"}),
            _pkg("@pkg/y", {"@pkg/x": "workspace:*"}),
        ]
        cycles = detect_inter_package_cycles(packages)
        assert len(cycles) == 2
        assert {frozenset(c) for c in cycles} == {
            frozenset({"@pkg/a", "@pkg/b"}),
            frozenset({"@pkg/x", "@pkg/y"}),
        }

    def test_disconnected_subgraphs(self):
        packages = [
            _pkg("@pkg/a", {"@pkg/b": "workspace:*"}),
            _pkg("@pkg/b"),
            _pkg("@pkg/x", {"@pkg/y": "workspace:*"}),
            _pkg("@pkg/y", {"@pkg/x": "workspace:*"}),
        ]
        cycles = detect_inter_package_cycles(packages)
        assert len(cycles) == 1
        assert set(cycles[0]) == {"@pkg/x", "@pkg/y"}

    def test_self_reference(self):
        cycles = detect_inter_package_cycles([_pkg("@pkg/a", {"@pkg/a": "workspace:*"})])
        assert cycles == [["@pkg/a"]]

    def test_empty_package_list(self):
        assert detect_inter_package_cycles([]) == []

    def test_packages_without_deps(self):
        assert detect_inter_package_cycles([_pkg("@pkg/a"), _pkg("@pkg/b")]) == []

    def test_witness_per_back_edge_only(self):
        # a -> b -> a and a -> b -> c -> a share the a->b edge; DFS from a
        # meets two back-edges to a, one for each cycle.
        packages = [
            _pkg("a", {"b": "workspace:*"}),
            _pkg("b", {"a": "workspace:*", "c": "workspace:*"}),
            _pkg("c", {"a": "workspace:*"}),
        ]
        cycles = detect_inter_package_cycles(packages)
        assert cycles == [["a", "b"], ["a", "b", "c"]]

    def test_black_nodes_not_revisited(self):
        # c is finished before d reaches it, so d -> c adds no cycle
        packages = [
            _pkg("a", {"b": "workspace:*", "d": "workspace:*"}),
            _pkg("b", {"c": "workspace:*"}),
            _pkg("c", {"b": "workspace:*"}),
            _pkg("d", {"c": "workspace:*"}),
        ]
        assert detect_inter_package_cycles(packages) == [["b", "c"]]
