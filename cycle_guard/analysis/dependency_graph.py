"""Workspace dependency graph builder and inter-package cycle detection."""

from __future__ import annotations

from cycle_guard.models import PackageInfo
from cycle_guard.analysis.graph_models import WorkspaceGraph

WORKSPACE_PROTOCOL = "workspace:"

_WHITE, _GRAY, _BLACK = 0, 1, 2


class WorkspaceGraphBuilder:
    """Build a directed graph of ``workspace:`` dependencies between packages."""

    def build(self, packages: list[PackageInfo]) -> WorkspaceGraph:
        graph = WorkspaceGraph()
        known = {pkg.name for pkg in packages}

        for pkg in packages:
            if pkg.name not in graph.forward:
                graph.nodes.append(pkg.name)
                graph.forward[pkg.name] = []

        for pkg in packages:
            # devDependencies win on a name clash, same as spreading both maps
            merged = {**pkg.dependencies, **pkg.dev_dependencies}

            for dep_name, specifier in merged.items():
                if not specifier.startswith(WORKSPACE_PROTOCOL):
                    continue
                # Dangling workspace references cannot close a cycle
                if dep_name not in known:
                    continue
                self._add_edge(graph, pkg.name, dep_name)

        return graph

    def detect_cycles(self, graph: WorkspaceGraph) -> list[list[str]]:
        """Find one witness cycle per back-edge using white/gray/black DFS.

        This does not enumerate every simple cycle of a strongly connected
        component; each back-edge met during the single traversal yields the
        slice of the current path from the revisited node to the top.
        """
        color = {name: _WHITE for name in graph.nodes}
        cycles: list[list[str]] = []
        path: list[str] = []

        def dfs(node: str) -> None:
            color[node] = _GRAY
            path.append(node)

            for neighbor in graph.forward.get(node, []):
                state = color.get(neighbor, _WHITE)
                if state == _GRAY:
                    cycles.append(path[path.index(neighbor):])
                elif state == _WHITE:
                    dfs(neighbor)

            path.pop()
            color[node] = _BLACK

        for name in graph.nodes:
            if color[name] == _WHITE:
                dfs(name)

        return cycles

    def _add_edge(self, graph: WorkspaceGraph, source: str, target: str) -> None:
        if target not in graph.forward[source]:
            graph.forward[source].append(target)


def detect_inter_package_cycles(packages: list[PackageInfo]) -> list[list[str]]:
    """Detect circular ``workspace:`` dependency chains between packages."""
    builder = WorkspaceGraphBuilder()
    return builder.detect_cycles(builder.build(packages))
