"""Data models for the workspace dependency graph."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class WorkspaceGraph:
    nodes: list[str] = field(default_factory=list)
    forward: dict[str, list[str]] = field(default_factory=dict)  # package -> [depends on]
