"""Shared fixtures: throwaway pnpm workspaces on disk."""

import json
from pathlib import Path

import pytest


def write_workspace(root: Path, packages: dict, config: dict | None = None,
                    patterns: list[str] | None = None) -> Path:
    """Create ``pnpm-workspace.yaml`` plus one ``packages/<dir>/package.json`` per entry."""
    root.mkdir(parents=True, exist_ok=True)
    lines = ["packages:"] + [f"  - '{p}'" for p in (patterns or ["packages/*"])]
    (root / "pnpm-workspace.yaml").write_text("\n".join(lines) + "\n", encoding="utf-8")

    for dir_name, manifest in packages.items():
        pkg_dir = root / "packages" / dir_name
        pkg_dir.mkdir(parents=True, exist_ok=True)
        (pkg_dir / "package.json").write_text(json.dumps(manifest), encoding="utf-8")

    if config is not None:
        (root / "monorepo.config.json").write_text(json.dumps(config), encoding="utf-8")
    return root


@pytest.fixture
def make_workspace(tmp_path):
    def _make(packages: dict, config: dict | None = None, patterns: list[str] | None = None) -> Path:
        return write_workspace(tmp_path / "ws", packages, config, patterns)
    return _make


@pytest.fixture
def cyclic_packages():
    return {
        "pkg-a": {
            "name": "@p/a",
            "version": "1.0.0",
            "dependencies": {"@p/b": "workspace:*"},
        },
        "pkg-b": {
            "name": "@p/b",
            "version": "1.0.0",
            "dependencies": {"@p/a": "workspace:*"},
        },
    }
