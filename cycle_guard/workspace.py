"""pnpm workspace discovery: locate the root and load every package.json."""

from __future__ import annotations

import fnmatch
import json
import logging
from pathlib import Path

import yaml

from cycle_guard.errors import WorkspaceError
from cycle_guard.models import PackageInfo, WorkspaceInfo

logger = logging.getLogger(__name__)

WORKSPACE_FILE = "pnpm-workspace.yaml"
LOCKFILE = "pnpm-lock.yaml"


def find_workspace_root(cwd: Path | None = None) -> Path:
    """Walk up from ``cwd`` until a directory holding pnpm-workspace.yaml is found."""
    current = (cwd or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        if (directory / WORKSPACE_FILE).is_file():
            return directory
    raise WorkspaceError(f"Not in a pnpm workspace ({WORKSPACE_FILE} not found above {current})")


def get_workspace_info(cwd: Path | None = None) -> WorkspaceInfo:
    root = find_workspace_root(cwd)
    packages: list[PackageInfo] = []
    for package_dir in _package_dirs(root):
        try:
            packages.append(load_package_json(package_dir))
        except (OSError, ValueError) as e:
            logger.warning("Failed to load package at %s: %s", package_dir, e)

    return WorkspaceInfo(
        root=root,
        packages=packages,
        lockfile=root / LOCKFILE,
        workspace_file=root / WORKSPACE_FILE,
    )


def load_package_json(package_dir: Path) -> PackageInfo:
    data = json.loads((package_dir / "package.json").read_text(encoding="utf-8"))
    if not isinstance(data, dict) or not isinstance(data.get("name"), str):
        raise ValueError("package.json has no name")

    return PackageInfo(
        name=data["name"],
        path=package_dir,
        version=data.get("version") or "0.0.0",
        private=bool(data.get("private", False)),
        dependencies=_string_map(data.get("dependencies")),
        dev_dependencies=_string_map(data.get("devDependencies")),
        scripts=_string_map(data.get("scripts")),
    )


def _workspace_patterns(root: Path) -> list[str]:
    try:
        parsed = yaml.safe_load((root / WORKSPACE_FILE).read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise WorkspaceError(f"Cannot read {WORKSPACE_FILE}: {e}") from e
    if not isinstance(parsed, dict):
        return []
    return [p for p in parsed.get("packages") or [] if isinstance(p, str)]


def _package_dirs(root: Path) -> list[Path]:
    patterns = _workspace_patterns(root)
    include = [p.rstrip("/") for p in patterns if not p.startswith("!")]
    exclude = [p[1:].rstrip("/") for p in patterns if p.startswith("!")]

    found: dict[Path, None] = {}
    for pattern in include:
        candidates = [root] if pattern in ("", ".") else sorted(root.glob(pattern))
        for candidate in candidates:
            if not candidate.is_dir():
                continue
            rel = candidate.relative_to(root)
            if _should_skip(rel):
                continue
            if any(fnmatch.fnmatch(rel.as_posix(), ex) for ex in exclude):
                continue
            if (candidate / "package.json").is_file():
                found[candidate] = None
    return list(found)


def _should_skip(rel: Path) -> bool:
    return any(part == "node_modules" or part.startswith(".") for part in rel.parts)


def _string_map(value: object) -> dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {str(k): str(v) for k, v in value.items()}
