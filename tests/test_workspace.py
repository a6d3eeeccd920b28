"""Tests for workspace discovery."""

import pytest

from cycle_guard.errors import WorkspaceError
from cycle_guard.workspace import find_workspace_root, get_workspace_info


def test_find_root_from_nested_dir(make_workspace, cyclic_packages):
    root = make_workspace(cyclic_packages)
    nested = root / "packages" / "pkg-a"
    assert find_workspace_root(nested) == root.resolve()


def test_missing_workspace_is_fatal(tmp_path):
    with pytest.raises(WorkspaceError):
        get_workspace_info(tmp_path)


def test_loads_packages(make_workspace):
    root = make_workspace({
        "pkg-a": {
            "name": "@p/a",
            "version": "2.0.0",
            "private": True,
            "dependencies": {"@p/b": "workspace:*"},
            "devDependencies": {"vitest": "^1.0.0"},
        },
        "pkg-b": {"name": "@p/b"},
    })
    info = get_workspace_info(root)
    assert info.root == root.resolve()
    by_name = {p.name: p for p in info.packages}
    assert set(by_name) == {"@p/a", "@p/b"}
    assert by_name["@p/a"].version == "2.0.0"
    assert by_name["@p/a"].private is True
    assert by_name["@p/a"].dependencies == {"@p/b": "workspace:*"}
    assert by_name["@p/a"].dev_dependencies == {"vitest": "^1.0.0"}
    assert by_name["@p/b"].dependencies == {}


def test_broken_manifest_skipped(make_workspace):
    root = make_workspace({"pkg-a": {"name": "@p/a"}})
    broken = root / "packages" / "pkg-bad"
    broken.mkdir()
    (broken / "package.json").write_text("{oops")
    info = get_workspace_info(root)
    assert [p.name for p in info.packages] == ["@p/a"]


def test_negated_pattern(make_workspace):
    root = make_workspace(
        {"pkg-a": {"name": "@p/a"}, "pkg-test": {"name": "@p/test"}},
        patterns=["packages/*", "!packages/pkg-test"],
    )
    info = get_workspace_info(root)
    assert [p.name for p in info.packages] == ["@p/a"]
