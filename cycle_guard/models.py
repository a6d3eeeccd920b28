"""Data models for the circular dependency check."""

from __future__ import annotations

import enum
from dataclasses import asdict, dataclass, field
from pathlib import Path


class Severity(enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class IssueType(enum.Enum):
    CIRCULAR_IMPORT = "circular-import"
    CIRCULAR_WORKSPACE_DEP = "circular-workspace-dep"


@dataclass
class PackageInfo:
    """A workspace package as read from its package.json."""
    name: str
    path: Path
    version: str = "0.0.0"
    private: bool = False
    dependencies: dict[str, str] = field(default_factory=dict)
    dev_dependencies: dict[str, str] = field(default_factory=dict)
    scripts: dict[str, str] = field(default_factory=dict)


@dataclass
class WorkspaceInfo:
    root: Path
    packages: list[PackageInfo] = field(default_factory=list)
    lockfile: Path | None = None
    workspace_file: Path | None = None


@dataclass(frozen=True)
class Issue:
    """A single reported problem. The message always carries the full cycle path."""
    severity: Severity
    type: IssueType
    message: str
    package: str | None = None
    file: str | None = None
    fix: str | None = None

    def to_dict(self) -> dict:
        data = {
            "severity": self.severity.value,
            "type": self.type.value,
            "message": self.message,
        }
        for key in ("package", "file", "fix"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data


@dataclass
class Stats:
    total: int = 0
    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0

    @classmethod
    def from_issues(cls, issues: list[Issue]) -> Stats:
        stats = cls(total=len(issues))
        for issue in issues:
            bucket = issue.severity.value
            setattr(stats, bucket, getattr(stats, bucket) + 1)
        return stats


@dataclass
class CheckResult:
    success: bool
    issues: list[Issue] = field(default_factory=list)
    stats: Stats = field(default_factory=Stats)

    @classmethod
    def from_issues(cls, issues: list[Issue]) -> CheckResult:
        # Any issue fails the check, whatever its severity.
        return cls(success=len(issues) == 0, issues=list(issues), stats=Stats.from_issues(issues))

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "issues": [issue.to_dict() for issue in self.issues],
            "stats": asdict(self.stats),
        }


@dataclass
class CheckOptions:
    """Command-level options for a circular dependency check."""
    cwd: Path = field(default_factory=lambda: Path("."))
    intra: bool = False
    inter: bool = False
    all: bool = False
    packages: list[str] = field(default_factory=list)
    tool: str | None = None

    @property
    def run_intra(self) -> bool:
        return self.intra or self.all or not (self.intra or self.inter)

    @property
    def run_inter(self) -> bool:
        return self.inter or self.all or not (self.intra or self.inter)
