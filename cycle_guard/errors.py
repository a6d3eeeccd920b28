"""Exception types raised by cycle-guard."""

from __future__ import annotations

from pathlib import Path


class CycleGuardError(Exception):
    """Base class for all cycle-guard errors."""


class WorkspaceError(CycleGuardError):
    """The workspace root could not be located or its packages enumerated."""


class ConfigError(CycleGuardError):
    """A configuration file could not be read or failed validation."""

    def __init__(self, message: str, path: Path | None = None):
        super().__init__(message)
        self.path = path


class AnalyzerError(CycleGuardError):
    """An import-graph analyzer ran but failed for one package."""

    def __init__(self, analyzer: str, message: str):
        super().__init__(f"{analyzer}: {message}")
        self.analyzer = analyzer
