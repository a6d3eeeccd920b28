"""Abstract base analyzer and helpers shared by the concrete adapters."""

from __future__ import annotations

import abc
import asyncio
import fnmatch
import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from cycle_guard.errors import AnalyzerError

logger = logging.getLogger(__name__)

SOURCE_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx")

SKIP_PATTERNS = ["node_modules", "__tests__", "*.d.ts", "*.test.*", "*.spec.*"]


@dataclass(frozen=True)
class AnalyzerUnavailable:
    """An analyzer that cannot run here: unknown name or missing executable."""
    analyzer: str
    reason: str


class BaseAnalyzer(abc.ABC):
    """Capability interface: find module-level import cycles in one package."""

    name: str

    @abc.abstractmethod
    async def run(
        self,
        source_root: Path,
        options: Any = None,
        timeout: float | None = None,
    ) -> list[list[str]]:
        """Return the import cycles found under ``source_root``.

        Each cycle is a list of file paths relative to ``source_root``.
        ``timeout`` is the budget in seconds for analyzers that do their work
        in-process and have to stop themselves. Raises ``AnalyzerError`` when
        the analyzer itself fails.
        """

    def check_available(self, source_root: Path) -> AnalyzerUnavailable | None:
        return None


def collect_source_files(package_path: Path) -> list[Path]:
    """All analyzable files under ``<package>/src``, sorted."""
    src = package_path / "src"
    if not src.is_dir():
        return []
    files: list[Path] = []
    for path in sorted(src.rglob("*")):
        if path.is_dir() or path.suffix not in SOURCE_EXTENSIONS:
            continue
        if _should_skip(path.relative_to(package_path)):
            continue
        files.append(path)
    return files


def _should_skip(path: Path) -> bool:
    for part in path.parts:
        for pattern in SKIP_PATTERNS:
            if fnmatch.fnmatch(part, pattern):
                return True
    return False


def find_executable(name: str, package_path: Path) -> str | None:
    """Locate ``name`` in node_modules/.bin from the package upwards, then on PATH."""
    start = package_path.resolve()
    for directory in (start, *start.parents):
        candidate = directory / "node_modules" / ".bin" / name
        if candidate.is_file() and os.access(candidate, os.X_OK):
            return str(candidate)
    return shutil.which(name)


def parse_cycle_list(payload: Any) -> list[list[str]]:
    """Coerce analyzer JSON into a list of cycles.

    Anything that is not a list of string lists contributes nothing.
    """
    if not isinstance(payload, list):
        return []
    cycles: list[list[str]] = []
    for entry in payload:
        if isinstance(entry, list) and entry and all(isinstance(item, str) for item in entry):
            cycles.append(list(entry))
    return cycles


async def run_process(analyzer: str, args: list[str], cwd: Path) -> tuple[int, str, str]:
    """Run an external analyzer process and capture its output."""
    logger.debug("Running %s", " ".join(args))
    try:
        process = await asyncio.create_subprocess_exec(
            *args,
            cwd=str(cwd),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        raise AnalyzerError(analyzer, f"failed to start: {e}") from e

    try:
        stdout, stderr = await process.communicate()
    except asyncio.CancelledError:
        if process.returncode is None:
            process.kill()
            await process.wait()
        raise

    return (
        process.returncode if process.returncode is not None else -1,
        stdout.decode("utf-8", errors="replace"),
        stderr.decode("utf-8", errors="replace"),
    )
