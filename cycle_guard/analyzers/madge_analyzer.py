"""madge adapter: runs ``madge --circular --json`` on a package's src directory."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from cycle_guard.config import MadgeOptions
from cycle_guard.errors import AnalyzerError
from cycle_guard.analyzers.base import (
    AnalyzerUnavailable,
    BaseAnalyzer,
    find_executable,
    parse_cycle_list,
    run_process,
)

logger = logging.getLogger(__name__)

_EXCLUDE_RE = r"(\.d\.ts$|node_modules|__tests__|\.test\.|\.spec\.)"


class MadgeAnalyzer(BaseAnalyzer):
    name = "madge"

    def check_available(self, source_root: Path) -> AnalyzerUnavailable | None:
        if find_executable("madge", source_root) is None:
            return AnalyzerUnavailable(self.name, "madge is not installed. Run: pnpm add -D madge")
        return None

    def build_args(self, executable: str, options: MadgeOptions) -> list[str]:
        args = [
            executable,
            "--circular",
            "--json",
            "--no-spinner",
            "--extensions", ",".join(options.file_extensions),
            "--exclude", _EXCLUDE_RE,
        ]
        if options.tsconfig:
            args += ["--ts-config", options.tsconfig]
        args.append("src")
        return args

    async def run(
        self,
        source_root: Path,
        options: MadgeOptions | None = None,
        timeout: float | None = None,
    ) -> list[list[str]]:
        options = options or MadgeOptions()
        if not (source_root / "src").is_dir():
            return []

        executable = find_executable("madge", source_root)
        if executable is None:
            raise AnalyzerError(self.name, "executable not found")

        code, stdout, stderr = await run_process(
            self.name, self.build_args(executable, options), source_root,
        )

        # madge exits 1 when it finds cycles, so the exit code alone means little
        if not stdout.strip():
            if code != 0:
                raise AnalyzerError(self.name, stderr.strip() or f"exited with code {code}")
            return []

        try:
            payload = json.loads(stdout)
        except json.JSONDecodeError:
            logger.debug("madge produced unparsable output for %s", source_root)
            return []
        # madge reports paths relative to the src directory it was given
        return [[f"src/{path}" for path in cycle] for cycle in parse_cycle_list(payload)]
