"""dpdm adapter: parses every source file as an entry and reads ``circulars`` from its JSON report."""

from __future__ import annotations

import json
import logging
import tempfile
from pathlib import Path

from cycle_guard.config import DpdmOptions
from cycle_guard.errors import AnalyzerError
from cycle_guard.analyzers.base import (
    AnalyzerUnavailable,
    BaseAnalyzer,
    collect_source_files,
    find_executable,
    parse_cycle_list,
    run_process,
)

logger = logging.getLogger(__name__)


class DpdmAnalyzer(BaseAnalyzer):
    name = "dpdm"

    def check_available(self, source_root: Path) -> AnalyzerUnavailable | None:
        if find_executable("dpdm", source_root) is None:
            return AnalyzerUnavailable(self.name, "dpdm is not installed. Run: pnpm add -D dpdm")
        return None

    def build_args(
        self,
        executable: str,
        entries: list[str],
        output: Path,
        options: DpdmOptions,
    ) -> list[str]:
        args = [
            executable,
            "--no-tree",
            "--no-warning",
            "--no-progress",
            "--circular",
            "--context", ".",
            "--extensions", ".ts,.tsx,.js,.jsx",
            "--output", str(output),
        ]
        if options.skip_type_only:
            args.append("--transform")
        if options.skip_dynamic_imports:
            args += ["--skip-dynamic-imports", "circular"]
        if options.tsconfig:
            args += ["--tsconfig", options.tsconfig]
        args += entries
        return args

    async def run(
        self,
        source_root: Path,
        options: DpdmOptions | None = None,
        timeout: float | None = None,
    ) -> list[list[str]]:
        options = options or DpdmOptions()
        entries = [p.relative_to(source_root).as_posix() for p in collect_source_files(source_root)]
        if not entries:
            return []

        executable = find_executable("dpdm", source_root)
        if executable is None:
            raise AnalyzerError(self.name, "executable not found")

        with tempfile.TemporaryDirectory(prefix="cycle-guard-dpdm-") as tmp:
            output = Path(tmp) / "dpdm.json"
            code, _stdout, stderr = await run_process(
                self.name, self.build_args(executable, entries, output, options), source_root,
            )

            if not output.is_file():
                if code != 0:
                    raise AnalyzerError(self.name, stderr.strip() or f"exited with code {code}")
                return []

            try:
                report = json.loads(output.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError):
                logger.debug("dpdm produced an unreadable report for %s", source_root)
                return []

        if not isinstance(report, dict):
            return []
        return parse_cycle_list(report.get("circulars"))
