"""In-process analyzer: regex import extraction plus networkx cycle search.

Needs no Node tooling, which makes it a useful fallback where dpdm and madge
are not installed. Only relative specifiers are followed; bare module names
point outside the package and cannot take part in an intra-package cycle.
"""

from __future__ import annotations

import asyncio
import logging
import re
import threading
import time
from pathlib import Path

import networkx as nx

from cycle_guard.config import NativeOptions
from cycle_guard.errors import AnalyzerError
from cycle_guard.analyzers.base import BaseAnalyzer, SOURCE_EXTENSIONS, collect_source_files

logger = logging.getLogger(__name__)

_BLOCK_COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)
_LINE_COMMENT_RE = re.compile(r"^\s*//.*$", re.MULTILINE)

# import x from './a' | import './a' | export { x } from './a' | import type { T } from './a'
_STATIC_RE = re.compile(
    r"""^\s*(?:import|export)\s+(type\s+)?(?:[\w*{}\s,$]+?\s+from\s+)?['"]([^'"\n]+)['"]""",
    re.MULTILINE,
)
_REQUIRE_RE = re.compile(r"""\brequire\(\s*['"]([^'"\n]+)['"]\s*\)""")
_DYNAMIC_RE = re.compile(r"""\bimport\(\s*['"]([^'"\n]+)['"]\s*\)""")

_JS_SUFFIXES = (".js", ".jsx", ".mjs", ".cjs")


def extract_specifiers(source: str, skip_type_only: bool = True, skip_dynamic: bool = True) -> list[str]:
    """Module specifiers imported by a JS/TS source text, in order of appearance."""
    source = _BLOCK_COMMENT_RE.sub("", source)
    source = _LINE_COMMENT_RE.sub("", source)

    found: list[tuple[int, str]] = []
    for m in _STATIC_RE.finditer(source):
        if m.group(1) and skip_type_only:
            continue
        found.append((m.start(2), m.group(2)))
    for m in _REQUIRE_RE.finditer(source):
        found.append((m.start(1), m.group(1)))
    if not skip_dynamic:
        for m in _DYNAMIC_RE.finditer(source):
            found.append((m.start(1), m.group(1)))

    found.sort()
    return [spec for _, spec in found]


def resolve_specifier(importer: Path, specifier: str, known: set[Path]) -> Path | None:
    """Map a relative specifier to one of the ``known`` source files."""
    if not specifier.startswith("."):
        return None
    base = (importer.parent / specifier).resolve()

    candidates: list[Path] = [base]
    if base.suffix in _JS_SUFFIXES:
        # TypeScript sources are commonly imported with the emitted .js name
        stem = base.with_suffix("")
        candidates += [stem.with_suffix(ext) for ext in (".ts", ".tsx")]
    candidates += [base.with_name(base.name + ext) for ext in SOURCE_EXTENSIONS]
    candidates += [base / f"index{ext}" for ext in SOURCE_EXTENSIONS]

    for candidate in candidates:
        if candidate in known:
            return candidate
    return None


class NativeAnalyzer(BaseAnalyzer):
    name = "native"

    def build_graph(
        self,
        source_root: Path,
        options: NativeOptions,
        deadline: float | None = None,
    ) -> nx.DiGraph:
        root = source_root.resolve()
        files = [p.resolve() for p in collect_source_files(root)]
        known = set(files)

        graph = nx.DiGraph()
        for path in files:
            self._check_deadline(deadline)
            node = path.relative_to(root).as_posix()
            graph.add_node(node)
            try:
                source = path.read_text(encoding="utf-8", errors="replace")
            except OSError as e:
                logger.debug("Skipping unreadable file %s: %s", path, e)
                continue
            for spec in extract_specifiers(source, options.skip_type_only, options.skip_dynamic_imports):
                target = resolve_specifier(path, spec, known)
                if target is not None:
                    graph.add_edge(node, target.relative_to(root).as_posix())
        return graph

    def find_cycles(
        self,
        source_root: Path,
        options: NativeOptions,
        deadline: float | None = None,
    ) -> list[list[str]]:
        """Cycles in the package's import graph.

        ``deadline`` is a ``time.monotonic()`` value; once it passes the scan
        stops with ``AnalyzerError``. ``simple_cycles`` can grow exponentially
        on dense graphs, so it is checked between cycles as well.
        """
        graph = self.build_graph(source_root, options, deadline)
        cycles: list[list[str]] = []
        for cycle in nx.simple_cycles(graph, length_bound=options.max_cycle_length):
            self._check_deadline(deadline)
            cycles.append(list(cycle))
        cycles.sort(key=lambda c: (len(c), sorted(c)))
        return cycles

    def _check_deadline(self, deadline: float | None) -> None:
        if deadline is not None and time.monotonic() > deadline:
            raise AnalyzerError(self.name, "scan exceeded its time budget")

    async def run(
        self,
        source_root: Path,
        options: NativeOptions | None = None,
        timeout: float | None = None,
    ) -> list[list[str]]:
        options = options or NativeOptions()
        deadline = time.monotonic() + timeout if timeout else None
        loop = asyncio.get_running_loop()
        future: asyncio.Future[list[list[str]]] = loop.create_future()

        # A daemon thread rather than the default executor: asyncio.run joins
        # executor threads on shutdown, which would outlast a timed-out scan.
        def worker() -> None:
            try:
                result = self.find_cycles(source_root, options, deadline)
            except Exception as e:
                _deliver(loop, future, exception=e)
            else:
                _deliver(loop, future, result=result)

        threading.Thread(target=worker, name=f"native-scan:{source_root.name}", daemon=True).start()
        return await future


def _deliver(
    loop: asyncio.AbstractEventLoop,
    future: asyncio.Future,
    result: list[list[str]] | None = None,
    exception: BaseException | None = None,
) -> None:
    def settle() -> None:
        if future.done():
            return
        if exception is not None:
            future.set_exception(exception)
        else:
            future.set_result(result)

    try:
        loop.call_soon_threadsafe(settle)
    except RuntimeError:
        # The loop is closed: the caller gave up waiting, nobody reads this result
        logger.debug("Dropping native scan result after the event loop closed")
