"""Analyzer registry."""

from __future__ import annotations

from cycle_guard.analyzers.base import AnalyzerUnavailable, BaseAnalyzer
from cycle_guard.analyzers.dpdm_analyzer import DpdmAnalyzer
from cycle_guard.analyzers.madge_analyzer import MadgeAnalyzer
from cycle_guard.analyzers.native_analyzer import NativeAnalyzer

_REGISTRY: dict[str, type[BaseAnalyzer]] = {
    DpdmAnalyzer.name: DpdmAnalyzer,
    MadgeAnalyzer.name: MadgeAnalyzer,
    NativeAnalyzer.name: NativeAnalyzer,
}

DEFAULT_ANALYZERS = ("dpdm", "madge")


def available_analyzers() -> list[str]:
    return list(_REGISTRY)


def get_analyzer(name: str) -> BaseAnalyzer | AnalyzerUnavailable:
    """Instantiate a registered analyzer, or describe why it cannot be used."""
    cls = _REGISTRY.get(name)
    if cls is None:
        return AnalyzerUnavailable(name, f"unknown analyzer {name!r}")
    return cls()


__all__ = [
    "AnalyzerUnavailable",
    "BaseAnalyzer",
    "DEFAULT_ANALYZERS",
    "DpdmAnalyzer",
    "MadgeAnalyzer",
    "NativeAnalyzer",
    "available_analyzers",
    "get_analyzer",
]
