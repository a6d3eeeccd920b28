"""Rotation-invariant cycle keys and deduplication."""

from __future__ import annotations

from collections.abc import Iterable, Sequence


def normalize_cycle(cycle: Sequence[str]) -> str:
    """Rotate ``cycle`` so its smallest element comes first and join it.

    Only rotations are folded together. ``a -> b -> c`` and its reverse
    ``a -> c -> b`` describe different edges and keep different keys.
    """
    if not cycle:
        return ""
    start = cycle.index(min(cycle))
    rotated = [*cycle[start:], *cycle[:start]]
    return " -> ".join(rotated)


def deduplicate_cycles(cycles: Iterable[Sequence[str]]) -> list[list[str]]:
    """Drop repeated rotations of the same cycle, keeping first-seen order."""
    seen: set[str] = set()
    unique: list[list[str]] = []
    for cycle in cycles:
        key = normalize_cycle(cycle)
        if key in seen:
            continue
        seen.add(key)
        unique.append(list(cycle))
    return unique
