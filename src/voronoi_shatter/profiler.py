# MIT License (see LICENSE)
"""
Lightweight timing instrumentation.

Used by Scene.step and the fragmentation orchestrator to measure how long
each phase of a tick or a shatter pass takes.

Example:
    profiler = Profiler()
    with profiler.section("slice"):
        run_slicing()
    print(profiler.stats.summary())
"""
from __future__ import annotations
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator


@dataclass
class ProfileStats:
    """Raw timing samples per named section, with summary statistics."""
    samples: dict[str, list[float]] = field(default_factory=dict)

    def add(self, name: str, dt: float) -> None:
        """Record a timing sample (in seconds) for a named section."""
        self.samples.setdefault(name, []).append(dt)

    def summary(self) -> dict[str, dict[str, float]]:
        """
        Per-section statistics.

        Returns:
            Dict mapping section name to {'n', 'mean_ms', 'max_ms', 'total_ms'}.
        """
        out = {}
        for name, times in self.samples.items():
            n = len(times)
            out[name] = {
                "n": n,
                "mean_ms": 1e3 * (sum(times) / n),
                "max_ms": 1e3 * max(times),
                "total_ms": 1e3 * sum(times),
            }
        return out


class Profiler:
    """Context-manager based section timer."""

    def __init__(self) -> None:
        self.stats = ProfileStats()

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        """Time the enclosed block under `name`, even if it raises."""
        t0 = time.perf_counter()
        try:
            yield
        finally:
            self.stats.add(name, time.perf_counter() - t0)

    def reset(self) -> None:
        self.stats = ProfileStats()
