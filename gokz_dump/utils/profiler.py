"""
Profiling utilities for gokz-dump.

Measures each pipeline stage (connect, extract, transform, write):
- Wall-clock time (perf_counter)
- Peak resident memory via a background sampling thread (psutil)

Usage example:
    from gokz_dump.utils.profiler import profile_block

    with profile_block("extract") as stats:
        rows = await fetch_raw_rows(conn, query)

    print(stats.duration_seconds, stats.peak_rss_bytes)
"""

from __future__ import annotations

import contextlib
import threading
import time
from dataclasses import dataclass, field
from typing import Generator, List, Optional

import psutil


@dataclass
class ProfileStats:
    """
    Container for the measurements of one stage.
    """

    label: str
    start_ts: float = field(default=0.0)
    end_ts: float = field(default=0.0)
    duration_seconds: float = field(default=0.0)
    peak_rss_bytes: Optional[int] = field(default=None)


@contextlib.contextmanager
def profile_block(label: str, sample_interval_ms: int = 50) -> Generator[ProfileStats, None, None]:
    """
    Context manager to time a block and track its peak RSS.

    A background thread samples the process RSS every `sample_interval_ms`
    while the block runs; the edges are sampled too, so even a block shorter
    than one interval gets a value.

    Stats are filled in even when the block raises, so a failed stage still
    reports how long it ran.
    """
    stats = ProfileStats(label=label)
    process = psutil.Process()
    peak_rss = process.memory_info().rss
    stop_sampling = threading.Event()

    def _sample_memory() -> None:
        nonlocal peak_rss
        while not stop_sampling.is_set():
            try:
                peak_rss = max(peak_rss, process.memory_info().rss)
            except psutil.Error:
                break
            stop_sampling.wait(timeout=sample_interval_ms / 1000.0)

    sampler = threading.Thread(target=_sample_memory, name=f"rss-{label}", daemon=True)
    sampler.start()

    stats.start_ts = time.perf_counter()
    try:
        yield stats
    finally:
        stats.end_ts = time.perf_counter()
        stats.duration_seconds = stats.end_ts - stats.start_ts
        stop_sampling.set()
        sampler.join(timeout=1.0)
        stats.peak_rss_bytes = max(peak_rss, process.memory_info().rss)


@dataclass
class StageTimings:
    """Ordered collection of stage stats for a whole run."""

    stages: List[ProfileStats] = field(default_factory=list)

    @contextlib.contextmanager
    def stage(self, label: str) -> Generator[ProfileStats, None, None]:
        with profile_block(label) as stats:
            self.stages.append(stats)
            yield stats

    @property
    def total_seconds(self) -> float:
        return sum(s.duration_seconds for s in self.stages)

    @property
    def peak_rss_bytes(self) -> Optional[int]:
        values = [s.peak_rss_bytes for s in self.stages if s.peak_rss_bytes is not None]
        return max(values) if values else None


__all__ = ["ProfileStats", "StageTimings", "profile_block"]
