"""
Timing and profiling utilities for the transaction latency demo.

This module provides a context manager to measure:
- Wall-clock time (perf_counter), reported in seconds and milliseconds
- CPU usage (psutil), when resource sampling is enabled
- Peak RSS via a background sampling thread, when resource sampling is enabled

Request handlers only need the wall-clock part; the benchmark runner turns
sampling on to report the process footprint next to the latencies.

Usage examples:
    from latency_demo.utils.profiler import profile_block

    with profile_block("recent") as stats:
        run_query()

    print(stats.elapsed_ms, stats.peak_rss_bytes)
"""

from __future__ import annotations

import contextlib
import threading
import time
from dataclasses import dataclass, field
from typing import Generator, Optional

import psutil


@dataclass
class ProfileStats:
    """
    Container for profiling measurements.
    """

    label: str
    start_ts: float = field(default=0.0)
    end_ts: float = field(default=0.0)
    duration_seconds: float = field(default=0.0)
    peak_rss_bytes: Optional[int] = field(default=None)
    cpu_percent: Optional[float] = field(default=None)

    @property
    def elapsed_ms(self) -> float:
        """Elapsed wall-clock time in milliseconds, rounded to 3 decimals."""
        return round(self.duration_seconds * 1000.0, 3)


@contextlib.contextmanager
def profile_block(
    label: str, sample_resources: bool = False, sample_interval_ms: int = 50
) -> Generator[ProfileStats, None, None]:
    """
    Context manager to profile a block of code.

    Works around ``await`` expressions as well, so async handlers can time
    the whole coroutine body including any suspension.

    Parameters
    ----------
    label : str
        Human-friendly label for the profiled block.
    sample_resources : bool
        Whether to sample peak RSS and CPU with psutil while the block runs.
    sample_interval_ms : int
        Interval in milliseconds for RSS sampling. Lower = more accurate but higher overhead.
    """
    stats = ProfileStats(label=label)
    process = psutil.Process() if sample_resources else None
    peak_rss = 0
    stop_sampling = threading.Event()
    sampler: Optional[threading.Thread] = None

    def _sample_memory() -> None:
        """Background thread to sample RSS at regular intervals."""
        nonlocal peak_rss
        while not stop_sampling.is_set():
            try:
                peak_rss = max(peak_rss, process.memory_info().rss)
            except psutil.Error:
                break
            stop_sampling.wait(timeout=sample_interval_ms / 1000.0)

    if process is not None:
        # cpu_percent needs a priming call
        process.cpu_percent(interval=None)
        peak_rss = process.memory_info().rss
        sampler = threading.Thread(target=_sample_memory, daemon=True)
        sampler.start()

    stats.start_ts = time.perf_counter()
    try:
        yield stats
    finally:
        stats.end_ts = time.perf_counter()
        stats.duration_seconds = stats.end_ts - stats.start_ts

        if sampler is not None:
            stop_sampling.set()
            sampler.join(timeout=1.0)
            stats.peak_rss_bytes = peak_rss if peak_rss > 0 else None
            stats.cpu_percent = process.cpu_percent(interval=None)


__all__ = ["ProfileStats", "profile_block"]
