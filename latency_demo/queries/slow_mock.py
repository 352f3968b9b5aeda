"""
Slow-mock query: the simulated "cache miss" path.

Stands in for a slow backing store. It suspends for a fixed delay and then
returns the head of the dataset unfiltered. The delay is an asyncio sleep, so
the event loop keeps serving other requests while this one waits.
"""

from __future__ import annotations

import asyncio
import time
from typing import Optional

from latency_demo.config import Settings, get_settings
from latency_demo.dataset import Dataset
from latency_demo.domain.models import DataSource
from latency_demo.queries.abstract import AbstractTransactionQuery, QueryResult
from latency_demo.utils.logging import get_logger
from latency_demo.utils.profiler import profile_block

log = get_logger(__name__)


async def sleep_at_least(seconds: float) -> None:
    """
    Suspend for no less than `seconds` of perf_counter time.

    asyncio timers may fire a hair early relative to perf_counter, so keep
    sleeping on whatever remains.
    """
    deadline = time.perf_counter() + seconds
    remaining = seconds
    while remaining > 0:
        await asyncio.sleep(remaining)
        remaining = deadline - time.perf_counter()


class SlowMockQuery(AbstractTransactionQuery):
    """
    Return the first records of the dataset after an artificial delay.
    """

    name: str = "slow_mock"
    description: str = "Fixed asyncio delay, then the first records unfiltered."
    message: str = "Slow (simulated) lookup to demonstrate a bottleneck."

    def __init__(
        self,
        dataset: Dataset,
        delay_ms: Optional[int] = None,
        sample_size: Optional[int] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        settings = settings or get_settings()
        self.dataset = dataset
        self.delay_ms = settings.slow_mock_delay_ms if delay_ms is None else delay_ms
        if sample_size is None or sample_size <= 0:
            sample_size = settings.slow_mock_sample_size
        self.sample_size = sample_size

    async def execute(self) -> QueryResult:
        with profile_block(self.name) as stats:
            await sleep_at_least(self.delay_ms / 1000.0)
            data = list(self.dataset.head(self.sample_size))

        log.info(
            f"Slow query executed in: {stats.elapsed_ms}ms",
            extra={"query": self.name, "rows": len(data), "query_time_ms": stats.elapsed_ms},
        )
        return QueryResult(
            data=data,
            query_time_ms=stats.elapsed_ms,
            source=DataSource.DATABASE_MOCK,
        )


__all__ = ["SlowMockQuery", "sleep_at_least"]
