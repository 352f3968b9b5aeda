"""
Recent-transactions query: the "cache hit" path.

Filters the in-memory dataset to the trailing window, orders it newest first
and truncates it to the requested limit. No I/O is involved, so the query
never suspends and never fails.
"""

from __future__ import annotations

from operator import attrgetter
from typing import Optional

from latency_demo.config import Settings, get_settings
from latency_demo.dataset import DAY_MS, Dataset, now_ms
from latency_demo.domain.models import DataSource
from latency_demo.queries.abstract import AbstractTransactionQuery, QueryResult
from latency_demo.utils.logging import get_logger
from latency_demo.utils.profiler import profile_block

log = get_logger(__name__)


def parse_limit(raw: Optional[str], default: int) -> int:
    """
    Interpret the `limit` query parameter.

    Anything that is not a positive integer (missing, non-numeric, decimal,
    zero or negative) falls back to `default`.
    """
    if raw is None:
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        return default
    return value if value > 0 else default


def _positive_or(value: Optional[int], default: int) -> int:
    return value if value is not None and value > 0 else default


class RecentTransactionsQuery(AbstractTransactionQuery):
    """
    Select the most recent transactions straight from memory.
    """

    name: str = "recent"
    description: str = "Filter last N days, sort by timestamp desc, slice to limit."
    message: str = "Recent transactions loaded quickly."

    def __init__(
        self,
        dataset: Dataset,
        limit: Optional[int] = None,
        window_days: Optional[int] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        settings = settings or get_settings()
        self.dataset = dataset
        self.limit = _positive_or(limit, settings.recent_default_limit)
        self.window_days = _positive_or(window_days, settings.recent_window_days)

    async def execute(self) -> QueryResult:
        with profile_block(self.name) as stats:
            cutoff = now_ms() - self.window_days * DAY_MS
            selected = [t for t in self.dataset if t.timestamp > cutoff]
            selected.sort(key=attrgetter("timestamp"), reverse=True)
            data = selected[: self.limit]

        log.info(
            f"Query executed in: {stats.elapsed_ms}ms",
            extra={"query": self.name, "rows": len(data), "query_time_ms": stats.elapsed_ms},
        )
        return QueryResult(
            data=data,
            query_time_ms=stats.elapsed_ms,
            source=DataSource.IN_MEMORY_CACHE,
        )


__all__ = ["RecentTransactionsQuery", "parse_limit"]
