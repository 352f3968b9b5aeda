"""
Transaction Latency Demo - in-memory "cache hit" vs. simulated slow path.

This package generates a fixed set of synthetic transactions at startup and
serves them over HTTP in two ways:

- Filtering, sorting and slicing the in-memory dataset directly
- Returning a slice after an artificial, non-blocking delay

The timing metadata attached to every response (and the `bench` command)
makes the latency gap between both paths visible.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from latency_demo.api import create_app
from latency_demo.benchmark import available_queries, run_benchmark
from latency_demo.config import Settings, get_settings
from latency_demo.dataset import Dataset, build_dataset, generate_transactions
from latency_demo.queries import (
    AbstractTransactionQuery,
    QueryResult,
    RecentTransactionsQuery,
    SlowMockQuery,
    TransactionQuery,
)
from latency_demo.utils.logging import configure_logging, get_logger
from latency_demo.utils.profiler import ProfileStats, profile_block

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Dataset
    "Dataset",
    "build_dataset",
    "generate_transactions",
    # Query paths
    "AbstractTransactionQuery",
    "QueryResult",
    "RecentTransactionsQuery",
    "SlowMockQuery",
    "TransactionQuery",
    # HTTP
    "create_app",
    # Benchmark
    "available_queries",
    "run_benchmark",
    # Logging
    "configure_logging",
    "get_logger",
    # Profiling
    "ProfileStats",
    "profile_block",
]
