"""
Query paths for the transaction latency demo.

This module re-exports the abstract interfaces and the concrete query classes
so downstream code can import from `latency_demo.queries` directly.
"""

from latency_demo.queries.abstract import (
    AbstractTransactionQuery,
    QueryResult,
    TransactionQuery,
)
from latency_demo.queries.recent import RecentTransactionsQuery, parse_limit
from latency_demo.queries.slow_mock import SlowMockQuery

__all__ = [
    # Abstracts
    "AbstractTransactionQuery",
    "QueryResult",
    "TransactionQuery",
    # Concrete queries
    "RecentTransactionsQuery",
    "SlowMockQuery",
    "parse_limit",
]
