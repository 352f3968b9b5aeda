"""
Domain package for the transaction latency demo.

Exports the core domain models used by the dataset generator, the query paths
and the HTTP layer. Keep this package focused on data definitions and
validation concerns.
"""

from latency_demo.domain.models import (
    Category,
    DataSource,
    QueryMetadata,
    Transaction,
    TransactionsResponse,
)

__all__ = [
    "Category",
    "DataSource",
    "QueryMetadata",
    "Transaction",
    "TransactionsResponse",
]
