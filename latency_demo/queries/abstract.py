"""
Abstract query interfaces and result contracts for the transaction latency demo.

Concrete query paths (the in-memory "cache hit" and the delayed "slow path")
implement the TransactionQuery protocol and return a QueryResult TypedDict so
the HTTP layer and the benchmark runner can treat them uniformly.
"""

from __future__ import annotations

import abc
from typing import List, Protocol, TypedDict, runtime_checkable

from latency_demo.domain.models import DataSource, Transaction


class QueryResult(TypedDict):
    """
    Outcome of one query: the selected records, how long it took and which
    path served it.
    """

    data: List[Transaction]
    query_time_ms: float
    source: DataSource


@runtime_checkable
class TransactionQuery(Protocol):
    """
    Common interface all query paths implement.

    Attributes
    ----------
    name : str
        A short machine-friendly identifier.
    description : str
        A human-friendly summary of the path.
    message : str
        Text returned to HTTP callers alongside the data.
    """

    name: str
    description: str
    message: str

    async def execute(self) -> QueryResult:
        """
        Run the query against the in-memory dataset and return the result.
        """
        ...


class AbstractTransactionQuery(abc.ABC):
    """
    ABC helper for class-based implementations.

    Subclasses set `name`, `description` and `message` and implement `execute`.
    """

    name: str
    description: str
    message: str

    @abc.abstractmethod
    async def execute(self) -> QueryResult:  # pragma: no cover - interface only
        """Run the query and return its result."""
        raise NotImplementedError


__all__ = [
    "AbstractTransactionQuery",
    "QueryResult",
    "TransactionQuery",
]
