"""
Domain models for the transaction latency demo.

Defines the synthetic transaction schema and the JSON envelope both endpoints
answer with. Field names are snake_case in Python and camelCase on the wire
(`userId`, `totalResults`, `timeElapsed`).
"""
from __future__ import annotations

from enum import Enum
from typing import List

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class Category(str, Enum):
    """Closed set of transaction categories."""

    SALES = "Sales"
    SERVICES = "Services"
    LOGISTICS = "Logistics"
    OTHER = "Other"


class DataSource(str, Enum):
    """Label telling the caller which path served the data."""

    IN_MEMORY_CACHE = "In-Memory Cache"
    DATABASE_MOCK = "Database Mock"


class Transaction(BaseModel):
    """
    A single synthetic transaction. Immutable once generated.
    """

    id: str = Field(..., description="Sequential identifier, T-1 .. T-N.")
    user_id: str = Field(..., description="Synthetic user, U-1 .. U-<pool size>.")
    amount: float = Field(..., ge=0, description="Amount rounded to 2 decimals.")
    timestamp: int = Field(..., description="Epoch milliseconds.")
    category: Category = Field(..., description="Transaction category.")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "alias_generator": to_camel,
    }


class QueryMetadata(BaseModel):
    total_results: int
    time_elapsed: str
    source: DataSource

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "alias_generator": to_camel,
    }


class TransactionsResponse(BaseModel):
    """
    JSON body returned by both transaction endpoints.
    """

    message: str
    metadata: QueryMetadata
    data: List[Transaction]

    model_config = {
        "frozen": True,
        "populate_by_name": True,
    }


__all__ = [
    "Category",
    "DataSource",
    "QueryMetadata",
    "Transaction",
    "TransactionsResponse",
]
