"""
Synthetic dataset generation for the transaction latency demo.

Builds the fixed, ordered set of transactions once at process start and wraps
it in a read-only container that the HTTP handlers and the benchmark runner
share. Generation is pseudo-random; pass a seed (and a reference "now") to
make it deterministic.
"""

from __future__ import annotations

import random
import time
from typing import Iterator, Optional, Sequence, Tuple, overload

from latency_demo.config import Settings, get_settings
from latency_demo.domain.models import Category, Transaction
from latency_demo.utils.logging import get_logger
from latency_demo.utils.profiler import profile_block

log = get_logger(__name__)

DAY_MS = 24 * 60 * 60 * 1000

_CATEGORIES: Tuple[Category, ...] = tuple(Category)


def now_ms() -> int:
    """Current wall-clock time as epoch milliseconds."""
    return int(time.time() * 1000)


class Dataset(Sequence[Transaction]):
    """
    Immutable, ordered collection of transactions.

    Backed by a tuple, so handlers can read it concurrently without locking.
    """

    __slots__ = ("_transactions", "_generated_at_ms")

    def __init__(self, transactions: Sequence[Transaction], generated_at_ms: int) -> None:
        self._transactions: Tuple[Transaction, ...] = tuple(transactions)
        self._generated_at_ms = generated_at_ms

    @property
    def generated_at_ms(self) -> int:
        return self._generated_at_ms

    @overload
    def __getitem__(self, index: int) -> Transaction: ...

    @overload
    def __getitem__(self, index: slice) -> Tuple[Transaction, ...]: ...

    def __getitem__(self, index):
        return self._transactions[index]

    def __len__(self) -> int:
        return len(self._transactions)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(self._transactions)

    def __repr__(self) -> str:
        return f"Dataset(size={len(self)}, generated_at_ms={self._generated_at_ms})"

    def head(self, count: int) -> Tuple[Transaction, ...]:
        """First `count` transactions in generation order."""
        return self._transactions[:count]


def generate_transactions(
    size: int,
    user_pool: int,
    history_days: int,
    seed: Optional[int] = None,
    reference_ms: Optional[int] = None,
) -> Tuple[Transaction, ...]:
    """
    Generate `size` transactions spread over the last `history_days` days.

    Ids are sequential (T-1 .. T-size); users, amounts, offsets and categories
    are drawn uniformly.
    """
    rng = random.Random(seed)
    now = reference_ms if reference_ms is not None else now_ms()
    history_ms = history_days * DAY_MS

    transactions = []
    for i in range(size):
        transactions.append(
            Transaction(
                id=f"T-{i + 1}",
                user_id=f"U-{rng.randint(1, user_pool)}",
                amount=round(rng.random() * 1000, 2),
                timestamp=now - rng.randrange(history_ms),
                category=rng.choice(_CATEGORIES),
            )
        )
    return tuple(transactions)


def build_dataset(settings: Optional[Settings] = None, reference_ms: Optional[int] = None) -> Dataset:
    """
    Generate the process-wide dataset from settings.
    """
    settings = settings or get_settings()
    generated_at = reference_ms if reference_ms is not None else now_ms()

    with profile_block("dataset") as stats:
        transactions = generate_transactions(
            size=settings.dataset_size,
            user_pool=settings.dataset_users,
            history_days=settings.dataset_history_days,
            seed=settings.dataset_seed,
            reference_ms=generated_at,
        )

    log.info(
        f"Generated {len(transactions):,} transactions in {stats.elapsed_ms}ms",
        extra={"rows": len(transactions), "seed": settings.dataset_seed},
    )
    return Dataset(transactions, generated_at_ms=generated_at)


__all__ = ["DAY_MS", "Dataset", "build_dataset", "generate_transactions", "now_ms"]
