"""
Utilities package for the transaction latency demo.

Exports shared helpers for logging, timing and other cross-cutting concerns.
Keep this package lightweight and free of domain-specific logic.
"""

from latency_demo.utils.logging import configure_logging, get_logger
from latency_demo.utils.profiler import ProfileStats, profile_block

__all__ = [
    "configure_logging",
    "get_logger",
    "ProfileStats",
    "profile_block",
]
