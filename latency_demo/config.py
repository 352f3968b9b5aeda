"""
Configuration settings for the transaction latency demo.

Uses Pydantic Settings to load environment variables for the HTTP server,
logging, the synthetic dataset and the two query paths. Defaults reproduce the
demo exactly: 10,000 records, port 3000, a 7-day window and a 500 ms slow path.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # Server
    server_host: str = Field("0.0.0.0", alias="SERVER_HOST")
    server_port: int = Field(3000, alias="SERVER_PORT")

    # Dataset
    dataset_size: int = Field(10_000, alias="DATASET_SIZE", gt=0)
    dataset_users: int = Field(100, alias="DATASET_USERS", gt=0)
    dataset_history_days: int = Field(30, alias="DATASET_HISTORY_DAYS", gt=0)
    dataset_seed: Optional[int] = Field(None, alias="DATASET_SEED")

    # Query paths
    recent_window_days: int = Field(7, alias="RECENT_WINDOW_DAYS", gt=0)
    recent_default_limit: int = Field(50, alias="RECENT_DEFAULT_LIMIT", gt=0)
    slow_mock_delay_ms: int = Field(500, alias="SLOW_MOCK_DELAY_MS", ge=0)
    slow_mock_sample_size: int = Field(10, alias="SLOW_MOCK_SAMPLE_SIZE", gt=0)

    # Benchmark defaults
    benchmark_runs: int = Field(5, alias="BENCHMARK_RUNS", gt=0)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
