"""
Pytest configuration for the transaction latency demo.

Provides fixtures for:
- Settings with a deterministic dataset seed
- A session-wide generated dataset (generation is the slowest setup step)
- The FastAPI app and an in-process async HTTP client
"""

from __future__ import annotations

from typing import AsyncIterator

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from latency_demo.api import create_app
from latency_demo.config import Settings, get_settings
from latency_demo.dataset import Dataset, build_dataset

TEST_SEED = 42


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Default settings with a fixed seed so failures are reproducible.
    """
    return Settings(dataset_seed=TEST_SEED, log_level="DEBUG")


@pytest.fixture(scope="session")
def dataset(test_settings: Settings) -> Dataset:
    """
    Full-size dataset shared by every test; it is immutable, so sharing is safe.
    """
    return build_dataset(test_settings)


@pytest.fixture
def app(test_settings: Settings, dataset: Dataset) -> FastAPI:
    return create_app(test_settings, dataset)


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    """
    Async client talking to the app in-process over ASGI.
    """
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def clear_settings_cache():
    """
    Reset the cached settings around tests that tweak the environment.
    """
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
