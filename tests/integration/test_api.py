"""HTTP contract of both transaction endpoints."""

from __future__ import annotations

import asyncio
import logging
import time

import httpx
import pytest
from fastapi.testclient import TestClient

from latency_demo.api import QUERY_TIME_HEADER, create_app, format_query_time
from latency_demo.dataset import DAY_MS, Dataset, now_ms
from latency_demo.queries.recent import RecentTransactionsQuery

RECENT_URL = "/api/v1/transactions/recent"
SLOW_MOCK_URL = "/api/v1/transactions/slow-mock"
DEFAULT_LIMIT = 50
SLOW_MOCK_DELAY_MS = 500


def _assert_envelope(body: dict, source: str) -> None:
    assert set(body) == {"message", "metadata", "data"}
    assert isinstance(body["message"], str) and body["message"]
    metadata = body["metadata"]
    assert metadata["source"] == source
    assert metadata["totalResults"] == len(body["data"])
    assert metadata["timeElapsed"].endswith("ms")
    float(metadata["timeElapsed"][:-2])


@pytest.mark.asyncio
async def test_recent_with_limit(client: httpx.AsyncClient):
    response = await client.get(RECENT_URL, params={"limit": "5"})

    assert response.status_code == 200
    body = response.json()
    _assert_envelope(body, "In-Memory Cache")
    data = body["data"]
    assert len(data) == 5

    cutoff = now_ms() - 7 * DAY_MS
    assert all(item["timestamp"] > cutoff for item in data)
    timestamps = [item["timestamp"] for item in data]
    assert timestamps == sorted(timestamps, reverse=True)

    query_time = float(response.headers[QUERY_TIME_HEADER])
    assert query_time >= 0
    assert body["metadata"]["timeElapsed"] == f"{response.headers[QUERY_TIME_HEADER]}ms"


@pytest.mark.asyncio
async def test_recent_transaction_fields(client: httpx.AsyncClient):
    response = await client.get(RECENT_URL, params={"limit": "1"})
    (item,) = response.json()["data"]

    assert set(item) == {"id", "userId", "amount", "timestamp", "category"}
    assert item["id"].startswith("T-")
    assert item["userId"].startswith("U-")
    assert isinstance(item["amount"], (int, float)) and item["amount"] >= 0
    assert isinstance(item["timestamp"], int)
    assert item["category"] in {"Sales", "Services", "Logistics", "Other"}


@pytest.mark.asyncio
@pytest.mark.parametrize("raw_limit", ["abc", "-5", "0", "1.5", None])
async def test_recent_invalid_limit_falls_back_to_default(client: httpx.AsyncClient, raw_limit):
    params = {"limit": raw_limit} if raw_limit is not None else {}
    response = await client.get(RECENT_URL, params=params)

    assert response.status_code == 200
    body = response.json()
    assert body["metadata"]["totalResults"] == DEFAULT_LIMIT
    assert len(body["data"]) == DEFAULT_LIMIT


@pytest.mark.asyncio
async def test_recent_limit_zero_matches_missing_limit(client: httpx.AsyncClient):
    with_zero = (await client.get(RECENT_URL, params={"limit": "0"})).json()["data"]
    without = (await client.get(RECENT_URL)).json()["data"]
    assert [t["id"] for t in with_zero] == [t["id"] for t in without]


@pytest.mark.asyncio
async def test_recent_limit_above_matches_returns_all_matches(client: httpx.AsyncClient, dataset: Dataset):
    before = now_ms() - 7 * DAY_MS
    body = (await client.get(RECENT_URL, params={"limit": "100000"})).json()
    upper = sum(1 for t in dataset if t.timestamp > before)

    assert body["metadata"]["totalResults"] == len(body["data"])
    assert DEFAULT_LIMIT < len(body["data"]) <= upper


@pytest.mark.asyncio
async def test_slow_mock_returns_first_ten_after_delay(client: httpx.AsyncClient, dataset: Dataset):
    start = time.perf_counter()
    response = await client.get(SLOW_MOCK_URL)
    elapsed_ms = (time.perf_counter() - start) * 1000

    assert response.status_code == 200
    body = response.json()
    _assert_envelope(body, "Database Mock")
    assert body["metadata"]["totalResults"] == 10
    assert [t["id"] for t in body["data"]] == [f"T-{n}" for n in range(1, 11)]
    assert body["data"] == [t.model_dump(by_alias=True, mode="json") for t in dataset[:10]]

    assert elapsed_ms >= SLOW_MOCK_DELAY_MS
    assert float(response.headers[QUERY_TIME_HEADER]) >= SLOW_MOCK_DELAY_MS


@pytest.mark.asyncio
async def test_recent_completes_while_slow_mock_pending(client: httpx.AsyncClient):
    completed: list[str] = []

    async def fetch(url: str, label: str) -> httpx.Response:
        response = await client.get(url)
        completed.append(label)
        return response

    slow_task = asyncio.create_task(fetch(SLOW_MOCK_URL, "slow"))
    await asyncio.sleep(0.05)
    fast = await fetch(RECENT_URL, "fast")

    assert fast.status_code == 200
    assert not slow_task.done()
    slow = await slow_task
    assert slow.status_code == 200
    assert completed == ["fast", "slow"]


def test_unknown_route_is_not_served(app):
    with TestClient(app) as tc:
        assert tc.get("/api/v1/transactions").status_code == 404


def test_unexpected_fault_yields_generic_500(app, monkeypatch):
    async def boom(self):
        raise RuntimeError("kaboom")

    monkeypatch.setattr(RecentTransactionsQuery, "execute", boom)
    with TestClient(app, raise_server_exceptions=False) as tc:
        response = tc.get(RECENT_URL)

    assert response.status_code == 500
    assert response.json() == {"message": "Internal server error"}


def test_startup_banner_names_both_endpoints(test_settings, dataset, caplog):
    app = create_app(test_settings, dataset)
    with caplog.at_level(logging.INFO, logger="latency_demo.api"):
        with TestClient(app):
            pass

    messages = [r.getMessage() for r in caplog.records if r.name == "latency_demo.api"]
    assert "[API Demo] Server running on port 3000" in messages
    assert "Fast endpoint: http://localhost:3000/api/v1/transactions/recent" in messages
    assert "Slow endpoint: http://localhost:3000/api/v1/transactions/slow-mock" in messages


def test_json_body_is_accepted_and_ignored(app):
    with TestClient(app) as tc:
        response = tc.request("GET", RECENT_URL, params={"limit": "3"}, json={"unused": True})
    assert response.status_code == 200
    assert response.json()["metadata"]["totalResults"] == 3


@pytest.mark.parametrize(
    ("value", "expected"),
    [(0.123, "0.123"), (500.0, "500"), (501.25, "501.25")],
)
def test_format_query_time(value, expected):
    assert format_query_time(value) == expected


@pytest.mark.asyncio
async def test_app_serves_with_injected_settings_despite_bad_environment(
    client: httpx.AsyncClient, monkeypatch, clear_settings_cache
):
    monkeypatch.setenv("SERVER_PORT", "notaport")

    recent = await client.get(RECENT_URL, params={"limit": "5"})
    slow = await client.get(SLOW_MOCK_URL)

    assert recent.status_code == 200
    assert recent.json()["metadata"]["totalResults"] == 5
    assert slow.status_code == 200
    assert slow.json()["metadata"]["totalResults"] == 10
