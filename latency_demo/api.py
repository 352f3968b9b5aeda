"""
HTTP layer for the transaction latency demo.

Builds a FastAPI application with two GET routes under `/api/v1`:

- `/transactions/recent` serves the in-memory "cache hit" path.
- `/transactions/slow-mock` serves the delayed "slow path".

The dataset is generated once by `create_app` and stored on `app.state`;
handlers receive it (and the settings) through dependencies, never through a
module-level global.

Usage:
    import uvicorn
    from latency_demo.api import create_app

    uvicorn.run(create_app(), host="0.0.0.0", port=3000)
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import APIRouter, Depends, FastAPI, Query, Request, Response
from fastapi.responses import JSONResponse

from latency_demo.config import Settings, get_settings
from latency_demo.dataset import Dataset, build_dataset
from latency_demo.domain.models import QueryMetadata, TransactionsResponse
from latency_demo.queries.abstract import QueryResult, TransactionQuery
from latency_demo.queries.recent import RecentTransactionsQuery, parse_limit
from latency_demo.queries.slow_mock import SlowMockQuery
from latency_demo.utils.logging import get_logger

log = get_logger(__name__)

API_PREFIX = "/api/v1"
RECENT_PATH = "/transactions/recent"
SLOW_MOCK_PATH = "/transactions/slow-mock"
QUERY_TIME_HEADER = "X-Query-Time"

router = APIRouter(prefix=API_PREFIX)


def format_query_time(query_time_ms: float) -> str:
    """Render milliseconds without a dangling `.0` (500.0 -> "500")."""
    text = repr(float(query_time_ms))
    return text[:-2] if text.endswith(".0") else text


def get_dataset(request: Request) -> Dataset:
    return request.app.state.dataset


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


async def _respond(query: TransactionQuery, response: Response) -> TransactionsResponse:
    result: QueryResult = await query.execute()
    elapsed = format_query_time(result["query_time_ms"])
    response.headers[QUERY_TIME_HEADER] = elapsed
    return TransactionsResponse(
        message=query.message,
        metadata=QueryMetadata(
            total_results=len(result["data"]),
            time_elapsed=f"{elapsed}ms",
            source=result["source"],
        ),
        data=result["data"],
    )


@router.get(RECENT_PATH, response_model=TransactionsResponse)
async def recent_transactions(
    response: Response,
    limit: Optional[str] = Query(None, description="Positive integer; anything else means the default."),
    dataset: Dataset = Depends(get_dataset),
    settings: Settings = Depends(get_app_settings),
) -> TransactionsResponse:
    """
    Most recent transactions of the trailing window, newest first.
    """
    query = RecentTransactionsQuery(
        dataset,
        limit=parse_limit(limit, settings.recent_default_limit),
        settings=settings,
    )
    return await _respond(query, response)


@router.get(SLOW_MOCK_PATH, response_model=TransactionsResponse)
async def slow_mock_transactions(
    response: Response,
    dataset: Dataset = Depends(get_dataset),
    settings: Settings = Depends(get_app_settings),
) -> TransactionsResponse:
    """
    Head of the dataset after an artificial, non-blocking delay.
    """
    query = SlowMockQuery(dataset, settings=settings)
    return await _respond(query, response)


async def _unhandled_exception(request: Request, exc: Exception) -> JSONResponse:
    log.exception(
        "Unhandled error while serving request",
        exc_info=exc,
        extra={"path": request.url.path, "method": request.method},
    )
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


def _startup_banner(settings: Settings) -> None:
    base_url = f"http://localhost:{settings.server_port}{API_PREFIX}"
    log.info(f"[API Demo] Server running on port {settings.server_port}")
    log.info(f"Fast endpoint: {base_url}{RECENT_PATH}")
    log.info(f"Slow endpoint: {base_url}{SLOW_MOCK_PATH}")


def create_app(settings: Optional[Settings] = None, dataset: Optional[Dataset] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Parameters
    ----------
    settings : Settings | None
        Effective configuration. Defaults to the cached process settings.
    dataset : Dataset | None
        Pre-built dataset. When omitted, one is generated right away so the
        data exists before the first request arrives.
    """
    settings = settings or get_settings()
    dataset = dataset if dataset is not None else build_dataset(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        _startup_banner(app.state.settings)
        yield

    app = FastAPI(title="Transaction Latency Demo", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.dataset = dataset
    app.include_router(router)
    app.add_exception_handler(Exception, _unhandled_exception)
    return app


__all__ = [
    "API_PREFIX",
    "QUERY_TIME_HEADER",
    "RECENT_PATH",
    "SLOW_MOCK_PATH",
    "create_app",
    "format_query_time",
]
