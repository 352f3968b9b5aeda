"""
Benchmark runner comparing the query paths in-process.

Runs each query path several times against the shared dataset, profiles every
run and aggregates the latencies so the gap between the in-memory path and the
slow path is visible without an HTTP client.

Usage (example from CLI):
    from latency_demo.benchmark import run_benchmark

    results = run_benchmark(query_names=["recent", "slow_mock"], runs=5)
    print(results)

Outputs are saved to `results/` by default:
- `results/latest.json` (last run)
- `results/run-<timestamp>.json` (timestamped archive)
"""

from __future__ import annotations

import asyncio
import json
import statistics
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

from latency_demo.config import Settings, get_settings
from latency_demo.dataset import Dataset, build_dataset
from latency_demo.queries.abstract import TransactionQuery
from latency_demo.queries.recent import RecentTransactionsQuery
from latency_demo.queries.slow_mock import SlowMockQuery
from latency_demo.utils.logging import get_logger
from latency_demo.utils.profiler import profile_block

log = get_logger(__name__)

QueryFactory = Callable[[Dataset, Settings, Optional[int]], TransactionQuery]


def _round_float(value: float, decimals: int = 3) -> float:
    """Round a float to specified decimal places for human-readable output."""
    return round(value, decimals)


def _query_factories() -> Dict[str, QueryFactory]:
    """Registry of available query paths."""
    return {
        "recent": lambda dataset, settings, limit: RecentTransactionsQuery(
            dataset,
            limit=limit,
            settings=settings,
        ),
        "slow_mock": lambda dataset, settings, limit: SlowMockQuery(dataset, settings=settings),
    }


def available_queries() -> List[str]:
    """List available query names."""
    return sorted(_query_factories().keys())


def _resolve_query(
    name: str, dataset: Dataset, settings: Settings, limit: Optional[int]
) -> TransactionQuery:
    factories = _query_factories()
    if name not in factories:
        raise ValueError(f"Unknown query '{name}'. Available: {', '.join(factories)}")
    return factories[name](dataset, settings, limit)


def _aggregate_runs(run_results: List[dict]) -> dict:
    """
    Aggregate multiple runs of one query into a statistical summary.

    Failed runs are left out of the latency statistics but still counted.
    """
    ok = [r for r in run_results if not r.get("error")]
    latencies = [r["query_time_ms"] for r in ok]
    peak_rss_values = [r["peak_rss_bytes"] for r in ok if r.get("peak_rss_bytes")]

    aggregated: dict = {
        "runs": len(run_results),
        "failed_runs": len(run_results) - len(ok),
        "rows": ok[0]["rows"] if ok else 0,
        "source": run_results[0].get("source"),
    }
    if latencies:
        aggregated["query_time_ms"] = {
            "median": _round_float(statistics.median(latencies)),
            "mean": _round_float(statistics.mean(latencies)),
            "stddev": _round_float(statistics.stdev(latencies)) if len(latencies) > 1 else 0.0,
            "min": _round_float(min(latencies)),
            "max": _round_float(max(latencies)),
        }
    if peak_rss_values:
        aggregated["peak_rss_bytes"] = int(statistics.median(peak_rss_values))
    return aggregated


async def _profiled_execute(query: TransactionQuery) -> dict:
    with profile_block(query.name, sample_resources=True) as stats:
        try:
            result = await query.execute()
        except Exception as exc:  # noqa: BLE001 - a failed run is recorded, not fatal
            log.exception(f"[QUERY FAILED] {query.name}", extra={"query": query.name})
            return {"rows": 0, "query_time_ms": 0.0, "source": None, "error": str(exc)}

    return {
        "rows": len(result["data"]),
        "query_time_ms": result["query_time_ms"],
        "source": result["source"].value,
        "wall_time_ms": stats.elapsed_ms,
        "peak_rss_bytes": stats.peak_rss_bytes,
        "cpu_percent": _round_float(stats.cpu_percent, 1) if stats.cpu_percent else None,
    }


def _persist_results(payload: dict, results_dir: Path) -> None:
    results_dir.mkdir(parents=True, exist_ok=True)
    latest_path = results_dir / "latest.json"
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    archive_path = results_dir / f"run-{timestamp}.json"

    for path in (latest_path, archive_path):
        with path.open("w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, sort_keys=True)

    log.info("Results persisted", extra={"latest": str(latest_path), "archive": str(archive_path)})


async def _run_queries(
    names: List[str],
    dataset: Dataset,
    settings: Settings,
    limit: Optional[int],
    runs: int,
) -> List[dict]:
    results: List[dict] = []
    for name in names:
        log.info(f"[QUERY] {name.upper()}", extra={"query": name, "runs": runs})
        run_results: List[dict] = []
        for run_num in range(1, runs + 1):
            query = _resolve_query(name, dataset, settings, limit)
            result = await _profiled_execute(query)
            result["run"] = run_num
            run_results.append(result)
            log.debug(
                f"[RUN {run_num}/{runs}] {name} took {result['query_time_ms']}ms",
                extra={"query": name, "run": run_num, "rows": result["rows"]},
            )

        aggregated = _aggregate_runs(run_results)
        aggregated["query"] = name
        aggregated["individual_runs"] = run_results
        results.append(aggregated)
    return results


def run_benchmark(
    query_names: Optional[Iterable[str]] = None,
    runs: Optional[int] = None,
    limit: Optional[int] = None,
    dataset: Optional[Dataset] = None,
    settings: Optional[Settings] = None,
    results_dir: Path | str = "results",
    persist: bool = True,
) -> List[dict]:
    """
    Run one or more query paths and optionally persist the aggregated results.

    Parameters
    ----------
    query_names : iterable[str] | None
        Query names to execute. If None or ["all"], executes all available.
    runs : int | None
        Number of measurement runs per query. Defaults to settings.benchmark_runs.
    limit : int | None
        Limit passed to the recent-transactions query. Missing or non-positive
        values mean settings.recent_default_limit.
    dataset : Dataset | None
        Dataset to query. Generated from settings when omitted.
    settings : Settings | None
        Effective configuration. Defaults to the cached process settings.
    results_dir : Path | str
        Directory to store JSON artifacts.
    persist : bool
        Whether to write results to disk.

    Returns
    -------
    List[dict]
        One aggregated entry per query, individual runs included.
    """
    settings = settings or get_settings()
    effective_runs = runs or settings.benchmark_runs

    names = list(query_names) if query_names is not None else ["all"]
    if len(names) == 1 and names[0] == "all":
        names = available_queries()
    for name in names:
        if name not in _query_factories():
            raise ValueError(f"Unknown query '{name}'. Available: {', '.join(available_queries())}")

    dataset = dataset if dataset is not None else build_dataset(settings)
    results = asyncio.run(_run_queries(names, dataset, settings, limit, effective_runs))

    payload = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "dataset_size": len(dataset),
        "runs": effective_runs,
        "queries": names,
        "results": results,
    }
    if persist:
        _persist_results(payload, Path(results_dir))

    log.info(
        f"[BENCHMARK COMPLETE] {len(names)} query path(s) executed",
        extra={"queries": names, "runs": effective_runs},
    )
    return results


__all__ = ["available_queries", "run_benchmark"]
