from __future__ import annotations

from typing import Any, Dict, List, Optional

from rich import box
from rich.console import Console
from rich.table import Table


def _median_latency(result: Dict[str, Any]) -> Optional[float]:
    stats = result.get("query_time_ms")
    return stats["median"] if stats else None


def print_results(results: List[Dict[str, Any]], console: Optional[Console] = None) -> None:
    """
    Render aggregated benchmark results as a rich table.

    Rows are sorted fastest first; the "Relative" column expresses each
    median latency as a multiple of the fastest one.
    """
    console = console or Console()

    if not results:
        console.print("[yellow]No results to display.[/yellow]")
        return

    table = Table(
        title="Transaction Latency Demo Results",
        box=box.ROUNDED,
        caption="Sorted by median latency (ascending)",
    )

    table.add_column("Query", style="cyan", no_wrap=True)
    table.add_column("Source", style="blue")
    table.add_column("Rows", justify="right", style="magenta")
    table.add_column("Runs", justify="right", style="blue")
    table.add_column("Latency (ms)\n[dim](Median ± StdDev)[/dim]", justify="right", style="green")
    table.add_column("Min / Max (ms)", justify="right", style="green")
    table.add_column("Relative", justify="right", style="bold red")
    table.add_column("Peak Memory (MB)", justify="right", style="yellow")

    # Failed queries (no latency stats) sink to the bottom
    def get_sort_key(r: Dict[str, Any]) -> float:
        median = _median_latency(r)
        return median if median is not None else float("inf")

    sorted_results = sorted(results, key=get_sort_key)
    fastest = _median_latency(sorted_results[0])

    for res in sorted_results:
        query = res.get("query", "Unknown")
        source = res.get("source") or "N/A"
        rows = f"{res.get('rows', 0):,}"
        runs = str(res.get("runs", 0))
        if res.get("failed_runs"):
            runs = f"{runs} [red]({res['failed_runs']} failed)[/red]"

        stats = res.get("query_time_ms")
        if stats:
            latency_str = f"{stats['median']:.3f} ± {stats['stddev']:.3f}"
            range_str = f"{stats['min']:.3f} / {stats['max']:.3f}"
            if fastest:
                relative_str = f"{stats['median'] / fastest:,.1f}x"
            else:
                relative_str = "N/A"
        else:
            latency_str = range_str = relative_str = "N/A"

        mem_bytes = res.get("peak_rss_bytes")
        mem_str = f"{mem_bytes / (1024 * 1024):.2f}" if mem_bytes else "N/A"

        table.add_row(query, source, rows, runs, latency_str, range_str, relative_str, mem_str)

    console.print(table)


__all__ = ["print_results"]
