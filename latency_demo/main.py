from __future__ import annotations

import sys
from typing import Optional

import typer
import uvicorn

from latency_demo.api import create_app
from latency_demo.benchmark import available_queries, run_benchmark
from latency_demo.config import get_settings
from latency_demo.reporter import print_results
from latency_demo.utils.logging import configure_logging

app = typer.Typer(help="Transaction latency demo: in-memory cache vs. slow path.")


def _serve(host: Optional[str] = None, port: Optional[int] = None) -> None:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    if port is not None:
        settings = settings.model_copy(update={"server_port": port})
    uvicorn.run(
        create_app(settings),
        host=host or settings.server_host,
        port=settings.server_port,
        log_config=None,
    )


@app.callback(invoke_without_command=True)
def default(ctx: typer.Context) -> None:
    """
    Start the HTTP server when no command is given.
    """
    if ctx.invoked_subcommand is None:
        _serve()


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Interface to bind (default from settings)."),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="TCP port (default from settings)."),
) -> None:
    """
    Generate the dataset and serve both endpoints.
    """
    _serve(host=host, port=port)


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"server={settings.server_host}:{settings.server_port} | "
        f"dataset={settings.dataset_size} users={settings.dataset_users} "
        f"history={settings.dataset_history_days}d seed={settings.dataset_seed} | "
        f"recent window={settings.recent_window_days}d default_limit={settings.recent_default_limit} | "
        f"slow_mock delay={settings.slow_mock_delay_ms}ms sample={settings.slow_mock_sample_size}"
    )


@app.command()
def bench(
    query: str = typer.Option(
        "all",
        "--query",
        "-q",
        help="Query path to run (recent, slow_mock, all, or list).",
    ),
    runs: Optional[int] = typer.Option(
        None,
        "--runs",
        "-n",
        help="Measurement runs per query (default from settings).",
    ),
    limit: Optional[int] = typer.Option(
        None,
        "--limit",
        "-l",
        min=1,
        help="Limit for the recent query (default from settings).",
    ),
    persist: bool = typer.Option(
        True,
        "--persist/--no-persist",
        help="Write JSON results under results/.",
    ),
) -> None:
    """
    Run the query paths in-process and print a latency comparison.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)

    if query == "list":
        typer.echo("Available queries: " + ", ".join(available_queries()))
        return

    try:
        results = run_benchmark(query_names=[query], runs=runs, limit=limit, persist=persist)
    except ValueError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2)
    print_results(results)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
