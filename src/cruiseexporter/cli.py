"""CLI entry point."""

from __future__ import annotations

import asyncio
import signal
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from cruiseexporter.core.config import Settings, get_settings
from cruiseexporter.core.exceptions import ConfigurationError
from cruiseexporter.core.exporter import Exporter
from cruiseexporter.core.logging import configure_logging

app = typer.Typer(
    name="cruise-exporter",
    help="Export cruise search prices and request timings as Prometheus gauges",
    no_args_is_help=True,
)
console = Console()

UrlsArgument = typer.Argument(None, help="Target search endpoint URLs (default: CRUISE_EXPORTER_URLS)")


def _load_settings(urls: Optional[list[str]], **overrides: object) -> Settings:
    try:
        settings = get_settings(urls=urls or None, **overrides)
    except ValidationError as e:
        raise ConfigurationError(str(e)) from e
    if not settings.urls:
        raise ConfigurationError("no target URLs given (pass them as arguments or set CRUISE_EXPORTER_URLS)")
    configure_logging(settings.log_level, settings.log_format)
    return settings


async def _serve(settings: Settings) -> None:
    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop.set)

    async with Exporter(settings) as exporter:
        exporter.serve_metrics()
        await exporter.run(stop)


@app.command()
def serve(
    urls: Optional[list[str]] = UrlsArgument,
    interval: Optional[float] = typer.Option(None, "--interval", "-i", help="Seconds between poll cycles"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Metrics endpoint port"),
    address: Optional[str] = typer.Option(None, "--address", help="Metrics endpoint bind address"),
    namespace: Optional[str] = typer.Option(None, "--namespace", help="Metric name namespace"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level"),
) -> None:
    """Serve /metrics and poll the targets until interrupted."""
    try:
        settings = _load_settings(
            urls,
            poll_interval=interval,
            listen_port=port,
            listen_address=address,
            namespace=namespace,
            log_level=log_level,
        )
    except ConfigurationError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(code=2) from e

    asyncio.run(_serve(settings))


@app.command()
def collect(
    urls: Optional[list[str]] = UrlsArgument,
    show_metrics: bool = typer.Option(False, "--show-metrics", help="Print the metrics exposition text"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level"),
) -> None:
    """Run a single poll cycle and print a summary."""
    try:
        settings = _load_settings(urls, log_level=log_level)
    except ConfigurationError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(code=2) from e

    async def _collect():
        async with Exporter(settings) as exporter:
            return exporter, await exporter.collect_once()

    exporter, cycle = asyncio.run(_collect())

    table = Table(title=f"Poll cycle ({cycle.duration_ms:.0f}ms)")
    table.add_column("URL")
    table.add_column("Requests", justify="right")
    table.add_column("Rows", justify="right")
    table.add_column("Total", justify="right")
    table.add_column("Status")
    for result in cycle.targets:
        status = "[green]ok[/green]" if result.ok else f"[red]{result.error}[/red]"
        table.add_row(result.url, str(result.requests), str(result.rows), str(result.total), status)
    console.print(table)

    if show_metrics:
        console.print(exporter.metrics.render().decode("utf-8"), markup=False, highlight=False)

    if cycle.failures:
        raise typer.Exit(code=1)


@app.command()
def version() -> None:
    """Show version."""
    from cruiseexporter import __version__

    console.print(f"cruise-exporter {__version__}")


if __name__ == "__main__":
    app()
