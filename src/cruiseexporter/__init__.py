"""
cruiseexporter - Cruise pricing exporter for Prometheus.

Polls a paginated cruise search API, flattens the nested response into
price rows and republishes them as gauges, together with per-request
network timing (DNS, connect, first byte, total).

Quick Start:
    >>> import asyncio
    >>> from cruiseexporter import Exporter, Settings
    >>> settings = Settings(urls=["https://example.com/graph"], poll_interval=300)
    >>> async def main():
    ...     async with Exporter(settings) as exporter:
    ...         exporter.serve_metrics()
    ...         await exporter.run(asyncio.Event())

Architecture:
    Fetcher: TimedFetcher (httpx on a timed network backend)
    Extractor: extract_page (pydantic mirrors of the response)
    Paginator: Paginator (offset pagination driven by the upstream total)
    Sink: MetricSet (prometheus_client gauges on an explicit registry)
    Scheduler: Collector (single-task fixed-cadence loop)
"""

from cruiseexporter.core.collector import Collector, CollectorState, CycleResult
from cruiseexporter.core.config import Settings, get_settings
from cruiseexporter.core.exceptions import (
    ConfigurationError,
    DecodeError,
    ExporterError,
    FetchError,
)
from cruiseexporter.core.exporter import Exporter
from cruiseexporter.http.client import FetchResult, TimedFetcher
from cruiseexporter.http.timing import TimingObserver, TimingSample
from cruiseexporter.metrics.sink import MetricSet
from cruiseexporter.models.price import Page, PriceRow
from cruiseexporter.search.extractor import extract_page
from cruiseexporter.search.paginator import PaginationResult, Paginator

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Orchestration
    "Exporter",
    "Collector",
    "CollectorState",
    "CycleResult",
    # Pipeline
    "TimedFetcher",
    "FetchResult",
    "TimingObserver",
    "TimingSample",
    "extract_page",
    "Page",
    "PriceRow",
    "Paginator",
    "PaginationResult",
    "MetricSet",
    # Configuration
    "Settings",
    "get_settings",
    # Errors
    "ExporterError",
    "FetchError",
    "DecodeError",
    "ConfigurationError",
]
