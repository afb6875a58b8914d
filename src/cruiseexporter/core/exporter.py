"""Exporter - wires the collection pipeline together.

The Exporter owns the HTTP client, the gauge set, the paginator and the
collector, all built from :class:`~cruiseexporter.core.config.Settings`.

Example:
    >>> import asyncio
    >>> from cruiseexporter.core.config import Settings
    >>> from cruiseexporter.core.exporter import Exporter
    >>> async def example():
    ...     settings = Settings(urls=["https://example.com/graph"])
    ...     async with Exporter(settings) as exporter:
    ...         return exporter.collector.targets
    >>> asyncio.run(example())
    ('https://example.com/graph',)
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from cruiseexporter.core.collector import Collector, CycleResult
from cruiseexporter.core.exceptions import ConfigurationError
from cruiseexporter.http.client import TimedFetcher
from cruiseexporter.metrics.sink import MetricSet
from cruiseexporter.search.paginator import Paginator

if TYPE_CHECKING:
    import httpx
    from prometheus_client import CollectorRegistry

    from cruiseexporter.core.config import Settings

logger = logging.getLogger(__name__)


class Exporter:
    """Main entry point: one fetcher, one gauge set, one collector.

    Args:
        settings: Exporter settings; at least one target URL is required.
        registry: Optional registry for the gauges (a fresh one by default).
        transport: Optional httpx transport (used by tests).

    Raises:
        ConfigurationError: If no target URL is configured.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        registry: CollectorRegistry | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not settings.urls:
            raise ConfigurationError("at least one target URL is required")
        self._settings = settings
        self._metrics = MetricSet(namespace=settings.namespace, registry=registry)
        self._fetcher = TimedFetcher(
            user_agent=settings.user_agent,
            timeout=settings.request_timeout,
            transport=transport,
        )
        self._paginator = Paginator(self._fetcher, self._metrics, page_size=settings.page_size)
        self._collector = Collector(self._paginator, settings.urls, settings.poll_interval)

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def metrics(self) -> MetricSet:
        """Gauge set; hand ``metrics.registry`` to the exposure endpoint."""
        return self._metrics

    @property
    def collector(self) -> Collector:
        return self._collector

    async def __aenter__(self) -> "Exporter":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self._fetcher.close()

    def serve_metrics(self) -> None:
        """Start the pull endpoint on the configured address and port."""
        self._metrics.serve(self._settings.listen_port, addr=self._settings.listen_address)

    async def collect_once(self) -> CycleResult:
        """Run a single cycle over all targets."""
        return await self._collector.run_cycle()

    async def run(self, stop: asyncio.Event) -> None:
        """Poll on the configured interval until ``stop`` is set."""
        logger.debug(
            f"Polling {len(self._settings.urls)} target(s) every {self._settings.poll_interval:g}s "
            f"with page size {self._settings.page_size}"
        )
        await self._collector.run(stop)
