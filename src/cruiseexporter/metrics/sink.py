"""Gauge set published by the exporter.

One :class:`MetricSet` owns an explicit Prometheus registry with five
per-URL request gauges and one price gauge keyed by the full label tuple
of a :class:`~cruiseexporter.models.price.PriceRow`. Every write replaces
the previous value for its label combination.

Example:
    >>> from cruiseexporter.metrics import MetricSet
    >>> from cruiseexporter.http.timing import TimingSample
    >>>
    >>> metrics = MetricSet(namespace="royal")
    >>> metrics.record_timing("https://example.com/graph", TimingSample(total_ms=120.0, status_code=200))
    >>> metrics.status("https://example.com/graph")
    200.0
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from prometheus_client import CollectorRegistry, Gauge, generate_latest, start_http_server

from cruiseexporter.models.price import PRICE_LABELS

if TYPE_CHECKING:
    from cruiseexporter.http.timing import TimingSample
    from cruiseexporter.models.price import PriceRow

logger = logging.getLogger(__name__)

SUBSYSTEM = "external"


class MetricSet:
    """The exporter's gauges and the registry they live in.

    Not safe for concurrent writers: the collector records from a single
    task.

    Attributes:
        registry: Registry to expose (pass it to the HTTP endpoint)
        namespace: Metric name prefix
    """

    def __init__(
        self,
        namespace: str = "royal",
        registry: CollectorRegistry | None = None,
    ) -> None:
        """Create and register the gauges.

        Args:
            namespace: Metric name prefix (``<namespace>_external_...``)
            registry: Registry to register into; a new one by default

        Raises:
            ValueError: If the gauges are already registered in ``registry``
        """
        self.namespace = namespace
        self.registry = registry if registry is not None else CollectorRegistry(auto_describe=True)

        def gauge(name: str, documentation: str, labelnames: tuple[str, ...] = ("url",)) -> Gauge:
            return Gauge(
                name,
                documentation,
                labelnames,
                namespace=namespace,
                subsystem=SUBSYSTEM,
                registry=self.registry,
            )

        self.url_status = gauge("proce", "Status of the URL as a integer value")
        self.url_ms = gauge("url_response_ms", "Response time in milliseconds it took for the URL to respond.")
        self.url_dns = gauge("url_dns_ms", "Response time in milliseconds it took for the DNS request to take place.")
        self.url_first_byte = gauge("url_first_byte_ms", "Response time in milliseconds it took to retrive the first byte.")
        self.url_connect_time = gauge(
            "url_connect_time_ms", "Response time in milliseconds it took to establish the inital connection."
        )
        self.price = gauge("price", "cabin price with labels", PRICE_LABELS)

    def record_timing(self, url: str, sample: TimingSample) -> None:
        """Overwrite the request gauges of ``url`` with ``sample``."""
        self.url_dns.labels(url=url).set(sample.dns_ms)
        self.url_connect_time.labels(url=url).set(sample.connect_ms)
        self.url_ms.labels(url=url).set(sample.total_ms)
        self.url_first_byte.labels(url=url).set(sample.first_byte_ms)
        self.url_status.labels(url=url).set(sample.status_code)

    def record_price(self, row: PriceRow) -> None:
        """Overwrite the price gauge for the row's label tuple."""
        self.price.labels(**row.labels()).set(row.price)

    def _value(self, name: str, labels: dict[str, str]) -> float | None:
        return self.registry.get_sample_value(f"{self.namespace}_{SUBSYSTEM}_{name}", labels)

    def status(self, url: str) -> float | None:
        """Last recorded HTTP status for ``url``, None if never recorded."""
        return self._value("proce", {"url": url})

    def price_of(self, row: PriceRow) -> float | None:
        """Current value of the price gauge for the row's label tuple."""
        return self._value("price", row.labels())

    def render(self) -> bytes:
        """Text exposition of every gauge in the registry."""
        return generate_latest(self.registry)

    def serve(self, port: int, addr: str = "0.0.0.0") -> None:
        """Start the pull endpoint for this registry in a daemon thread."""
        start_http_server(port, addr=addr, registry=self.registry)
        logger.info(f"Serving metrics on http://{addr}:{port}/metrics")
