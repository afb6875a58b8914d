"""Prometheus gauges for pricing and request timing.

Example:
    >>> from cruiseexporter.metrics import MetricSet
    >>>
    >>> metrics = MetricSet()
    >>> metrics.serve(9110)
"""

from cruiseexporter.metrics.sink import MetricSet

__all__ = [
    "MetricSet",
]
