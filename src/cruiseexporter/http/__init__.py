"""HTTP utilities.

Provides the instrumented client used to call the upstream search API.

Example:
    >>> from cruiseexporter.http import TimedFetcher
    >>>
    >>> async with TimedFetcher() as fetcher:
    ...     result = await fetcher.post_json("https://example.com/graph", payload)
    ...     print(result.timing)
"""

from cruiseexporter.http.backend import TimedNetworkBackend, TimedTransport
from cruiseexporter.http.client import FetchResult, TimedFetcher
from cruiseexporter.http.timing import TimingObserver, TimingSample

__all__ = [
    "FetchResult",
    "TimedFetcher",
    "TimedNetworkBackend",
    "TimedTransport",
    "TimingObserver",
    "TimingSample",
]
