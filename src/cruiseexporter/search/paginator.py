"""Walk a paginated search to the end.

The paginator requests fixed-size pages at increasing offsets and pushes
every response's timing and rows into the metric sink as it goes.
Termination is governed by the ``total`` reported on each page, which is
re-read after every page.

Example:
    >>> from cruiseexporter.search.paginator import Paginator
    >>> paginator = Paginator(fetcher, metrics, page_size=20)
    >>> result = await paginator.collect("https://example.com/graph")
    >>> result.requests, result.rows
    (2, 25)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from cruiseexporter.core.exceptions import FetchError
from cruiseexporter.search.extractor import extract_page
from cruiseexporter.search.query import build_search_payload

if TYPE_CHECKING:
    from cruiseexporter.http.client import TimedFetcher
    from cruiseexporter.metrics.sink import MetricSet

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20


@dataclass
class PaginationResult:
    """Outcome of paginating one target.

    Example:
        >>> from cruiseexporter.search.paginator import PaginationResult
        >>> PaginationResult(url="https://example.com/graph", requests=2, rows=25).ok
        True
    """

    url: str
    requests: int = 0
    rows: int = 0
    undecoded_pages: int = 0
    total: int = 0
    error: str | None = None

    @property
    def ok(self) -> bool:
        """True when pagination ran to the last page."""
        return self.error is None


class Paginator:
    """Drives fetch → extract → record across the pages of one target.

    Nothing is buffered: rows go to the sink page by page, so a failure
    part-way leaves the rows already recorded in place.
    """

    def __init__(
        self,
        fetcher: TimedFetcher,
        metrics: MetricSet,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        if page_size < 1:
            raise ValueError("page_size must be positive")
        self._fetcher = fetcher
        self._metrics = metrics
        self._page_size = page_size

    @property
    def page_size(self) -> int:
        return self._page_size

    async def collect(self, url: str) -> PaginationResult:
        """Fetch every page of ``url`` and record it.

        Stops after the page where ``offset >= total - page_size``. A
        transport error, or a total that is not positive, aborts the
        target for this cycle; it is logged and reported on the result.
        """
        result = PaginationResult(url=url)
        offset = 0
        total = 0

        while True:
            try:
                fetched = await self._fetcher.post_json(url, build_search_payload(skip=offset, count=self._page_size))
            except FetchError as e:
                logger.error(f"Aborting {url} at offset {offset}: {e}")
                result.error = str(e)
                return result

            result.requests += 1
            self._metrics.record_timing(url, fetched.timing)

            page = extract_page(fetched.body, url)
            for row in page.rows:
                self._metrics.record_price(row)
            result.rows += page.count

            if page.decoded:
                total = page.total
            else:
                result.undecoded_pages += 1
            result.total = total

            logger.info(f"pulled down {self._page_size} skipping the first {offset} of {total} total")

            if total <= 0:
                logger.warning(f"Aborting {url} at offset {offset}: upstream reported total {total}")
                result.error = f"non-positive total {total}"
                return result

            if offset >= total - self._page_size:
                return result
            offset += self._page_size
