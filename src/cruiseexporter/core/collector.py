"""Collector scheduler.

Runs one full poll cycle (every target, each paginated to the end) right
away, then one per tick of a fixed-cadence ticker until the stop event is
set. Cycles never overlap: ticks that elapse while a cycle runs collapse
into a single immediate run once it finishes.

Example:
    >>> import asyncio
    >>> from cruiseexporter.core.collector import Collector
    >>> collector = Collector(paginator, targets=["https://example.com/graph"], interval=300)
    >>> stop = asyncio.Event()
    >>> await collector.run(stop)  # until stop.set()
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING

from cruiseexporter.search.paginator import PaginationResult

if TYPE_CHECKING:
    from cruiseexporter.search.paginator import Paginator

logger = logging.getLogger(__name__)


class CollectorState(str, Enum):
    """Lifecycle of a :class:`Collector`.

    Example:
        >>> CollectorState.IDLE.value
        'idle'
    """

    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


@dataclass
class CycleResult:
    """Result of one pass over all targets.

    Example:
        >>> from cruiseexporter.core.collector import CycleResult
        >>> from cruiseexporter.search.paginator import PaginationResult
        >>> cycle = CycleResult(targets=[
        ...     PaginationResult(url="a", requests=2, rows=25),
        ...     PaginationResult(url="b", requests=1, error="refused"),
        ... ])
        >>> cycle.total_rows, cycle.failures
        (25, 1)
    """

    targets: list[PaginationResult] = field(default_factory=list)
    started_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    duration_ms: float = 0.0

    @property
    def total_requests(self) -> int:
        return sum(t.requests for t in self.targets)

    @property
    def total_rows(self) -> int:
        return sum(t.rows for t in self.targets)

    @property
    def failures(self) -> int:
        return sum(1 for t in self.targets if not t.ok)


class Ticker:
    """Fixed-cadence deadlines on the grid ``start + k * interval``.

    Example:
        >>> now = [0.0]
        >>> ticker = Ticker(1.0, clock=lambda: now[0])
        >>> now[0] = 3.5  # a long cycle overran three ticks
        >>> ticker.delay()
        0.0
        >>> ticker.advance()
        >>> ticker.delay()
        0.5
    """

    def __init__(self, interval: float, clock: Callable[[], float] = time.monotonic) -> None:
        self.interval = interval
        self._clock = clock
        self._next = clock() + interval

    def delay(self) -> float:
        """Seconds until the pending tick, 0 if it already elapsed."""
        return max(0.0, self._next - self._clock())

    def advance(self) -> None:
        """Consume the pending tick and drop any others already elapsed."""
        now = self._clock()
        self._next += self.interval
        if self._next <= now:
            missed = int((now - self._next) // self.interval) + 1
            self._next += missed * self.interval


class Collector:
    """Sequential poll loop over the configured targets.

    Targets are processed in order, each paginated to completion before
    the next one starts. A failure in one target is logged and never stops
    the others or the loop.
    """

    def __init__(
        self,
        paginator: Paginator,
        targets: Sequence[str],
        interval: float,
    ) -> None:
        """Initialize the collector.

        Args:
            paginator: Paginator used for every target
            targets: Target URLs, polled in this order
            interval: Seconds between cycle starts
        """
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._paginator = paginator
        self._targets = tuple(targets)
        self._interval = interval
        self._state = CollectorState.IDLE
        self._cycles = 0

    @property
    def state(self) -> CollectorState:
        return self._state

    @property
    def targets(self) -> tuple[str, ...]:
        return self._targets

    @property
    def cycles(self) -> int:
        """Number of completed cycles."""
        return self._cycles

    async def run_cycle(self) -> CycleResult:
        """Paginate every target once, in order."""
        self._state = CollectorState.RUNNING
        cycle = CycleResult()
        start = time.perf_counter()
        try:
            for url in self._targets:
                try:
                    result = await self._paginator.collect(url)
                except Exception as e:
                    logger.exception(f"Unexpected error collecting {url}")
                    result = PaginationResult(url=url, error=f"{type(e).__name__}: {e}")
                cycle.targets.append(result)
        finally:
            self._state = CollectorState.IDLE
        cycle.duration_ms = (time.perf_counter() - start) * 1000
        self._cycles += 1
        logger.info(
            f"Cycle {self._cycles} done: {len(cycle.targets)} targets, {cycle.total_requests} requests, "
            f"{cycle.total_rows} rows, {cycle.failures} failed in {cycle.duration_ms:.0f}ms"
        )
        return cycle

    async def run(self, stop: asyncio.Event) -> None:
        """Poll until ``stop`` is set.

        The stop event is honoured between cycles and while waiting for
        the next tick; a running cycle is allowed to finish.
        """
        logger.info("starting exporter")
        ticker = Ticker(self._interval)
        try:
            if not stop.is_set():
                await self.run_cycle()
            while not stop.is_set():
                try:
                    await asyncio.wait_for(stop.wait(), timeout=ticker.delay())
                except TimeoutError:
                    pass
                if stop.is_set():
                    break
                ticker.advance()
                await self.run_cycle()
        finally:
            self._state = CollectorState.STOPPED
            logger.info("gracefully stopping exporter")
