"""Per-request network timing.

A :class:`TimingObserver` is activated for the duration of one request.
The timed network backend (:mod:`cruiseexporter.http.backend`) looks the
active observer up and calls its DNS, connect and first-byte callbacks;
the fetcher marks request start and headers received. The result is
frozen into a :class:`TimingSample`.

Example:
    >>> from cruiseexporter.http.timing import TimingObserver
    >>> observer = TimingObserver()
    >>> observer.request_started()
    >>> observer.headers_received()
    >>> sample = observer.sample(status_code=200)
    >>> sample.dns_ms, sample.connect_ms
    (0.0, 0.0)
"""

from __future__ import annotations

import time
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any

CURRENT_OBSERVER: ContextVar[TimingObserver | None] = ContextVar("cruiseexporter_timing_observer", default=None)


def current_observer() -> TimingObserver | None:
    """Observer of the request running in this context, if any."""
    return CURRENT_OBSERVER.get()


@dataclass(frozen=True, slots=True)
class TimingSample:
    """Durations of one request, in milliseconds.

    Phases the transport skipped (e.g. DNS and connect on a pooled
    connection) are 0.0.

    Attributes:
        dns_ms: Host name resolution.
        connect_ms: TCP connection establishment.
        first_byte_ms: Request send to first response byte.
        total_ms: Request send to response headers received.
        status_code: HTTP status of the response.
    """

    dns_ms: float = 0.0
    connect_ms: float = 0.0
    first_byte_ms: float = 0.0
    total_ms: float = 0.0
    status_code: int = 0


def _elapsed_ms(start: float | None, end: float | None) -> float:
    if start is None or end is None or end < start:
        return 0.0
    return (end - start) * 1000.0


class TimingObserver:
    """Collects phase timestamps for a single request.

    The callback points mirror the phases of a request: ``dns_start`` /
    ``dns_done``, ``connect_start`` / ``connect_done`` and ``first_byte``.

    A fresh observer must be used for every request.
    """

    def __init__(self, clock: Any = time.perf_counter) -> None:
        self._clock = clock
        self._started: float | None = None
        self._dns_start: float | None = None
        self._dns_done: float | None = None
        self._connect_start: float | None = None
        self._connect_done: float | None = None
        self._first_byte: float | None = None
        self._headers: float | None = None

    def activate(self):
        """Make this the current observer; returns the token for :meth:`deactivate`."""
        return CURRENT_OBSERVER.set(self)

    @staticmethod
    def deactivate(token) -> None:
        CURRENT_OBSERVER.reset(token)

    def request_started(self) -> None:
        self._started = self._clock()

    def dns_start(self) -> None:
        self._dns_start = self._clock()

    def dns_done(self) -> None:
        self._dns_done = self._clock()

    def connect_start(self) -> None:
        self._connect_start = self._clock()

    def connect_done(self) -> None:
        self._connect_done = self._clock()

    def first_byte(self) -> None:
        # Only the first read after the request went out counts.
        if self._started is not None and self._first_byte is None:
            self._first_byte = self._clock()

    def headers_received(self) -> None:
        self._headers = self._clock()

    def sample(self, status_code: int) -> TimingSample:
        """Freeze the observed phases into a :class:`TimingSample`."""
        return TimingSample(
            dns_ms=_elapsed_ms(self._dns_start, self._dns_done),
            connect_ms=_elapsed_ms(self._connect_start, self._connect_done),
            first_byte_ms=_elapsed_ms(self._started, self._first_byte),
            total_ms=_elapsed_ms(self._started, self._headers),
            status_code=status_code,
        )
