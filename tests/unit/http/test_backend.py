"""Tests for cruiseexporter.http.backend - timed resolve, dial and read."""

from __future__ import annotations

import asyncio
import socket
from contextlib import contextmanager

import httpcore
import pytest

from cruiseexporter.http.backend import TimedNetworkBackend, TimedNetworkStream, TimedTransport, is_ip_literal
from cruiseexporter.http.timing import TimingObserver


class FakeClock:
    def __init__(self) -> None:
        self.now = 50.0

    def __call__(self) -> float:
        return self.now

    def tick(self, ms: float) -> None:
        self.now += ms / 1000.0


class FakeStream(httpcore.AsyncNetworkStream):
    def __init__(self, chunks: list[bytes] | None = None) -> None:
        self.chunks = list(chunks or [])
        self.written: list[bytes] = []
        self.closed = False
        self.tls_hostname: str | None = None

    async def read(self, max_bytes: int, timeout: float | None = None) -> bytes:
        return self.chunks.pop(0) if self.chunks else b""

    async def write(self, buffer: bytes, timeout: float | None = None) -> None:
        self.written.append(buffer)

    async def aclose(self) -> None:
        self.closed = True

    async def start_tls(self, ssl_context, server_hostname=None, timeout=None):
        self.tls_hostname = server_hostname
        return FakeStream(self.chunks)

    def get_extra_info(self, info: str):
        return f"extra:{info}"


class FakeBackend(httpcore.AsyncNetworkBackend):
    """Dials instantly, except for addresses listed as refused or slow."""

    def __init__(self, clock: FakeClock, *, refused=(), dial_ms: float = 0.0) -> None:
        self.clock = clock
        self.refused = set(refused)
        self.dial_ms = dial_ms
        self.dialed: list[tuple[str, int]] = []
        self.stream = FakeStream([b"HTTP/1.1 200 OK\r\n"])

    async def connect_tcp(self, host, port, timeout=None, local_address=None, socket_options=None):
        self.dialed.append((host, port))
        self.clock.tick(self.dial_ms)
        if host in self.refused:
            raise httpcore.ConnectError(f"refused: {host}")
        return self.stream

    async def connect_unix_socket(self, path, timeout=None, socket_options=None):
        return self.stream

    async def sleep(self, seconds: float) -> None:
        return None


def _addrinfo(*addresses: str) -> list:
    return [(socket.AF_INET, socket.SOCK_STREAM, 6, "", (address, 443)) for address in addresses]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def observer(clock) -> TimingObserver:
    return TimingObserver(clock=clock)


@contextmanager
def activated(observer: TimingObserver):
    token = observer.activate()
    try:
        yield observer
    finally:
        observer.deactivate(token)


@pytest.fixture
def resolver(monkeypatch, clock):
    """Replace the event loop resolver with a table lookup costing 25 ms."""
    calls: list[str] = []
    table = {"search.example.com": _addrinfo("10.0.0.1", "10.0.0.2", "10.0.0.1")}

    async def getaddrinfo(self, host, port, **kwargs):
        calls.append(host)
        clock.tick(25)
        if host not in table:
            raise socket.gaierror(socket.EAI_NONAME, "Name or service not known")
        return table[host]

    monkeypatch.setattr(asyncio.BaseEventLoop, "getaddrinfo", getaddrinfo)
    return calls


# =============================================================================
# Resolve and dial
# =============================================================================


class TestConnect:
    async def test_dns_and_connect_timed_separately(self, clock, observer, resolver) -> None:
        inner = FakeBackend(clock, dial_ms=7)
        backend = TimedNetworkBackend(inner)

        with activated(observer):
            stream = await backend.connect_tcp("search.example.com", 443)

        assert isinstance(stream, TimedNetworkStream)
        assert resolver == ["search.example.com"]
        assert inner.dialed == [("10.0.0.1", 443)]
        sample = observer.sample(200)
        assert sample.dns_ms == pytest.approx(25)
        assert sample.connect_ms == pytest.approx(7)

    async def test_ip_literal_skips_dns(self, clock, observer, resolver) -> None:
        inner = FakeBackend(clock, dial_ms=3)

        with activated(observer):
            await TimedNetworkBackend(inner).connect_tcp("127.0.0.1", 8080)

        assert resolver == []
        assert inner.dialed == [("127.0.0.1", 8080)]
        sample = observer.sample(200)
        assert sample.dns_ms == 0.0
        assert sample.connect_ms == pytest.approx(3)

    async def test_falls_over_to_next_address(self, clock, observer, resolver) -> None:
        inner = FakeBackend(clock, refused={"10.0.0.1"}, dial_ms=4)

        with activated(observer):
            await TimedNetworkBackend(inner).connect_tcp("search.example.com", 443)

        assert inner.dialed == [("10.0.0.1", 443), ("10.0.0.2", 443)]
        assert observer.sample(200).connect_ms == pytest.approx(8)

    async def test_all_addresses_refused(self, clock, observer, resolver) -> None:
        inner = FakeBackend(clock, refused={"10.0.0.1", "10.0.0.2"})

        with activated(observer), pytest.raises(httpcore.ConnectError, match="10.0.0.2"):
            await TimedNetworkBackend(inner).connect_tcp("search.example.com", 443)

        assert observer.sample(0).connect_ms == 0.0

    async def test_lookup_failure_is_connect_error(self, clock, observer, resolver) -> None:
        inner = FakeBackend(clock)

        with activated(observer), pytest.raises(httpcore.ConnectError, match="unknown.example.com"):
            await TimedNetworkBackend(inner).connect_tcp("unknown.example.com", 443)

        assert inner.dialed == []
        assert observer.sample(0).dns_ms == pytest.approx(25)

    async def test_forwards_without_observer(self, clock, resolver) -> None:
        inner = FakeBackend(clock)

        stream = await TimedNetworkBackend(inner).connect_tcp("search.example.com", 443)

        assert await stream.read(1024) == b"HTTP/1.1 200 OK\r\n"

    def test_ip_literals(self) -> None:
        assert is_ip_literal("127.0.0.1")
        assert is_ip_literal("[::1]")
        assert not is_ip_literal("localhost")


# =============================================================================
# Stream
# =============================================================================


class TestStream:
    async def test_first_read_with_data_is_first_byte(self, clock, observer) -> None:
        stream = TimedNetworkStream(FakeStream([b"", b"HTTP/1.1", b" 200 OK"]))
        observer.request_started()
        await stream.write(b"POST /graph HTTP/1.1\r\n\r\n")
        clock.tick(30)

        with activated(observer):
            assert await stream.read(1024) == b""
            clock.tick(15)
            await stream.read(1024)
            clock.tick(20)
            await stream.read(1024)
        observer.headers_received()

        sample = observer.sample(200)
        assert sample.first_byte_ms == pytest.approx(45)
        assert sample.total_ms == pytest.approx(65)

    async def test_read_before_request_is_ignored(self, clock, observer) -> None:
        stream = TimedNetworkStream(FakeStream([b"stale", b"HTTP/1.1 200 OK"]))

        with activated(observer):
            await stream.read(1024)
            clock.tick(10)
            observer.request_started()
            clock.tick(12)
            await stream.read(1024)

        assert observer.sample(200).first_byte_ms == pytest.approx(12)

    async def test_tls_stream_stays_wrapped(self) -> None:
        inner = FakeStream([b"x"])
        stream = TimedNetworkStream(inner)

        tls = await stream.start_tls(None, server_hostname="search.example.com")

        assert isinstance(tls, TimedNetworkStream)
        assert inner.tls_hostname == "search.example.com"

    async def test_delegates(self) -> None:
        inner = FakeStream()
        stream = TimedNetworkStream(inner)

        await stream.write(b"abc")
        await stream.aclose()

        assert inner.written == [b"abc"]
        assert inner.closed
        assert stream.get_extra_info("server_addr") == "extra:server_addr"


class TestTransport:
    async def test_pool_uses_given_backend(self, clock) -> None:
        backend = TimedNetworkBackend(FakeBackend(clock))
        transport = TimedTransport(network_backend=backend)
        try:
            assert transport._pool._network_backend is backend
        finally:
            await transport.aclose()

    async def test_default_backend_is_timed(self) -> None:
        transport = TimedTransport()
        try:
            assert isinstance(transport._pool._network_backend, TimedNetworkBackend)
        finally:
            await transport.aclose()
