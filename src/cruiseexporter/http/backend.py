"""Timed network backend for httpcore.

httpcore resolves and dials inside a single ``connect_tcp`` call. The
backend here splits that call into a name lookup and a dial to the
resolved address so each phase is timed on its own, and wraps the stream
so the first byte read back is timestamped. Timings go to the
:class:`~cruiseexporter.http.timing.TimingObserver` active for the
current request; without one the backend only forwards.

Example:
    >>> import httpx
    >>> from cruiseexporter.http.backend import TimedTransport
    >>> client = httpx.AsyncClient(transport=TimedTransport())
"""

from __future__ import annotations

import asyncio
import ipaddress
import logging
import socket
import ssl
from collections.abc import Iterable
from typing import Any

import certifi
import httpcore
import httpx

from cruiseexporter.http.timing import current_observer

logger = logging.getLogger(__name__)

DEFAULT_LIMITS = httpx.Limits(max_connections=100, max_keepalive_connections=20, keepalive_expiry=5.0)


def is_ip_literal(host: str) -> bool:
    try:
        ipaddress.ip_address(host.strip("[]"))
    except ValueError:
        return False
    return True


class TimedNetworkStream(httpcore.AsyncNetworkStream):
    """Forwards to the wrapped stream, reporting the first byte read."""

    def __init__(self, stream: httpcore.AsyncNetworkStream) -> None:
        self._stream = stream

    async def read(self, max_bytes: int, timeout: float | None = None) -> bytes:
        data = await self._stream.read(max_bytes, timeout=timeout)
        if data:
            observer = current_observer()
            if observer is not None:
                observer.first_byte()
        return data

    async def write(self, buffer: bytes, timeout: float | None = None) -> None:
        await self._stream.write(buffer, timeout=timeout)

    async def aclose(self) -> None:
        await self._stream.aclose()

    async def start_tls(
        self,
        ssl_context: ssl.SSLContext,
        server_hostname: str | None = None,
        timeout: float | None = None,
    ) -> httpcore.AsyncNetworkStream:
        stream = await self._stream.start_tls(ssl_context, server_hostname=server_hostname, timeout=timeout)
        return TimedNetworkStream(stream)

    def get_extra_info(self, info: str) -> Any:
        return self._stream.get_extra_info(info)


class TimedNetworkBackend(httpcore.AsyncNetworkBackend):
    """Resolve, then dial each resolved address in turn, timing both."""

    def __init__(self, backend: httpcore.AsyncNetworkBackend | None = None) -> None:
        self._backend = backend if backend is not None else httpcore.AnyIOBackend()

    async def _resolve(self, host: str, port: int) -> list[str]:
        observer = current_observer()
        if observer is not None:
            observer.dns_start()
        try:
            infos = await asyncio.get_running_loop().getaddrinfo(host, port, type=socket.SOCK_STREAM)
        except OSError as e:
            raise httpcore.ConnectError(f"DNS lookup for {host} failed: {e}") from e
        finally:
            if observer is not None:
                observer.dns_done()
        return list(dict.fromkeys(str(info[4][0]) for info in infos))

    async def connect_tcp(
        self,
        host: str,
        port: int,
        timeout: float | None = None,
        local_address: str | None = None,
        socket_options: Iterable[Any] | None = None,
    ) -> httpcore.AsyncNetworkStream:
        addresses = [host] if is_ip_literal(host) else await self._resolve(host, port)

        observer = current_observer()
        if observer is not None:
            observer.connect_start()
        last_error: httpcore.ConnectError | None = None
        for address in addresses:
            try:
                stream = await self._backend.connect_tcp(
                    address,
                    port,
                    timeout=timeout,
                    local_address=local_address,
                    socket_options=socket_options,
                )
            except httpcore.ConnectError as e:
                logger.debug(f"Connect to {host} via {address}:{port} failed: {e}")
                last_error = e
                continue
            if observer is not None:
                observer.connect_done()
            return TimedNetworkStream(stream)

        if last_error is None:
            raise httpcore.ConnectError(f"No addresses found for {host}")
        raise last_error

    async def connect_unix_socket(
        self,
        path: str,
        timeout: float | None = None,
        socket_options: Iterable[Any] | None = None,
    ) -> httpcore.AsyncNetworkStream:
        stream = await self._backend.connect_unix_socket(path, timeout=timeout, socket_options=socket_options)
        return TimedNetworkStream(stream)

    async def sleep(self, seconds: float) -> None:
        await self._backend.sleep(seconds)


class TimedTransport(httpx.AsyncHTTPTransport):
    """httpx transport whose connection pool dials through :class:`TimedNetworkBackend`."""

    def __init__(
        self,
        limits: httpx.Limits = DEFAULT_LIMITS,
        network_backend: httpcore.AsyncNetworkBackend | None = None,
    ) -> None:
        ssl_context = ssl.create_default_context(cafile=certifi.where())
        super().__init__(verify=ssl_context, limits=limits)
        self._pool = httpcore.AsyncConnectionPool(
            ssl_context=ssl_context,
            max_connections=limits.max_connections,
            max_keepalive_connections=limits.max_keepalive_connections,
            keepalive_expiry=limits.keepalive_expiry,
            http1=True,
            http2=False,
            network_backend=network_backend if network_backend is not None else TimedNetworkBackend(),
        )
