"""Custom exceptions.

cruiseexporter uses a small hierarchy of exceptions so callers can tell
transport failures from bad upstream documents:

Example:
    >>> from cruiseexporter.core.exceptions import ExporterError, FetchError
    >>> isinstance(FetchError("https://example.com", "refused"), ExporterError)
    True
"""

from __future__ import annotations


class ExporterError(Exception):
    """Base exception for cruiseexporter.

    Example:
        >>> from cruiseexporter.core.exceptions import ExporterError
        >>> e = ExporterError("something went wrong")
        >>> str(e)
        'something went wrong'
    """


class FetchError(ExporterError):
    """A request never produced a response (DNS, connect, timeout, ...).

    Example:
        >>> from cruiseexporter.core.exceptions import FetchError
        >>> err = FetchError("https://example.com/graph", "connection refused")
        >>> err.url
        'https://example.com/graph'
        >>> str(err)
        'Failed to fetch https://example.com/graph: connection refused'
    """

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to fetch {url}: {reason}")


class DecodeError(ExporterError):
    """Upstream document could not be decoded into a page.

    Example:
        >>> from cruiseexporter.core.exceptions import DecodeError
        >>> raise DecodeError("results.total missing")  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        DecodeError: results.total missing
    """


class ConfigurationError(ExporterError):
    """Configuration is invalid.

    Example:
        >>> from cruiseexporter.core.exceptions import ConfigurationError
        >>> raise ConfigurationError("no target urls")  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        ConfigurationError: no target urls
    """
