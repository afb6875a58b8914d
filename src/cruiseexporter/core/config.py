"""Exporter configuration.

Application settings loaded from environment variables with the
CRUISE_EXPORTER_ prefix.

Example:
    >>> from cruiseexporter.core.config import get_settings
    >>> settings = get_settings(log_level="DEBUG")
    >>> settings.log_level
    'DEBUG'
    >>> settings.page_size
    20
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.0 Safari/605.1.15"
)


class Settings(BaseSettings):
    """Application settings.

    Loads from environment variables with CRUISE_EXPORTER_ prefix. List
    values such as ``urls`` are given as JSON, e.g.
    ``CRUISE_EXPORTER_URLS='["https://a.example/graph"]'``.

    Example:
        >>> from cruiseexporter.core.config import Settings
        >>> s = Settings(urls=["https://example.com/graph"], poll_interval=60)
        >>> s.urls
        ['https://example.com/graph']
        >>> s.namespace
        'royal'
    """

    model_config = SettingsConfigDict(
        env_prefix="CRUISE_EXPORTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Targets
    urls: list[str] = Field(default_factory=list, description="Upstream search endpoints to poll")
    poll_interval: float = Field(default=300.0, gt=0, description="Seconds between poll cycles")
    page_size: int = Field(default=20, ge=1, le=1000, description="Rows requested per page")

    # HTTP
    user_agent: str = Field(default=DEFAULT_USER_AGENT)
    request_timeout: float | None = Field(
        default=None, gt=0, description="Per-request timeout in seconds (None disables it)"
    )

    # Metrics endpoint
    namespace: str = Field(default="royal", min_length=1, description="Metric name namespace")
    listen_address: str = Field(default="0.0.0.0")
    listen_port: int = Field(default=9110, ge=1, le=65535)

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: Literal["console", "json"] = Field(default="console", description="Log format: json or console")

    @field_validator("urls")
    @classmethod
    def _strip_urls(cls, value: list[str]) -> list[str]:
        return [url.strip() for url in value if url.strip()]

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()


def get_settings(**overrides: Any) -> Settings:
    """Get settings with optional overrides.

    Overrides whose value is None are ignored so CLI options that were not
    given fall back to the environment.

    Example:
        >>> from cruiseexporter.core.config import get_settings
        >>> s = get_settings(poll_interval=30.0, namespace=None)
        >>> s.poll_interval, s.namespace
        (30.0, 'royal')
    """
    return Settings(**{key: value for key, value in overrides.items() if value is not None})
