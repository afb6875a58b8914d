"""Core configuration, orchestration and scheduling."""

from cruiseexporter.core.collector import Collector, CollectorState, CycleResult, Ticker
from cruiseexporter.core.config import Settings, get_settings
from cruiseexporter.core.exceptions import (
    ConfigurationError,
    DecodeError,
    ExporterError,
    FetchError,
)
from cruiseexporter.core.exporter import Exporter

__all__ = [
    # Orchestrator
    "Exporter",
    # Scheduling
    "Collector",
    "CollectorState",
    "CycleResult",
    "Ticker",
    # Configuration
    "Settings",
    "get_settings",
    # Errors
    "ConfigurationError",
    "DecodeError",
    "ExporterError",
    "FetchError",
]
