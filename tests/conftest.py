"""Shared fixtures: upstream document builders and a fake search API."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from types import SimpleNamespace
from typing import Any

import httpx
import pytest
from prometheus_client import CollectorRegistry

from cruiseexporter.metrics.sink import MetricSet

TARGET_URL = "https://search.example.com/graph"


def stateroom_price(class_id: str, value: int | None) -> dict[str, Any]:
    return {
        "price": {"value": value, "__typename": "CruisePrice"},
        "stateroomClass": {"id": class_id, "__typename": "StateroomClass"},
        "__typename": "StateroomClassPrice",
    }


def sailing(
    code: str = "WN07W392",
    sail_date: str = "2026-11-02",
    prices: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    return {
        "bookingLink": "/booking",
        "id": f"{code}-{sail_date}",
        "itinerary": {"code": code, "__typename": "Itinerary"},
        "sailDate": sail_date,
        "startDate": sail_date,
        "endDate": sail_date,
        "stateroomClassPricing": prices if prices is not None else [stateroom_price("INTERIOR", 1034)],
        "__typename": "Sailing",
    }


def cruise(
    cruise_id: str = "WN07MIA-2390812",
    sailings: list[dict[str, Any]] | None = None,
    ship: str = "Wonder of the Seas",
    ship_code: str = "WN",
    port: str = "Miami, Florida",
    destination: str = "CARIB",
    nights: int = 7,
) -> dict[str, Any]:
    return {
        "id": cruise_id,
        "productViewLink": "/cruises/itinerary",
        "masterSailing": {
            "itinerary": {
                "code": "WN07W392",
                "name": "7 Night Western Caribbean",
                "departurePort": {"code": "MIA", "name": port, "region": "CARIB", "__typename": "Port"},
                "destination": {"code": destination, "name": "Caribbean", "__typename": "Destination"},
                "ship": {"code": ship_code, "name": ship, "stateroomClasses": [], "__typename": "Ship"},
                "sailingNights": nights,
                "totalNights": nights,
                "type": "CRUISE",
                "__typename": "Itinerary",
            },
            "__typename": "MasterSailing",
        },
        "sailings": sailings if sailings is not None else [sailing()],
        "__typename": "Cruise",
    }


def search_document(cruises: list[dict[str, Any]], total: int) -> dict[str, Any]:
    return {
        "data": {
            "cruiseSearch": {
                "results": {
                    "cruises": cruises,
                    "cruiseRecommendationId": "rec-1",
                    "total": total,
                    "__typename": "CruiseSearchResults",
                },
                "__typename": "CruiseSearch",
            }
        }
    }


def page_of(count: int, total: int, start: int = 0) -> dict[str, Any]:
    """Document with ``count`` cruises, each carrying one priced row."""
    return search_document(
        [cruise(cruise_id=f"C{start + i:04d}", sailings=[sailing(prices=[stateroom_price("BALCONY", 500 + i)])]) for i in range(count)],
        total=total,
    )


class FakeSearchApi:
    """httpx.MockTransport handler serving canned pages by ``skip``.

    ``pages`` maps a skip offset to either a JSON-able document, raw
    bytes, or an exception instance to raise.
    """

    def __init__(self, pages: dict[int, Any], status_code: int = 200) -> None:
        self.pages = pages
        self.status_code = status_code
        self.requests: list[dict[str, Any]] = []

    @property
    def offsets(self) -> list[int]:
        return [r["variables"]["pagination"]["skip"] for r in self.requests]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        self.requests.append(payload)
        page = self.pages.get(payload["variables"]["pagination"]["skip"])
        if isinstance(page, Exception):
            raise page
        if isinstance(page, bytes):
            return httpx.Response(self.status_code, content=page)
        if page is None:
            page = search_document([], total=0)
        return httpx.Response(self.status_code, json=page)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def registry() -> CollectorRegistry:
    """Fresh registry per test."""
    return CollectorRegistry()


@pytest.fixture
def metrics(registry: CollectorRegistry) -> MetricSet:
    """Gauge set on a fresh registry."""
    return MetricSet(namespace="royal", registry=registry)


@pytest.fixture
def fake_api() -> Callable[..., FakeSearchApi]:
    """Factory for :class:`FakeSearchApi` handlers."""
    return FakeSearchApi


@pytest.fixture
def upstream() -> SimpleNamespace:
    """Builders for upstream search documents."""
    return SimpleNamespace(
        stateroom_price=stateroom_price,
        sailing=sailing,
        cruise=cruise,
        document=search_document,
        page_of=page_of,
    )


@pytest.fixture
def target_url() -> str:
    return TARGET_URL


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """Undo configure_logging() so caplog keeps seeing package records."""
    logger = logging.getLogger("cruiseexporter")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate
