"""Mirrors of the cruise search GraphQL response.

Only the fields the exporter turns into labels or values are modelled;
the rest of the (large) upstream schema is dropped while decoding.

Example:
    >>> from cruiseexporter.models.upstream import CruiseSearchResponse
    >>> doc = CruiseSearchResponse.model_validate_json(
    ...     b'{"data": {"cruiseSearch": {"results": {"cruises": [], "total": 0}}}}'
    ... )
    >>> doc.results.total
    0
"""

from __future__ import annotations

from pydantic import Field

from cruiseexporter.models.base import UpstreamModel


class Ship(UpstreamModel):
    name: str
    code: str


class Port(UpstreamModel):
    name: str


class Destination(UpstreamModel):
    code: str


class Itinerary(UpstreamModel):
    """Itinerary of a cruise's master sailing."""

    ship: Ship
    departure_port: Port
    destination: Destination
    total_nights: int


class MasterSailing(UpstreamModel):
    itinerary: Itinerary


class Price(UpstreamModel):
    value: int | None = None


class StateroomClass(UpstreamModel):
    id: str


class StateroomClassPrice(UpstreamModel):
    """Price of one stateroom class on one sailing."""

    price: Price | None = None
    stateroom_class: StateroomClass

    @property
    def amount(self) -> int:
        """Price in minor currency units, 0 when the class has no price."""
        if self.price is None or self.price.value is None:
            return 0
        return self.price.value


class SailingItinerary(UpstreamModel):
    code: str


class Sailing(UpstreamModel):
    """One concrete departure of a cruise."""

    itinerary: SailingItinerary
    sail_date: str
    stateroom_class_pricing: list[StateroomClassPrice] = Field(default_factory=list)


class Cruise(UpstreamModel):
    id: str
    master_sailing: MasterSailing
    sailings: list[Sailing] = Field(default_factory=list)


class SearchResults(UpstreamModel):
    cruises: list[Cruise] = Field(default_factory=list)
    total: int


class CruiseSearch(UpstreamModel):
    results: SearchResults


class SearchData(UpstreamModel):
    cruise_search: CruiseSearch


class CruiseSearchResponse(UpstreamModel):
    """Top level of the ``cruiseSearch_Cruises`` response."""

    data: SearchData

    @property
    def results(self) -> SearchResults:
        return self.data.cruise_search.results
