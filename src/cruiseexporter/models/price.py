"""Flattened pricing rows and pages.

Example:
    >>> from cruiseexporter.models.price import Page, PriceRow
    >>> row = PriceRow(
    ...     url="https://example.com/graph",
    ...     cruise_id="WN07MIA-2390812",
    ...     itinerary="WN07W392",
    ...     stateroom_class="INTERIOR",
    ...     date_label="2026-11-02",
    ...     ship="Wonder of the Seas",
    ...     departure_port="Miami, Florida",
    ...     days="7",
    ...     ship_code="WN",
    ...     destination_code="CARIB",
    ...     price=1034,
    ... )
    >>> row.labels()["stateroomclass"]
    'INTERIOR'
    >>> Page(rows=(row,), total=1).count
    1
"""

from __future__ import annotations

from dataclasses import dataclass

PRICE_LABELS: tuple[str, ...] = (
    "url",
    "cruiseid",
    "itinerary",
    "stateroomclass",
    "datelabel",
    "ship",
    "departureport",
    "days",
    "shipcode",
    "destinationcode",
)


@dataclass(frozen=True, slots=True)
class PriceRow:
    """One positive-priced observation for a stateroom class on a sailing.

    Attributes:
        url: Target the row was collected from.
        cruise_id: Upstream cruise identifier.
        itinerary: Itinerary code of the sailing.
        stateroom_class: Stateroom class identifier.
        date_label: Sail date as reported upstream.
        ship: Ship name of the cruise's master sailing.
        departure_port: Departure port name.
        days: Total voyage nights as a base-10 string.
        ship_code: Ship code.
        destination_code: Destination code.
        price: Price in minor currency units, always > 0.
    """

    url: str
    cruise_id: str
    itinerary: str
    stateroom_class: str
    date_label: str
    ship: str
    departure_port: str
    days: str
    ship_code: str
    destination_code: str
    price: int

    def labels(self) -> dict[str, str]:
        """Label values keyed by the price gauge's label names."""
        return dict(
            zip(
                PRICE_LABELS,
                (
                    self.url,
                    self.cruise_id,
                    self.itinerary,
                    self.stateroom_class,
                    self.date_label,
                    self.ship,
                    self.departure_port,
                    self.days,
                    self.ship_code,
                    self.destination_code,
                ),
                strict=True,
            )
        )


@dataclass(frozen=True, slots=True)
class Page:
    """Rows extracted from one response plus the upstream total.

    ``decoded`` is False when the response could not be decoded; such a
    page carries no rows and a total of 0 that callers must not trust.
    """

    rows: tuple[PriceRow, ...] = ()
    total: int = 0
    decoded: bool = True

    @property
    def count(self) -> int:
        return len(self.rows)
