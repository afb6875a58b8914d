"""Flatten a cruise search response into price rows.

Each (cruise, sailing, stateroom class price) triple becomes one candidate
row. Cruise-level labels come from the cruise's master sailing itinerary,
sailing-level labels from the individual sailing. Candidates whose price
is not strictly positive are dropped.

Example:
    >>> from cruiseexporter.search.extractor import extract_page
    >>> page = extract_page(b"not json", url="https://example.com/graph")
    >>> page.decoded, page.total, page.rows
    (False, 0, ())
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from pydantic import ValidationError

from cruiseexporter.core.exceptions import DecodeError
from cruiseexporter.models.price import Page, PriceRow
from cruiseexporter.models.upstream import Cruise, CruiseSearchResponse

logger = logging.getLogger(__name__)


def decode_response(body: bytes | str) -> CruiseSearchResponse:
    """Decode a raw response body.

    Raises:
        DecodeError: If the body is not JSON or lacks a required field.
    """
    try:
        return CruiseSearchResponse.model_validate_json(body)
    except ValidationError as e:
        raise DecodeError(f"unexpected cruise search document: {e.error_count()} error(s): {e}") from e


def iter_rows(cruise: Cruise, url: str) -> Iterator[PriceRow]:
    """Yield the positive-priced rows of one cruise in source order."""
    itinerary = cruise.master_sailing.itinerary
    days = str(itinerary.total_nights)
    for sailing in cruise.sailings:
        for entry in sailing.stateroom_class_pricing:
            if entry.amount <= 0:
                continue
            yield PriceRow(
                url=url,
                cruise_id=cruise.id,
                itinerary=sailing.itinerary.code,
                stateroom_class=entry.stateroom_class.id,
                date_label=sailing.sail_date,
                ship=itinerary.ship.name,
                departure_port=itinerary.departure_port.name,
                days=days,
                ship_code=itinerary.ship.code,
                destination_code=itinerary.destination.code,
                price=entry.amount,
            )


def extract_page(body: bytes | str, url: str) -> Page:
    """Decode one response body into a :class:`Page`.

    Decoding problems are logged and reported as an undecoded empty page
    instead of raising, so one bad response never aborts a cycle.
    """
    try:
        document = decode_response(body)
    except DecodeError as e:
        logger.warning(f"Could not decode page from {url}: {e}")
        return Page(rows=(), total=0, decoded=False)

    results = document.results
    rows = tuple(row for cruise in results.cruises for row in iter_rows(cruise, url))
    return Page(rows=rows, total=results.total)
