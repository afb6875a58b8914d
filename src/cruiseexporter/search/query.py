"""Request payload for the cruise search GraphQL endpoint."""

from __future__ import annotations

from typing import Any

OPERATION_NAME = "cruiseSearch_Cruises"
SORT_ORDER = "RECOMMENDED"

SEARCH_QUERY = (
    "query cruiseSearch_Cruises($filters: String, $qualifiers: String, $sort: CruiseSearchSort, "
    "$pagination: CruiseSearchPagination) { cruiseSearch( filters: $filters qualifiers: $qualifiers "
    "sort: $sort pagination: $pagination ) { results { cruises { id productViewLink lowestPriceSailing "
    "{ bookingLink id lowestStateroomClassPrice { price { value __typename } stateroomClass { id "
    "__typename } __typename } sailDate startDate endDate taxesAndFees { value __typename } "
    "taxesAndFeesIncluded __typename } masterSailing { itinerary { code media { images { path "
    "__typename } __typename } days { number type ports { activity arrivalTime departureTime port { "
    "code name region media { images { path __typename } __typename } __typename } __typename } "
    "__typename } departurePort { code name region __typename } destination { code name __typename } "
    "name postTour { days { number type ports { activity arrivalTime departureTime port { code name "
    "region __typename } __typename } __typename } duration __typename } preTour { days { number type "
    "ports { activity arrivalTime departureTime port { code name region __typename } __typename } "
    "__typename } duration __typename } sailingNights ship { code name stateroomClasses { id name "
    "content { amenities area code maxCapacity media { images { path meta { description title "
    "location __typename } __typename } __typename } superCategory __typename } __typename } media { "
    "images { path __typename } __typename } __typename } totalNights type __typename } __typename } "
    "sailings { bookingLink id itinerary { code __typename } sailDate startDate endDate "
    "stateroomClassPricing { price { value __typename } stateroomClass { id __typename } __typename } "
    "__typename } __typename } cruiseRecommendationId total __typename } __typename } }"
)


def build_search_payload(skip: int, count: int, sort: str = SORT_ORDER) -> dict[str, Any]:
    """Build the JSON body requesting ``count`` cruises starting at ``skip``.

    Example:
        >>> payload = build_search_payload(skip=40, count=20)
        >>> payload["variables"]["pagination"]
        {'count': 20, 'skip': 40}
        >>> payload["operationName"]
        'cruiseSearch_Cruises'
    """
    return {
        "operationName": OPERATION_NAME,
        "variables": {
            "sort": {"by": sort},
            "pagination": {"count": count, "skip": skip},
        },
        "query": SEARCH_QUERY,
    }
