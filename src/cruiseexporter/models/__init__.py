"""Data models.

Upstream document mirrors (pydantic) and the flattened values the
exporter publishes (dataclasses).
"""

from cruiseexporter.models.price import PRICE_LABELS, Page, PriceRow
from cruiseexporter.models.upstream import (
    Cruise,
    CruiseSearchResponse,
    Sailing,
    StateroomClassPrice,
)

__all__ = [
    "PRICE_LABELS",
    "Cruise",
    "CruiseSearchResponse",
    "Page",
    "PriceRow",
    "Sailing",
    "StateroomClassPrice",
]
