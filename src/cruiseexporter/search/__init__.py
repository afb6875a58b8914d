"""Cruise search protocol: request payload, page extraction, pagination."""

from cruiseexporter.search.extractor import decode_response, extract_page
from cruiseexporter.search.paginator import DEFAULT_PAGE_SIZE, PaginationResult, Paginator
from cruiseexporter.search.query import build_search_payload

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "PaginationResult",
    "Paginator",
    "build_search_payload",
    "decode_response",
    "extract_page",
]
