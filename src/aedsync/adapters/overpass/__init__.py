"""Overpass adapter package."""

from __future__ import annotations

from .client import OverpassAPIError, OverpassFetcher, build_query
from .schema import OverpassElement, OverpassResponse
from .translator import translate_element

__all__ = [
    "OverpassAPIError",
    "OverpassElement",
    "OverpassFetcher",
    "OverpassResponse",
    "build_query",
    "translate_element",
]
