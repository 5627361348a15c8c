"""Translate Overpass payloads into map elements."""

from __future__ import annotations

from typing import TYPE_CHECKING

from aedsync.domain.features import ElementKind, LatLon, MapElement

if TYPE_CHECKING:
    from .schema import OverpassElement, OverpassPoint


def translate_element(element: OverpassElement) -> MapElement:
    return MapElement(
        kind=ElementKind(element.type),
        id=element.id,
        lat=element.lat,
        lon=element.lon,
        version=element.version,
        tags=dict(element.tags),
        geometry=tuple(_point(point) for point in element.geometry if point is not None),
        center=_point(element.center) if element.center is not None else None,
    )


def _point(point: OverpassPoint) -> LatLon:
    return LatLon(lat=point.lat, lon=point.lon)
