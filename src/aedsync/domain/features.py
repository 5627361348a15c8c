"""Map-side feature types as returned by the map query service."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from aedsync.domain.tags import TagMap


class ElementKind(StrEnum):
    NODE = "node"
    WAY = "way"
    RELATION = "relation"


@dataclass(slots=True, frozen=True)
class LatLon:
    lat: float
    lon: float


@dataclass(slots=True, frozen=True, kw_only=True)
class MapElement:
    """Any OSM element; ways and relations carry ``geometry``/``center`` from ``out geom``."""

    kind: ElementKind
    id: int
    lat: float | None = None
    lon: float | None = None
    version: int | None = None
    tags: TagMap = field(default_factory=dict)
    geometry: tuple[LatLon, ...] = ()
    center: LatLon | None = None

    @property
    def is_point(self) -> bool:
        return (
            self.kind is ElementKind.NODE
            and self.lat is not None
            and self.lon is not None
            and math.isfinite(self.lat)
            and math.isfinite(self.lon)
        )

    def as_node(self) -> MapNode:
        if not self.is_point or self.lat is None or self.lon is None:
            raise ValueError(f"{self.kind} {self.id} is not a point feature")
        return MapNode(id=self.id, lat=self.lat, lon=self.lon, version=self.version, tags=self.tags)

    def positions(self) -> list[LatLon]:
        """Coordinates used for proximity checks."""

        if self.kind is ElementKind.NODE:
            if not self.is_point or self.lat is None or self.lon is None:
                return []
            return [LatLon(self.lat, self.lon)]
        points = list(self.geometry)
        if self.center is not None:
            points.append(self.center)
        return points


@dataclass(slots=True, frozen=True, kw_only=True)
class MapNode:
    """A point feature with finite coordinates."""

    id: int
    lat: float
    lon: float
    version: int | None = None
    tags: TagMap = field(default_factory=dict)

    def to_element(self) -> MapElement:
        return MapElement(
            kind=ElementKind.NODE,
            id=self.id,
            lat=self.lat,
            lon=self.lon,
            version=self.version,
            tags=dict(self.tags),
        )

    def moved(self, lat: float, lon: float, tags: TagMap) -> MapNode:
        return replace(self, lat=lat, lon=lon, tags=tags)
