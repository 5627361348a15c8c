"""Great-circle distance and point-in-polygon geofencing.

Positions follow GeoJSON order: ``(lon, lat)``. A polygon is a list of rings where the first
ring is the outer boundary and the remaining rings are holes; a multi-polygon is a list of
polygons. Points lying on any ring edge (within ``EDGE_EPSILON``) are treated as inside the
polygon so that boundary-hugging coordinates do not flip between runs.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from importlib import resources
from typing import TYPE_CHECKING, cast

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from pathlib import Path

type Position = tuple[float, float]
type Ring = Sequence[Position]
type Polygon = Sequence[Ring]
type MultiPolygon = Sequence[Polygon]

EARTH_RADIUS_M = 6_371_000.0
EDGE_EPSILON = 1e-10
DEFAULT_BOUNDARY_RESOURCE = "norway_boundary.geojson"


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Return the great-circle distance in metres between two WGS84 coordinates."""

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def _on_segment(point: Position, start: Position, end: Position) -> bool:
    px, py = point
    x1, y1 = start
    x2, y2 = end
    cross = (py - y1) * (x2 - x1) - (px - x1) * (y2 - y1)
    if abs(cross) > EDGE_EPSILON:
        return False
    dot = (px - x1) * (px - x2) + (py - y1) * (py - y2)
    return dot <= EDGE_EPSILON


def on_ring_edge(point: Position, ring: Ring) -> bool:
    if not ring:
        return False
    previous = ring[-1]
    for current in ring:
        if _on_segment(point, previous, current):
            return True
        previous = current
    return False


def point_in_ring(point: Position, ring: Ring) -> bool:
    """Ray-casting test; points on an edge count as inside."""

    if not ring:
        return False
    x, y = point
    inside = False
    x1, y1 = ring[-1]
    for x2, y2 in ring:
        if _on_segment(point, (x1, y1), (x2, y2)):
            return True
        if (y1 > y) != (y2 > y):
            x_intersect = (x2 - x1) * (y - y1) / (y2 - y1) + x1
            if x < x_intersect:
                inside = not inside
        x1, y1 = x2, y2
    return inside


def point_in_polygon(point: Position, polygon: Polygon) -> bool:
    if not polygon:
        return False
    outer, *holes = polygon
    if not point_in_ring(point, outer):
        return False
    for hole in holes:
        if on_ring_edge(point, hole):
            return True
        if point_in_ring(point, hole):
            return False
    return True


@dataclass(frozen=True, slots=True)
class BBox:
    min_lon: float
    min_lat: float
    max_lon: float
    max_lat: float

    @classmethod
    def of_ring(cls, ring: Ring) -> BBox:
        lons = [lon for lon, _ in ring]
        lats = [lat for _, lat in ring]
        return cls(min(lons), min(lats), max(lons), max(lats))

    def contains(self, point: Position) -> bool:
        lon, lat = point
        return (
            self.min_lon - EDGE_EPSILON <= lon <= self.max_lon + EDGE_EPSILON
            and self.min_lat - EDGE_EPSILON <= lat <= self.max_lat + EDGE_EPSILON
        )


class Boundary:
    """A multi-polygon geofence with per-polygon bounding-box prefilters."""

    def __init__(self, polygons: MultiPolygon) -> None:
        self._polygons: list[tuple[BBox, Polygon]] = [
            (BBox.of_ring(polygon[0]), polygon) for polygon in polygons if polygon and polygon[0]
        ]

    def __len__(self) -> int:
        return len(self._polygons)

    def contains(self, lat: float, lon: float) -> bool:
        if not (math.isfinite(lat) and math.isfinite(lon)):
            return False
        point: Position = (lon, lat)
        return any(
            bbox.contains(point) and point_in_polygon(point, polygon)
            for bbox, polygon in self._polygons
        )

    @classmethod
    def from_geojson(cls, document: object) -> Boundary:
        """Build from a GeoJSON Polygon, MultiPolygon, Feature or FeatureCollection."""

        return cls(list(_collect_polygons(document)))


def _as_ring(raw: object) -> list[Position]:
    points = cast("list[list[float]]", raw)
    return [(float(position[0]), float(position[1])) for position in points]


def _collect_polygons(document: object) -> Iterable[Polygon]:
    if not isinstance(document, dict):
        raise ValueError("GeoJSON boundary must be an object")
    geojson = cast("dict[str, object]", document)
    kind = geojson.get("type")
    if kind == "FeatureCollection":
        for feature in cast("list[object]", geojson.get("features") or []):
            yield from _collect_polygons(feature)
    elif kind == "Feature":
        yield from _collect_polygons(geojson.get("geometry"))
    elif kind == "Polygon":
        rings = cast("list[object]", geojson["coordinates"])
        yield [_as_ring(ring) for ring in rings]
    elif kind == "MultiPolygon":
        for polygon in cast("list[list[object]]", geojson["coordinates"]):
            yield [_as_ring(ring) for ring in polygon]
    else:
        raise ValueError(f"Unsupported GeoJSON boundary type: {kind!r}")


def load_boundary(path: Path | None = None) -> Boundary:
    """Load a boundary from ``path`` or fall back to the bundled Norway outline."""

    if path is not None:
        document = json.loads(path.read_text(encoding="utf-8"))
    else:
        resource = resources.files("aedsync.data").joinpath(DEFAULT_BOUNDARY_RESOURCE)
        document = json.loads(resource.read_text(encoding="utf-8"))
    boundary = Boundary.from_geojson(document)
    if not len(boundary):
        raise ValueError("Boundary GeoJSON does not contain any polygons")
    return boundary
