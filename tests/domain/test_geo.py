from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from aedsync.domain.geo import Boundary, haversine_m, load_boundary, point_in_polygon

if TYPE_CHECKING:
    from pathlib import Path

SQUARE = [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0), (0.0, 0.0)]
HOLE = [(4.0, 4.0), (6.0, 4.0), (6.0, 6.0), (4.0, 6.0), (4.0, 4.0)]


def test_haversine_is_zero_for_identical_points() -> None:
    assert haversine_m(59.91, 10.75, 59.91, 10.75) == 0.0


def test_haversine_matches_known_distance() -> None:
    # One degree of latitude is roughly 111.2 km on the mean-radius sphere.
    assert haversine_m(60.0, 10.0, 61.0, 10.0) == pytest.approx(111_195, rel=1e-3)


def test_haversine_is_symmetric() -> None:
    there = haversine_m(59.91, 10.75, 60.39, 5.32)
    back = haversine_m(60.39, 5.32, 59.91, 10.75)

    assert there == pytest.approx(back)


def test_point_in_polygon_respects_holes() -> None:
    polygon = [SQUARE, HOLE]

    assert point_in_polygon((1.0, 1.0), polygon)
    assert not point_in_polygon((5.0, 5.0), polygon)
    assert not point_in_polygon((11.0, 5.0), polygon)


def test_points_on_edges_count_as_inside() -> None:
    polygon = [SQUARE, HOLE]

    assert point_in_polygon((0.0, 5.0), polygon)
    assert point_in_polygon((10.0, 10.0), polygon)
    assert point_in_polygon((4.0, 5.0), polygon)


def test_boundary_uses_lat_lon_argument_order() -> None:
    ring = [(5.0, 58.0), (31.0, 58.0), (31.0, 71.0), (5.0, 71.0), (5.0, 58.0)]
    boundary = Boundary([[ring]])

    assert boundary.contains(59.91, 10.75)
    assert not boundary.contains(10.75, 59.91)


def test_boundary_rejects_non_finite_coordinates() -> None:
    boundary = Boundary([[SQUARE]])

    assert not boundary.contains(float("nan"), 5.0)
    assert not boundary.contains(5.0, float("inf"))


def test_bundled_boundary_covers_norway_only() -> None:
    boundary = load_boundary()

    assert boundary.contains(59.91, 10.75)  # Oslo
    assert boundary.contains(60.39, 5.32)  # Bergen
    assert not boundary.contains(59.33, 18.07)  # Stockholm


def test_load_boundary_reads_feature_collection(tmp_path: Path) -> None:
    document = {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "properties": {},
                "geometry": {"type": "Polygon", "coordinates": [[list(p) for p in SQUARE]]},
            }
        ],
    }
    path = tmp_path / "square.geojson"
    path.write_text(json.dumps(document), encoding="utf-8")

    boundary = load_boundary(path)

    assert len(boundary) == 1
    assert boundary.contains(5.0, 5.0)


def test_load_boundary_rejects_unsupported_geometry(tmp_path: Path) -> None:
    path = tmp_path / "point.geojson"
    path.write_text(json.dumps({"type": "Point", "coordinates": [1, 2]}), encoding="utf-8")

    with pytest.raises(ValueError, match="Unsupported GeoJSON boundary type"):
        load_boundary(path)
