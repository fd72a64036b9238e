"""Tests for reducing GeoJSON geometries to representative coordinates."""

import pytest

from fontmap.core.geometry import is_number_pair, normalize, ring_centroid, to_coordinate
from fontmap.errors import GeometryError, InvalidGeometryError, UnsupportedGeometryError
from fontmap.models import Coordinate


def test_point_geometry_is_returned_unchanged():
    feature = {"type": "Feature", "geometry": {"type": "Point", "coordinates": [2.17, 41.38]}}

    assert normalize(feature) == Coordinate(2.17, 41.38)


def test_bare_geometry_is_accepted():
    assert normalize({"type": "Point", "coordinates": [1, 2]}) == Coordinate(1.0, 2.0)


def test_point_keeps_only_lon_lat_of_three_dimensional_position():
    geometry = {"type": "Point", "coordinates": [1.5, 41.8, 120.0]}

    assert normalize(geometry) == Coordinate(1.5, 41.8)


def test_polygon_uses_vertex_centroid_of_outer_ring():
    geometry = {
        "type": "Polygon",
        "coordinates": [
            [[0.0, 0.0], [4.0, 0.0], [4.0, 2.0], [0.0, 2.0], [0.0, 0.0]],
            [[1.0, 0.5], [2.0, 0.5], [2.0, 1.0], [1.0, 0.5]],
        ],
    }

    centroid = normalize({"type": "Feature", "geometry": geometry})

    assert centroid.lon == pytest.approx(1.6)
    assert centroid.lat == pytest.approx(0.8)


def test_closing_vertex_is_averaged_with_the_rest():
    square = {"type": "Polygon", "coordinates": [[[0, 0], [2, 0], [2, 2], [0, 2], [0, 0]]]}

    assert normalize(square) == (pytest.approx(0.8), pytest.approx(0.8))


def test_open_ring_counts_every_vertex():
    centroid = ring_centroid([[0.0, 0.0], [3.0, 0.0], [0.0, 3.0]])

    assert centroid.lon == pytest.approx(1.0)
    assert centroid.lat == pytest.approx(1.0)


@pytest.mark.parametrize(
    "coordinates",
    [
        [],
        [[]],
        [[[2.0, 41.0]]],
        [[[2.0, 41.0], [2.0, 41.0]]],
        "not-a-ring",
    ],
)
def test_degenerate_polygons_are_invalid(coordinates):
    with pytest.raises(InvalidGeometryError):
        normalize({"type": "Polygon", "coordinates": coordinates})


@pytest.mark.parametrize(
    "geometry",
    [
        {"type": "Point", "coordinates": [200.0, 41.0]},
        {"type": "Point", "coordinates": [2.0, -91.0]},
        {"type": "Point", "coordinates": ["2", "41"]},
        {"type": "Point", "coordinates": [2.0]},
        {"type": "Point", "coordinates": [float("nan"), 41.0]},
        {"coordinates": [2.0, 41.0]},
    ],
)
def test_malformed_points_are_invalid(geometry):
    with pytest.raises(InvalidGeometryError):
        normalize(geometry)


def test_missing_geometry_is_invalid():
    with pytest.raises(InvalidGeometryError):
        normalize({"type": "Feature", "geometry": None, "properties": {}})


@pytest.mark.parametrize("kind", ["LineString", "MultiPoint", "MultiPolygon", "GeometryCollection"])
def test_other_geometry_types_are_unsupported(kind):
    with pytest.raises(UnsupportedGeometryError):
        normalize({"type": kind, "coordinates": []})


@pytest.mark.parametrize("kind", [1, 3, ["Point"]])
def test_non_string_geometry_types_are_unsupported(kind):
    with pytest.raises(UnsupportedGeometryError):
        normalize({"type": kind, "coordinates": [2.0, 41.0]})


def test_geometry_errors_carry_a_reason():
    assert InvalidGeometryError.reason == "invalid_geometry"
    assert UnsupportedGeometryError.reason == "unsupported_geometry"
    assert issubclass(InvalidGeometryError, GeometryError)
    assert issubclass(UnsupportedGeometryError, GeometryError)


def test_number_pair_rejects_booleans():
    assert is_number_pair([1, 2.5])
    assert not is_number_pair([True, False])
    assert not is_number_pair((1,))


def test_to_coordinate_accepts_boundaries():
    assert to_coordinate([-180, -90]) == Coordinate(-180.0, -90.0)
    assert to_coordinate([180, 90]) == Coordinate(180.0, 90.0)
