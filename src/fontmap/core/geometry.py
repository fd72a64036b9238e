"""Reduce GeoJSON geometries to a single representative coordinate."""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from typing import Any

from ..errors import InvalidGeometryError, UnsupportedGeometryError
from ..models import Coordinate


def is_number_pair(value: object) -> bool:
    """Return ``True`` when ``value`` looks like an ``(x, y)`` tuple."""

    if not isinstance(value, (list, tuple)) or len(value) < 2:
        return False
    return all(
        isinstance(component, (int, float)) and not isinstance(component, bool)
        for component in value[:2]
    )


def to_coordinate(value: object) -> Coordinate:
    """Validate a raw ``[lon, lat]`` position and return it as a coordinate."""

    if not is_number_pair(value):
        raise InvalidGeometryError(f"Expected a [lon, lat] pair, got {value!r}")
    lon = float(value[0])  # type: ignore[index]
    lat = float(value[1])  # type: ignore[index]
    if not (math.isfinite(lon) and math.isfinite(lat)):
        raise InvalidGeometryError(f"Non-finite coordinate {value!r}")
    if not -180.0 <= lon <= 180.0:
        raise InvalidGeometryError(f"Longitude {lon} outside [-180, 180]")
    if not -90.0 <= lat <= 90.0:
        raise InvalidGeometryError(f"Latitude {lat} outside [-90, 90]")
    return Coordinate(lon, lat)


def ring_centroid(ring: object) -> Coordinate:
    """Return the unweighted mean of every position listed in *ring*.

    The closing position of a closed ring is averaged like any other entry.
    Rings with fewer than two distinct positions are degenerate.
    """

    if not isinstance(ring, (list, tuple)):
        raise InvalidGeometryError("Polygon ring must be a list of positions")
    vertices = [to_coordinate(vertex) for vertex in ring]
    if len(set(vertices)) < 2:
        raise InvalidGeometryError("Degenerate polygon ring")
    lon = sum(vertex.lon for vertex in vertices) / len(vertices)
    lat = sum(vertex.lat for vertex in vertices) / len(vertices)
    return Coordinate(lon, lat)


def normalize(feature: Mapping[str, Any]) -> Coordinate:
    """Return the representative coordinate of a GeoJSON feature or geometry.

    Point geometries yield their position unchanged, polygons the vertex
    centroid of their outer ring.  Malformed geometries raise
    :class:`InvalidGeometryError`; any other geometry type raises
    :class:`UnsupportedGeometryError`.
    """

    if not isinstance(feature, Mapping):
        raise InvalidGeometryError(f"Expected a mapping, got {type(feature).__name__}")
    if feature.get("type") == "Feature" or "geometry" in feature:
        geometry = feature.get("geometry")
    else:
        geometry = feature
    if not isinstance(geometry, Mapping):
        raise InvalidGeometryError("Feature has no geometry")

    if geometry.get("type") is None:
        raise InvalidGeometryError("Geometry has no type")
    geom_type = geometry.get("type")
    coordinates = geometry.get("coordinates")
    if geom_type == "Point":
        return to_coordinate(coordinates)
    if geom_type == "Polygon":
        if not isinstance(coordinates, Sequence) or isinstance(coordinates, str) or not coordinates:
            raise InvalidGeometryError("Polygon has no rings")
        return ring_centroid(coordinates[0])
    raise UnsupportedGeometryError(f"Unsupported geometry type {geometry.get('type')!r}")


__all__ = [
    "is_number_pair",
    "normalize",
    "ring_centroid",
    "to_coordinate",
]
