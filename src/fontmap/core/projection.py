"""Web-Mercator helpers shared by the grid, the index and the queries."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from ..config import EARTH_RADIUS_M, MERCATOR_LAT_BOUND
from ..models import Coordinate


def world_size(zoom: float, tile_size: int) -> float:
    """Return the width of the whole world in pixels at *zoom*."""

    return float(tile_size * (2.0 ** float(zoom)))


def lonlat_to_world(lon: float, lat: float) -> tuple[float, float]:
    """Project longitude/latitude into normalised ``[0, 1]`` world units."""

    lat = max(min(float(lat), MERCATOR_LAT_BOUND), -MERCATOR_LAT_BOUND)
    x = (float(lon) + 180.0) / 360.0
    sin_lat = math.sin(math.radians(lat))
    y = 0.5 - math.log((1 + sin_lat) / (1 - sin_lat)) / (4 * math.pi)
    return x, y


def world_to_lonlat(x: float, y: float) -> Coordinate:
    """Inverse of :func:`lonlat_to_world`."""

    lon = x * 360.0 - 180.0
    y2 = (180.0 - y * 360.0) * math.pi / 180.0
    lat = 360.0 * math.atan(math.exp(y2)) / math.pi - 90.0
    return Coordinate(lon, lat)


def project_many(lons: Sequence[float], lats: Sequence[float]) -> tuple[np.ndarray, np.ndarray]:
    """Vectorised :func:`lonlat_to_world` for whole coordinate columns."""

    lon_arr = np.asarray(lons, dtype=np.float64)
    lat_arr = np.clip(np.asarray(lats, dtype=np.float64), -MERCATOR_LAT_BOUND, MERCATOR_LAT_BOUND)
    xs = (lon_arr + 180.0) / 360.0
    sin_lat = np.sin(np.radians(lat_arr))
    ys = 0.5 - np.log((1 + sin_lat) / (1 - sin_lat)) / (4 * np.pi)
    return xs, ys


def haversine_m(a: Coordinate, b: Coordinate) -> float:
    """Return the great-circle distance between *a* and *b* in meters."""

    lat1 = math.radians(a.lat)
    lat2 = math.radians(b.lat)
    dlat = lat2 - lat1
    dlon = math.radians(b.lon - a.lon)
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.asin(min(1.0, math.sqrt(h)))


__all__ = [
    "haversine_m",
    "lonlat_to_world",
    "project_many",
    "world_size",
    "world_to_lonlat",
]
