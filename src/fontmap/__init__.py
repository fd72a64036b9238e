"""Zoom-level clustering and viewport queries for point-of-interest maps."""

from __future__ import annotations

from .core import ClusterIndex, ClusterIndexBuilder
from .engine import FountainMap
from .models import BBox, Coordinate, Feature
from .settings import ClusterOptions

__version__ = "0.1.0"

__all__ = [
    "BBox",
    "ClusterIndex",
    "ClusterIndexBuilder",
    "ClusterOptions",
    "Coordinate",
    "Feature",
    "FountainMap",
]
