"""Clustering and query engine."""

from __future__ import annotations

from .cluster_index import (
    BuildProgress,
    ClusterIndex,
    ClusterIndexBuilder,
    ClusterNode,
    ZoomLevel,
    make_cluster_id,
    split_cluster_id,
)
from .expander import ClusterExpander
from .geometry import normalize
from .grid import SpatialGrid
from .nearest import NearestPointFinder
from .viewport import ClusterEntity, PointEntity, ViewportQuery, VisibleEntity

__all__ = [
    "BuildProgress",
    "ClusterEntity",
    "ClusterExpander",
    "ClusterIndex",
    "ClusterIndexBuilder",
    "ClusterNode",
    "NearestPointFinder",
    "PointEntity",
    "SpatialGrid",
    "ViewportQuery",
    "VisibleEntity",
    "ZoomLevel",
    "make_cluster_id",
    "normalize",
    "split_cluster_id",
]
