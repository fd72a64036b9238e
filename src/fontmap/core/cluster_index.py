"""Hierarchical zoom-level clustering of point features.

The index is an arena: every zoom level owns a flat tuple of
:class:`ClusterNode` records and nodes refer to each other by integer ids only.
An id packs the node's position inside its level together with the level's
zoom, so ids are unique across the whole index but are *not* stable across
zoom levels.  Callers must re-query after every zoom change.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass, replace
from typing import Iterable, Iterator, Optional, Sequence

from ..config import ZOOM_BITS, ZOOM_MASK
from ..errors import UnknownClusterError
from ..models import Coordinate, Feature
from ..settings.options import ClusterOptions
from .grid import SpatialGrid
from .projection import lonlat_to_world, project_many, world_size

LOGGER = logging.getLogger(__name__)


def make_cluster_id(position: int, zoom: int) -> int:
    """Pack a level position and zoom into a single flat id."""

    return (position << ZOOM_BITS) | zoom


def split_cluster_id(cluster_id: int) -> tuple[int, int]:
    """Return ``(position, zoom)`` for *cluster_id*."""

    return cluster_id >> ZOOM_BITS, cluster_id & ZOOM_MASK


@dataclass(frozen=True)
class ClusterNode:
    """A leaf (one feature) or a cluster of nearby nodes at one zoom level."""

    id: int
    zoom: int
    lon: float
    lat: float
    x: float
    y: float
    leaf_count: int
    children: tuple[int, ...] = ()
    parent: Optional[int] = None
    feature_index: Optional[int] = None

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.lon, self.lat)

    @property
    def is_leaf(self) -> bool:
        return self.leaf_count == 1


@dataclass(frozen=True)
class ZoomLevel:
    """All nodes of one zoom level plus the grid used to query them."""

    zoom: int
    nodes: tuple[ClusterNode, ...]
    grid: SpatialGrid

    def __len__(self) -> int:
        return len(self.nodes)


@dataclass(frozen=True)
class BuildProgress:
    """Snapshot emitted after each finished zoom level."""

    zoom: int
    completed: int
    total: int


class ClusterIndex:
    """Immutable, fully built cluster hierarchy."""

    def __init__(
        self,
        features: Sequence[Feature],
        options: ClusterOptions,
        levels: dict[int, ZoomLevel],
    ) -> None:
        self._features = tuple(features)
        self._options = options
        self._levels = dict(levels)

    @classmethod
    def build(
        cls, features: Iterable[Feature], options: ClusterOptions | None = None
    ) -> "ClusterIndex":
        """Build an index synchronously."""

        return ClusterIndexBuilder(features, options).build()

    @property
    def options(self) -> ClusterOptions:
        return self._options

    @property
    def features(self) -> tuple[Feature, ...]:
        return self._features

    @property
    def feature_count(self) -> int:
        return len(self._features)

    @property
    def is_empty(self) -> bool:
        return not self._features

    @property
    def zooms(self) -> tuple[int, ...]:
        """Return the stored zoom levels, coarsest first."""

        return tuple(sorted(self._levels))

    def clamp_zoom(self, zoom: float) -> int:
        """Clamp a requested view zoom into ``[min_zoom, max_zoom]``."""

        value = int(math.floor(zoom))
        return max(self._options.min_zoom, min(self._options.max_zoom, value))

    def level_zoom_for(self, zoom: float) -> int:
        """Return the stored level that serves a requested view *zoom*.

        Zooms outside ``[cluster_min_zoom, cluster_max_zoom]`` are not
        clustered and are served by the leaf level.
        """

        clamped = self.clamp_zoom(zoom)
        if clamped < self._options.cluster_min_zoom:
            return self._options.leaf_zoom
        return min(self._options.leaf_zoom, clamped)

    def level(self, zoom: int) -> ZoomLevel:
        """Return the stored level for *zoom* exactly."""

        return self._levels[zoom]

    def level_for(self, zoom: float) -> ZoomLevel:
        return self._levels[self.level_zoom_for(zoom)]

    def leaf_level(self) -> ZoomLevel:
        return self._levels[self._options.leaf_zoom]

    def node(self, cluster_id: int) -> ClusterNode:
        """Return the node for *cluster_id* or raise :class:`UnknownClusterError`."""

        if not isinstance(cluster_id, int) or isinstance(cluster_id, bool) or cluster_id < 0:
            raise UnknownClusterError(cluster_id)
        position, zoom = split_cluster_id(cluster_id)
        level = self._levels.get(zoom)
        if level is None or position >= len(level.nodes):
            raise UnknownClusterError(cluster_id)
        return level.nodes[position]

    def feature_of(self, node: ClusterNode) -> Feature:
        if node.feature_index is None:
            raise ValueError(f"Node {node.id} aggregates {node.leaf_count} features")
        return self._features[node.feature_index]


class ClusterIndexBuilder:
    """Build a :class:`ClusterIndex` one zoom level at a time.

    :meth:`steps` yields a :class:`BuildProgress` after every finished level so
    a cooperative scheduler can interleave other work.  The index only becomes
    visible through :attr:`result` once the last level is complete.
    """

    def __init__(
        self, features: Iterable[Feature], options: ClusterOptions | None = None
    ) -> None:
        self._features = tuple(features)
        self._options = options or ClusterOptions()
        self._result: ClusterIndex | None = None

    @property
    def total_steps(self) -> int:
        options = self._options
        return options.cluster_max_zoom - options.cluster_min_zoom + 2

    @property
    def result(self) -> ClusterIndex | None:
        return self._result

    def build(self) -> ClusterIndex:
        for _ in self.steps():
            pass
        assert self._result is not None
        return self._result

    def steps(self) -> Iterator[BuildProgress]:
        options = self._options
        total = self.total_steps
        started = time.perf_counter()

        levels: dict[int, ZoomLevel] = {}
        finer = self._leaf_nodes()
        levels[options.leaf_zoom] = self._make_level(options.leaf_zoom, finer)
        completed = 1
        yield BuildProgress(options.leaf_zoom, completed, total)

        for zoom in range(options.cluster_max_zoom, options.cluster_min_zoom - 1, -1):
            level_started = time.perf_counter()
            coarse, parents = self._cluster(finer, zoom)
            finer = tuple(
                replace(node, parent=parent) for node, parent in zip(finer, parents)
            )
            levels[zoom + 1] = ZoomLevel(zoom + 1, finer, levels[zoom + 1].grid)
            levels[zoom] = self._make_level(zoom, coarse)
            finer = coarse
            completed += 1
            LOGGER.debug(
                "Clustered zoom %d: %d nodes in %.1f ms",
                zoom,
                len(coarse),
                (time.perf_counter() - level_started) * 1000.0,
            )
            yield BuildProgress(zoom, completed, total)

        self._result = ClusterIndex(self._features, options, levels)
        LOGGER.info(
            "Built cluster index for %d features across %d levels in %.1f ms",
            len(self._features),
            len(levels),
            (time.perf_counter() - started) * 1000.0,
        )

    def _leaf_nodes(self) -> tuple[ClusterNode, ...]:
        zoom = self._options.leaf_zoom
        if not self._features:
            return ()
        xs, ys = project_many(
            [feature.lon for feature in self._features],
            [feature.lat for feature in self._features],
        )
        return tuple(
            ClusterNode(
                id=make_cluster_id(index, zoom),
                zoom=zoom,
                lon=feature.lon,
                lat=feature.lat,
                x=float(xs[index]),
                y=float(ys[index]),
                leaf_count=1,
                feature_index=index,
            )
            for index, feature in enumerate(self._features)
        )

    def _make_level(self, zoom: int, nodes: tuple[ClusterNode, ...]) -> ZoomLevel:
        grid = SpatialGrid(zoom, self._options.radius, self._options.tile_size)
        for node in nodes:
            grid.insert(node.id, node.x, node.y)
        grid.freeze()
        return ZoomLevel(zoom, nodes, grid)

    def _cluster(
        self, finer: Sequence[ClusterNode], zoom: int
    ) -> tuple[tuple[ClusterNode, ...], list[int]]:
        """Merge the nodes of level ``zoom + 1`` into the nodes of level *zoom*."""

        radius = self._options.radius
        scale = world_size(zoom, self._options.tile_size)
        grid = SpatialGrid(zoom, radius, self._options.tile_size)
        for node in finer:
            grid.insert(node.id, node.x, node.y)
        grid.freeze()

        merged = [False] * len(finer)
        parents: list[int] = [-1] * len(finer)
        coarse: list[ClusterNode] = []

        for index, node in enumerate(finer):
            if merged[index]:
                continue
            merged[index] = True
            px = node.x * scale
            py = node.y * scale

            candidates: list[tuple[float, int]] = []
            for cell in grid.neighbors(grid.cell_of_world(node.x, node.y)):
                for other_id, ox, oy in grid.points_in(cell):
                    position = split_cluster_id(other_id)[0]
                    if merged[position]:
                        continue
                    distance = math.hypot(ox * scale - px, oy * scale - py)
                    if distance <= radius:
                        candidates.append((distance, other_id))
            # Equidistant candidates merge in ascending id order.
            candidates.sort()

            members = [node]
            for _, other_id in candidates:
                position = split_cluster_id(other_id)[0]
                merged[position] = True
                members.append(finer[position])

            cluster_id = make_cluster_id(len(coarse), zoom)
            for member in members:
                parents[split_cluster_id(member.id)[0]] = cluster_id
            coarse.append(self._merge(cluster_id, zoom, members))

        return tuple(coarse), parents

    @staticmethod
    def _merge(cluster_id: int, zoom: int, members: Sequence[ClusterNode]) -> ClusterNode:
        children = tuple(member.id for member in members)
        if len(members) == 1:
            only = members[0]
            return replace(only, id=cluster_id, zoom=zoom, children=children, parent=None)

        leaf_count = sum(member.leaf_count for member in members)
        lon = sum(member.lon * member.leaf_count for member in members) / leaf_count
        lat = sum(member.lat * member.leaf_count for member in members) / leaf_count
        x, y = lonlat_to_world(lon, lat)
        return ClusterNode(
            id=cluster_id,
            zoom=zoom,
            lon=lon,
            lat=lat,
            x=x,
            y=y,
            leaf_count=leaf_count,
            children=children,
        )


__all__ = [
    "BuildProgress",
    "ClusterIndex",
    "ClusterIndexBuilder",
    "ClusterNode",
    "ZoomLevel",
    "make_cluster_id",
    "split_cluster_id",
]
