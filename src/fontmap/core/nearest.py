"""Nearest-feature lookup over the leaf level grid."""

from __future__ import annotations

import itertools
import math
from typing import Iterable, Optional

from ..models import Coordinate, Feature
from .cluster_index import ClusterIndex, split_cluster_id
from .grid import SpatialGrid
from .projection import haversine_m, lonlat_to_world


class NearestPointFinder:
    """Expanding-ring search for the feature closest to a coordinate."""

    def __init__(self, index: ClusterIndex) -> None:
        self._index = index

    def nearest(self, coord: Coordinate | tuple[float, float]) -> Optional[Feature]:
        """Return the closest feature to *coord*, or ``None`` for an empty index."""

        found = self._search(Coordinate(*coord))
        if found is None:
            return None
        return self._index.features[found]

    def nearest_with_distance(
        self, coord: Coordinate | tuple[float, float]
    ) -> Optional[tuple[Feature, float]]:
        """Return the closest feature and its great-circle distance in meters."""

        coord = Coordinate(*coord)
        found = self._search(coord)
        if found is None:
            return None
        feature = self._index.features[found]
        return feature, haversine_m(coord, feature.coordinate)

    def _search(self, coord: Coordinate) -> Optional[int]:
        if self._index.is_empty:
            return None
        grid = self._index.leaf_level().grid
        x, y = lonlat_to_world(coord.lon, coord.lat)
        px, py = grid.to_pixels(x, y)
        world_px = grid.to_pixels(1.0, 0.0)[0]

        best, exact = self._ring_search(grid, px, py, px, world_px, None)
        # A feature across the antimeridian can be closer than anything found
        # on this side; repeat the search from the query's mirror image.
        if best is not None and not exact and min(px, world_px - px) < best[0]:
            mirror = px + world_px if px < world_px / 2 else px - world_px
            best, _ = self._ring_search(grid, mirror, py, px, world_px, best)

        if best is None:
            return None
        return self._index.leaf_level().nodes[best[1]].feature_index

    @staticmethod
    def _ring_search(
        grid: SpatialGrid,
        ox: float,
        py: float,
        px: float,
        world_px: float,
        best: Optional[tuple[float, int]],
    ) -> tuple[Optional[tuple[float, int]], bool]:
        """Expand rings around pixel ``(ox, py)``, measuring from ``(px, py)``.

        Distances wrap around the antimeridian.  Returns the best
        ``(distance, position)`` pair and whether every entry was examined.
        """

        size = grid.cell_size
        origin = (int(math.floor(ox / size)), int(math.floor(py / size)))

        def consider(entries: Iterable[tuple[int, float, float]]) -> None:
            nonlocal best
            for node_id, nx, ny in entries:
                npx, npy = grid.to_pixels(nx, ny)
                dx = abs(npx - px)
                dx = min(dx, world_px - dx)
                candidate = (math.hypot(dx, npy - py), split_cluster_id(node_id)[0])
                if best is None or candidate < best:
                    best = candidate

        visited = 0
        for radius in itertools.count():
            cells = grid.ring(origin, radius)
            if visited + len(cells) > grid.cell_count:
                # The rings now cover more cells than the grid holds; a full
                # scan is cheaper and trivially exact.
                consider(grid.entries())
                return best, True
            visited += len(cells)
            for cell in cells:
                consider(grid.points_in(cell))
            if best is None:
                continue
            # Anything in ring ``radius + 1`` or beyond is at least this far away.
            inner = min(
                ox - (origin[0] - radius) * size,
                (origin[0] + radius + 1) * size - ox,
                py - (origin[1] - radius) * size,
                (origin[1] + radius + 1) * size - py,
            )
            if best[0] < inner:
                return best, False


__all__ = ["NearestPointFinder"]
