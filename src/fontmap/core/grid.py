"""Uniform pixel grid used for neighbour lookups and bounding-box queries."""

from __future__ import annotations

import math
from typing import Dict, Iterator

from ..models import Coordinate
from .projection import lonlat_to_world, world_size

CellKey = tuple[int, int]


class SpatialGrid:
    """Bucket node ids by grid cell at a single zoom level.

    Positions are stored in normalised world units; the cell size is one
    clustering radius expressed in pixels at :attr:`zoom`.  The grid accepts
    inserts until :meth:`freeze` is called and is read-only afterwards.
    """

    def __init__(self, zoom: int, cell_size: float, tile_size: int) -> None:
        if cell_size <= 0:
            raise ValueError("cell_size must be positive")
        self.zoom = int(zoom)
        self.cell_size = float(cell_size)
        self.tile_size = int(tile_size)
        self._scale = world_size(self.zoom, self.tile_size)
        self._cells: Dict[CellKey, list[tuple[int, float, float]]] = {}
        self._frozen = False

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._cells.values())

    @property
    def frozen(self) -> bool:
        return self._frozen

    def to_pixels(self, x: float, y: float) -> tuple[float, float]:
        """Scale normalised world units into pixels at the grid zoom."""

        return x * self._scale, y * self._scale

    def cell_of_world(self, x: float, y: float) -> CellKey:
        px, py = self.to_pixels(x, y)
        return int(math.floor(px / self.cell_size)), int(math.floor(py / self.cell_size))

    def cell_of(self, coord: Coordinate, zoom: int | None = None) -> CellKey:
        """Return the cell that contains *coord*.

        *zoom* defaults to the grid zoom; passing a different zoom computes the
        cell the coordinate would occupy in a grid built at that level.
        """

        x, y = lonlat_to_world(coord.lon, coord.lat)
        if zoom is None or int(zoom) == self.zoom:
            return self.cell_of_world(x, y)
        scale = world_size(int(zoom), self.tile_size)
        return (
            int(math.floor(x * scale / self.cell_size)),
            int(math.floor(y * scale / self.cell_size)),
        )

    @staticmethod
    def neighbors(cell: CellKey) -> set[CellKey]:
        """Return the 3×3 block of cells centred on *cell* (including itself)."""

        cx, cy = cell
        return {(cx + dx, cy + dy) for dx in (-1, 0, 1) for dy in (-1, 0, 1)}

    @staticmethod
    def ring(cell: CellKey, radius: int) -> list[CellKey]:
        """Return the cells at Chebyshev distance *radius* from *cell*."""

        cx, cy = cell
        if radius == 0:
            return [cell]
        cells: list[CellKey] = []
        for dx in range(-radius, radius + 1):
            cells.append((cx + dx, cy - radius))
            cells.append((cx + dx, cy + radius))
        for dy in range(-radius + 1, radius):
            cells.append((cx - radius, cy + dy))
            cells.append((cx + radius, cy + dy))
        return cells

    def insert(self, node_id: int, x: float, y: float) -> None:
        """Register *node_id* at normalised world position ``(x, y)``."""

        if self._frozen:
            raise RuntimeError("SpatialGrid is frozen")
        self._cells.setdefault(self.cell_of_world(x, y), []).append((node_id, x, y))

    def freeze(self) -> None:
        self._frozen = True

    def points_in(self, cell: CellKey) -> list[tuple[int, float, float]]:
        """Return the ``(node_id, x, y)`` entries stored in *cell*."""

        return list(self._cells.get(cell, ()))

    def cells_in_rect(
        self, min_x: float, min_y: float, max_x: float, max_y: float
    ) -> Iterator[CellKey]:
        """Yield the occupied cells overlapping a normalised world rectangle."""

        first = self.cell_of_world(min_x, min_y)
        last = self.cell_of_world(max_x, max_y)
        span = (last[0] - first[0] + 1) * (last[1] - first[1] + 1)
        if span > len(self._cells):
            # Sparse grid: walking the occupied cells is cheaper.
            for cell in self._cells:
                if first[0] <= cell[0] <= last[0] and first[1] <= cell[1] <= last[1]:
                    yield cell
            return
        for cx in range(first[0], last[0] + 1):
            for cy in range(first[1], last[1] + 1):
                if (cx, cy) in self._cells:
                    yield (cx, cy)

    @property
    def cell_count(self) -> int:
        """Return the number of occupied cells."""

        return len(self._cells)

    def entries(self) -> Iterator[tuple[int, float, float]]:
        """Yield every ``(node_id, x, y)`` entry in insertion order per cell."""

        for bucket in self._cells.values():
            yield from bucket


__all__ = ["CellKey", "SpatialGrid"]
