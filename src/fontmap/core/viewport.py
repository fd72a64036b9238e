"""Answer "what is visible here?" for a bounding box and a zoom level."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from ..models import BBox, Coordinate, Feature
from .cluster_index import ClusterIndex, ClusterNode, ZoomLevel
from .projection import lonlat_to_world, world_size


@dataclass(frozen=True)
class ClusterEntity:
    """A visible aggregate of two or more features."""

    id: int
    coordinate: Coordinate
    leaf_count: int
    kind = "cluster"


@dataclass(frozen=True)
class PointEntity:
    """A visible single feature."""

    id: int
    feature: Feature
    kind = "point"

    @property
    def coordinate(self) -> Coordinate:
        return self.feature.coordinate

    @property
    def leaf_count(self) -> int:
        return 1


VisibleEntity = Union[ClusterEntity, PointEntity]


def entity_for(index: ClusterIndex, node: ClusterNode) -> VisibleEntity:
    """Wrap *node* as the entity a renderer should draw."""

    if node.is_leaf:
        return PointEntity(id=node.id, feature=index.feature_of(node))
    return ClusterEntity(id=node.id, coordinate=node.coordinate, leaf_count=node.leaf_count)


def _validate_bbox(bbox: BBox) -> None:
    if not (-90.0 <= bbox.min_lat <= 90.0 and -90.0 <= bbox.max_lat <= 90.0):
        raise ValueError(f"Latitude outside [-90, 90] in {tuple(bbox)}")
    if bbox.min_lat > bbox.max_lat:
        raise ValueError(f"min_lat greater than max_lat in {tuple(bbox)}")


class ViewportQuery:
    """Enumerate the clusters and points of a level inside a bounding box."""

    def __init__(self, index: ClusterIndex) -> None:
        self._index = index

    def query(self, bbox: BBox | tuple[float, float, float, float], zoom: float) -> list[VisibleEntity]:
        """Return the entities visible in *bbox* at *zoom*, ordered by id."""

        bbox = BBox(*bbox)
        _validate_bbox(bbox)
        if self._index.is_empty:
            return []

        level = self._index.level_for(zoom)
        min_lon = ((bbox.min_lon + 180.0) % 360.0 + 360.0) % 360.0 - 180.0
        max_lon = ((bbox.max_lon + 180.0) % 360.0 + 360.0) % 360.0 - 180.0
        if bbox.max_lon - bbox.min_lon >= 360.0:
            min_lon, max_lon = -180.0, 180.0
        elif bbox.max_lon == 180.0:
            max_lon = 180.0

        if min_lon > max_lon:
            # Crosses the antimeridian: query both halves.
            ids = self._ids_in(level, min_lon, bbox.min_lat, 180.0, bbox.max_lat)
            ids |= self._ids_in(level, -180.0, bbox.min_lat, max_lon, bbox.max_lat)
        else:
            ids = self._ids_in(level, min_lon, bbox.min_lat, max_lon, bbox.max_lat)

        return [entity_for(self._index, self._index.node(node_id)) for node_id in sorted(ids)]

    def _ids_in(
        self,
        level: ZoomLevel,
        min_lon: float,
        min_lat: float,
        max_lon: float,
        max_lat: float,
    ) -> set[int]:
        options = self._index.options
        # Pad by one clustering radius so clusters straddling the edge stay visible.
        pad = options.radius / world_size(level.zoom, options.tile_size)
        west, north = lonlat_to_world(min_lon, max_lat)
        east, south = lonlat_to_world(max_lon, min_lat)
        west -= pad
        north -= pad
        east += pad
        south += pad

        found: set[int] = set()
        for cell in level.grid.cells_in_rect(west, north, east, south):
            for node_id, x, y in level.grid.points_in(cell):
                if west <= x <= east and north <= y <= south:
                    found.add(node_id)
        return found


__all__ = ["ClusterEntity", "PointEntity", "ViewportQuery", "VisibleEntity", "entity_for"]
