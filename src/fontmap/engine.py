"""Facade that owns the published cluster index and its query helpers."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Iterable, Optional

from .core.cluster_index import ClusterIndex, ClusterIndexBuilder
from .core.expander import ClusterExpander
from .core.nearest import NearestPointFinder
from .core.viewport import ViewportQuery, VisibleEntity
from .models import BBox, Coordinate, Feature
from .settings.options import ClusterOptions

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class IndexSnapshot:
    """A published index bundled with the query objects bound to it."""

    generation: int
    index: ClusterIndex
    viewport: ViewportQuery
    expander: ClusterExpander
    nearest: NearestPointFinder

    @classmethod
    def wrap(cls, generation: int, index: ClusterIndex) -> "IndexSnapshot":
        return cls(
            generation=generation,
            index=index,
            viewport=ViewportQuery(index),
            expander=ClusterExpander(index),
            nearest=NearestPointFinder(index),
        )


class FountainMap:
    """Serve queries from the latest complete index.

    Rebuilds run against a private builder and are published with a single
    reference swap, so concurrent readers see either the old or the new index
    in full.  A build that finishes after a newer one was started is dropped.
    """

    def __init__(
        self,
        features: Iterable[Feature] = (),
        options: ClusterOptions | None = None,
    ) -> None:
        self._options = options or ClusterOptions()
        self._lock = threading.Lock()
        self._generation = 0
        self._snapshot = IndexSnapshot.wrap(0, ClusterIndex.build((), self._options))
        features = tuple(features)
        if features:
            self.rebuild(features)

    @property
    def options(self) -> ClusterOptions:
        return self._options

    @property
    def index(self) -> ClusterIndex:
        return self._snapshot.index

    @property
    def generation(self) -> int:
        return self._snapshot.generation

    def snapshot(self) -> IndexSnapshot:
        return self._snapshot

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------
    def begin_rebuild(self, features: Iterable[Feature]) -> tuple[int, ClusterIndexBuilder]:
        """Reserve a generation number and return a builder for *features*."""

        with self._lock:
            self._generation += 1
            generation = self._generation
        return generation, ClusterIndexBuilder(features, self._options)

    def publish(self, generation: int, index: ClusterIndex) -> bool:
        """Swap in *index* unless a newer rebuild has been started since."""

        with self._lock:
            if generation != self._generation:
                LOGGER.info(
                    "Discarding stale index generation %d (current %d)",
                    generation,
                    self._generation,
                )
                return False
            self._snapshot = IndexSnapshot.wrap(generation, index)
        LOGGER.info(
            "Published index generation %d with %d features", generation, index.feature_count
        )
        return True

    def rebuild(self, features: Iterable[Feature]) -> bool:
        """Build and publish a new index synchronously."""

        generation, builder = self.begin_rebuild(features)
        return self.publish(generation, builder.build())

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def query(self, bbox: BBox | tuple[float, float, float, float], zoom: float) -> list[VisibleEntity]:
        return self._snapshot.viewport.query(bbox, zoom)

    def expansion_zoom(self, cluster_id: int) -> int:
        return self._snapshot.expander.expansion_zoom(cluster_id)

    def leaves_of(
        self, cluster_id: int, limit: Optional[int] = None, offset: int = 0
    ) -> tuple[Feature, ...]:
        return self._snapshot.expander.leaves_of(cluster_id, limit=limit, offset=offset)

    def children_of(self, cluster_id: int) -> list[VisibleEntity]:
        return self._snapshot.expander.children_of(cluster_id)

    def nearest(self, coord: Coordinate | tuple[float, float]) -> Optional[Feature]:
        return self._snapshot.nearest.nearest(coord)

    def nearest_with_distance(
        self, coord: Coordinate | tuple[float, float]
    ) -> Optional[tuple[Feature, float]]:
        return self._snapshot.nearest.nearest_with_distance(coord)


__all__ = ["FountainMap", "IndexSnapshot"]
