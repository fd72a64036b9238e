"""Drill-down queries for a single cluster."""

from __future__ import annotations

import threading
from typing import Optional

from ..models import Feature
from .cluster_index import ClusterIndex, ClusterNode
from .viewport import VisibleEntity, entity_for


class ClusterExpander:
    """Resolve expansion zooms, children and leaves of cluster ids.

    Leaf lists are computed once per id and memoised; the index is immutable
    so cached results never go stale.
    """

    def __init__(self, index: ClusterIndex) -> None:
        self._index = index
        self._leaf_cache: dict[int, tuple[Feature, ...]] = {}
        self._lock = threading.Lock()

    def expansion_zoom(self, cluster_id: int) -> int:
        """Return the lowest zoom at which *cluster_id* splits into ≥2 entities.

        Single-feature nodes are already distinguishable, so their own zoom is
        returned.
        """

        node = self._index.node(cluster_id)
        if node.is_leaf:
            return node.zoom
        current = node
        while len(current.children) == 1:
            current = self._index.node(current.children[0])
        # ``current`` still holds every leaf; its children are the first level
        # that shows the members separately.
        return min(current.zoom + 1, self._index.options.max_zoom)

    def children_of(self, cluster_id: int) -> list[VisibleEntity]:
        """Return the entities that *cluster_id* folds together one zoom finer."""

        node = self._index.node(cluster_id)
        return [
            entity_for(self._index, self._index.node(child_id))
            for child_id in sorted(node.children)
        ]

    def leaves_of(
        self, cluster_id: int, limit: Optional[int] = None, offset: int = 0
    ) -> tuple[Feature, ...]:
        """Return the features under *cluster_id*, optionally paginated."""

        node = self._index.node(cluster_id)
        with self._lock:
            leaves = self._leaf_cache.get(node.id)
        if leaves is None:
            leaves = tuple(self._collect(node))
            with self._lock:
                self._leaf_cache.setdefault(node.id, leaves)
        if offset < 0:
            raise ValueError("offset must not be negative")
        if limit is None:
            return leaves[offset:]
        return leaves[offset : offset + max(0, limit)]

    def _collect(self, node: ClusterNode) -> list[Feature]:
        features: list[Feature] = []
        stack = [node]
        while stack:
            current = stack.pop()
            if current.feature_index is not None:
                features.append(self._index.features[current.feature_index])
                continue
            # Reverse so leaves come out in child order.
            stack.extend(self._index.node(child) for child in reversed(current.children))
        return features


__all__ = ["ClusterExpander"]
