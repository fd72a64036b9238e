"""GeoJSON input and output."""

from __future__ import annotations

from .geojson import (
    IngestResult,
    IngestionSummary,
    entities_to_geojson,
    ingest,
    load_feature_collection,
    load_features,
)

__all__ = [
    "IngestResult",
    "IngestionSummary",
    "entities_to_geojson",
    "ingest",
    "load_feature_collection",
    "load_features",
]
