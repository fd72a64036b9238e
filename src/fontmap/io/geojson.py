"""Read GeoJSON feature collections and render query results back to GeoJSON."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Mapping

from jsonschema import Draft202012Validator

from ..core.geometry import normalize
from ..core.viewport import ClusterEntity, VisibleEntity
from ..errors import DatasetInvalidError, GeometryError
from ..models import Feature
from ..presentation import abbreviate_count
from ..utils.jsonio import read_json

LOGGER = logging.getLogger(__name__)

# Only the envelope is validated here; per-feature geometry problems are
# reported through :class:`IngestionSummary` instead of failing the load.
FEATURE_COLLECTION_SCHEMA: dict[str, Any] = {
    "$id": "fontmap/feature-collection.schema.json",
    "type": "object",
    "required": ["type", "features"],
    "properties": {
        "type": {"const": "FeatureCollection"},
        "features": {
            "type": "array",
            "items": {"type": "object"},
        },
    },
}

_validator = Draft202012Validator(FEATURE_COLLECTION_SCHEMA)


@dataclass
class IngestionSummary:
    """Counts of accepted and skipped features by reason."""

    total: int = 0
    accepted: int = 0
    skipped: Counter = field(default_factory=Counter)

    @property
    def skipped_total(self) -> int:
        return sum(self.skipped.values())

    def as_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "accepted": self.accepted,
            "skipped": dict(sorted(self.skipped.items())),
        }


@dataclass(frozen=True)
class IngestResult:
    features: tuple[Feature, ...]
    summary: IngestionSummary


def validate_feature_collection(collection: object) -> None:
    """Raise :class:`DatasetInvalidError` when the envelope is malformed."""

    errors = sorted(_validator.iter_errors(collection), key=lambda err: list(err.path))
    if errors:
        first = errors[0]
        location = "/".join(str(part) for part in first.path) or "<root>"
        raise DatasetInvalidError(f"Invalid feature collection at {location}: {first.message}")


def load_feature_collection(path: Path) -> dict[str, Any]:
    """Read and validate the GeoJSON document stored at *path*."""

    try:
        payload = read_json(path)
    except (OSError, ValueError) as exc:
        raise DatasetInvalidError(f"Could not read {path}: {exc}") from exc
    validate_feature_collection(payload)
    return payload


def feature_id(raw: Mapping[str, Any], position: int) -> str:
    """Return a stable identifier for the raw feature at *position*."""

    value = raw.get("id")
    if value is None:
        properties = raw.get("properties") or {}
        value = properties.get("@id") if isinstance(properties, Mapping) else None
    if value is None:
        return f"feature-{position}"
    return str(value)


def ingest(collection: Mapping[str, Any]) -> IngestResult:
    """Normalise every feature of *collection*, skipping and counting failures."""

    validate_feature_collection(collection)
    summary = IngestionSummary()
    features: list[Feature] = []
    for position, raw in enumerate(collection["features"]):
        summary.total += 1
        try:
            coordinate = normalize(raw)
        except GeometryError as exc:
            summary.skipped[exc.reason] += 1
            LOGGER.warning("Skipping feature %s: %s", feature_id(raw, position), exc)
            continue
        properties = raw.get("properties")
        features.append(
            Feature(
                id=feature_id(raw, position),
                coordinate=coordinate,
                properties=properties if isinstance(properties, Mapping) else {},
            )
        )
        summary.accepted += 1

    LOGGER.info(
        "Ingested %d of %d features (%d skipped)",
        summary.accepted,
        summary.total,
        summary.skipped_total,
    )
    return IngestResult(tuple(features), summary)


def load_features(path: Path) -> IngestResult:
    """Read *path* and return its normalised features."""

    return ingest(load_feature_collection(path))


def entity_to_geojson(entity: VisibleEntity) -> dict[str, Any]:
    """Render a visible entity with the property names map renderers expect."""

    if isinstance(entity, ClusterEntity):
        return {
            "type": "Feature",
            "id": entity.id,
            "geometry": {"type": "Point", "coordinates": [entity.coordinate.lon, entity.coordinate.lat]},
            "properties": {
                "cluster": True,
                "cluster_id": entity.id,
                "point_count": entity.leaf_count,
                "point_count_abbreviated": abbreviate_count(entity.leaf_count),
            },
        }
    feature = entity.feature
    return {
        "type": "Feature",
        "id": feature.id,
        "geometry": {"type": "Point", "coordinates": [feature.lon, feature.lat]},
        "properties": dict(feature.properties),
    }


def entities_to_geojson(entities: Iterable[VisibleEntity]) -> dict[str, Any]:
    return {
        "type": "FeatureCollection",
        "features": [entity_to_geojson(entity) for entity in entities],
    }


__all__ = [
    "FEATURE_COLLECTION_SCHEMA",
    "IngestResult",
    "IngestionSummary",
    "entities_to_geojson",
    "entity_to_geojson",
    "feature_id",
    "ingest",
    "load_feature_collection",
    "load_features",
    "validate_feature_collection",
]
