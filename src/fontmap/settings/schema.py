"""Schema helpers for the clustering options file."""

from __future__ import annotations

from copy import deepcopy
from typing import Any

from jsonschema import Draft202012Validator

from .. import config

OPTIONS_SCHEMA: dict[str, Any] = {
    "$id": "fontmap/options.schema.json",
    "type": "object",
    "required": [
        "schema",
        "radius",
        "tile_size",
        "min_zoom",
        "max_zoom",
        "cluster_min_zoom",
        "cluster_max_zoom",
    ],
    "properties": {
        "schema": {"const": "fontmap/options@1"},
        "radius": {"type": "number", "exclusiveMinimum": 0},
        "tile_size": {"type": "integer", "minimum": 1},
        "min_zoom": {"type": "integer", "minimum": 0, "maximum": 30},
        "max_zoom": {"type": "integer", "minimum": 0, "maximum": 30},
        "cluster_min_zoom": {"type": "integer", "minimum": 0, "maximum": 30},
        "cluster_max_zoom": {"type": "integer", "minimum": 0, "maximum": 30},
    },
    "additionalProperties": True,
}

DEFAULT_OPTIONS: dict[str, Any] = {
    "schema": "fontmap/options@1",
    "radius": config.CLUSTER_RADIUS_PX,
    "tile_size": config.TILE_SIZE,
    "min_zoom": config.MIN_ZOOM,
    "max_zoom": config.MAX_ZOOM,
    "cluster_min_zoom": config.CLUSTER_MIN_ZOOM,
    "cluster_max_zoom": config.CLUSTER_MAX_ZOOM,
}

_validator = Draft202012Validator(OPTIONS_SCHEMA)


def merge_with_defaults(data: dict[str, Any] | None) -> dict[str, Any]:
    """Merge *data* with :data:`DEFAULT_OPTIONS` and validate the result."""

    merged = deepcopy(DEFAULT_OPTIONS)
    if data:
        for key, value in data.items():
            merged[key] = value
    _validator.validate(merged)
    return merged


def validate_options(data: dict[str, Any]) -> None:
    """Validate *data* against the options schema."""

    _validator.validate(data)


__all__ = ["DEFAULT_OPTIONS", "OPTIONS_SCHEMA", "merge_with_defaults", "validate_options"]
