"""Typed clustering options loaded from defaults or a JSON settings file."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from jsonschema import ValidationError

from .. import config
from ..errors import SettingsLoadError, SettingsValidationError
from ..utils.jsonio import read_json
from .schema import merge_with_defaults


@dataclass(frozen=True)
class ClusterOptions:
    """Parameters that govern how an index is built and queried."""

    radius: float = config.CLUSTER_RADIUS_PX
    tile_size: int = config.TILE_SIZE
    min_zoom: int = config.MIN_ZOOM
    max_zoom: int = config.MAX_ZOOM
    cluster_min_zoom: int = config.CLUSTER_MIN_ZOOM
    cluster_max_zoom: int = config.CLUSTER_MAX_ZOOM

    def __post_init__(self) -> None:
        if self.radius <= 0:
            raise SettingsValidationError("radius must be positive")
        if self.tile_size <= 0:
            raise SettingsValidationError("tile_size must be positive")
        if not (
            0 <= self.min_zoom
            <= self.cluster_min_zoom
            <= self.cluster_max_zoom
            < self.max_zoom
        ):
            raise SettingsValidationError(
                "zoom bounds must satisfy "
                "min_zoom <= cluster_min_zoom <= cluster_max_zoom < max_zoom, got "
                f"{self.min_zoom}/{self.cluster_min_zoom}/"
                f"{self.cluster_max_zoom}/{self.max_zoom}"
            )
        if self.leaf_zoom > config.ZOOM_MASK:
            raise SettingsValidationError(
                f"cluster_max_zoom must be below {config.ZOOM_MASK}"
            )

    @property
    def leaf_zoom(self) -> int:
        """Return the zoom level that stores every feature as its own node."""

        return self.cluster_max_zoom + 1

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "ClusterOptions":
        """Build options from a partial mapping, filling gaps with defaults."""

        try:
            merged = merge_with_defaults(dict(data) if data else None)
        except ValidationError as exc:
            raise SettingsValidationError(exc.message) from exc
        return cls(
            radius=float(merged["radius"]),
            tile_size=int(merged["tile_size"]),
            min_zoom=int(merged["min_zoom"]),
            max_zoom=int(merged["max_zoom"]),
            cluster_min_zoom=int(merged["cluster_min_zoom"]),
            cluster_max_zoom=int(merged["cluster_max_zoom"]),
        )


def load_options(path: Path | None = None) -> ClusterOptions:
    """Return options stored at *path*, or the defaults when no path is given."""

    if path is None:
        return ClusterOptions()
    try:
        payload = read_json(path)
    except (OSError, ValueError) as exc:
        raise SettingsLoadError(f"Could not read options from {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise SettingsValidationError(f"Options file {path} must contain a JSON object")
    return ClusterOptions.from_mapping(payload)


__all__ = ["ClusterOptions", "load_options"]
