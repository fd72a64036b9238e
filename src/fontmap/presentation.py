"""Labels and styling hints for rendering features and clusters."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, NamedTuple

from . import config
from .models import Coordinate, Feature


class CameraView(NamedTuple):
    """Where the map opens: a centre coordinate and a zoom level."""

    center: Coordinate
    zoom: int


@dataclass(frozen=True)
class ClusterStyle:
    """Circle colour and radius for a cluster marker."""

    size_class: str
    color: str
    radius: int


_SMALL = ClusterStyle("small", "#3B82F6", 15)
_MEDIUM = ClusterStyle("medium", "#10B981", 20)
_LARGE = ClusterStyle("large", "#F59E0B", 25)


def initial_view() -> CameraView:
    """Return the camera the map starts with, framing Catalonia."""

    return CameraView(Coordinate(*config.INITIAL_CENTER), config.INITIAL_ZOOM)


def display_name(feature: Feature | Mapping[str, Any]) -> str:
    """Return the label shown for a feature, falling back to a placeholder."""

    properties = feature.properties if isinstance(feature, Feature) else feature
    for key in config.NAME_PROPERTIES:
        value = properties.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return config.UNNAMED_FEATURE_LABEL


def abbreviate_count(count: int) -> str:
    """Return a compact label such as ``"950"``, ``"1.2k"`` or ``"12k"``."""

    if count < 1000:
        return str(count)
    for divisor, suffix in ((1_000_000, "M"), (1000, "k")):
        if count >= divisor:
            value = count / divisor
            if value >= 10:
                return f"{int(round(value))}{suffix}"
            text = f"{value:.1f}".rstrip("0").rstrip(".")
            return f"{text}{suffix}"
    return str(count)


def cluster_style(count: int) -> ClusterStyle:
    """Pick the marker style for a cluster holding *count* features."""

    if count < config.CLUSTER_STEP_MEDIUM:
        return _SMALL
    if count < config.CLUSTER_STEP_LARGE:
        return _MEDIUM
    return _LARGE


__all__ = [
    "CameraView",
    "ClusterStyle",
    "abbreviate_count",
    "cluster_style",
    "display_name",
    "initial_view",
]
