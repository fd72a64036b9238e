"""Value objects shared by the ingestion pipeline and the cluster index."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, NamedTuple


class Coordinate(NamedTuple):
    """A WGS84 ``(longitude, latitude)`` pair in degrees."""

    lon: float
    lat: float


class BBox(NamedTuple):
    """Geographic bounding box ``(min_lon, min_lat, max_lon, max_lat)``."""

    min_lon: float
    min_lat: float
    max_lon: float
    max_lat: float

    @classmethod
    def parse(cls, raw: str) -> "BBox":
        """Parse a comma separated ``minLon,minLat,maxLon,maxLat`` string."""

        parts = [part.strip() for part in raw.split(",")]
        if len(parts) != 4:
            raise ValueError(f"Expected 4 comma separated numbers, got {raw!r}")
        return cls(*(float(part) for part in parts))


@dataclass(frozen=True)
class Feature:
    """Immutable input record with a normalised coordinate."""

    id: str
    coordinate: Coordinate
    properties: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        # Freeze the property mapping so shared features cannot be mutated.
        if not isinstance(self.properties, MappingProxyType):
            object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))

    @property
    def lon(self) -> float:
        return self.coordinate.lon

    @property
    def lat(self) -> float:
        return self.coordinate.lat


__all__ = ["BBox", "Coordinate", "Feature"]
