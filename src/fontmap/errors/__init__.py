"""Custom exception hierarchy for fontmap."""

from __future__ import annotations


class FontMapError(Exception):
    """Base class for all custom errors raised by fontmap."""


# --- Geometry errors ---

class GeometryError(FontMapError):
    """Base class for failures while reducing a geometry to a coordinate."""

    reason = "geometry_error"


class InvalidGeometryError(GeometryError):
    """Raised when a geometry is malformed or degenerate."""

    reason = "invalid_geometry"


class UnsupportedGeometryError(GeometryError):
    """Raised when the geometry type cannot be reduced to a point."""

    reason = "unsupported_geometry"


# --- Query errors ---

class UnknownClusterError(FontMapError, LookupError):
    """Raised when a cluster id does not exist in the current index."""

    def __init__(self, cluster_id: int) -> None:
        super().__init__(f"Unknown cluster id {cluster_id}")
        self.cluster_id = cluster_id


# --- Dataset errors ---

class DatasetError(FontMapError):
    """Base class for errors while reading a feature collection."""


class DatasetInvalidError(DatasetError):
    """Raised when the feature collection envelope fails validation."""


# --- Settings errors ---

class SettingsError(FontMapError):
    """Base class for settings related failures."""


class SettingsLoadError(SettingsError):
    """Raised when the settings file cannot be parsed or loaded."""


class SettingsValidationError(SettingsError):
    """Raised when settings data fails schema validation."""
