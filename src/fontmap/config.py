"""Default configuration values for fontmap."""

from __future__ import annotations

from typing import Final

# ``TILE_SIZE`` is the pixel width of one map tile at integer zoom levels.  The
# clustering radius is expressed in these pixels, so the same radius covers the
# same on-screen distance at every zoom.
TILE_SIZE: Final[int] = 512
CLUSTER_RADIUS_PX: Final[float] = 50.0

MIN_ZOOM: Final[int] = 0
MAX_ZOOM: Final[int] = 20
CLUSTER_MIN_ZOOM: Final[int] = 0
# Zoom 14 and deeper render every fountain individually.
CLUSTER_MAX_ZOOM: Final[int] = 13

# Cluster ids reserve the low bits for the zoom level of the node.
ZOOM_BITS: Final[int] = 5
ZOOM_MASK: Final[int] = (1 << ZOOM_BITS) - 1

MERCATOR_LAT_BOUND: Final[float] = 85.05112878
EARTH_RADIUS_M: Final[float] = 6_371_008.8

# ---------------------------------------------------------------------------
# Presentation defaults
# ---------------------------------------------------------------------------

INITIAL_CENTER: Final[tuple[float, float]] = (1.5, 41.8)
INITIAL_ZOOM: Final[int] = 7
UNNAMED_FEATURE_LABEL: Final[str] = "Font sense nom"
NAME_PROPERTIES: Final[tuple[str, ...]] = ("name", "name:ca")

# Cluster circles switch colour and size at these point counts.
CLUSTER_STEP_MEDIUM: Final[int] = 10
CLUSTER_STEP_LARGE: Final[int] = 30
