import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Make the package importable without an editable install.
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from fontmap.models import Coordinate, Feature  # noqa: E402


def make_feature(fid: str, lon: float, lat: float, **properties) -> Feature:
    return Feature(id=fid, coordinate=Coordinate(lon, lat), properties=properties)


@pytest.fixture
def three_points() -> list[Feature]:
    """Two fountains a few meters apart and one far to the east."""

    return [
        make_feature("a", 1.0, 41.0, name="Font de la Plaça"),
        make_feature("b", 1.0001, 41.0001),
        make_feature("c", 10.0, 42.0, **{"name:ca": "Font Llunyana"}),
    ]


@pytest.fixture
def sample_collection() -> dict:
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "id": "node/1",
                "geometry": {"type": "Point", "coordinates": [2.17, 41.38]},
                "properties": {"name": "Canaletes"},
            },
            {
                "type": "Feature",
                "geometry": {
                    "type": "Polygon",
                    "coordinates": [[[2.0, 41.0], [2.2, 41.0], [2.2, 41.2], [2.0, 41.2], [2.0, 41.0]]],
                },
                "properties": {"@id": "way/7", "amenity": "drinking_water"},
            },
            {
                "type": "Feature",
                "geometry": {"type": "LineString", "coordinates": [[0.0, 0.0], [1.0, 1.0]]},
                "properties": {},
            },
            {
                "type": "Feature",
                "geometry": {"type": "Polygon", "coordinates": [[[2.0, 41.0]]]},
                "properties": {},
            },
            {
                "type": "Feature",
                "geometry": None,
                "properties": {},
            },
        ],
    }
