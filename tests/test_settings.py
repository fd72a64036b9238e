"""Tests for clustering options and their JSON schema."""

import json

import pytest
from jsonschema import ValidationError

from fontmap import config
from fontmap.errors import SettingsLoadError, SettingsValidationError
from fontmap.settings import (
    DEFAULT_OPTIONS,
    ClusterOptions,
    load_options,
    merge_with_defaults,
    validate_options,
)


def test_defaults_match_config():
    options = ClusterOptions()

    assert options.radius == config.CLUSTER_RADIUS_PX
    assert options.tile_size == config.TILE_SIZE
    assert options.cluster_max_zoom == config.CLUSTER_MAX_ZOOM
    assert options.leaf_zoom == config.CLUSTER_MAX_ZOOM + 1
    validate_options(DEFAULT_OPTIONS)


def test_merge_with_defaults_overrides_keys():
    merged = merge_with_defaults({"radius": 80})

    assert merged["radius"] == 80
    assert merged["tile_size"] == config.TILE_SIZE


def test_merge_with_defaults_validates():
    with pytest.raises(ValidationError):
        merge_with_defaults({"radius": -1})


def test_from_mapping_builds_options():
    options = ClusterOptions.from_mapping({"radius": 60, "cluster_max_zoom": 15})

    assert options.radius == 60.0
    assert options.cluster_max_zoom == 15


def test_from_mapping_wraps_schema_errors():
    with pytest.raises(SettingsValidationError):
        ClusterOptions.from_mapping({"tile_size": "big"})


@pytest.mark.parametrize(
    "kwargs",
    [
        {"radius": 0},
        {"tile_size": 0},
        {"cluster_min_zoom": 10, "cluster_max_zoom": 5},
        {"cluster_max_zoom": 20, "max_zoom": 20},
        {"min_zoom": 4, "cluster_min_zoom": 2},
    ],
)
def test_inconsistent_options_are_rejected(kwargs):
    with pytest.raises(SettingsValidationError):
        ClusterOptions(**kwargs)


def test_load_options_defaults_without_path():
    assert load_options(None) == ClusterOptions()


def test_load_options_from_file(tmp_path):
    path = tmp_path / "options.json"
    path.write_text(json.dumps({"radius": 40, "max_zoom": 18}), encoding="utf-8")

    options = load_options(path)

    assert options.radius == 40.0
    assert options.max_zoom == 18


def test_load_options_errors(tmp_path):
    broken = tmp_path / "broken.json"
    broken.write_text("nope", encoding="utf-8")
    listing = tmp_path / "list.json"
    listing.write_text("[]", encoding="utf-8")

    with pytest.raises(SettingsLoadError):
        load_options(broken)
    with pytest.raises(SettingsValidationError):
        load_options(listing)
