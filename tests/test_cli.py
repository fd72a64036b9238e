"""Tests for the command line entry points."""

import json

import pytest
from typer.testing import CliRunner

from fontmap.cli import app

runner = CliRunner()


@pytest.fixture
def dataset(tmp_path, sample_collection):
    path = tmp_path / "fonts.geojson"
    path.write_text(json.dumps(sample_collection), encoding="utf-8")
    return path


def test_summary_reports_ingestion(dataset):
    result = runner.invoke(app, ["summary", str(dataset)])

    assert result.exit_code == 0, result.output
    assert "Loaded 2 of 5 features" in result.output
    assert "invalid_geometry" in result.output
    assert "Cluster levels" in result.output
    assert "Initial view: (1.5, 41.8) at zoom 7" in result.output


def test_query_json_output(dataset):
    result = runner.invoke(
        app, ["query", str(dataset), "--bbox", "1.5,40.5,2.5,41.8", "--zoom", "14", "--json"]
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert sorted(feature["id"] for feature in payload["features"]) == ["node/1", "way/7"]


def test_query_writes_output_file(dataset, tmp_path):
    target = tmp_path / "out" / "visible.geojson"

    result = runner.invoke(
        app,
        ["query", str(dataset), "--bbox", "1.5,40.5,2.5,41.8", "-z", "0", "--output", str(target)],
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(target.read_text(encoding="utf-8"))
    (cluster,) = payload["features"]
    assert cluster["properties"]["point_count"] == 2
    assert not target.with_suffix(".geojson.tmp").exists()


def test_query_rejects_bad_bbox(dataset):
    result = runner.invoke(app, ["query", str(dataset), "--bbox", "1,2,3", "--zoom", "4"])

    assert result.exit_code != 0


def test_expand_unknown_cluster_fails_cleanly(dataset):
    result = runner.invoke(app, ["expand", str(dataset), "999999"])

    assert result.exit_code == 1
    assert "Unknown cluster id 999999" in result.output


def test_expand_lists_leaves(dataset):
    query = runner.invoke(
        app, ["query", str(dataset), "--bbox", "-180,-85,180,85", "--zoom", "0", "--json"]
    )
    (cluster,) = json.loads(query.output)["features"]

    result = runner.invoke(app, ["expand", str(dataset), str(cluster["properties"]["cluster_id"])])

    assert result.exit_code == 0, result.output
    assert "Canaletes" in result.output
    assert "way/7" in result.output


def test_nearest_prints_distance(dataset):
    result = runner.invoke(app, ["nearest", str(dataset), "--lon", "2.17", "--lat", "41.381"])

    assert result.exit_code == 0, result.output
    assert "node/1" in result.output
    assert " m" in result.output


def test_invalid_settings_file(dataset, tmp_path):
    settings = tmp_path / "options.json"
    settings.write_text(json.dumps({"radius": -5}), encoding="utf-8")

    result = runner.invoke(app, ["summary", str(dataset), "--settings", str(settings)])

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_markup_in_feature_names_is_printed_literally(tmp_path):
    path = tmp_path / "markup.geojson"
    collection = {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "id": "node/[red]",
                "geometry": {"type": "Point", "coordinates": [2.0, 41.0]},
                "properties": {"name": "[/b] Font [bold]"},
            }
        ],
    }
    path.write_text(json.dumps(collection), encoding="utf-8")

    result = runner.invoke(app, ["nearest", str(path), "--lon", "2.0", "--lat", "41.0"])

    assert result.exit_code == 0, result.output
    assert "node/[red]" in result.output
    assert "[/b] Font [bold]" in result.output
