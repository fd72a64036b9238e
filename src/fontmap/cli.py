"""Typer-based CLI entry point."""

from __future__ import annotations

import functools
import json
from pathlib import Path
from typing import Optional

import typer
from rich import print
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .core.viewport import ClusterEntity
from .engine import FountainMap
from .errors import DatasetInvalidError, FontMapError, SettingsError, UnknownClusterError
from .io.geojson import IngestResult, entities_to_geojson, load_features
from .models import BBox, Coordinate, Feature
from .presentation import display_name, initial_view
from .settings.options import load_options
from .utils.jsonio import write_json

app = typer.Typer(help="Cluster and query a static collection of map features")

SETTINGS_OPTION = typer.Option(None, "--settings", "-s", help="JSON file with clustering options")


def _handle_errors(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (UnknownClusterError, DatasetInvalidError, SettingsError) as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(1) from exc
        except FontMapError as exc:
            typer.echo(f"Unexpected error: {exc}", err=True)
            raise typer.Exit(1) from exc

    return wrapper


def _label(feature: Feature) -> str:
    # Feature ids and names come from the dataset and may contain markup.
    return escape(f"{feature.id}  {display_name(feature)}")


def _open(dataset: Path, settings: Optional[Path]) -> tuple[FountainMap, IngestResult]:
    options = load_options(settings)
    result = load_features(dataset)
    return FountainMap(result.features, options), result


@app.command()
@_handle_errors
def summary(
    dataset: Path = typer.Argument(..., exists=True, dir_okay=False),
    settings: Optional[Path] = SETTINGS_OPTION,
) -> None:
    """Report ingestion counts and the number of nodes per zoom level."""

    fountain_map, result = _open(dataset, settings)
    print(f"[green]Loaded {result.summary.accepted} of {result.summary.total} features")
    for reason, count in sorted(result.summary.skipped.items()):
        print(f"[yellow]Skipped {count} ({reason})")

    table = Table(title="Cluster levels")
    table.add_column("zoom", justify="right")
    table.add_column("nodes", justify="right")
    table.add_column("clusters", justify="right")
    index = fountain_map.index
    for zoom in index.zooms:
        level = index.level(zoom)
        clusters = sum(1 for node in level.nodes if not node.is_leaf)
        table.add_row(str(zoom), str(len(level)), str(clusters))
    Console().print(table)
    view = initial_view()
    print(f"Initial view: ({view.center.lon}, {view.center.lat}) at zoom {view.zoom}")


@app.command()
@_handle_errors
def query(
    dataset: Path = typer.Argument(..., exists=True, dir_okay=False),
    bbox: str = typer.Option(..., "--bbox", help="minLon,minLat,maxLon,maxLat"),
    zoom: int = typer.Option(..., "--zoom", "-z", min=0),
    as_json: bool = typer.Option(False, "--json", help="Print a GeoJSON FeatureCollection"),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", dir_okay=False, help="Write the GeoJSON result to a file"
    ),
    settings: Optional[Path] = SETTINGS_OPTION,
) -> None:
    """List the clusters and points visible in a bounding box."""

    try:
        box = BBox.parse(bbox)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--bbox") from exc
    fountain_map, _ = _open(dataset, settings)
    try:
        entities = fountain_map.query(box, zoom)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--bbox") from exc

    if output is not None:
        write_json(output, entities_to_geojson(entities))
        print(f"[green]Wrote {len(entities)} entities to {escape(str(output))}")
        return
    if as_json:
        typer.echo(json.dumps(entities_to_geojson(entities), ensure_ascii=False))
        return
    for entity in entities:
        lon, lat = entity.coordinate
        if isinstance(entity, ClusterEntity):
            print(f"cluster {entity.id}  {entity.leaf_count} features  ({lon:.5f}, {lat:.5f})")
        else:
            print(f"point   {_label(entity.feature)}  ({lon:.5f}, {lat:.5f})")
    print(f"[green]{len(entities)} entities at zoom {zoom}")


@app.command()
@_handle_errors
def expand(
    dataset: Path = typer.Argument(..., exists=True, dir_okay=False),
    cluster_id: int = typer.Argument(...),
    limit: Optional[int] = typer.Option(None, "--limit", min=0),
    settings: Optional[Path] = SETTINGS_OPTION,
) -> None:
    """Show the expansion zoom and the leaves of a cluster."""

    fountain_map, _ = _open(dataset, settings)
    expansion = fountain_map.expansion_zoom(cluster_id)
    leaves = fountain_map.leaves_of(cluster_id, limit=limit)
    print(f"Cluster {cluster_id} expands at zoom {expansion}")
    for feature in leaves:
        print(f"  {_label(feature)}")


@app.command()
@_handle_errors
def nearest(
    dataset: Path = typer.Argument(..., exists=True, dir_okay=False),
    lon: float = typer.Option(..., "--lon", min=-180.0, max=180.0),
    lat: float = typer.Option(..., "--lat", min=-90.0, max=90.0),
    settings: Optional[Path] = SETTINGS_OPTION,
) -> None:
    """Find the feature closest to a coordinate."""

    fountain_map, _ = _open(dataset, settings)
    found = fountain_map.nearest_with_distance(Coordinate(lon, lat))
    if found is None:
        print("[yellow]No features loaded")
        return
    feature, meters = found
    print(f"{_label(feature)}  {meters:.0f} m")


def main() -> None:  # pragma: no cover - console script
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
