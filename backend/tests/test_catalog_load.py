from __future__ import annotations

import json

import pytest

from catalog.loaders import load_geojson_points
from catalog.types import Coordinate, Point, PointCatalog
from maps.load_catalog import load_map_catalog


def _write(tmp_path, features):
    path = tmp_path / "points.geojson"
    path.write_text(
        json.dumps({"type": "FeatureCollection", "features": features}), encoding="utf-8"
    )
    return path


def test_load_mecklenburg_waters_non_empty():
    loaded = load_map_catalog("mecklenburg_waters")
    catalog = loaded.catalog
    assert len(catalog) == 732
    assert catalog[0].name == "Neddersee"

    luettsee = catalog.get("wb-0012")
    assert luettsee is not None
    assert luettsee.name == "Lüttsee"
    assert luettsee.coordinate == Coordinate(lat=53.7804, lon=11.0504)


def test_loader_skips_unnamed_and_non_point_features(tmp_path):
    path = _write(
        tmp_path,
        [
            {"type": "Feature", "id": "a", "properties": {"name": "Alpha"},
             "geometry": {"type": "Point", "coordinates": [11.0, 53.0]}},
            {"type": "Feature", "id": "b", "properties": {},
             "geometry": {"type": "Point", "coordinates": [11.0, 53.0]}},
            {"type": "Feature", "id": "c", "properties": {"name": "Line"},
             "geometry": {"type": "LineString", "coordinates": [[11.0, 53.0], [12.0, 54.0]]}},
            {"type": "Feature", "properties": {"name": "No id"},
             "geometry": {"type": "Point", "coordinates": [12.0, 54.0]}},
        ],
    )
    points = load_geojson_points(path)
    assert [(p.id, p.name) for p in points] == [("a", "Alpha"), ("point-3", "No id")]
    assert points[1].lat == 54.0
    assert points[1].lon == 12.0


def test_loader_rejects_out_of_range_coordinates(tmp_path):
    path = _write(
        tmp_path,
        [
            {"type": "Feature", "id": "x", "properties": {"name": "Nowhere"},
             "geometry": {"type": "Point", "coordinates": [11.0, 95.0]}},
        ],
    )
    with pytest.raises(ValueError):
        load_geojson_points(path)


def test_catalog_rejects_duplicate_ids_and_blank_names():
    c = Coordinate(lat=53.0, lon=11.0)
    with pytest.raises(ValueError):
        PointCatalog.of([Point(id="a", name="A", coordinate=c), Point(id="a", name="B", coordinate=c)])
    with pytest.raises(ValueError):
        PointCatalog.of([Point(id="a", name="  ", coordinate=c)])


def test_catalog_lookup_and_iteration_order(catalog):
    assert catalog.get("wb-0004").name == "Großeichsener See"
    assert catalog.get("missing") is None
    assert [p.id for p in catalog] == [f"wb-000{i}" for i in range(1, 7)]
