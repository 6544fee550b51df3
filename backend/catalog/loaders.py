from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from catalog.types import Coordinate, Point

logger = logging.getLogger(__name__)


def load_geojson_points(path: Path) -> list[Point]:
    """
    Input: a GeoJSON FeatureCollection of `Point` features with a `name` property.

    - Feature ids become point ids; features without one get `point-<index>`.
    - Non-point geometries and unnamed features are skipped.
    - Coordinates outside the WGS84 range raise `ValueError`.
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Invalid GeoJSON root: {path}")
    features = data.get("features") or []

    out: list[Point] = []
    skipped = 0
    for i, feature in enumerate(features):
        geom = (feature or {}).get("geometry") or {}
        props = (feature or {}).get("properties") or {}
        if geom.get("type") != "Point":
            skipped += 1
            continue
        coords = geom.get("coordinates")
        if not coords or len(coords) < 2:
            skipped += 1
            continue

        name = _feature_name(props)
        if not name:
            skipped += 1
            continue

        fid = str((feature or {}).get("id") or props.get("id") or f"point-{i}")
        lon, lat = float(coords[0]), float(coords[1])
        try:
            coordinate = Coordinate(lat=lat, lon=lon)
        except ValueError as e:
            raise ValueError(f"{path}: feature '{fid}' ({name}): {e}") from e
        out.append(Point(id=fid, name=name, coordinate=coordinate))

    if skipped:
        logger.debug("Skipped %d non-point or unnamed features in %s", skipped, path)
    return out


def _feature_name(props: dict[str, Any]) -> str:
    return str(props.get("name") or props.get("label") or "").strip()
