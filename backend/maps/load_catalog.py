from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache

from catalog.loaders import load_geojson_points
from catalog.types import PointCatalog
from geo.index import CatalogIndex, build_catalog_index
from maps.registry import find_map, resolve_repo_path
from maps.types import MapConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadedMap:
    config: MapConfig
    catalog: PointCatalog
    index: CatalogIndex


@lru_cache(maxsize=8)
def load_map_catalog(map_id: str) -> LoadedMap:
    """
    Load a configured map's point catalog from disk (once per process) and index it.

    Raises `KeyError` for unknown map ids.
    """
    entry = find_map(map_id)
    if entry is None:
        raise KeyError(map_id)
    cfg = entry.config

    src = cfg.catalog
    path = resolve_repo_path(src.path)
    if not path.exists():
        raise FileNotFoundError(f"Map '{cfg.id}' missing catalog file: {src.path}")
    if src.type == "geojson_points":
        points = load_geojson_points(path)
    else:
        raise ValueError(f"Unknown catalog source type: {src.type}")

    catalog = PointCatalog.of(points)
    logger.info("Loaded %d points for map '%s' from %s", len(catalog), cfg.id, path)
    return LoadedMap(config=cfg, catalog=catalog, index=build_catalog_index(catalog))
