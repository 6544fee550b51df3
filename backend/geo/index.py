from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Iterable

from shapely.geometry import Point as ShapelyPoint
from shapely.geometry import box as shapely_box
from shapely.strtree import STRtree

from catalog.types import Point, PointCatalog
from geo.region import BBox, Region


@dataclass
class CatalogIndex:
    """
    STRtree over a catalog's points (EPSG:4326, lon/lat degrees).

    Used to report which annotations fall inside the visible region; results keep
    catalog order. One index is shared by every session of a map, so the region
    cache is guarded by `_cache_lock`.
    """

    catalog: PointCatalog

    _tree: STRtree | None = field(default=None, repr=False)
    _region_cache: dict[tuple[float, float, float, float], frozenset[str]] = field(
        default_factory=dict, repr=False
    )
    _cache_lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def ids_in_bbox(self, bbox: BBox, *, decimals: int = 4) -> frozenset[str]:
        b = bbox.clipped()
        key = (
            round(b.min_lon, decimals),
            round(b.min_lat, decimals),
            round(b.max_lon, decimals),
            round(b.max_lat, decimals),
        )
        with self._cache_lock:
            cached = self._region_cache.get(key)
        if cached is not None:
            return cached

        if self._tree is None:
            out: frozenset[str] = frozenset()
        else:
            query = shapely_box(b.min_lon, b.min_lat, b.max_lon, b.max_lat)
            idxs = _to_int_list(self._tree.query(query, predicate="intersects"))
            out = frozenset(self.catalog[i].id for i in idxs)
        with self._cache_lock:
            _bounded_cache_put(self._region_cache, key, out, max_items=128)
        return out

    def points_in_region(
        self, region: Region, points: Iterable[Point] | None = None
    ) -> list[Point]:
        """
        Points of `points` (default: the whole catalog) visible in `region`, in input order.
        """
        ids = self.ids_in_bbox(region.to_bbox())
        src = self.catalog if points is None else points
        return [p for p in src if p.id in ids]


def build_catalog_index(catalog: PointCatalog) -> CatalogIndex:
    idx = CatalogIndex(catalog=catalog)
    geoms = [ShapelyPoint(float(p.lon), float(p.lat)) for p in catalog]
    idx._tree = STRtree(geoms) if geoms else None
    return idx


def _to_int_list(idxs: Any) -> list[int]:
    if idxs is None:
        return []
    return sorted(int(i) for i in idxs)


def _bounded_cache_put(cache: dict, key, value, *, max_items: int) -> None:
    cache[key] = value
    if len(cache) > max_items:
        oldest = next(iter(cache.keys()))
        if oldest != key:
            cache.pop(oldest, None)
