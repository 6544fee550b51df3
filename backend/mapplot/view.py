from __future__ import annotations

import math

from catalog.types import Coordinate
from geo.region import Region, Span

DEFAULT_VIEWPORT = {"width": 900, "height": 600}
# Web Mercator is undefined at the poles; mapbox clips here.
MAX_MERCATOR_LAT = 85.0511


def region_to_zoom(region: Region, *, viewport: dict[str, int] | None) -> float:
    """
    Mapbox zoom at which `region` fits into the viewport.
    """
    b = region.to_bbox().clipped()
    width, height = _viewport_size(viewport)
    return bbox_to_zoom(
        b.min_lon, b.min_lat, b.max_lon, b.max_lat, width=width, height=height
    )


def region_from_view(
    center: Coordinate, zoom: float, *, viewport: dict[str, int] | None
) -> Region:
    """
    Inverse of `region_to_zoom`: the region a mapbox view (center + zoom) shows.
    """
    width, height = _viewport_size(viewport)
    scale = 256.0 * (2.0 ** float(zoom))
    lon_delta = min(360.0, (width * 360.0) / scale)
    merc_delta = (height * 170.0) / scale

    y_c = _lat_to_merc_deg(max(-MAX_MERCATOR_LAT, min(MAX_MERCATOR_LAT, center.lat)))
    lat_min = _merc_deg_to_lat(y_c - merc_delta / 2.0)
    lat_max = _merc_deg_to_lat(y_c + merc_delta / 2.0)
    lat_delta = max(lat_max - lat_min, 1e-9)
    return Region(center=center, span=Span(lat_delta=lat_delta, lon_delta=lon_delta))


def bbox_to_zoom(
    min_lon: float,
    min_lat: float,
    max_lon: float,
    max_lat: float,
    *,
    width: int,
    height: int,
) -> float:
    # WebMercator bbox -> zoom heuristic.
    min_lat = max(-MAX_MERCATOR_LAT, min_lat)
    max_lat = min(MAX_MERCATOR_LAT, max_lat)
    lon_delta = max_lon - min_lon
    lat_delta = _lat_to_merc_deg(max_lat) - _lat_to_merc_deg(min_lat)

    # avoid division by zero
    lon_delta = max(lon_delta, 1e-6)
    lat_delta = max(lat_delta, 1e-6)

    # 256px tiles
    zoom_x = math.log2((width * 360.0) / (256.0 * lon_delta))
    zoom_y = math.log2((height * 170.0) / (256.0 * lat_delta))
    return float(max(0.0, min(zoom_x, zoom_y)))


def _viewport_size(viewport: dict[str, int] | None) -> tuple[int, int]:
    width = int((viewport or {}).get("width") or DEFAULT_VIEWPORT["width"])
    height = int((viewport or {}).get("height") or DEFAULT_VIEWPORT["height"])
    return width, height


def _lat_to_merc_deg(lat: float) -> float:
    s = math.sin(lat * math.pi / 180.0)
    return math.log((1 + s) / (1 - s)) / 2.0 * 180.0 / math.pi


def _merc_deg_to_lat(y: float) -> float:
    return math.degrees(math.atan(math.sinh(math.radians(y))))
