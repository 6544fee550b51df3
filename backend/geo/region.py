from __future__ import annotations

import math
from dataclasses import dataclass

from catalog.types import Coordinate


@dataclass(frozen=True)
class BBox:
    """
    WGS84 bounding box in lon/lat degrees.

    Same convention as the frontend payloads: minLon, minLat, maxLon, maxLat.
    """

    min_lon: float
    min_lat: float
    max_lon: float
    max_lat: float

    def normalized(self) -> "BBox":
        min_lon = min(self.min_lon, self.max_lon)
        max_lon = max(self.min_lon, self.max_lon)
        min_lat = min(self.min_lat, self.max_lat)
        max_lat = max(self.min_lat, self.max_lat)
        return BBox(min_lon=min_lon, min_lat=min_lat, max_lon=max_lon, max_lat=max_lat)

    def clipped(self) -> "BBox":
        """
        Clip to the valid WGS84 range (a zoomed-out region can extend past it).
        """
        b = self.normalized()
        return BBox(
            min_lon=max(-180.0, b.min_lon),
            min_lat=max(-90.0, b.min_lat),
            max_lon=min(180.0, b.max_lon),
            max_lat=min(90.0, b.max_lat),
        )


@dataclass(frozen=True)
class Span:
    """
    Visible extent in degrees. Both deltas are finite and strictly positive.
    """

    lat_delta: float
    lon_delta: float

    def __post_init__(self) -> None:
        if not all(
            math.isfinite(float(d)) and float(d) > 0.0
            for d in (self.lat_delta, self.lon_delta)
        ):
            raise ValueError(
                f"Span deltas must be finite and > 0, got ({self.lat_delta}, {self.lon_delta})"
            )


@dataclass(frozen=True)
class Region:
    """
    The visible map window: a center coordinate and a span around it.
    """

    center: Coordinate
    span: Span

    @classmethod
    def from_bbox(cls, bbox: BBox) -> "Region":
        b = bbox.normalized()
        return cls(
            center=Coordinate(
                lat=(b.min_lat + b.max_lat) / 2.0, lon=(b.min_lon + b.max_lon) / 2.0
            ),
            span=Span(lat_delta=b.max_lat - b.min_lat, lon_delta=b.max_lon - b.min_lon),
        )

    def to_bbox(self) -> BBox:
        half_lat = self.span.lat_delta / 2.0
        half_lon = self.span.lon_delta / 2.0
        return BBox(
            min_lon=self.center.lon - half_lon,
            min_lat=self.center.lat - half_lat,
            max_lon=self.center.lon + half_lon,
            max_lat=self.center.lat + half_lat,
        )

    def as_dict(self) -> dict[str, dict[str, float]]:
        return {
            "center": {"lat": self.center.lat, "lon": self.center.lon},
            "span": {"latDelta": self.span.lat_delta, "lonDelta": self.span.lon_delta},
        }
