from __future__ import annotations

import logging
from dataclasses import dataclass, field

from catalog.types import Coordinate
from geo.region import Region, Span

logger = logging.getLogger(__name__)

ZOOM_FACTOR = 1.5
MIN_SPAN_DEGREES = 0.0005
MAX_SPAN = Span(lat_delta=180.0, lon_delta=360.0)
SELECT_SPAN = Span(lat_delta=0.05, lon_delta=0.05)


@dataclass(frozen=True)
class ViewportLimits:
    zoom_factor: float = ZOOM_FACTOR
    min_span: float = MIN_SPAN_DEGREES
    max_span: Span = field(default=MAX_SPAN)

    def __post_init__(self) -> None:
        if not self.zoom_factor > 1.0:
            raise ValueError(f"zoom_factor must be > 1, got {self.zoom_factor}")
        if not 0.0 < self.min_span <= min(self.max_span.lat_delta, self.max_span.lon_delta):
            raise ValueError(
                f"min_span must be in (0, {self.max_span}], got {self.min_span}"
            )


class ViewportController:
    """
    Owns the current map region.

    Button zooms scale both span deltas by `zoom_factor` and are clamped to
    `[min_span, max_span]`, but never move against the button: zooming in never
    grows a span and zooming out never shrinks one, even when a gesture left it
    outside the limits. Regions reported by the map widget are stored as-is.
    """

    def __init__(self, start_region: Region, limits: ViewportLimits | None = None):
        self.start_region = start_region
        self.limits = limits or ViewportLimits()
        self.region = start_region

    def zoom_in(self) -> Region:
        lim = self.limits
        s = self.region.span
        return self._set_span(
            _shrunk(s.lat_delta, lim.zoom_factor, lim.min_span),
            _shrunk(s.lon_delta, lim.zoom_factor, lim.min_span),
        )

    def zoom_out(self) -> Region:
        lim = self.limits
        s = self.region.span
        return self._set_span(
            _grown(s.lat_delta, lim.zoom_factor, lim.max_span.lat_delta),
            _grown(s.lon_delta, lim.zoom_factor, lim.max_span.lon_delta),
        )

    def reset(self) -> Region:
        self.region = self.start_region
        return self.region

    def recenter(self, coordinate: Coordinate, span: Span = SELECT_SPAN) -> Region:
        self.region = Region(center=coordinate, span=span)
        logger.debug("Recentered on (%.4f, %.4f)", coordinate.lat, coordinate.lon)
        return self.region

    def set_region(self, region: Region) -> Region:
        self.region = region
        return self.region

    def _set_span(self, lat_delta: float, lon_delta: float) -> Region:
        span = Span(lat_delta=lat_delta, lon_delta=lon_delta)
        self.region = Region(center=self.region.center, span=span)
        return self.region


def _shrunk(delta: float, factor: float, lo: float) -> float:
    # Never grows: a delta already below `lo` stays where it is.
    return min(delta, max(delta / factor, lo))


def _grown(delta: float, factor: float, hi: float) -> float:
    return max(delta, min(delta * factor, hi))
