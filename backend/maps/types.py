from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from catalog.types import Coordinate
from geo.region import Region, Span
from view.viewport import MAX_SPAN, MIN_SPAN_DEGREES, SELECT_SPAN, ZOOM_FACTOR, ViewportLimits


class MapCenter(BaseModel):
    lat: float = Field(ge=-90.0, le=90.0)
    lon: float = Field(ge=-180.0, le=180.0)


class MapSpan(BaseModel):
    latDelta: float = Field(gt=0.0, le=180.0)
    lonDelta: float = Field(gt=0.0, le=360.0)

    def to_span(self) -> Span:
        return Span(lat_delta=self.latDelta, lon_delta=self.lonDelta)


class MapDefaultView(BaseModel):
    center: MapCenter
    span: MapSpan

    def to_region(self) -> Region:
        return Region(
            center=Coordinate(lat=self.center.lat, lon=self.center.lon),
            span=self.span.to_span(),
        )


CatalogSourceType = Literal["geojson_points"]


class MapCatalogSource(BaseModel):
    type: CatalogSourceType = "geojson_points"
    path: str


class MapViewport(BaseModel):
    """
    Button zoom behavior. Spans reached by the zoom buttons stay within
    [minSpan, maxSpan]; map gestures are not clamped.
    """

    zoomFactor: float = Field(default=ZOOM_FACTOR, gt=1.0)
    minSpan: float = Field(default=MIN_SPAN_DEGREES, gt=0.0)
    maxSpan: MapSpan = Field(
        default_factory=lambda: MapSpan(
            latDelta=MAX_SPAN.lat_delta, lonDelta=MAX_SPAN.lon_delta
        )
    )

    def to_limits(self) -> ViewportLimits:
        return ViewportLimits(
            zoom_factor=self.zoomFactor,
            min_span=self.minSpan,
            max_span=self.maxSpan.to_span(),
        )


class MapSearch(BaseModel):
    # Span the map jumps to when a search result is selected.
    selectSpan: MapSpan = Field(
        default_factory=lambda: MapSpan(
            latDelta=SELECT_SPAN.lat_delta, lonDelta=SELECT_SPAN.lon_delta
        )
    )
    placeholder: str = "Search water bodies..."


class MapPlot(BaseModel):
    traceTitle: str = "Water bodies"
    mapStyle: str = "carto-positron"
    showLabels: bool = True
    # Free-form marker/label styling hints consumed by the trace builder.
    style: dict[str, Any] = Field(default_factory=dict)


class MapConfig(BaseModel):
    id: str
    title: str
    enabled: bool = True
    catalog: MapCatalogSource
    defaultView: MapDefaultView
    viewport: MapViewport = Field(default_factory=MapViewport)
    search: MapSearch = Field(default_factory=MapSearch)
    plot: MapPlot = Field(default_factory=MapPlot)
