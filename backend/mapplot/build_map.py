from __future__ import annotations

from typing import Any

from geo.index import CatalogIndex
from geo.region import Region
from mapplot.traces import trace_annotations
from mapplot.view import region_to_zoom
from view.presenter import DisplayState


def build_map_plot(
    display: DisplayState,
    region: Region,
    *,
    index: CatalogIndex | None = None,
    viewport: dict[str, int] | None = None,
    style: dict[str, Any] | None = None,
    title: str = "Water bodies",
    map_style: str = "carto-positron",
) -> dict[str, Any]:
    traces = [
        trace_annotations(
            display.annotations,
            show_labels=display.show_labels,
            title=title,
            style=style,
        )
    ]

    in_region = (
        len(index.points_in_region(region, display.annotations))
        if index is not None
        else None
    )
    meta: dict[str, Any] = {
        "region": region.as_dict(),
        "showLabels": display.show_labels,
        "stats": {
            "renderedPoints": len(display.annotations),
            "inRegion": in_region,
        },
    }

    return {
        "data": traces,
        "layout": {
            "mapbox": {
                "center": {"lat": region.center.lat, "lon": region.center.lon},
                "zoom": region_to_zoom(region, viewport=viewport),
                "style": map_style,
            },
            "margin": {"l": 0, "r": 0, "t": 0, "b": 0},
            "showlegend": False,
            "meta": meta,
        },
    }
