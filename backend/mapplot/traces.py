from __future__ import annotations

from typing import Any, Sequence

from catalog.types import Point

DEFAULT_MARKER_COLOR = "rgba(30, 136, 229, 0.95)"
DEFAULT_MARKER_SIZE = 12


def trace_annotations(
    points: Sequence[Point],
    *,
    show_labels: bool,
    title: str = "Water bodies",
    style: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    One marker per point; names are drawn under the markers only when `show_labels`.

    `text` always carries the names so hover works with labels hidden.
    """
    style = style or {}
    marker = style.get("marker") or {}
    label = style.get("label") or {}
    trace: dict[str, Any] = {
        "type": "scattermapbox",
        "name": title,
        "ids": [p.id for p in points],
        "lon": [p.lon for p in points],
        "lat": [p.lat for p in points],
        "mode": "markers+text" if show_labels else "markers",
        "text": [p.name for p in points],
        "marker": {
            "size": int(
                (marker.get("size") if isinstance(marker, dict) else None)
                or DEFAULT_MARKER_SIZE
            ),
            "color": (marker.get("color") if isinstance(marker, dict) else None)
            or DEFAULT_MARKER_COLOR,
        },
        "hovertemplate": "%{text}<extra></extra>",
    }
    if show_labels:
        trace["textposition"] = "bottom center"
        trace["textfont"] = {
            "size": int((label.get("size") if isinstance(label, dict) else None) or 11),
            "color": (label.get("color") if isinstance(label, dict) else None)
            or "rgba(33, 33, 33, 0.95)",
        }
    return trace
