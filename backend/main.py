import logging
import os
from typing import Any, Callable

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, model_validator
import uvicorn

from api.config import cors_origins, log_level
from api.sessions import SessionEntry, get_session_store
from catalog.types import Coordinate, Point
from geo.region import BBox, Region, Span
from mapplot.build_map import build_map_plot
from mapplot.view import region_from_view
from maps.load_catalog import LoadedMap, load_map_catalog
from maps.registry import default_map_id, list_maps
from view.session import MapSession

logging.basicConfig(
    level=log_level(), format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Water-body map")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # Rejected input is not echoed back; it may hold values JSON cannot encode (inf).
    errors = [
        {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
        for err in exc.errors()
    ]
    return JSONResponse(status_code=422, content={"detail": errors})


class ApiCenter(BaseModel):
    lat: float = Field(ge=-90.0, le=90.0, allow_inf_nan=False)
    lon: float = Field(ge=-180.0, le=180.0, allow_inf_nan=False)


class ApiSpan(BaseModel):
    latDelta: float = Field(gt=0.0, allow_inf_nan=False)
    lonDelta: float = Field(gt=0.0, allow_inf_nan=False)


class ApiRegion(BaseModel):
    center: ApiCenter
    span: ApiSpan


class ApiBbox(BaseModel):
    minLon: float = Field(ge=-180.0, le=180.0, allow_inf_nan=False)
    minLat: float = Field(ge=-90.0, le=90.0, allow_inf_nan=False)
    maxLon: float = Field(ge=-180.0, le=180.0, allow_inf_nan=False)
    maxLat: float = Field(ge=-90.0, le=90.0, allow_inf_nan=False)

    @model_validator(mode="after")
    def _non_degenerate(self) -> "ApiBbox":
        if self.minLon == self.maxLon or self.minLat == self.maxLat:
            raise ValueError("bbox must have a positive extent")
        return self


class ApiViewport(BaseModel):
    width: int = Field(gt=0)
    height: int = Field(gt=0)


class ApiMapView(BaseModel):
    center: ApiCenter
    zoom: float = Field(ge=0.0, le=24.0, allow_inf_nan=False)


class ApiCreateSession(BaseModel):
    mapId: str | None = None
    viewport: ApiViewport | None = None


class ApiRegionEvent(BaseModel):
    """
    Region reported by the map widget after a pan/pinch.

    Exactly one of `region` (center + span), `bbox` (visible bounds) or `view`
    (mapbox center + zoom) must be given.
    """

    region: ApiRegion | None = None
    bbox: ApiBbox | None = None
    view: ApiMapView | None = None
    viewport: ApiViewport | None = None

    @model_validator(mode="after")
    def _exactly_one(self) -> "ApiRegionEvent":
        given = [x for x in (self.region, self.bbox, self.view) if x is not None]
        if len(given) != 1:
            raise ValueError("exactly one of `region`, `bbox`, `view` is required")
        return self


class ApiTextEvent(BaseModel):
    text: str = ""


class ApiFocusEvent(BaseModel):
    hasFocus: bool


class ApiSelectEvent(BaseModel):
    pointId: str


def _point_json(p: Point) -> dict[str, Any]:
    return {"id": p.id, "name": p.name, "lat": p.lat, "lon": p.lon}


def _loaded_map(map_id: str | None) -> LoadedMap:
    mid = (map_id or "").strip() or default_map_id()
    try:
        return load_map_catalog(mid)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown map: {mid}")


def _entry(session_id: str) -> SessionEntry:
    entry = get_session_store().get(session_id)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"Unknown session: {session_id}")
    return entry


def _snapshot(entry: SessionEntry) -> dict[str, Any]:
    session = entry.session
    cfg = entry.map.config
    state = session.search_state
    display = session.display()
    plot = build_map_plot(
        display,
        session.region,
        index=entry.map.index,
        viewport=entry.viewport,
        style=cfg.plot.style,
        title=cfg.plot.traceTitle,
        map_style=cfg.plot.mapStyle,
    )
    return {
        "sessionId": entry.id,
        "mapId": cfg.id,
        "region": session.region.as_dict(),
        "search": {
            "query": state.query,
            "active": state.active,
            "phase": state.phase.value,
            "showClearButton": session.search.show_clear_button,
            "placeholder": cfg.search.placeholder,
        },
        "showLabels": session.show_labels,
        "results": [_point_json(p) for p in session.results()],
        "dismissKeyboard": session.search.consume_dismiss_request(),
        "plot": plot,
    }


def _apply(session_id: str, event: Callable[[MapSession], Any]) -> dict[str, Any]:
    entry = _entry(session_id)
    with entry.lock:
        event(entry.session)
        return _snapshot(entry)


def _region_of(body: ApiRegionEvent, viewport: dict[str, int] | None) -> Region:
    if body.region is not None:
        return Region(
            center=Coordinate(lat=body.region.center.lat, lon=body.region.center.lon),
            span=Span(
                lat_delta=body.region.span.latDelta,
                lon_delta=body.region.span.lonDelta,
            ),
        )
    if body.bbox is not None:
        b = body.bbox
        return Region.from_bbox(
            BBox(min_lon=b.minLon, min_lat=b.minLat, max_lon=b.maxLon, max_lat=b.maxLat)
        )
    if body.view is None:
        raise HTTPException(status_code=422, detail="No region given")
    center = Coordinate(lat=body.view.center.lat, lon=body.view.center.lon)
    return region_from_view(center, body.view.zoom, viewport=viewport)


@app.get("/maps")
def get_maps():
    out = []
    for cfg in list_maps():
        loaded = load_map_catalog(cfg.id)
        out.append(
            {
                "id": cfg.id,
                "title": cfg.title,
                "points": len(loaded.catalog),
                "defaultView": cfg.defaultView.model_dump(),
                "searchPlaceholder": cfg.search.placeholder,
            }
        )
    return out


@app.get("/maps/{map_id}/points")
def get_map_points(map_id: str):
    loaded = _loaded_map(map_id)
    return [_point_json(p) for p in loaded.catalog]


@app.post("/sessions")
def create_session(body: ApiCreateSession | None = None):
    body = body or ApiCreateSession()
    entry = get_session_store().create(_loaded_map(body.mapId))
    if body.viewport is not None:
        entry.viewport = body.viewport.model_dump()
    with entry.lock:
        return _snapshot(entry)


@app.get("/sessions/{session_id}")
def get_session(session_id: str):
    return _apply(session_id, lambda s: None)


@app.delete("/sessions/{session_id}")
def delete_session(session_id: str):
    if not get_session_store().drop(session_id):
        raise HTTPException(status_code=404, detail=f"Unknown session: {session_id}")
    return {"deleted": session_id}


@app.post("/sessions/{session_id}/region")
def region_changed(session_id: str, body: ApiRegionEvent):
    entry = _entry(session_id)
    with entry.lock:
        if body.viewport is not None:
            entry.viewport = body.viewport.model_dump()
        entry.session.region_changed(_region_of(body, entry.viewport))
        return _snapshot(entry)


@app.post("/sessions/{session_id}/search/text")
def search_text_changed(session_id: str, body: ApiTextEvent):
    return _apply(session_id, lambda s: s.text_changed(body.text))


@app.post("/sessions/{session_id}/search/focus")
def search_focus_changed(session_id: str, body: ApiFocusEvent):
    return _apply(session_id, lambda s: s.focus_changed(body.hasFocus))


@app.post("/sessions/{session_id}/search/select")
def search_select(session_id: str, body: ApiSelectEvent):
    def select(s: MapSession) -> None:
        try:
            s.select(body.pointId)
        except KeyError:
            raise HTTPException(
                status_code=404, detail=f"Unknown point: {body.pointId}"
            )

    return _apply(session_id, select)


@app.post("/sessions/{session_id}/search/clear")
def search_clear(session_id: str):
    return _apply(session_id, lambda s: s.clear_search())


@app.post("/sessions/{session_id}/zoom-in")
def zoom_in(session_id: str):
    return _apply(session_id, lambda s: s.zoom_in())


@app.post("/sessions/{session_id}/zoom-out")
def zoom_out(session_id: str):
    return _apply(session_id, lambda s: s.zoom_out())


@app.post("/sessions/{session_id}/reset")
def reset_view(session_id: str):
    return _apply(session_id, lambda s: s.reset_view())


@app.post("/sessions/{session_id}/labels/toggle")
def toggle_labels(session_id: str):
    return _apply(session_id, lambda s: s.toggle_labels())


def run() -> None:
    uvicorn.run(
        "main:app",
        host=os.getenv("WATERMAP_HOST") or "127.0.0.1",
        port=int(os.getenv("WATERMAP_PORT") or "8000"),
        log_level=logging.getLevelName(log_level()).lower(),
    )


if __name__ == "__main__":
    run()
