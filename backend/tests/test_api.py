from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from api.sessions import reset_session_store
from main import app


@pytest.fixture
def client():
    reset_session_store()
    yield TestClient(app)
    reset_session_store()


def _new_session(client) -> dict:
    resp = client.post("/sessions", json={"mapId": "mecklenburg_waters"})
    assert resp.status_code == 200
    return resp.json()


def test_get_maps_lists_mecklenburg_waters(client):
    resp = client.get("/maps")
    assert resp.status_code == 200
    rows = {r["id"]: r for r in resp.json()}
    assert rows["mecklenburg_waters"]["points"] == 732
    assert rows["mecklenburg_waters"]["searchPlaceholder"] == "Gewässer suchen..."


def test_get_points_keeps_catalog_order(client):
    resp = client.get("/maps/mecklenburg_waters/points")
    assert resp.status_code == 200
    points = resp.json()
    assert points[0] == {"id": "wb-0001", "name": "Neddersee", "lat": 53.7033, "lon": 11.063}
    assert client.get("/maps/nope/points").status_code == 404


def test_new_session_starts_idle_at_start_region(client):
    snap = _new_session(client)
    assert snap["mapId"] == "mecklenburg_waters"
    assert snap["region"] == {
        "center": {"lat": 53.77, "lon": 11.15},
        "span": {"latDelta": 0.5, "lonDelta": 0.5},
    }
    assert snap["search"]["phase"] == "idle"
    assert snap["search"]["showClearButton"] is False
    assert snap["showLabels"] is True
    assert snap["results"] == []
    assert snap["dismissKeyboard"] is False
    trace = snap["plot"]["data"][0]
    assert len(trace["ids"]) == 732
    assert trace["mode"] == "markers+text"


def test_search_and_select_luettsee(client):
    sid = _new_session(client)["sessionId"]

    snap = client.post(f"/sessions/{sid}/search/focus", json={"hasFocus": True}).json()
    assert snap["search"]["phase"] == "editing"

    snap = client.post(f"/sessions/{sid}/search/text", json={"text": "lüttsee"}).json()
    names = [r["name"] for r in snap["results"]]
    assert names[0] == "Lüttsee"
    assert all("lüttsee" in n.lower() for n in names)
    assert len(snap["plot"]["data"][0]["ids"]) == len(names)

    snap = client.post(f"/sessions/{sid}/search/select", json={"pointId": "wb-0012"}).json()
    assert snap["search"] == {
        "query": "Lüttsee",
        "active": False,
        "phase": "idle",
        "showClearButton": True,
        "placeholder": "Gewässer suchen...",
    }
    assert snap["region"] == {
        "center": {"lat": 53.7804, "lon": 11.0504},
        "span": {"latDelta": 0.05, "lonDelta": 0.05},
    }
    assert snap["results"] == []
    assert snap["dismissKeyboard"] is True
    stats = snap["plot"]["layout"]["meta"]["stats"]
    assert stats["renderedPoints"] == 732
    assert 0 < stats["inRegion"] < 732

    # The dismissal request is delivered once.
    assert client.get(f"/sessions/{sid}").json()["dismissKeyboard"] is False


def test_select_unknown_point_is_404(client):
    sid = _new_session(client)["sessionId"]
    resp = client.post(f"/sessions/{sid}/search/select", json={"pointId": "wb-9999"})
    assert resp.status_code == 404


def test_zoom_buttons_and_reset(client):
    sid = _new_session(client)["sessionId"]
    snap = client.post(f"/sessions/{sid}/zoom-in").json()
    assert snap["region"]["span"]["latDelta"] == pytest.approx(0.5 / 1.5)
    zoom_in_level = snap["plot"]["layout"]["mapbox"]["zoom"]

    snap = client.post(f"/sessions/{sid}/zoom-out").json()
    snap = client.post(f"/sessions/{sid}/zoom-out").json()
    assert snap["region"]["span"]["lonDelta"] == pytest.approx(0.75)
    assert snap["plot"]["layout"]["mapbox"]["zoom"] < zoom_in_level

    snap = client.post(f"/sessions/{sid}/reset").json()
    assert snap["region"]["span"] == {"latDelta": 0.5, "lonDelta": 0.5}


def test_toggle_labels_changes_mode_only(client):
    sid = _new_session(client)["sessionId"]
    snap = client.post(f"/sessions/{sid}/labels/toggle").json()
    assert snap["showLabels"] is False
    trace = snap["plot"]["data"][0]
    assert trace["mode"] == "markers"
    assert len(trace["ids"]) == 732


def test_region_event_accepts_bbox_region_and_view(client):
    sid = _new_session(client)["sessionId"]

    snap = client.post(
        f"/sessions/{sid}/region",
        json={"bbox": {"minLon": 11.0, "minLat": 53.6, "maxLon": 11.4, "maxLat": 53.8}},
    ).json()
    assert snap["region"]["center"]["lat"] == pytest.approx(53.7)
    assert snap["region"]["span"]["lonDelta"] == pytest.approx(0.4)

    snap = client.post(
        f"/sessions/{sid}/region",
        json={"region": {"center": {"lat": 53.5, "lon": 11.5}, "span": {"latDelta": 0.1, "lonDelta": 0.2}}},
    ).json()
    assert snap["region"]["span"] == {"latDelta": 0.1, "lonDelta": 0.2}

    snap = client.post(
        f"/sessions/{sid}/region",
        json={
            "view": {"center": {"lat": 53.5, "lon": 11.5}, "zoom": 9.0},
            "viewport": {"width": 1000, "height": 700},
        },
    ).json()
    assert snap["region"]["center"] == {"lat": 53.5, "lon": 11.5}
    assert snap["plot"]["layout"]["mapbox"]["zoom"] == pytest.approx(9.0, abs=1e-2)


def test_region_event_validation(client):
    sid = _new_session(client)["sessionId"]
    assert client.post(f"/sessions/{sid}/region", json={}).status_code == 422
    resp = client.post(
        f"/sessions/{sid}/region",
        json={"region": {"center": {"lat": 53.5, "lon": 11.5}, "span": {"latDelta": 0, "lonDelta": 1}}},
    )
    assert resp.status_code == 422
    resp = client.post(
        f"/sessions/{sid}/region",
        json={"bbox": {"minLon": 11.0, "minLat": 53.6, "maxLon": 11.0, "maxLat": 53.8}},
    )
    assert resp.status_code == 422


def test_clear_keeps_phase_and_requests_dismissal(client):
    sid = _new_session(client)["sessionId"]
    client.post(f"/sessions/{sid}/search/focus", json={"hasFocus": True})
    client.post(f"/sessions/{sid}/search/text", json={"text": "see"})
    snap = client.post(f"/sessions/{sid}/search/clear").json()
    assert snap["search"]["query"] == ""
    assert snap["search"]["phase"] == "editing"
    assert snap["dismissKeyboard"] is True
    assert len(snap["plot"]["data"][0]["ids"]) == 732


def test_unknown_session_and_delete(client):
    assert client.get("/sessions/nope").status_code == 404
    sid = _new_session(client)["sessionId"]
    assert client.delete(f"/sessions/{sid}").status_code == 200
    assert client.get(f"/sessions/{sid}").status_code == 404
    assert client.delete(f"/sessions/{sid}").status_code == 404


def test_oldest_session_is_evicted(client, monkeypatch):
    monkeypatch.setenv("WATERMAP_MAX_SESSIONS", "2")
    reset_session_store()
    first = _new_session(client)["sessionId"]
    _new_session(client)
    _new_session(client)
    assert client.get(f"/sessions/{first}").status_code == 404


def test_overflowing_span_is_rejected_and_session_stays_usable(client):
    snap = _new_session(client)
    sid = snap["sessionId"]
    body = (
        '{"region": {"center": {"lat": 53.5, "lon": 11.5},'
        ' "span": {"latDelta": 1e400, "lonDelta": 1}}}'
    )
    resp = client.post(
        f"/sessions/{sid}/region",
        content=body,
        headers={"content-type": "application/json"},
    )
    assert resp.status_code == 422
    assert resp.json()["detail"][0]["loc"][-1] == "latDelta"
    after = client.get(f"/sessions/{sid}")
    assert after.status_code == 200
    assert after.json()["region"] == snap["region"]


def test_run_serves_app_with_uvicorn(monkeypatch):
    import main

    calls = []
    monkeypatch.setattr(main.uvicorn, "run", lambda *a, **kw: calls.append((a, kw)))
    monkeypatch.setenv("WATERMAP_PORT", "8123")
    monkeypatch.delenv("WATERMAP_HOST", raising=False)
    monkeypatch.delenv("WATERMAP_LOG_LEVEL", raising=False)
    main.run()
    assert calls == [
        (("main:app",), {"host": "127.0.0.1", "port": 8123, "log_level": "info"})
    ]
