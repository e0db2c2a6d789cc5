from __future__ import annotations

import pytest

TEE = {"lat": 28.844444, "lon": -81.955278}
GREEN = {"lat": 28.841111, "lon": -81.954722}
HOLE_1 = {"club": "Belle Glades", "nine": "Calusa", "hole": 1}
HOLE_2 = {"club": "Belle Glades", "nine": "Calusa", "hole": 2}


def _open(client, hole=HOLE_1):
    resp = client.post("/api/visits", json=hole)
    assert resp.status_code == 201
    return resp.json()


def test_open_visit_returns_default_frame(client):
    frame = _open(client)
    assert frame["hole_key"] == "BelleGlades-Calusa-01"
    assert frame["A"] == {"x": 0.5, "y": 0.75}
    assert frame["C"] == {"x": 0.5, "y": 0.25}
    assert frame["calibration_state"] == "default"
    assert frame["scale"] == pytest.approx(819.2, rel=1e-3)
    assert frame["distances"]["tee_to_green"] == 410
    assert frame["distances"]["to_green"] is None
    assert frame["distances"]["display"]["to_green"] == "—"
    assert frame["location_status"] == "not_started"
    assert frame["target"]["active"] is False


def test_unknown_hole_is_404(client):
    resp = client.post("/api/visits", json={"club": "Belle Glades", "nine": "Calusa", "hole": 42})
    assert resp.status_code == 404


def test_unknown_visit_is_404(client):
    assert client.get("/api/visits/visit_missing").status_code == 404


def test_fix_projects_onto_diagram(client):
    visit_id = _open(client)["visit_id"]
    resp = client.post(
        f"/api/visits/{visit_id}/fix", json={**GREEN, "accuracy_m": 4.0, "received_at_ms": 1000}
    )
    assert resp.status_code == 200
    frame = resp.json()
    assert frame["location_status"] == "locked"
    assert frame["along_track_fraction"] == pytest.approx(1.0, abs=1e-6)
    assert frame["live_position"]["y"] == pytest.approx(0.25, abs=1e-4)
    assert frame["distances"]["to_green"] == 0
    assert frame["distances"]["cross_track"] == 0


def test_fix_error_reverts_to_placeholders(client):
    visit_id = _open(client)["visit_id"]
    client.post(f"/api/visits/{visit_id}/fix", json={**TEE, "received_at_ms": 1000})
    resp = client.post(f"/api/visits/{visit_id}/fix-error", json={"message": "permission denied"})
    frame = resp.json()
    assert frame["location_status"] == "error"
    assert frame["distances"]["to_green"] is None
    assert frame["live_position"] is None
    assert frame["marker"] is None


def test_target_placement_and_clear(client):
    visit_id = _open(client)["visit_id"]

    rejected = client.post(f"/api/visits/{visit_id}/target", json={"x": 0.5, "y": 0.27}).json()
    assert rejected["placed"] is False
    assert rejected["frame"]["target"]["active"] is False

    placed = client.post(f"/api/visits/{visit_id}/target", json={"x": 0.8, "y": 0.5}).json()
    assert placed["placed"] is True
    target = placed["frame"]["target"]
    assert target["active"] is True
    assert target["B"]["x"] == pytest.approx(0.5)
    assert target["B"]["y"] == pytest.approx(0.5)
    assert placed["frame"]["distances"]["tee_to_target"] == 205
    assert placed["frame"]["distances"]["target_to_green"] == 205

    dragged = client.post(f"/api/visits/{visit_id}/target/drag", json={"x": 0.55, "y": 0.45}).json()
    assert dragged["target"]["B"] == {"x": 0.55, "y": 0.45}

    cleared = client.delete(f"/api/visits/{visit_id}/target").json()
    assert cleared["target"]["active"] is False
    assert cleared["target"]["B"] == {"x": 0.55, "y": 0.45}
    assert cleared["distances"]["tee_to_target"] is None


def test_anchor_drag_clamps_and_collapsed_anchors_blank_distances(client):
    visit_id = _open(client)["visit_id"]
    frame = client.post(f"/api/visits/{visit_id}/anchors/A", json={"x": 1.4, "y": 0.9}).json()
    assert frame["A"] == {"x": 1.0, "y": 0.9}
    assert frame["calibration_state"] == "user_placed"

    client.post(f"/api/visits/{visit_id}/anchors/A", json={"x": 0.5, "y": 0.25})
    frame = client.post(
        f"/api/visits/{visit_id}/fix", json={**TEE, "received_at_ms": 1000}
    ).json()
    assert frame["scale"] is None
    assert all(value is None for key, value in frame["distances"].items() if key != "display")
    assert set(frame["distances"]["display"].values()) == {"—"}

    assert client.post(f"/api/visits/{visit_id}/anchors/B", json={"x": 0.5, "y": 0.5}).status_code == 422


def test_save_then_revisit_loads_calibration(client):
    visit_id = _open(client)["visit_id"]
    client.post(f"/api/visits/{visit_id}/anchors/C", json={"x": 0.4, "y": 0.2})
    saved = client.post(f"/api/visits/{visit_id}/save").json()
    assert saved["calibration_state"] == "saved"

    switched = client.post(f"/api/visits/{visit_id}/hole", json=HOLE_2).json()
    assert switched["hole_key"] == "BelleGlades-Calusa-02"
    assert switched["C"] == {"x": 0.5, "y": 0.25}

    back = client.post(f"/api/visits/{visit_id}/hole", json=HOLE_1).json()
    assert back["calibration_state"] == "loaded"
    assert back["C"] == {"x": 0.4, "y": 0.2}

    stored = client.get("/api/calibrations/BelleGlades-Calusa-01").json()
    assert stored["C"] == {"x": 0.4, "y": 0.2}


def test_tick_eases_marker(client):
    visit_id = _open(client)["visit_id"]
    client.post(f"/api/visits/{visit_id}/fix", json={**TEE, "received_at_ms": 1000})
    frame = client.post(f"/api/visits/{visit_id}/fix", json={**GREEN, "received_at_ms": 2000}).json()
    assert frame["marker"]["y"] == pytest.approx(0.75)

    frame = client.post(f"/api/visits/{visit_id}/tick", json={"elapsed_ms": 150}).json()
    assert 0.25 < frame["marker"]["y"] < 0.75

    frame = client.post(f"/api/visits/{visit_id}/tick", json={"elapsed_ms": 150}).json()
    assert frame["marker"]["y"] == pytest.approx(0.25, abs=1e-4)


def test_close_visit(client):
    visit_id = _open(client)["visit_id"]
    assert client.delete(f"/api/visits/{visit_id}").status_code == 204
    assert client.get(f"/api/visits/{visit_id}").status_code == 404
    assert client.delete(f"/api/visits/{visit_id}").status_code == 404


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_unsupported_location_is_reported(client):
    visit_id = _open(client)["visit_id"]
    client.post(f"/api/visits/{visit_id}/fix", json={**TEE, "received_at_ms": 1000})
    resp = client.post(f"/api/visits/{visit_id}/fix-error", json={"kind": "unsupported"})
    assert resp.status_code == 200
    frame = resp.json()
    assert frame["location_status"] == "unsupported"
    assert frame["location_message"] == "Geolocation not supported"
    assert frame["distances"]["to_green"] is None


def test_unknown_fix_error_kind_is_rejected(client):
    visit_id = _open(client)["visit_id"]
    resp = client.post(f"/api/visits/{visit_id}/fix-error", json={"kind": "bogus"})
    assert resp.status_code == 422
