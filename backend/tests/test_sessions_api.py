"""Tests for session lifecycle, snapshots and live updates."""
from __future__ import annotations

import asyncio

import pytest
from fastapi import WebSocketDisconnect

from lumina.session import SessionLimitError, SessionRegistry


def test_create_and_status(client, session_id):
    r = client.get(f"/sessions/{session_id}")
    assert r.status_code == 200
    data = r.json()
    assert data["session_id"] == session_id
    assert data["initialized"] is False
    assert data["agents"] == 0
    assert data["reputation"] == 1250


def test_unknown_session(client):
    r = client.get("/sessions/nope")
    assert r.status_code == 404
    assert r.json()["error"] == "session_not_found"
    assert client.post("/sessions/nope/initialize", json={}).status_code == 404


def test_initialize_default_roster(client, session_id):
    r = client.post(f"/sessions/{session_id}/initialize", json={})
    assert r.status_code == 200
    snap = r.json()["snapshot"]
    assert snap["tick"] == 0
    assert [a["id"] for a in snap["agents"]] == ["a1", "a2", "a3", "a4"]
    assert snap["zone_counts"] == {"dashboard": 1, "studio": 1, "files": 1, "chat": 1}
    status = client.get(f"/sessions/{session_id}").json()
    assert status["initialized"] is True
    assert status["engine"]["running"] is True


def test_initialize_only_once(client, live_session):
    r = client.post(f"/sessions/{live_session}/initialize", json={})
    assert r.status_code == 409
    assert r.json()["error"] == "already_initialized"


def test_initialize_custom_roster(client, session_id):
    roster = [
        {"id": "x1", "name": "Quill", "type": "creative", "zone_id": "studio", "energy": 30},
        {"id": "x2", "name": "Brush", "type": "creative", "zone_id": "studio"},
        {"id": "x3", "name": "Stray", "type": "oracle", "zone_id": "basement"},
    ]
    r = client.post(f"/sessions/{session_id}/initialize", json={"agents": roster})
    assert r.status_code == 200
    snap = r.json()["snapshot"]
    assert [i["key"] for i in snap["interactions"]] == ["x1-x2"]
    stray = snap["agents"][2]
    assert stray["rest_position"] == [0.0, 1.0, 0.0]


def test_initialize_rejects_duplicate_ids(client, session_id):
    roster = [
        {"id": "d", "name": "One", "type": "analyst", "zone_id": "dashboard"},
        {"id": "d", "name": "Two", "type": "manager", "zone_id": "files"},
    ]
    r = client.post(f"/sessions/{session_id}/initialize", json={"agents": roster})
    assert r.status_code == 422
    assert r.json()["error"] == "invalid_roster"


def test_forced_tick(client, admin_headers, live_session):
    r = client.post(f"/sessions/{live_session}/tick", headers=admin_headers)
    assert r.status_code == 200
    snap = r.json()["snapshot"]
    assert snap["tick"] == 1
    by_id = {a["id"]: a for a in snap["agents"]}
    assert by_id["a1"]["energy"] == 89
    latest = client.get(f"/sessions/{live_session}/snapshot").json()
    assert latest["tick"] == 1


def test_forced_tick_requires_admin(client, live_session):
    r = client.post(f"/sessions/{live_session}/tick")
    assert r.status_code == 401


def test_forced_tick_before_initialize(client, admin_headers, session_id):
    r = client.post(f"/sessions/{session_id}/tick", headers=admin_headers)
    assert r.status_code == 409
    assert r.json()["error"] == "not_initialized"


def test_delete_session(client):
    sid = client.post("/sessions").json()["session_id"]
    client.post(f"/sessions/{sid}/initialize", json={})
    r = client.delete(f"/sessions/{sid}")
    assert r.status_code == 200
    assert client.get(f"/sessions/{sid}").status_code == 404
    assert client.delete(f"/sessions/{sid}").status_code == 404


def test_integration_events(client, live_session):
    r = client.get(f"/sessions/{live_session}/integrations/events")
    assert r.status_code == 200
    data = r.json()
    assert data["enabled"] == ["whatsapp", "telegram"]
    assert data["reputation"] >= 1250
    assert isinstance(data["events"], list)


def test_websocket_sends_snapshots(client, admin_headers, live_session):
    with client.websocket_connect(f"/ws/sessions/{live_session}") as ws:
        first = ws.receive_json()
        assert first["type"] == "snapshot"
        assert first["data"]["tick"] == 0
        client.post(f"/sessions/{live_session}/tick", headers=admin_headers)
        pushed = ws.receive_json()
        assert pushed["data"]["tick"] == 1


def test_websocket_unknown_session(client):
    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect("/ws/sessions/nope") as ws:
            ws.receive_json()


def test_registry_limit():
    registry = SessionRegistry(max_sessions=1)
    first = registry.create(interval_seconds=3600)
    with pytest.raises(SessionLimitError):
        registry.create()
    assert asyncio.run(registry.close(first.session_id)) is True
    assert len(registry) == 0


def test_initialize_rejects_out_of_range_values(client, session_id):
    roster = [{"id": "h", "name": "Hot", "type": "analyst", "zone_id": "dashboard", "energy": 500, "load": -40}]
    r = client.post(f"/sessions/{session_id}/initialize", json={"agents": roster})
    assert r.status_code == 422
    assert client.get(f"/sessions/{session_id}").json()["initialized"] is False


def test_integration_toggle(client, session_id):
    r = client.post(f"/sessions/{session_id}/integrations/telegram/toggle")
    assert r.status_code == 200
    assert r.json()["enabled"] is False
    events = client.get(f"/sessions/{session_id}/integrations/events").json()
    assert events["enabled"] == ["whatsapp"]
    r = client.post(f"/sessions/{session_id}/integrations/viber/toggle")
    assert r.json()["integrations"] == ["whatsapp", "viber"]
    assert client.post(f"/sessions/{session_id}/integrations/fax/toggle").status_code == 404
