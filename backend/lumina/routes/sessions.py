"""Routes: session lifecycle, snapshots, manual ticks, integration feed, live updates."""
from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Request, Response, WebSocket, WebSocketDisconnect

from lumina.auth import require_admin
from lumina.models import InitializeRequest
from lumina.session import SessionLimitError, agents_from_specs, default_roster, sessions
from lumina.simulation import EngineStoppedError
from lumina.snapshots import snapshot_to_dict
from lumina.store import StoreAlreadyInitializedError, StoreClosedError
from lumina.ws import ws_manager

_log = logging.getLogger(__name__)
router = APIRouter()


def _not_found(response: Response, session_id: str) -> dict:
    response.status_code = 404
    return {"error": "session_not_found", "session_id": session_id}


@router.post("/sessions")
def create_session(response: Response):
    try:
        session = sessions.create()
    except SessionLimitError:
        response.status_code = 429
        return {"error": "session_limit"}
    return {"ok": True, "session_id": session.session_id}


@router.post("/sessions/{session_id}/initialize")
async def initialize_session(session_id: str, response: Response, req: Optional[InitializeRequest] = None):
    session = sessions.get(session_id)
    if not session:
        return _not_found(response, session_id)
    specs = req.agents if req is not None else None
    try:
        roster = agents_from_specs(specs) if specs is not None else default_roster()
        snapshot = session.initialize(roster)
    except StoreAlreadyInitializedError:
        _log.warning("initialize rejected: session %s already initialized", session_id)
        response.status_code = 409
        return {"error": "already_initialized", "session_id": session_id}
    except StoreClosedError:
        return _not_found(response, session_id)
    except ValueError as exc:
        response.status_code = 422
        return {"error": "invalid_roster", "detail": str(exc)}
    return {"ok": True, "snapshot": snapshot_to_dict(snapshot)}


@router.get("/sessions/{session_id}")
def session_status(session_id: str, response: Response):
    session = sessions.get(session_id)
    if not session:
        return _not_found(response, session_id)
    return session.status()


@router.get("/sessions/{session_id}/snapshot")
def session_snapshot(session_id: str, response: Response):
    session = sessions.get(session_id)
    if not session:
        return _not_found(response, session_id)
    return snapshot_to_dict(session.latest_snapshot())


@router.post("/sessions/{session_id}/tick")
async def force_tick(session_id: str, request: Request, response: Response):
    if not require_admin(request):
        response.status_code = 401
        return {"error": "unauthorized"}
    session = sessions.get(session_id)
    if not session:
        return _not_found(response, session_id)
    if not session.store.initialized:
        response.status_code = 409
        return {"error": "not_initialized", "session_id": session_id}
    try:
        snapshot = session.engine.tick()
    except (EngineStoppedError, StoreClosedError):
        return _not_found(response, session_id)
    session.engine.feed.dispatch(snapshot)
    return {"ok": True, "snapshot": snapshot_to_dict(snapshot)}


@router.delete("/sessions/{session_id}")
async def delete_session(session_id: str, response: Response):
    closed = await sessions.close(session_id)
    if not closed:
        return _not_found(response, session_id)
    return {"ok": True, "session_id": session_id}


@router.get("/sessions/{session_id}/integrations/events")
def integration_events(session_id: str, response: Response, limit: int = 3):
    session = sessions.get(session_id)
    if not session:
        return _not_found(response, session_id)
    limit = max(1, min(limit, 50))
    return {
        "enabled": list(session.integrations.enabled),
        "reputation": session.reputation,
        "events": [asdict(e) for e in session.integrations.recent(limit)],
    }


@router.post("/sessions/{session_id}/integrations/{kind}/toggle")
def integration_toggle(session_id: str, kind: str, response: Response):
    session = sessions.get(session_id)
    if not session:
        return _not_found(response, session_id)
    enabled = session.integrations.toggle(kind)
    if enabled is None:
        response.status_code = 404
        return {"error": "integration_not_found", "type": kind}
    return {"ok": True, "type": kind, "enabled": enabled, "integrations": list(session.integrations.enabled)}


@router.websocket("/ws/sessions/{session_id}")
async def ws_session(ws: WebSocket, session_id: str):
    session = sessions.get(session_id)
    if not session:
        await ws.close(code=4404)
        return
    await ws_manager.connect(session_id, ws)
    try:
        await ws.send_json({"type": "snapshot", "data": snapshot_to_dict(session.latest_snapshot())})
        while True:
            # Clients are read-only; keep the socket open until they leave.
            await ws.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        await ws_manager.disconnect(session_id, ws)
