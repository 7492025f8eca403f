"""Routes: lazily generated, per-session cached zone summaries."""
from __future__ import annotations

from fastapi import APIRouter, Response

from lumina.session import sessions

router = APIRouter()


@router.get("/sessions/{session_id}/zones/{zone_id}/summary")
async def zone_summary(session_id: str, zone_id: str, response: Response):
    session = sessions.get(session_id)
    if not session:
        response.status_code = 404
        return {"error": "session_not_found", "session_id": session_id}
    if zone_id not in session.zones:
        response.status_code = 404
        return {"error": "zone_not_found", "zone_id": zone_id}
    summary = await session.zone_summary(zone_id)
    return {
        "zone_id": zone_id,
        "summary": summary,
        "cached": zone_id in session.zone_summaries,
        "agents": session.latest_snapshot().zone_counts().get(zone_id, 0),
    }
