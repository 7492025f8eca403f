"""Routes: governance initiatives and the AI content classifier."""
from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Response

from lumina.models import ClassifyRequest
from lumina.session import sessions

router = APIRouter()


@router.get("/sessions/{session_id}/governance/initiatives")
def initiatives_list(session_id: str, response: Response):
    session = sessions.get(session_id)
    if not session:
        response.status_code = 404
        return {"error": "session_not_found", "session_id": session_id}
    return {"initiatives": [asdict(i) for i in session.initiatives]}


@router.post("/sessions/{session_id}/governance/classify")
async def governance_classify(session_id: str, req: ClassifyRequest, response: Response):
    session = sessions.get(session_id)
    if not session:
        response.status_code = 404
        return {"error": "session_not_found", "session_id": session_id}
    text = (req.text or "").strip()
    if not text:
        return {"error": "missing_text"}
    result = await session.classify(text, req.initiative_ids)
    return {"ok": True, "result": result}
