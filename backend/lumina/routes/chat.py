"""Routes: per-agent chat transcripts, AI replies and reply feedback."""
from __future__ import annotations

import logging
from dataclasses import asdict

from fastapi import APIRouter, Response

from lumina.models import ChatSendRequest, FeedbackRequest
from lumina.session import sessions

_log = logging.getLogger(__name__)
router = APIRouter()


@router.get("/sessions/{session_id}/chat/{agent_id}")
def chat_transcript(session_id: str, agent_id: str, response: Response, limit: int = 50):
    session = sessions.get(session_id)
    if not session:
        response.status_code = 404
        return {"error": "session_not_found", "session_id": session_id}
    limit = max(1, min(limit, 200))
    msgs = session.chats.get(agent_id, [])[-limit:]
    return {"agent_id": agent_id, "messages": [asdict(m) for m in msgs]}


@router.post("/sessions/{session_id}/chat/{agent_id}")
async def chat_send(session_id: str, agent_id: str, req: ChatSendRequest, response: Response):
    session = sessions.get(session_id)
    if not session:
        response.status_code = 404
        return {"error": "session_not_found", "session_id": session_id}
    agent = session.find_agent(agent_id)
    if not agent:
        response.status_code = 404
        return {"error": "agent_not_found", "agent_id": agent_id}
    text = (req.text or "").strip()
    if not text:
        return {"error": "missing_text"}
    _log.info("chat_send session=%s agent=%s text_len=%d", session_id, agent_id, len(text))
    user_msg, reply, error = await session.chat(agent, text)
    if error:
        response.status_code = 502
        return {"error": error, "message": asdict(user_msg)}
    return {"ok": True, "message": asdict(user_msg), "reply": asdict(reply)}


@router.post("/sessions/{session_id}/chat/{agent_id}/feedback")
def chat_feedback(session_id: str, agent_id: str, req: FeedbackRequest, response: Response):
    session = sessions.get(session_id)
    if not session:
        response.status_code = 404
        return {"error": "session_not_found", "session_id": session_id}
    msg = session.record_feedback(agent_id, req.msg_id, req.feedback, req.comment)
    if not msg:
        response.status_code = 404
        return {"error": "message_not_found", "msg_id": req.msg_id}
    return {"ok": True, "message": asdict(msg)}
