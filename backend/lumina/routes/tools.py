"""Routes: installable tool registry."""
from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Response

from lumina.session import sessions

router = APIRouter()


@router.get("/sessions/{session_id}/tools")
def tools_list(session_id: str, response: Response, category: str = ""):
    session = sessions.get(session_id)
    if not session:
        response.status_code = 404
        return {"error": "session_not_found", "session_id": session_id}
    tools = session.tools_payload()
    if category:
        tools = [t for t in tools if t["category"] == category]
    return {"tools": tools}


@router.post("/sessions/{session_id}/tools/{tool_id}/toggle")
def tools_toggle(session_id: str, tool_id: str, response: Response):
    session = sessions.get(session_id)
    if not session:
        response.status_code = 404
        return {"error": "session_not_found", "session_id": session_id}
    tool = session.toggle_tool(tool_id)
    if not tool:
        response.status_code = 404
        return {"error": "tool_not_found", "tool_id": tool_id}
    return {"ok": True, "tool": asdict(tool)}
