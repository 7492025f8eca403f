"""Routes: run info and audit trail."""
from __future__ import annotations

import time
from dataclasses import asdict

from fastapi import APIRouter, Request, Response

from lumina.audit import recent_audit
from lumina.auth import require_admin
from lumina.config import BACKEND_VERSION, TICK_INTERVAL_SECONDS
from lumina.session import sessions

router = APIRouter()

started_at: float = time.time()


@router.get("/run")
def run_info():
    return {
        "version": BACKEND_VERSION,
        "started_at": started_at,
        "sessions": len(sessions),
        "tick_interval_seconds": TICK_INTERVAL_SECONDS,
    }


@router.get("/audit/recent")
def audit_recent(request: Request, response: Response, limit: int = 100):
    if not require_admin(request):
        response.status_code = 401
        return {"error": "unauthorized"}
    return {"events": [asdict(e) for e in recent_audit(limit)]}
