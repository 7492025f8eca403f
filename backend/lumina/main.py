from __future__ import annotations

import logging
import sys
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from lumina.audit import append_audit
from lumina.config import BACKEND_VERSION, CORS_ORIGINS, validate_config
from lumina.models import AuditEntry
from lumina.routes import register_routes
from lumina.session import sessions

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
_log = logging.getLogger("lumina")


@asynccontextmanager
async def lifespan(app: FastAPI):
    validate_config()
    _log.info("Lumina backend %s starting", BACKEND_VERSION)
    yield
    _log.info("Shutting down %d session(s)", len(sessions))
    await sessions.close_all()


app = FastAPI(title="Lumina Campus Backend", version=BACKEND_VERSION, lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials="*" not in CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def audit_middleware(request: Request, call_next):
    """Keep a bounded in-memory trail of requests for the admin audit view."""
    started = time.time()
    resp = await call_next(request)
    dur_ms = (time.time() - started) * 1000.0
    try:
        append_audit(AuditEntry(
            audit_id=str(uuid.uuid4()),
            method=str(request.method),
            path=str(request.url.path),
            query=str(request.url.query or ""),
            status_code=int(getattr(resp, "status_code", 0) or 0),
            duration_ms=float(dur_ms),
            client=str(getattr(request.client, "host", "") or ""),
            created_at=time.time(),
        ))
    except Exception:
        _log.debug("Failed to record audit entry", exc_info=True)
    return resp


register_routes(app)
