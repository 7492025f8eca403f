"""Routes: health and the static zone directory."""
from __future__ import annotations

from fastapi import APIRouter

from lumina.config import BACKEND_VERSION
from lumina.session import sessions
from lumina.zones import default_zones

router = APIRouter()


@router.get("/health")
def health():
    return {"ok": True, "version": BACKEND_VERSION, "sessions": len(sessions)}


@router.get("/zones")
def zones_list():
    return {"zones": {zid: list(anchor) for zid, anchor in default_zones.as_dict().items()}}
