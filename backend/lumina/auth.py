"""
Authorization helpers.
"""
from __future__ import annotations

from fastapi import Request

from lumina.config import ADMIN_TOKEN


def require_admin(request: Request) -> bool:
    """
    Minimal guardrail:
    - If ADMIN_TOKEN is set, require `Authorization: Bearer <token>`.
    - If not set, allow (intended for LAN/local use).
    """
    if not ADMIN_TOKEN:
        return True
    auth = (request.headers.get("authorization") or "").strip()
    return auth == f"Bearer {ADMIN_TOKEN}"
