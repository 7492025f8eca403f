"""
Register all route modules with the FastAPI app.
"""
from __future__ import annotations

from fastapi import FastAPI


def register_routes(app: FastAPI) -> None:
    from lumina.routes import (
        world, sessions, chat, zones, tools, governance, admin,
    )
    app.include_router(world.router)
    app.include_router(sessions.router)
    app.include_router(chat.router)
    app.include_router(zones.router)
    app.include_router(tools.router)
    app.include_router(governance.router)
    app.include_router(admin.router)
