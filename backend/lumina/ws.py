"""
WebSocket manager for broadcasting session snapshots to dashboard clients.
"""
from __future__ import annotations

import asyncio
from typing import Any, Dict, List

from fastapi import WebSocket


class WSManager:
    def __init__(self) -> None:
        self._connections: Dict[str, List[WebSocket]] = {}
        self._lock = asyncio.Lock()

    async def connect(self, channel: str, ws: WebSocket) -> None:
        await ws.accept()
        async with self._lock:
            self._connections.setdefault(channel, []).append(ws)

    async def disconnect(self, channel: str, ws: WebSocket) -> None:
        async with self._lock:
            conns = [c for c in self._connections.get(channel, []) if c is not ws]
            if conns:
                self._connections[channel] = conns
            else:
                self._connections.pop(channel, None)

    def count(self, channel: str) -> int:
        return len(self._connections.get(channel, []))

    async def broadcast(self, channel: str, msg: Dict[str, Any]) -> None:
        async with self._lock:
            conns = list(self._connections.get(channel, []))
        for ws in conns:
            try:
                await ws.send_json(msg)
            except Exception:
                await self.disconnect(channel, ws)

    async def close_channel(self, channel: str, code: int = 1000) -> None:
        async with self._lock:
            conns = self._connections.pop(channel, [])
        for ws in conns:
            try:
                await ws.close(code=code)
            except Exception:
                continue


ws_manager = WSManager()
