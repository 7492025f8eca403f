"""
Sessions: one isolated simulation per dashboard client.

A session owns its agent store, tick engine, chat transcripts, zone summary
cache, tool list, governance initiatives and integration feed. Nothing is
shared between sessions and nothing outlives ``close()``.
"""
from __future__ import annotations

import asyncio
import logging
import random
import time
import uuid
from dataclasses import asdict
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from lumina import ai
from lumina.config import (
    CHAT_HISTORY_MAX, DEFAULT_INITIATIVES, DEFAULT_INTEGRATIONS, DEFAULT_ROSTER,
    DEFAULT_TOOLS, MAX_SESSIONS, STARTING_REPUTATION, TICK_INTERVAL_SECONDS,
)
from lumina.integrations import IntegrationFeed
from lumina.models import Agent, AgentSpec, ChatMessage, Initiative, Tool
from lumina.simulation import TickEngine
from lumina.snapshots import Snapshot, snapshot_to_dict
from lumina.store import AgentStore, SimulationError
from lumina.ws import ws_manager
from lumina.zones import ZoneDirectory, default_zones

_log = logging.getLogger(__name__)


class SessionLimitError(SimulationError):
    pass


def default_roster() -> List[Agent]:
    return [Agent(**row) for row in DEFAULT_ROSTER]


def agents_from_specs(specs: Iterable[AgentSpec]) -> List[Agent]:
    return [Agent(**spec.model_dump()) for spec in specs]


class Session:
    def __init__(
        self,
        session_id: str,
        *,
        zones: ZoneDirectory = default_zones,
        interval_seconds: float = TICK_INTERVAL_SECONDS,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.session_id = session_id
        self.created_at = time.time()
        self.zones = zones
        self.store = AgentStore()
        self.engine = TickEngine(
            self.store, zones,
            interval_seconds=interval_seconds,
            rng=rng,
            clock=clock,
            name=f"session-{session_id}",
        )
        self.reputation = STARTING_REPUTATION
        self.integrations = IntegrationFeed(DEFAULT_INTEGRATIONS)
        self.tools: List[Tool] = [Tool(**t) for t in DEFAULT_TOOLS]
        self.initiatives: List[Initiative] = [Initiative(**i) for i in DEFAULT_INITIATIVES]
        self.chats: Dict[str, List[ChatMessage]] = {}
        self.zone_summaries: Dict[str, str] = {}
        self._summary_locks: Dict[str, asyncio.Lock] = {}
        self._msg_seq = 0
        self.closed = False
        self.engine.feed.subscribe(self._after_tick)
        self.engine.feed.subscribe(self._broadcast)

    # --- Simulation ---

    def initialize(self, agents: Iterable[Agent]) -> Snapshot:
        """Load the roster once and start ticking. Must run on the event loop."""
        self.store.initialize(agents)
        snapshot = self.engine.publish_initial()
        self.engine.start()
        _log.info("Session %s initialized with %d agents", self.session_id, len(snapshot.agents))
        return snapshot

    def latest_snapshot(self) -> Snapshot:
        return self.engine.latest_snapshot()

    def find_agent(self, agent_id: str) -> Optional[Agent]:
        for a in self.store.current():
            if a.id == agent_id:
                return a
        return None

    async def _after_tick(self, snapshot: Snapshot) -> None:
        self.reputation += self.integrations.step(time.time())

    async def _broadcast(self, snapshot: Snapshot) -> None:
        await ws_manager.broadcast(self.session_id, {"type": "snapshot", "data": snapshot_to_dict(snapshot)})

    # --- AI collaborators ---

    async def zone_summary(self, zone_id: str) -> str:
        """Summary text for a zone, fetched at most once per session on success."""
        cached = self.zone_summaries.get(zone_id)
        if cached is not None:
            return cached
        lock = self._summary_locks.setdefault(zone_id, asyncio.Lock())
        async with lock:
            cached = self.zone_summaries.get(zone_id)
            if cached is not None:
                return cached
            try:
                text = await asyncio.to_thread(ai.summarize_zone, zone_id)
            except ai.AIUnavailableError:
                return ai.AI_OFFLINE_TEXT
            except ai.AIServiceError as exc:
                _log.warning("Zone summary failed session=%s zone=%s: %s", self.session_id, zone_id, exc)
                return ai.SUMMARY_FAILED_TEXT
            self.zone_summaries[zone_id] = text
            return text

    def _next_msg_id(self) -> int:
        self._msg_seq += 1
        return self._msg_seq

    def _append_message(self, agent_id: str, msg: ChatMessage) -> None:
        history = self.chats.setdefault(agent_id, [])
        history.append(msg)
        if len(history) > CHAT_HISTORY_MAX:
            del history[: len(history) - CHAT_HISTORY_MAX]

    async def chat(self, agent: Agent, text: str) -> Tuple[ChatMessage, Optional[ChatMessage], Optional[str]]:
        """Record the user's message and ask the AI to answer as ``agent``."""
        user_msg = ChatMessage(msg_id=self._next_msg_id(), role="user", text=text, created_at=time.time())
        self._append_message(agent.id, user_msg)
        try:
            reply_text = await asyncio.to_thread(ai.agent_reply, agent.name, agent.role, text)
        except ai.AIServiceError as exc:
            _log.error("Agent chat failed session=%s agent=%s: %s", self.session_id, agent.id, exc)
            return user_msg, None, exc.error_code
        reply = ChatMessage(msg_id=self._next_msg_id(), role="model", text=reply_text, created_at=time.time())
        self._append_message(agent.id, reply)
        return user_msg, reply, None

    def record_feedback(self, agent_id: str, msg_id: int, feedback: str, comment: str) -> Optional[ChatMessage]:
        for msg in self.chats.get(agent_id, []):
            if msg.msg_id == msg_id and msg.role == "model":
                msg.feedback = feedback
                msg.feedback_comment = comment.strip()
                _log.info("[Analytics] Feedback session=%s agent=%s msg=%d: %s, comment=%r",
                          self.session_id, agent_id, msg_id, feedback, msg.feedback_comment)
                return msg
        return None

    async def classify(self, text: str, initiative_ids: Iterable[str]) -> str:
        wanted = set(initiative_ids)
        titles = [i.title for i in self.initiatives if i.id in wanted]
        try:
            return await asyncio.to_thread(ai.classify, text, titles)
        except ai.AIUnavailableError:
            return "No API key configured."
        except ai.AIServiceError as exc:
            _log.warning("Classification failed session=%s: %s", self.session_id, exc)
            return "Error calling AI service."

    # --- Tools ---

    def toggle_tool(self, tool_id: str) -> Optional[Tool]:
        for tool in self.tools:
            if tool.id == tool_id:
                tool.installed = not tool.installed
                _log.info("Session %s tool %s installed=%s", self.session_id, tool_id, tool.installed)
                return tool
        return None

    # --- Lifecycle ---

    async def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        await self.engine.stop()
        self.store.close()
        await ws_manager.close_channel(self.session_id)
        _log.info("Session %s closed at tick %d", self.session_id, self.engine.status()["tick"])

    def status(self) -> dict:
        return {
            "session_id": self.session_id,
            "created_at": self.created_at,
            "initialized": self.store.initialized,
            "reputation": self.reputation,
            "agents": len(self.store.current()),
            "engine": self.engine.status(),
            "integrations": list(self.integrations.enabled),
        }

    def tools_payload(self) -> List[dict]:
        return [asdict(t) for t in self.tools]


class SessionRegistry:
    def __init__(self, max_sessions: int = MAX_SESSIONS) -> None:
        self._sessions: Dict[str, Session] = {}
        self._max_sessions = max_sessions

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self, **kwargs) -> Session:
        if len(self._sessions) >= self._max_sessions:
            raise SessionLimitError(f"session limit reached ({self._max_sessions})")
        session_id = uuid.uuid4().hex[:16]
        session = Session(session_id, **kwargs)
        self._sessions[session_id] = session
        _log.info("Session %s created", session_id)
        return session

    def get(self, session_id: str) -> Optional[Session]:
        return self._sessions.get(session_id)

    async def close(self, session_id: str) -> bool:
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        await session.close()
        return True

    async def close_all(self) -> None:
        for session_id in list(self._sessions):
            await self.close(session_id)


sessions = SessionRegistry()
