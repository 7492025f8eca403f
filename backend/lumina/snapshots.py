"""
Snapshots: the immutable per-tick view handed to presentation consumers.

The feed keeps only the latest snapshot. Publishing swaps one reference, so a
reader gets either the previous or the next snapshot and never a mix. Pushing
to subscribers never blocks the publisher: each subscriber has at most one
delivery in flight, and snapshots published meanwhile collapse to the newest.
"""
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import asdict, dataclass, field
from typing import Awaitable, Callable, Dict, List, Optional, Tuple

from lumina.models import Agent, Interaction, Vec3

_log = logging.getLogger(__name__)

Subscriber = Callable[["Snapshot"], Awaitable[None]]


@dataclass(frozen=True)
class Snapshot:
    tick: int
    agents: Tuple[Agent, ...] = ()
    interactions: Tuple[Interaction, ...] = ()
    positions: Tuple[Vec3, ...] = ()
    rest_positions: Tuple[Vec3, ...] = ()
    phase: float = 0.0
    created_at: float = field(default_factory=time.time)

    def position_of(self, agent_id: str) -> Optional[Vec3]:
        for agent, pos in zip(self.agents, self.positions):
            if agent.id == agent_id:
                return pos
        return None

    def zone_counts(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for a in self.agents:
            counts[a.zone_id] = counts.get(a.zone_id, 0) + 1
        return counts


EMPTY_SNAPSHOT = Snapshot(tick=0, created_at=0.0)


def snapshot_to_dict(snapshot: Snapshot) -> dict:
    agents = []
    for agent, pos, rest in zip(snapshot.agents, snapshot.positions, snapshot.rest_positions):
        row = asdict(agent)
        row["position"] = list(pos)
        row["rest_position"] = list(rest)
        agents.append(row)
    return {
        "tick": snapshot.tick,
        "phase": snapshot.phase,
        "created_at": snapshot.created_at,
        "agents": agents,
        "interactions": [
            {"key": i.key, "agent_a": i.agent_a, "agent_b": i.agent_b, "start": list(i.start), "end": list(i.end)}
            for i in snapshot.interactions
        ],
        "zone_counts": snapshot.zone_counts(),
    }


class _Subscription:
    __slots__ = ("fn", "task", "pending")

    def __init__(self, fn: Subscriber) -> None:
        self.fn = fn
        self.task: Optional[asyncio.Task] = None
        self.pending: Optional[Snapshot] = None


class SnapshotFeed:
    def __init__(self) -> None:
        self._latest: Snapshot = EMPTY_SNAPSHOT
        self._subscriptions: List[_Subscription] = []
        self._closed = False

    def latest(self) -> Snapshot:
        return self._latest

    def publish(self, snapshot: Snapshot) -> None:
        self._latest = snapshot

    def subscribe(self, fn: Subscriber) -> None:
        self._subscriptions.append(_Subscription(fn))

    def unsubscribe(self, fn: Subscriber) -> None:
        self._subscriptions = [s for s in self._subscriptions if s.fn is not fn]

    def in_flight(self) -> int:
        return sum(1 for s in self._subscriptions if s.task is not None and not s.task.done())

    def dispatch(self, snapshot: Snapshot) -> None:
        """Schedule delivery of ``snapshot`` to every subscriber and return at once."""
        if self._closed:
            return
        loop = asyncio.get_running_loop()
        for sub in list(self._subscriptions):
            if sub.task is not None and not sub.task.done():
                sub.pending = snapshot
                continue
            sub.task = loop.create_task(self._deliver(sub, snapshot))

    async def _deliver(self, sub: _Subscription, snapshot: Optional[Snapshot]) -> None:
        while snapshot is not None:
            try:
                await sub.fn(snapshot)
            except Exception:
                _log.warning("Snapshot subscriber failed at tick %d", snapshot.tick, exc_info=True)
            snapshot, sub.pending = sub.pending, None

    async def close(self) -> None:
        """Stop dispatching and cancel deliveries still in flight."""
        self._closed = True
        tasks = [s.task for s in self._subscriptions if s.task is not None and not s.task.done()]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
