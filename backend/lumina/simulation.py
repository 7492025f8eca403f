"""
Simulation tick engine.

Each tick updates every agent independently, places the new roster in the
scene, detects interactions and publishes one immutable snapshot. The tick
body is synchronous, so on the event loop it is a single unit of work relative
to any reader.
"""
from __future__ import annotations

import asyncio
import logging
import random
import time
from dataclasses import replace
from typing import Callable, List, Optional, Sequence

from lumina.config import (
    CONNECTION_DEGRADE_PROBABILITY, DEFAULT_TASKS, ENERGY_DECAY,
    LOW_ENERGY_THRESHOLD, RECHARGE_AMOUNT, TASK_REASSIGN_PROBABILITY,
    TASKS_BY_TYPE, TICK_INTERVAL_SECONDS,
)
from lumina.interactions import detect_interactions
from lumina.models import Agent, ConnectionQuality
from lumina.placement import place, rest_position
from lumina.snapshots import Snapshot, SnapshotFeed
from lumina.store import AgentStore, SimulationError
from lumina.utils import clamp, iso_ts
from lumina.zones import ZoneDirectory, default_zones

_log = logging.getLogger(__name__)


class EngineStoppedError(SimulationError):
    pass


def tasks_for(agent_type: str) -> List[str]:
    return TASKS_BY_TYPE.get(agent_type) or DEFAULT_TASKS


def sample_connection_quality(rng: random.Random) -> ConnectionQuality:
    if rng.random() < CONNECTION_DEGRADE_PROBABILITY:
        return "unstable" if rng.random() < 0.5 else "offline"
    return "optimal"


def step_agent(agent: Agent, rng: random.Random) -> Agent:
    """
    Advance one agent by one tick.

    Energy decays by one. Below the low-energy threshold the agent is forced
    idle and recharges in the same tick; otherwise it may pick a new task for
    its type. Connection quality is resampled with no memory of the previous
    value.
    """
    energy = agent.energy - ENERGY_DECAY
    task = agent.current_task
    status = agent.status
    if energy < LOW_ENERGY_THRESHOLD:
        task = "Recharging"
        status = "Idle"
        energy += RECHARGE_AMOUNT
    elif rng.random() < TASK_REASSIGN_PROBABILITY:
        task = rng.choice(tasks_for(agent.type))
        status = "Active"
    return replace(
        agent,
        energy=clamp(energy, 0, 100),
        load=clamp(agent.load, 0, 100),
        cooldown=max(0, agent.cooldown - 1),
        current_task=task,
        status=status,
        connection_quality=sample_connection_quality(rng),
    )


class TickEngine:
    def __init__(
        self,
        store: AgentStore,
        zones: ZoneDirectory = default_zones,
        *,
        feed: Optional[SnapshotFeed] = None,
        interval_seconds: float = TICK_INTERVAL_SECONDS,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.monotonic,
        name: str = "tick-engine",
    ) -> None:
        self._store = store
        self._zones = zones
        self.feed = feed if feed is not None else SnapshotFeed()
        self._interval = max(0.0, float(interval_seconds))
        self._rng = rng or random.Random()
        self._clock = clock
        self._name = name
        self._started_at = clock()
        self._tick = 0
        self._task: Optional[asyncio.Task] = None
        self._stop_event = asyncio.Event()
        self._stopping = False
        self._last_tick_at: Optional[float] = None
        self._last_error: Optional[str] = None
        self._agent_failures = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def phase(self) -> float:
        return max(0.0, self._clock() - self._started_at)

    def latest_snapshot(self) -> Snapshot:
        return self.feed.latest()

    def _update_agent(self, agent: Agent) -> Agent:
        try:
            return step_agent(agent, self._rng)
        except Exception:
            self._agent_failures += 1
            _log.warning("[%s] Agent %r update failed; carrying it over unchanged", self._name,
                         getattr(agent, "id", "?"), exc_info=True)
            return agent

    def _build_snapshot(self, agents: Sequence[Agent], tick: int) -> Snapshot:
        phase = self.phase()
        count = len(agents)
        anchors = [self._zones.anchor_of(a.zone_id) for a in agents]
        positions = tuple(place(i, count, anchor, phase) for i, anchor in enumerate(anchors))
        return Snapshot(
            tick=tick,
            agents=tuple(agents),
            interactions=tuple(detect_interactions(agents, positions)),
            positions=positions,
            rest_positions=tuple(rest_position(anchor) for anchor in anchors),
            phase=phase,
        )

    def publish_initial(self) -> Snapshot:
        """Publish the freshly initialized roster without advancing it."""
        snapshot = self._build_snapshot(self._store.current(), self._tick)
        self.feed.publish(snapshot)
        return snapshot

    def tick(self) -> Snapshot:
        if self._stopping:
            raise EngineStoppedError(f"{self._name} is stopped")
        agents = self._store.apply_tick(self._update_agent)
        snapshot = self._build_snapshot(agents, self._tick + 1)
        self._tick = snapshot.tick
        self.feed.publish(snapshot)
        self._last_tick_at = time.time()
        return snapshot

    async def _run(self) -> None:
        _log.info("[%s] Tick loop started (interval=%.2fs)", self._name, self._interval)
        while not self._stop_event.is_set():
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self._interval)
                break
            except asyncio.TimeoutError:
                pass
            try:
                snapshot = self.tick()
            except EngineStoppedError:
                break
            except Exception as exc:
                self._last_error = f"{exc.__class__.__name__}: {exc}"
                _log.exception("[%s] Tick failed: %s", self._name, exc)
                continue
            self.feed.dispatch(snapshot)
        _log.info("[%s] Tick loop stopped at tick %d", self._name, self._tick)

    def start(self) -> bool:
        if self.running or self._stopping:
            return False
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run(), name=self._name)
        return True

    async def stop(self) -> bool:
        """Stop accepting ticks and wait for the in-flight one to finish."""
        if self._stopping:
            return False
        self._stopping = True
        self._stop_event.set()
        task = self._task
        if task is not None:
            await task
        await self.feed.close()
        return True

    def status(self) -> dict:
        return {
            "running": self.running,
            "stopping": self._stopping,
            "tick": self._tick,
            "interval_seconds": self._interval,
            "last_tick_at": iso_ts(self._last_tick_at) if self._last_tick_at else None,
            "last_error": self._last_error,
            "agent_failures": self._agent_failures,
            "deliveries_in_flight": self.feed.in_flight(),
        }
