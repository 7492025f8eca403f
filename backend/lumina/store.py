"""
Agent store: the authoritative agent roster of one session.

The roster is an immutable tuple. Writers build a complete replacement and
commit it with a single reference swap, so readers only ever see a whole roster.
"""
from __future__ import annotations

import logging
import threading
from typing import Callable, Iterable, Tuple

from lumina.models import Agent

_log = logging.getLogger(__name__)


class SimulationError(RuntimeError):
    pass


class StoreAlreadyInitializedError(SimulationError):
    pass


class StoreClosedError(SimulationError):
    pass


class AgentStore:
    def __init__(self) -> None:
        self._agents: Tuple[Agent, ...] = ()
        self._initialized = False
        self._closed = False
        self._write_lock = threading.Lock()

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def closed(self) -> bool:
        return self._closed

    def initialize(self, agents: Iterable[Agent]) -> None:
        with self._write_lock:
            if self._closed:
                raise StoreClosedError("agent store is closed")
            if self._initialized:
                raise StoreAlreadyInitializedError("agent store already initialized")
            roster = tuple(agents)
            ids = [a.id for a in roster]
            if len(set(ids)) != len(ids):
                raise ValueError("agent ids must be unique")
            self._agents = roster
            self._initialized = True
        _log.info("Agent store initialized with %d agents", len(roster))

    def current(self) -> Tuple[Agent, ...]:
        return self._agents

    def apply_tick(self, updater: Callable[[Agent], Agent]) -> Tuple[Agent, ...]:
        """Replace every agent with ``updater(agent)``; nothing is committed if it raises."""
        with self._write_lock:
            if self._closed:
                raise StoreClosedError("agent store is closed")
            updated = tuple(updater(a) for a in self._agents)
            self._agents = updated
            return updated

    def close(self) -> None:
        with self._write_lock:
            self._closed = True
