"""Integration event feed: simulated inbound messages from chat bridges."""
from __future__ import annotations

import logging
import random
import uuid
from typing import Iterable, List, Optional

from lumina.config import (
    INTEGRATION_EVENT_PROBABILITY, INTEGRATION_EVENTS_MAX,
    INTEGRATION_HANDLE_SECONDS, INTEGRATION_REWARD, INTEGRATION_TYPES,
)
from lumina.models import IntegrationEvent

_log = logging.getLogger(__name__)


class IntegrationFeed:
    def __init__(self, enabled: Iterable[str], *, rng: Optional[random.Random] = None) -> None:
        self.enabled: List[str] = [t for t in enabled if t in INTEGRATION_TYPES]
        self.events: List[IntegrationEvent] = []
        self._rng = rng or random.Random()

    def step(self, now: float) -> int:
        """
        Advance the feed once. Returns the reputation earned by events that
        were handled during this step.
        """
        earned = 0
        for ev in self.events:
            if not ev.handled and now - ev.created_at >= INTEGRATION_HANDLE_SECONDS:
                ev.handled = True
                earned += INTEGRATION_REWARD
        if self._rng.random() < INTEGRATION_EVENT_PROBABILITY:
            kind = self._rng.choice(INTEGRATION_TYPES)
            if kind in self.enabled:
                ev = IntegrationEvent(
                    event_id=uuid.uuid4().hex[:12],
                    type=kind,
                    message=f"Incoming {kind} query.",
                    handled=False,
                    created_at=now,
                )
                self.events.insert(0, ev)
                del self.events[INTEGRATION_EVENTS_MAX:]
                _log.info("Integration event %s queued (%s)", ev.event_id, kind)
        return earned

    def toggle(self, kind: str) -> Optional[bool]:
        """Flip ``kind`` on or off. Returns the new state, or None for an unknown type."""
        if kind not in INTEGRATION_TYPES:
            return None
        if kind in self.enabled:
            self.enabled = [t for t in self.enabled if t != kind]
        else:
            self.enabled = [t for t in INTEGRATION_TYPES if t in self.enabled or t == kind]
        _log.info("Integration %s enabled=%s", kind, kind in self.enabled)
        return kind in self.enabled

    def recent(self, limit: int = 3) -> List[IntegrationEvent]:
        return self.events[: max(0, limit)]
