"""
Interaction detection: which agent pairs are linked this tick.

Every unordered pair is checked once (i < j); the pass is O(n^2) in the number
of agents.
"""
from __future__ import annotations

from typing import FrozenSet, List, Sequence, Set

from lumina.config import INTERACTION_DISTANCE
from lumina.models import Agent, Interaction, Vec3

COMPATIBLE_PAIRS: Set[FrozenSet[str]] = {
    frozenset({"analyst", "manager"}),
    frozenset({"creative"}),
}


def is_compatible(type_a: str, type_b: str) -> bool:
    return frozenset({type_a, type_b}) in COMPATIBLE_PAIRS


def in_range(a: Vec3, b: Vec3, max_distance: float = INTERACTION_DISTANCE) -> bool:
    return a.distance_to(b) < max_distance


def detect_interactions(agents: Sequence[Agent], positions: Sequence[Vec3]) -> List[Interaction]:
    if len(agents) != len(positions):
        raise ValueError("agents and positions must have the same length")
    out: List[Interaction] = []
    n = len(agents)
    for i in range(n):
        for j in range(i + 1, n):
            a, b = agents[i], agents[j]
            if not is_compatible(a.type, b.type):
                continue
            if in_range(positions[i], positions[j]):
                out.append(Interaction(agent_a=a.id, agent_b=b.id, start=positions[i], end=positions[j]))
    return out
