"""Placement: where an agent stands in the scene for a given rotation phase."""
from __future__ import annotations

import math

from lumina.config import ANGULAR_SPEED, PLACEMENT_HEIGHT, PLACEMENT_RADIUS
from lumina.models import Vec3


def place(agent_index: int, agent_count: int, anchor: Vec3, phase: float) -> Vec3:
    """
    Position on a circle of radius ``PLACEMENT_RADIUS`` around ``anchor``.

    ``phase`` is elapsed wall-clock seconds; agents are spread evenly by index
    and rotate together at ``ANGULAR_SPEED``.
    """
    count = max(1, agent_count)
    angle = phase * ANGULAR_SPEED + agent_index * (2 * math.pi / count)
    return Vec3(
        anchor.x + math.cos(angle) * PLACEMENT_RADIUS,
        anchor.y + PLACEMENT_HEIGHT,
        anchor.z + math.sin(angle) * PLACEMENT_RADIUS,
    )


def rest_position(anchor: Vec3) -> Vec3:
    return Vec3(anchor.x, anchor.y + PLACEMENT_HEIGHT, anchor.z)
