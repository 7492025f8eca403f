"""Tests for the zone directory and placement function."""
from __future__ import annotations

import math

import pytest

from lumina.config import ANGULAR_SPEED, PLACEMENT_RADIUS
from lumina.models import Vec3
from lumina.placement import place, rest_position
from lumina.zones import ORIGIN, ZoneDirectory, default_zones


def test_known_and_unknown_zones():
    assert default_zones.anchor_of("studio") == Vec3(-12.0, 0.0, -5.0)
    assert default_zones.anchor_of("nowhere") == ORIGIN
    assert "files" in default_zones
    assert "nowhere" not in default_zones


def test_custom_directory():
    zones = ZoneDirectory({"lab": (1, 2, 3)})
    assert zones.anchor_of("lab") == Vec3(1.0, 2.0, 3.0)
    assert zones.anchor_of("dashboard") == ORIGIN


def test_position_on_circle_around_anchor():
    anchor = Vec3(12.0, 0.0, -5.0)
    for i in range(5):
        p = place(i, 5, anchor, phase=7.3)
        assert math.hypot(p.x - anchor.x, p.z - anchor.z) == pytest.approx(PLACEMENT_RADIUS)
        assert p.y == pytest.approx(anchor.y + 1.0)


def test_agents_spread_evenly_at_phase_zero():
    anchor = ORIGIN
    positions = [place(i, 4, anchor, phase=0.0) for i in range(4)]
    expected = [(3.0, 0.0), (0.0, 3.0), (-3.0, 0.0), (0.0, -3.0)]
    for p, (x, z) in zip(positions, expected):
        assert p.x == pytest.approx(x, abs=1e-9)
        assert p.z == pytest.approx(z, abs=1e-9)


def test_phase_rotates_agents():
    phase = 2.0
    p = place(0, 1, ORIGIN, phase=phase)
    angle = phase * ANGULAR_SPEED
    assert p.x == pytest.approx(math.cos(angle) * PLACEMENT_RADIUS)
    assert p.z == pytest.approx(math.sin(angle) * PLACEMENT_RADIUS)


def test_placement_is_pure():
    anchor = default_zones.anchor_of("chat")
    assert place(3, 7, anchor, 12.5) == place(3, 7, anchor, 12.5)


def test_rest_position_is_anchor_raised():
    assert rest_position(Vec3(-12.0, 0.0, -5.0)) == Vec3(-12.0, 1.0, -5.0)
