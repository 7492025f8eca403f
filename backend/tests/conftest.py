"""
Shared fixtures for backend tests.
Environment is pinned before any lumina import so config constants are predictable:
background ticks are effectively disabled and the AI service is offline.
"""
from __future__ import annotations

import os

os.environ["ADMIN_TOKEN"] = "test-admin-token"
os.environ["TICK_INTERVAL_SECONDS"] = "3600"
os.environ["LLM_API_KEY"] = ""
os.environ["LLM_BASE_URL"] = ""

import pytest
from fastapi.testclient import TestClient


class ScriptedRandom:
    """Random source that replays fixed draws; falls back to 'no event' draws."""

    def __init__(self, values=(), choices=()):
        self._values = list(values)
        self._choices = list(choices)

    def random(self) -> float:
        return self._values.pop(0) if self._values else 0.99

    def choice(self, seq):
        if self._choices:
            pick = self._choices.pop(0)
            assert pick in seq
            return pick
        return seq[0]


@pytest.fixture
def scripted_random():
    return ScriptedRandom


class FakeClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture(scope="session")
def client():
    from lumina.main import app
    with TestClient(app) as c:
        yield c


@pytest.fixture(scope="session")
def admin_headers() -> dict:
    return {"Authorization": "Bearer test-admin-token"}


@pytest.fixture
def session_id(client):
    r = client.post("/sessions")
    assert r.status_code == 200
    sid = r.json()["session_id"]
    yield sid
    client.delete(f"/sessions/{sid}")


@pytest.fixture
def live_session(client, session_id) -> str:
    r = client.post(f"/sessions/{session_id}/initialize", json={})
    assert r.status_code == 200
    return session_id
