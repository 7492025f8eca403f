"""Tests for the AI service client; the HTTP layer is faked."""
from __future__ import annotations

import pytest
import requests

from lumina import ai


class _FakeResponse:
    def __init__(self, payload=None, status=200, bad_json=False):
        self._payload = payload
        self.status_code = status
        self._bad_json = bad_json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if self._bad_json:
            raise ValueError("not json")
        return self._payload


@pytest.fixture
def online(monkeypatch):
    monkeypatch.setattr(ai, "LLM_API_KEY", "test-key")
    calls = []

    def install(response):
        def fake_post(url, json=None, headers=None, timeout=None):
            calls.append({"url": url, "json": json, "headers": headers})
            if isinstance(response, Exception):
                raise response
            return response
        monkeypatch.setattr(ai.requests, "post", fake_post)
        return calls

    return install


def _reply(text):
    return _FakeResponse({"choices": [{"message": {"content": text}}]})


def test_offline_without_key():
    assert not ai.llm_available()
    with pytest.raises(ai.AIUnavailableError) as exc:
        ai.summarize_zone("studio")
    assert exc.value.error_code == "ai_offline"


def test_agent_reply_prompt(online):
    calls = online(_reply("  Hello human.  "))
    assert ai.agent_reply("Muse", "Artist", "hi") == "Hello human."
    body = calls[0]["json"]
    assert calls[0]["url"].endswith("/v1/chat/completions")
    assert calls[0]["headers"]["Authorization"] == "Bearer test-key"
    assert body["messages"][0]["content"] == "Act as agent Muse (Artist). User says: hi"


def test_empty_answers_fall_back(online):
    online(_FakeResponse({"choices": []}))
    assert ai.summarize_zone("files") == "No activity detected."
    assert ai.agent_reply("Muse", "Artist", "hi") == "Error."


def test_classify_lists_initiatives(online):
    calls = online(_reply("Mostly about budgets."))
    assert ai.classify("spend less", ["Budget Optimization", "GDPR Compliance"]) == "Mostly about budgets."
    assert "Budget Optimization, GDPR Compliance" in calls[0]["json"]["messages"][0]["content"]


def test_transport_errors_are_wrapped(online):
    online(requests.ConnectionError("refused"))
    with pytest.raises(ai.AIServiceError) as exc:
        ai.complete("x")
    assert exc.value.error_code == "ai_failed"


def test_http_error_is_wrapped(online):
    online(_FakeResponse({}, status=500))
    with pytest.raises(ai.AIServiceError):
        ai.complete("x")


def test_bad_json(online):
    online(_FakeResponse(bad_json=True))
    with pytest.raises(ai.AIServiceError) as exc:
        ai.complete("x")
    assert exc.value.error_code == "ai_bad_response"


def test_unexpected_shape(online):
    online(_FakeResponse(["not", "a", "dict"]))
    with pytest.raises(ai.AIServiceError):
        ai.complete("x")
