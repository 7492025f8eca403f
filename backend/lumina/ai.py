"""
AI text-generation collaborator (OpenAI-compatible chat completions).

Blocking calls; async callers run them with ``asyncio.to_thread`` so the tick
loop is never held up by the network.
"""
from __future__ import annotations

import logging
from typing import Iterable

import requests

from lumina.config import LLM_API_KEY, LLM_BASE_URL, LLM_MAX_TOKENS, LLM_MODEL, LLM_TIMEOUT_SECONDS
from lumina.utils import trunc

_log = logging.getLogger(__name__)

DEFAULT_LLM_BASE_URL = "https://api.openai.com"

AI_OFFLINE_TEXT = "AI Offline"
SUMMARY_FAILED_TEXT = "Analysis Failed"


class AIServiceError(RuntimeError):
    def __init__(self, message: str, *, error_code: str = "ai_failed") -> None:
        super().__init__(message)
        self.error_code = error_code


class AIUnavailableError(AIServiceError):
    def __init__(self, message: str = "LLM_API_KEY not configured") -> None:
        super().__init__(message, error_code="ai_offline")


def llm_available() -> bool:
    return bool(LLM_API_KEY)


def complete(prompt: str, *, max_tokens: int = LLM_MAX_TOKENS, temperature: float = 0.7) -> str:
    if not llm_available():
        raise AIUnavailableError()
    base_url = LLM_BASE_URL or DEFAULT_LLM_BASE_URL
    payload = {
        "model": LLM_MODEL,
        "messages": [{"role": "user", "content": prompt}],
        "stream": False,
        "temperature": temperature,
        "max_tokens": max_tokens,
    }
    _log.debug("AI request model=%s prompt_len=%d", LLM_MODEL, len(prompt))
    try:
        resp = requests.post(
            f"{base_url}/v1/chat/completions",
            json=payload,
            headers={"Authorization": f"Bearer {LLM_API_KEY}", "Content-Type": "application/json"},
            timeout=LLM_TIMEOUT_SECONDS,
        )
        resp.raise_for_status()
        obj = resp.json()
    except requests.RequestException as exc:
        raise AIServiceError(f"{exc.__class__.__name__}: {exc}") from exc
    except ValueError as exc:
        raise AIServiceError("invalid JSON from AI service", error_code="ai_bad_response") from exc
    if not isinstance(obj, dict):
        raise AIServiceError("unexpected AI response shape", error_code="ai_bad_response")
    choices = obj.get("choices") or []
    if not choices:
        return ""
    message = (choices[0] or {}).get("message") or {}
    return str(message.get("content") or "").strip()


def zone_summary_prompt(zone_id: str) -> str:
    return f"Generate a 1-sentence summary of simulated activity in the {zone_id} zone of a digital university."


def summarize_zone(zone_id: str) -> str:
    text = complete(zone_summary_prompt(zone_id), max_tokens=80)
    return text or "No activity detected."


def agent_reply(name: str, role: str, text: str) -> str:
    prompt = f"Act as agent {name} ({role}). User says: {trunc(text, 4000)}"
    return complete(prompt) or "Error."


def classify(text: str, initiatives: Iterable[str]) -> str:
    titles = ", ".join(initiatives)
    prompt = (
        f"Classify this text based on the following initiatives: {titles}. "
        f"Return a concise analysis. Text: \"{trunc(text, 6000)}\""
    )
    return complete(prompt) or "Classification failed."
