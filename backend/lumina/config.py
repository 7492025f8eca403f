"""
Centralized configuration: environment variables, simulation constants and seed data.
"""
from __future__ import annotations

import logging
import os

_log = logging.getLogger(__name__)

BACKEND_VERSION = "4.4.0"

ADMIN_TOKEN = os.getenv("ADMIN_TOKEN", "").strip()
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
MAX_SESSIONS = int(float(os.getenv("MAX_SESSIONS", "64")))

TICK_INTERVAL_SECONDS = float(os.getenv("TICK_INTERVAL_SECONDS", "2.0"))

# --- Simulation constants ---
PLACEMENT_RADIUS = 3.0
PLACEMENT_HEIGHT = 1.0
ANGULAR_SPEED = 0.5  # radians per second of wall-clock time
INTERACTION_DISTANCE = 15.0

ENERGY_DECAY = 1
LOW_ENERGY_THRESHOLD = 20
RECHARGE_AMOUNT = 5
TASK_REASSIGN_PROBABILITY = 0.3
CONNECTION_DEGRADE_PROBABILITY = 0.1

TASKS_BY_TYPE = {
    "analyst": ["Solving Eq.", "Data Mining", "Checking Regs"],
    "creative": ["Sketching", "Color Grading", "Ideation"],
    "manager": ["Indexing", "Sorting", "Archiving"],
    "security": ["Patrol", "Firewalling", "Scanning"],
}
DEFAULT_TASKS = ["Thinking"]

# --- Integration feed ---
INTEGRATION_TYPES = ["whatsapp", "telegram", "viber"]
DEFAULT_INTEGRATIONS = ["whatsapp", "telegram"]
INTEGRATION_EVENT_PROBABILITY = 0.05
INTEGRATION_HANDLE_SECONDS = 3.0
INTEGRATION_REWARD = 5
INTEGRATION_EVENTS_MAX = 50
STARTING_REPUTATION = 1250

# --- AI service (OpenAI-compatible chat completions) ---
LLM_BASE_URL = os.getenv("LLM_BASE_URL", "").rstrip("/")
LLM_MODEL = os.getenv("LLM_MODEL", "gpt-4o-mini")
LLM_API_KEY = os.getenv("LLM_API_KEY", "").strip()
LLM_TIMEOUT_SECONDS = float(os.getenv("LLM_TIMEOUT_SECONDS", "30"))
LLM_MAX_TOKENS = int(os.getenv("LLM_MAX_TOKENS", "300"))

CHAT_HISTORY_MAX = 200

# --- Static campus data ---
ZONES = {
    "dashboard": (0.0, 0.0, 0.0),
    "studio": (-12.0, 0.0, -5.0),
    "files": (12.0, 0.0, -5.0),
    "chat": (0.0, 0.0, -15.0),
}

DEFAULT_ROSTER = [
    {"id": "a1", "name": "Logic-Bot", "role": "Tutor", "status": "Active", "connection_quality": "optimal",
     "type": "analyst", "load": 45, "energy": 90, "cooldown": 0, "current_task": "Calculating", "zone_id": "dashboard"},
    {"id": "a2", "name": "Muse", "role": "Artist", "status": "Idle", "connection_quality": "unstable",
     "type": "creative", "load": 10, "energy": 40, "cooldown": 30, "current_task": "Dreaming", "zone_id": "studio"},
    {"id": "a3", "name": "Archivist", "role": "Librarian", "status": "Optimizing", "connection_quality": "optimal",
     "type": "manager", "load": 80, "energy": 65, "cooldown": 0, "current_task": "Indexing", "zone_id": "files"},
    {"id": "a4", "name": "Sentinel", "role": "Flow Guard", "status": "Active", "connection_quality": "offline",
     "type": "security", "load": 60, "energy": 80, "cooldown": 10, "current_task": "Patrol", "zone_id": "chat"},
]

DEFAULT_TOOLS = [
    {"id": "e1", "name": "WhatsApp Bridge", "description": "Route messages to agents.", "version": "1.0", "installed": True, "category": "plugin"},
    {"id": "e2", "name": "Telegram Bot", "description": "BotFather integration.", "version": "0.9", "installed": True, "category": "plugin"},
    {"id": "e3", "name": "Viber Connect", "description": "Community management.", "version": "0.5", "installed": False, "category": "plugin"},
    {"id": "e4", "name": "GitHub Sync", "description": "Auto-commit code changes.", "version": "2.1", "installed": False, "category": "dev"},
    {"id": "e5", "name": "Notion Import", "description": "Sync workspace docs.", "version": "1.2", "installed": False, "category": "productivity"},
]

DEFAULT_INITIATIVES = [
    {"id": "i1", "title": "Sustainability 2025", "active": True},
    {"id": "i2", "title": "GDPR Compliance", "active": False},
    {"id": "i3", "title": "Campus Diversity", "active": True},
    {"id": "i4", "title": "Budget Optimization", "active": False},
]


def validate_config() -> None:
    """Log warnings for missing/insecure configuration. Called once at startup."""
    if not ADMIN_TOKEN:
        _log.warning(
            "ADMIN_TOKEN is empty, admin endpoints are UNPROTECTED. "
            "Set ADMIN_TOKEN env var in production."
        )
    if TICK_INTERVAL_SECONDS <= 0:
        _log.warning("TICK_INTERVAL_SECONDS=%s is not positive; engines will tick back to back.", TICK_INTERVAL_SECONDS)
    if not LLM_BASE_URL:
        _log.info("LLM_BASE_URL not set, using the public OpenAI endpoint for AI replies.")
    if not LLM_API_KEY:
        _log.info("LLM_API_KEY not set, zone summaries and agent chat report the AI as offline.")
