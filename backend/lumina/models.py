"""
All data models: dataclasses for internal state, Pydantic models for API requests.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Literal, NamedTuple, Optional

from pydantic import BaseModel, Field

# --- Type aliases ---
ConnectionQuality = Literal["optimal", "unstable", "offline"]
MessageRole = Literal["user", "model"]
FeedbackType = Literal["up", "down"]
IntegrationType = Literal["whatsapp", "telegram", "viber"]


class Vec3(NamedTuple):
    x: float
    y: float
    z: float

    def distance_to(self, other: "Vec3") -> float:
        return math.sqrt((self.x - other.x) ** 2 + (self.y - other.y) ** 2 + (self.z - other.z) ** 2)


# --- Internal state dataclasses ---

@dataclass(frozen=True)
class Agent:
    id: str
    name: str
    role: str
    type: str
    zone_id: str
    status: str = "Idle"
    connection_quality: str = "optimal"
    load: int = 0
    energy: int = 100
    cooldown: int = 0
    current_task: str = ""


@dataclass(frozen=True)
class Interaction:
    agent_a: str
    agent_b: str
    start: Vec3
    end: Vec3

    @property
    def key(self) -> str:
        return f"{self.agent_a}-{self.agent_b}"


@dataclass
class ChatMessage:
    msg_id: int
    role: MessageRole
    text: str
    created_at: float
    feedback: Optional[FeedbackType] = None
    feedback_comment: str = ""


@dataclass
class Tool:
    id: str
    name: str
    description: str
    version: str
    installed: bool
    category: str


@dataclass
class Initiative:
    id: str
    title: str
    active: bool


@dataclass
class IntegrationEvent:
    event_id: str
    type: IntegrationType
    message: str
    handled: bool
    created_at: float


@dataclass
class AuditEntry:
    audit_id: str
    method: str
    path: str
    query: str
    status_code: int
    duration_ms: float
    client: str
    created_at: float


# --- API request models ---

class AgentSpec(BaseModel):
    id: str
    name: str
    role: str = ""
    type: str
    zone_id: str
    status: str = "Idle"
    connection_quality: str = "optimal"
    load: int = Field(default=0, ge=0, le=100)
    energy: int = Field(default=100, ge=0, le=100)
    cooldown: int = Field(default=0, ge=0)
    current_task: str = ""


class InitializeRequest(BaseModel):
    agents: Optional[List[AgentSpec]] = None


class ChatSendRequest(BaseModel):
    text: str


class FeedbackRequest(BaseModel):
    msg_id: int
    feedback: FeedbackType
    comment: str = ""


class ClassifyRequest(BaseModel):
    text: str
    initiative_ids: List[str] = Field(default_factory=list)

