"""Pydantic schemas for the module catalog and the active training session."""
from datetime import datetime
from enum import Enum

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from cybershield.schemas.common import CamelModel


class ModuleType(str, Enum):
    PHISHING = "phishing"
    SOCIAL_ENGINEERING = "social-engineering"
    INCIDENT_RESPONSE = "incident-response"
    PASSWORD_SECURITY = "password-security"


class Difficulty(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


class ModuleStatus(str, Enum):
    LOCKED = "locked"
    AVAILABLE = "available"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class MessageRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class TrainingModule(CamelModel):
    id: str
    type: ModuleType
    title: str
    description: str
    difficulty: Difficulty
    status: ModuleStatus
    estimated_minutes: int
    total_scenarios: int
    completed_scenarios: int = 0
    required_score: int = Field(ge=0, le=100)
    best_score: int | None = None
    prerequisites: list[str] = Field(default_factory=list)
    icon: str = ""
    skills: list[str] = Field(default_factory=list)


class MessageMetadata(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    is_attack: bool | None = None
    red_flag_triggered: str | None = None
    score_impact: int | None = None


class ChatMessage(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    role: MessageRole
    content: str
    timestamp: datetime
    metadata: MessageMetadata | None = None


class SessionFeedback(CamelModel):
    overall_score: int = Field(ge=0, le=100)
    max_score: int = 100
    correct_actions: int = 0
    total_actions: int = 0
    missed_red_flags: list[str] = Field(default_factory=list)
    identified_red_flags: list[str] = Field(default_factory=list)
    strengths: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)
    detailed_analysis: str = ""


class SessionState(CamelModel):
    """The single training-session slot; empty when ``session_id`` is None."""

    session_id: str | None = None
    module_id: str | None = None
    is_active: bool = False
    start_time: datetime | None = None
    scenario_index: int = 0
    messages: list[ChatMessage] = Field(default_factory=list)
    score: int = 0
    max_score: int = 100
    feedback: SessionFeedback | None = None


# ---------- request bodies ----------

class StartSessionSchema(CamelModel):
    module_id: str


class AddMessageSchema(CamelModel):
    role: MessageRole
    content: str
    metadata: MessageMetadata | None = None


class ScoreDeltaSchema(CamelModel):
    delta: int


class AnswerSchema(CamelModel):
    # True when the trainee judges the scenario to be an attack
    is_threat: bool
