"""Pydantic schemas for the coaching chat proxy."""
from enum import Enum
from typing import Any

from pydantic import Field

from cybershield.schemas.common import CamelModel
from cybershield.schemas.training import Difficulty, MessageRole


class CoachingMode(str, Enum):
    PHISHING = "phishing"
    SOCIAL_ENGINEERING = "socialEngineering"
    INCIDENT_RESPONSE = "incidentResponse"
    COACHING = "coaching"

    @classmethod
    def parse(cls, value: str | None) -> "CoachingMode":
        """Map a free-form mode string onto a known mode; unknown modes coach."""
        try:
            return cls(value)
        except ValueError:
            return cls.COACHING


class CoachingMessage(CamelModel):
    role: MessageRole
    content: str


class CoachingRequestSchema(CamelModel):
    mode: str
    messages: list[CoachingMessage]
    difficulty: Difficulty | None = None
    context: str | None = None


class CoachingReplySchema(CamelModel):
    success: bool = True
    message: str
    usage: dict[str, Any] = Field(default_factory=dict)
