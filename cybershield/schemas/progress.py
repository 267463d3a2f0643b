"""Pydantic schemas for durable progression state and user preferences."""
from datetime import datetime
from enum import Enum

from pydantic import Field

from cybershield.schemas.common import CamelModel
from cybershield.schemas.training import Difficulty, ModuleStatus, SessionFeedback

BASE_XP_TO_NEXT_LEVEL = 100


class BadgeRarity(str, Enum):
    COMMON = "common"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


class Theme(str, Enum):
    DARK = "dark"
    LIGHT = "light"
    SYSTEM = "system"


class Badge(CamelModel):
    id: str
    name: str
    description: str
    icon: str
    requirement: str
    rarity: BadgeRarity
    earned_at: datetime | None = None


class ModuleProgress(CamelModel):
    module_id: str
    status: ModuleStatus
    best_score: int = 0
    attempts: int = 0
    last_attempt_date: str | None = None


class UserProgress(CamelModel):
    level: int = Field(default=1, ge=1)
    xp: int = Field(default=0, ge=0)
    xp_to_next_level: int = BASE_XP_TO_NEXT_LEVEL
    total_score: int = 0
    streak: int = Field(default=0, ge=0)
    last_active_date: str | None = None
    module_progress: dict[str, ModuleProgress] = Field(default_factory=dict)
    badges: list[Badge] = Field(default_factory=list)


class ProgressOutSchema(UserProgress):
    level_title: str
    badge_count: int


class UserSettings(CamelModel):
    notifications: bool = True
    sound_effects: bool = True
    voice_input: bool = False
    text_to_speech: bool = False
    dark_mode: bool = True
    difficulty: Difficulty = Difficulty.BEGINNER


class ThemeSchema(CamelModel):
    theme: Theme


class OnboardingSchema(CamelModel):
    seen: bool


class TrainingResultSchema(CamelModel):
    feedback: SessionFeedback
    grade: str
    passed: bool
    xp_earned: int
    level: int
    new_badges: list[Badge] = Field(default_factory=list)


class AdvanceOutSchema(CamelModel):
    finished: bool
    scenario_index: int
    result: TrainingResultSchema | None = None


class XPSchema(CamelModel):
    amount: int


class ModuleResultSchema(CamelModel):
    score: int
    passed: bool
