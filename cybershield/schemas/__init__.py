from cybershield.schemas.ai import CoachingMode, CoachingReplySchema, CoachingRequestSchema
from cybershield.schemas.progress import Badge, BadgeRarity, ModuleProgress, UserProgress, UserSettings
from cybershield.schemas.scenario import Scenario, ScenarioRequestSchema, scenario_adapter
from cybershield.schemas.training import (
    ChatMessage,
    Difficulty,
    ModuleStatus,
    ModuleType,
    SessionFeedback,
    SessionState,
    TrainingModule,
)

__all__ = [
    "Badge",
    "BadgeRarity",
    "ChatMessage",
    "CoachingMode",
    "CoachingReplySchema",
    "CoachingRequestSchema",
    "Difficulty",
    "ModuleProgress",
    "ModuleStatus",
    "ModuleType",
    "Scenario",
    "ScenarioRequestSchema",
    "SessionFeedback",
    "SessionState",
    "TrainingModule",
    "UserProgress",
    "UserSettings",
    "scenario_adapter",
]
