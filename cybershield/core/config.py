"""Application configuration from environment."""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """App settings loaded from env / .env."""

    app_name: str = "CyberShield Training"
    debug: bool = False
    log_level: str = "INFO"

    # Database (key-value snapshots of progress and settings)
    database_url: str = "sqlite:///./cybershield.db"

    # AI service (Anthropic messages API)
    anthropic_api_key: str = ""
    ai_base_url: str = "https://api.anthropic.com"
    ai_model: str = "claude-sonnet-4-20250514"
    ai_api_version: str = "2023-06-01"
    ai_timeout_seconds: float = 60.0
    ai_max_tokens: int = 1024
    scenario_max_tokens: int = 2048

    # Training flow
    scenarios_per_session: int = 5
    correct_answer_points: int = 20
    xp_multiplier: float = 1.5

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()

