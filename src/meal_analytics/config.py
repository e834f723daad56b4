"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from meal_analytics.services.reports import ReportConfig
from meal_analytics.services.stats import StatsConfig

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    openai_api_key: str
    openai_model: str = "gpt-5.2"
    openai_reasoning_effort: str | None = "low"
    openai_store: bool = False
    narrative_timeout_seconds: float = 10.0
    max_range_days: int = 366
    brevo_api_key: str | None = None
    brevo_base_url: str = "https://api.brevo.com/v3"
    report_sender_email: str = "reports@mealanalytics.app"
    report_sender_name: str = "Meal Analytics"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def report_config(settings: Settings) -> ReportConfig:
    """Build report tunables from settings."""
    return ReportConfig(narrative_timeout_seconds=settings.narrative_timeout_seconds)


def stats_config(settings: Settings) -> StatsConfig:
    """Build aggregation limits from settings."""
    return StatsConfig(max_range_days=settings.max_range_days)
