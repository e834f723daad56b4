"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from meal_analytics.adapters.brevo_email_notifier import BrevoEmailNotifier
from meal_analytics.adapters.openai_narrative_client import OpenAINarrativeClient
from meal_analytics.adapters.supabase_meal_log_repository import (
    SupabaseMealLogRepository,
)
from meal_analytics.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from meal_analytics.adapters.supabase_report_repository import (
    SupabaseReportRepository,
)
from meal_analytics.adapters.supabase_user_repository import SupabaseUserDirectory
from meal_analytics.config import Settings, report_config, stats_config
from meal_analytics.services.meals import MealLogService
from meal_analytics.services.narrative import NarrativeService
from meal_analytics.services.profiles import ProfileService
from meal_analytics.services.reports import ReportService
from meal_analytics.services.stats import StatsService
from meal_analytics.services.targets import DEFAULT_TARGET_CONFIG


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    meal_log_service: MealLogService
    stats_service: StatsService
    profile_service: ProfileService
    report_service: ReportService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    meal_log_repository = SupabaseMealLogRepository(supabase_client)
    profile_repository = SupabaseProfileRepository(supabase_client)
    report_repository = SupabaseReportRepository(supabase_client)
    user_directory = SupabaseUserDirectory(supabase_client)

    stats_service = StatsService(
        reader=meal_log_repository,
        config=stats_config(resolved_settings),
    )
    openai_client = OpenAINarrativeClient.create(resolved_settings.openai_api_key)
    narrative_service = NarrativeService(
        client=openai_client,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )
    notifier = None
    if resolved_settings.brevo_api_key:
        notifier = BrevoEmailNotifier.create(
            api_key=resolved_settings.brevo_api_key,
            base_url=resolved_settings.brevo_base_url,
            sender_email=resolved_settings.report_sender_email,
            sender_name=resolved_settings.report_sender_name,
            directory=user_directory,
        )
    report_service = ReportService(
        stats_service=stats_service,
        profile_repository=profile_repository,
        narrative_service=narrative_service,
        repository=report_repository,
        notifier=notifier,
        config=report_config(resolved_settings),
        target_config=DEFAULT_TARGET_CONFIG,
    )

    async def close_resources() -> None:
        await openai_client.close()
        if notifier is not None:
            await notifier.close()

    return AppContainer(
        settings=resolved_settings,
        meal_log_service=MealLogService(meal_log_repository),
        stats_service=stats_service,
        profile_service=ProfileService(
            repository=profile_repository,
            target_config=DEFAULT_TARGET_CONFIG,
            narrative_service=narrative_service,
            advice_timeout_seconds=resolved_settings.narrative_timeout_seconds,
        ),
        report_service=report_service,
        close_resources=close_resources,
    )
