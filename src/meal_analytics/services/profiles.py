"""Health profile service."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Protocol
from uuid import UUID

from meal_analytics.domain.errors import GenerationError
from meal_analytics.domain.profile import HealthProfile, ProfileAdvice, Targets
from meal_analytics.services.narrative import NarrativeService, ProfileContext
from meal_analytics.services.targets import (
    DEFAULT_TARGET_CONFIG,
    TargetConfig,
    calculate_targets,
)

_logger = logging.getLogger(__name__)


class ProfileRepository(Protocol):
    """Persistence interface for health profiles."""

    def get_profile(self, user_id: UUID) -> HealthProfile | None:
        """Return the stored profile for a user, if any."""

    def get_advice(self, user_id: UUID) -> ProfileAdvice | None:
        """Return the advice stored with the user's profile, if any."""

    def save_profile(
        self,
        user_id: UUID,
        profile: HealthProfile,
        advice: ProfileAdvice | None = None,
    ) -> None:
        """Replace the stored profile and its advice for a user."""


@dataclass(frozen=True)
class ProfileView:
    """A stored profile together with its current targets."""

    profile: HealthProfile
    targets: Targets
    advice: ProfileAdvice | None = None


@dataclass
class ProfileService:
    """Service that stores profiles and recomputes targets on every read."""

    repository: ProfileRepository
    target_config: TargetConfig = field(default=DEFAULT_TARGET_CONFIG)
    narrative_service: NarrativeService | None = None
    advice_timeout_seconds: float = 10.0

    async def save_profile(self, user_id: UUID, profile: HealthProfile) -> ProfileView:
        """Replace the user's profile and return fresh targets.

        Dietary advice is generated when a narrative service is configured.
        A failed or slow generation stores the profile without advice.
        """
        targets = calculate_targets(profile, self.target_config)
        advice = await self._advise(user_id, profile, targets)
        await asyncio.to_thread(self.repository.save_profile, user_id, profile, advice)
        return ProfileView(profile=profile, targets=targets, advice=advice)

    def get_profile(self, user_id: UUID) -> ProfileView | None:
        """Return the user's profile with targets, if a profile exists."""
        profile = self.repository.get_profile(user_id)
        if profile is None:
            return None
        return ProfileView(
            profile=profile,
            targets=calculate_targets(profile, self.target_config),
            advice=self.repository.get_advice(user_id),
        )

    async def _advise(
        self, user_id: UUID, profile: HealthProfile, targets: Targets
    ) -> ProfileAdvice | None:
        if self.narrative_service is None:
            return None
        try:
            return await self.narrative_service.advise_profile(
                ProfileContext(profile=profile, targets=targets),
                self.advice_timeout_seconds,
            )
        except GenerationError as exc:
            _logger.warning(
                "Profile advice generation failed: %s",
                exc,
                extra={"user_id": str(user_id)},
            )
            return None
