"""Narrative insight generation using LLMs."""

import asyncio
import re
from dataclasses import dataclass
from datetime import date
from typing import Protocol

from pydantic import ValidationError

from meal_analytics.domain.errors import GenerationError, GenerationTimeout
from meal_analytics.domain.narrative import NarrativeExtract, ProfileAdviceExtract
from meal_analytics.domain.profile import HealthProfile, ProfileAdvice, Targets
from meal_analytics.domain.reports import Narrative, ReportSummary, ReportType

MAX_RECOMMENDATIONS = 10
MAX_RECOMMENDATION_LENGTH = 100
MAX_RECOMMENDED_FOODS = 15
MAX_FOODS_TO_AVOID = 10
AVOID_SECTION_LINES = 20

NARRATIVE_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "insights": {"type": "string"},
        "recommendations": {"type": "array", "items": {"type": "string"}},
    },
    "required": ["insights", "recommendations"],
    "additionalProperties": False,
}

PROFILE_ADVICE_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "recommendations": {"type": "string"},
        "recommended_foods": {"type": "array", "items": {"type": "string"}},
        "foods_to_avoid": {"type": "array", "items": {"type": "string"}},
    },
    "required": ["recommendations", "recommended_foods", "foods_to_avoid"],
    "additionalProperties": False,
}

_BULLET_PATTERN = re.compile(r"^\s*(?:[-•*]|\d+[.)])\s+(?P<text>.+?)\s*$")


class NarrativeClient(Protocol):
    """Interface for LLM text generation with structured output."""

    async def generate(
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
        schema: dict[str, object],
    ) -> dict[str, object]:
        """Return structured narrative data."""


@dataclass(frozen=True)
class NarrativeContext:
    """Structured nutrition summary handed to the narrative generator."""

    report_type: ReportType
    start_date: date
    end_date: date
    summary: ReportSummary
    targets: Targets | None

    def to_prompt(self) -> str:
        """Render the context as plain text for the model."""
        summary = self.summary
        lines = [
            f"Nutrition {self.report_type.value} report "
            f"from {self.start_date.isoformat()} to {self.end_date.isoformat()}.",
            f"Days in period: {summary.total_days}",
            f"Days with meals logged: {summary.days_logged} "
            f"(adherence {summary.adherence_ratio:.0%})",
            f"Total meals: {summary.total_meals}",
            f"Longest logging streak: {summary.streak_days} days",
            "Daily averages over the whole period:",
            f"- Calories: {summary.avg_calories} kcal",
            f"- Protein: {summary.avg_protein_g:.1f} g",
            f"- Carbs: {summary.avg_carbs_g:.1f} g",
            f"- Fat: {summary.avg_fat_g:.1f} g",
            f"- Fiber: {summary.avg_fiber_g:.1f} g",
        ]
        if self.targets is not None:
            targets = self.targets
            lines.extend(
                [
                    "Daily targets:",
                    f"- Calories: {targets.daily_calories} kcal",
                    f"- Protein: {targets.protein_g} g",
                    f"- Carbs: {targets.carbs_g} g",
                    f"- Fat: {targets.fat_g} g",
                    f"BMI: {targets.bmi:.2f} ({targets.bmi_category})",
                ]
            )
        if summary.compliance is not None:
            compliance = summary.compliance
            lines.append(
                "Compliance with targets: "
                f"calories {compliance.calories:.0f}%, "
                f"protein {compliance.protein:.0f}%, "
                f"carbs {compliance.carbs:.0f}%, "
                f"fat {compliance.fat:.0f}%"
            )
        if summary.days_on_target is not None:
            lines.append(f"Days on calorie target: {summary.days_on_target}")
        lines.extend(
            [
                "",
                "Write a short, encouraging analysis of these eating patterns "
                "in 'insights' and give up to 5 concrete, actionable "
                "recommendations in 'recommendations'.",
            ]
        )
        return "\n".join(lines)


@dataclass(frozen=True)
class ProfileContext:
    """Health profile and derived targets handed to the advice generator."""

    profile: HealthProfile
    targets: Targets

    def to_prompt(self) -> str:
        profile = self.profile
        targets = self.targets
        lines = [
            "Health profile:",
            f"- Age: {profile.age}",
            f"- Sex: {profile.sex.value}",
            f"- Weight: {profile.weight_kg:g} kg",
            f"- Height: {profile.height_cm:g} cm",
            f"- Activity level: {profile.activity_level.value}",
            f"- Goal: {profile.goal.value} weight",
            f"- BMI: {targets.bmi:.2f} ({targets.bmi_category})",
            f"- Daily calories: {targets.daily_calories} kcal",
            f"- Macros: protein {targets.protein_g} g, "
            f"carbs {targets.carbs_g} g, fat {targets.fat_g} g",
        ]
        if profile.medical_conditions:
            lines.append(
                f"- Medical conditions: {', '.join(profile.medical_conditions)}"
            )
        if profile.allergies:
            lines.append(f"- Allergies: {', '.join(profile.allergies)}")
        if profile.dietary_preferences:
            lines.append(
                f"- Dietary preferences: {', '.join(profile.dietary_preferences)}"
            )
        lines.extend(
            [
                "",
                "Give personalized nutrition recommendations and general tips in "
                "'recommendations', 10 to 15 specific recommended foods in "
                "'recommended_foods', and foods to avoid or limit in "
                "'foods_to_avoid'. Respect the allergies and preferences above.",
            ]
        )
        return "\n".join(lines)


@dataclass
class NarrativeService:
    """Service that prepares narrative prompts and validates results."""

    client: NarrativeClient
    model: str
    reasoning_effort: str | None
    store: bool

    async def generate(
        self, context: NarrativeContext, timeout_seconds: float
    ) -> Narrative:
        """Generate insights for a report context within the timeout."""
        raw = await self._call(context.to_prompt(), NARRATIVE_SCHEMA, timeout_seconds)
        try:
            extract = NarrativeExtract.model_validate(raw)
        except ValidationError as exc:
            raise GenerationError("narrative output failed validation") from exc

        recommendations = [
            item.strip() for item in extract.recommendations if item.strip()
        ] or extract_bullet_items(extract.insights)
        return Narrative(
            text=extract.insights,
            recommendations=recommendations[:MAX_RECOMMENDATIONS],
        )

    async def advise_profile(
        self, context: ProfileContext, timeout_seconds: float
    ) -> ProfileAdvice:
        """Generate dietary advice for a health profile within the timeout."""
        raw = await self._call(
            context.to_prompt(), PROFILE_ADVICE_SCHEMA, timeout_seconds
        )
        try:
            extract = ProfileAdviceExtract.model_validate(raw)
        except ValidationError as exc:
            raise GenerationError("profile advice failed validation") from exc

        recommended = [
            item.strip() for item in extract.recommended_foods if item.strip()
        ] or extract_bullet_items(extract.recommendations, MAX_RECOMMENDED_FOODS)
        avoid = [
            item.strip() for item in extract.foods_to_avoid if item.strip()
        ] or extract_foods_to_avoid(extract.recommendations)
        return ProfileAdvice(
            text=extract.recommendations,
            recommended_foods=recommended[:MAX_RECOMMENDED_FOODS],
            foods_to_avoid=avoid[:MAX_FOODS_TO_AVOID],
        )

    async def _call(
        self, prompt: str, schema: dict[str, object], timeout_seconds: float
    ) -> dict[str, object]:
        try:
            return await asyncio.wait_for(
                self.client.generate(
                    model=self.model,
                    reasoning_effort=self.reasoning_effort,
                    store=self.store,
                    prompt=prompt,
                    schema=schema,
                ),
                timeout=timeout_seconds,
            )
        except TimeoutError as exc:
            raise GenerationTimeout(
                f"narrative generation exceeded {timeout_seconds}s"
            ) from exc
        except Exception as exc:
            raise GenerationError(f"{type(exc).__name__}: {exc}") from exc


def extract_bullet_items(text: str, limit: int = MAX_RECOMMENDATIONS) -> list[str]:
    """Collect bullet or numbered list items from free text."""
    items: list[str] = []
    for line in text.splitlines():
        match = _BULLET_PATTERN.match(line)
        if not match:
            continue
        item = match.group("text")
        if len(item) < MAX_RECOMMENDATION_LENGTH:
            items.append(item)
        if len(items) >= limit:
            break
    return items


def extract_foods_to_avoid(text: str, limit: int = MAX_FOODS_TO_AVOID) -> list[str]:
    """Collect list items from the section following the first mention of avoid."""
    lines = text.splitlines()
    for index, line in enumerate(lines):
        if "avoid" in line.lower():
            section = "\n".join(lines[index + 1 : index + 1 + AVOID_SECTION_LINES])
            return extract_bullet_items(section, limit)
    return []
