"""Physiological target calculations."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from meal_analytics.domain.errors import InvalidProfile
from meal_analytics.domain.profile import (
    ActivityLevel,
    Goal,
    HealthProfile,
    Sex,
    Targets,
)

PROTEIN_KCAL_PER_G = 4
CARBS_KCAL_PER_G = 4
FAT_KCAL_PER_G = 9

_BMI_BANDS = (
    (30.0, "Obese"),
    (25.0, "Overweight"),
    (18.5, "Normal weight"),
)


def _default_activity_multipliers() -> Mapping[ActivityLevel, float]:
    return MappingProxyType(
        {
            ActivityLevel.SEDENTARY: 1.2,
            ActivityLevel.LIGHT: 1.375,
            ActivityLevel.MODERATE: 1.55,
            ActivityLevel.ACTIVE: 1.725,
            ActivityLevel.VERY_ACTIVE: 1.9,
        }
    )


def _default_goal_factors() -> Mapping[Goal, float]:
    return MappingProxyType({Goal.LOSE: 0.80, Goal.MAINTAIN: 1.0, Goal.GAIN: 1.15})


@dataclass(frozen=True)
class TargetConfig:
    """Constants used by the target calculator."""

    activity_multipliers: Mapping[ActivityLevel, float] = field(
        default_factory=_default_activity_multipliers
    )
    goal_factors: Mapping[Goal, float] = field(default_factory=_default_goal_factors)
    protein_g_per_kg: float = 1.6
    fat_calorie_share: float = 0.30


DEFAULT_TARGET_CONFIG = TargetConfig()


def calculate_targets(
    profile: HealthProfile, config: TargetConfig = DEFAULT_TARGET_CONFIG
) -> Targets:
    """Compute BMI and daily calorie and macro targets for a profile.

    The calorie target is rounded once, after the activity and goal
    adjustments; macro targets are derived from the rounded calorie target.
    """
    if not isinstance(profile, HealthProfile):
        raise InvalidProfile("a HealthProfile is required")
    try:
        multiplier = config.activity_multipliers[profile.activity_level]
        goal_factor = config.goal_factors[profile.goal]
    except KeyError as exc:
        raise InvalidProfile(f"no factor configured for {exc.args[0]!r}") from exc

    bmi = calculate_bmi(profile.weight_kg, profile.height_cm)
    bmr = calculate_bmr(profile)
    tdee = bmr * multiplier
    daily_calories = round(tdee * goal_factor)

    protein_g = round(profile.weight_kg * config.protein_g_per_kg)
    fat_kcal = daily_calories * config.fat_calorie_share
    fat_g = round(fat_kcal / FAT_KCAL_PER_G)
    carbs_kcal = daily_calories - protein_g * PROTEIN_KCAL_PER_G - fat_kcal
    carbs_g = max(0, round(carbs_kcal / CARBS_KCAL_PER_G))

    return Targets(
        bmi=bmi,
        bmi_category=bmi_category(bmi),
        bmr=bmr,
        tdee=tdee,
        daily_calories=daily_calories,
        protein_g=protein_g,
        carbs_g=carbs_g,
        fat_g=fat_g,
    )


def calculate_bmi(weight_kg: float, height_cm: float) -> float:
    """Return BMI rounded to two decimals."""
    if weight_kg <= 0 or height_cm <= 0:
        raise InvalidProfile("weight and height must be positive")
    height_m = height_cm / 100
    return round(weight_kg / (height_m * height_m), 2)


def bmi_category(bmi: float) -> str:
    """Classify a BMI; each band includes its lower bound."""
    for lower_bound, label in _BMI_BANDS:
        if bmi >= lower_bound:
            return label
    return "Underweight"


def calculate_bmr(profile: HealthProfile) -> float:
    """Mifflin-St Jeor basal metabolic rate in kcal/day."""
    base = 10 * profile.weight_kg + 6.25 * profile.height_cm - 5 * profile.age
    if profile.sex is Sex.MALE:
        return base + 5
    return base - 161
