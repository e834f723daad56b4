"""Models for narrative generation results."""

from pydantic import BaseModel, ConfigDict, Field


class NarrativeExtract(BaseModel):
    """Structured output returned by the narrative generator."""

    model_config = ConfigDict(str_strip_whitespace=True)

    insights: str = Field(min_length=1)
    recommendations: list[str] = Field(default_factory=list)


class ProfileAdviceExtract(BaseModel):
    """Structured dietary advice for a health profile."""

    model_config = ConfigDict(str_strip_whitespace=True)

    recommendations: str = Field(min_length=1)
    recommended_foods: list[str] = Field(default_factory=list)
    foods_to_avoid: list[str] = Field(default_factory=list)
