"""Caller-supplied request descriptors."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class Gender(StrEnum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class ActivityLevel(StrEnum):
    """Ordinal activity level, from least to most active."""

    SEDENTARY = "sedentary"
    LIGHT = "light"
    MODERATE = "moderate"
    ACTIVE = "active"
    VERY_ACTIVE = "very_active"

    @property
    def rank(self) -> int:
        return list(ActivityLevel).index(self)


class Goal(StrEnum):
    LOSE_WEIGHT = "lose_weight"
    MAINTAIN = "maintain"
    GAIN_MUSCLE = "gain_muscle"


class ProfileDescriptor(BaseModel):
    """Profile used to personalize a generated meal plan."""

    model_config = ConfigDict(frozen=True)

    age: int = Field(gt=0, le=130)
    gender: Gender
    weight_kg: float = Field(gt=0)
    height_cm: float = Field(gt=0)
    activity_level: ActivityLevel
    goal: Goal
    daily_calorie_target: int = Field(gt=0)
    dietary_restrictions: frozenset[str] = frozenset()


class RecipePreferences(BaseModel):
    """Advisory recipe filters; they shape the prompt only."""

    model_config = ConfigDict(frozen=True)

    cuisine: str | None = None
    dietary_restrictions: frozenset[str] = frozenset()
    max_calories: int | None = Field(default=None, gt=0)
    max_cooking_time_minutes: int | None = Field(default=None, gt=0)
