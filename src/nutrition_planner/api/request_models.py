"""Pydantic models for HTTP request bodies."""

from pydantic import BaseModel, ConfigDict, Field

from nutrition_planner.domain.profile import ActivityLevel, Gender, Goal


class AnalyzeFoodRequest(BaseModel):
    """Base64 image upload for analysis."""

    model_config = ConfigDict(populate_by_name=True)

    image: str = Field(min_length=1)
    mime_type: str = Field(alias="mimeType", min_length=1)


class GenerateMealPlanRequest(BaseModel):
    """Profile fields and plan length for plan generation."""

    age: int = Field(gt=0, le=130)
    gender: Gender
    weight_kg: float = Field(gt=0)
    height_cm: float = Field(gt=0)
    activity_level: ActivityLevel
    goal: Goal
    daily_calorie_target: int | None = Field(default=None, gt=0)
    dietary_restrictions: list[str] | str | None = None
    days: int | None = Field(default=None, ge=1, le=30)


class RecipePreferencesRequest(BaseModel):
    cuisine: str | None = None
    dietary_restrictions: list[str] | str | None = None
    max_calories: int | None = Field(default=None, gt=0)
    cooking_time: int | None = Field(default=None, gt=0)


class RecipeSuggestionsRequest(BaseModel):
    """Ingredients on hand plus optional preferences."""

    ingredients: list[str] = Field(min_length=1)
    preferences: RecipePreferencesRequest | None = None
