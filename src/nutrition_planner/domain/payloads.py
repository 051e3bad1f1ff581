"""Structured payload models returned by the inference service."""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

MAX_CALORIES = 10_000
MAX_MEAL_CALORIES = 5_000
MAX_MACRO_GRAMS = 1_000.0
MAX_MINUTES = 600
MAX_SERVINGS = 50
MAX_PLAN_DAYS = 30
MAX_RECIPES = 5

NonEmptyText = Annotated[str, Field(min_length=1, pattern=r"^\s*\S")]
Grams = Annotated[
    float, Field(ge=0.0, le=MAX_MACRO_GRAMS, strict=True, allow_inf_nan=False)
]
Confidence = Literal["high", "medium", "low"]
MealType = Literal["breakfast", "lunch", "dinner", "snack"]

SINGLE_MEAL_TYPES: frozenset[str] = frozenset({"breakfast", "lunch", "dinner"})


class _Payload(BaseModel):
    model_config = ConfigDict(frozen=True)


class NutritionEstimate(_Payload):
    """Nutrition estimate for a single analyzed meal."""

    name: NonEmptyText
    calories: int = Field(ge=0, le=MAX_MEAL_CALORIES, strict=True)
    protein_g: Grams
    carbs_g: Grams
    fat_g: Grams
    fiber_g: Grams
    confidence: Confidence
    ingredients: list[NonEmptyText] = Field(min_length=1)
    suggestion: str


class PlanMealItem(_Payload):
    """One meal slot inside a plan day."""

    meal_type: MealType
    meal_name: NonEmptyText
    calories: int = Field(ge=0, le=MAX_MEAL_CALORIES, strict=True)
    protein_g: Grams
    carbs_g: Grams
    fat_g: Grams
    ingredients: list[NonEmptyText]
    instructions: str


class PlanDay(_Payload):
    """A single day of a generated plan."""

    day_number: int = Field(ge=1, le=MAX_PLAN_DAYS, strict=True)
    meals: list[PlanMealItem] = Field(min_length=1)

    @property
    def total_calories(self) -> int:
        return sum(meal.calories for meal in self.meals)


class PlanDraft(_Payload):
    """Validated plan payload before schedule assembly."""

    plan_name: NonEmptyText
    days: list[PlanDay] = Field(min_length=1, max_length=MAX_PLAN_DAYS)


class RecipeSuggestion(_Payload):
    """A suggested recipe."""

    name: NonEmptyText
    description: str
    prep_time_minutes: int = Field(ge=0, le=MAX_MINUTES, strict=True)
    cook_time_minutes: int = Field(ge=0, le=MAX_MINUTES, strict=True)
    servings: int = Field(ge=1, le=MAX_SERVINGS, strict=True)
    calories_per_serving: int = Field(ge=0, le=MAX_CALORIES, strict=True)
    protein_g: Grams
    carbs_g: Grams
    fat_g: Grams
    ingredients: list[NonEmptyText] = Field(min_length=1)
    instructions: list[NonEmptyText] = Field(min_length=1)
    tips: str | None = None


class RecipeSet(_Payload):
    """Container for one to five recipe suggestions."""

    recipes: list[RecipeSuggestion] = Field(min_length=1, max_length=MAX_RECIPES)
