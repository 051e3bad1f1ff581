"""Schema validation for structured payloads extracted from model output."""

from collections import Counter
from enum import StrEnum

import pydantic

from nutrition_planner.domain.errors import PayloadValidationError
from nutrition_planner.domain.payloads import (
    SINGLE_MEAL_TYPES,
    NutritionEstimate,
    PlanDraft,
    PlanMealItem,
    RecipeSet,
)


class PayloadKind(StrEnum):
    NUTRITION_ESTIMATE = "nutrition_estimate"
    MEAL_PLAN = "meal_plan"
    RECIPE_SET = "recipe_set"


_MODELS: dict[PayloadKind, type[pydantic.BaseModel]] = {
    PayloadKind.NUTRITION_ESTIMATE: NutritionEstimate,
    PayloadKind.MEAL_PLAN: PlanDraft,
    PayloadKind.RECIPE_SET: RecipeSet,
}


def validate(
    candidate: object, kind: PayloadKind, *, day_count: int | None = None
) -> pydantic.BaseModel:
    """Validate an untrusted candidate and return the typed payload.

    For meal plans, ``day_count`` fixes the expected number of days; when
    omitted the plan must cover ``1..len(days)``.
    """
    model = _MODELS[kind]
    if isinstance(candidate, pydantic.BaseModel):
        candidate = candidate.model_dump()
    try:
        payload = model.model_validate(candidate)
    except pydantic.ValidationError as exc:
        raise _first_error(exc) from exc
    if isinstance(payload, PlanDraft):
        _check_plan(payload, day_count)
    return payload


def _first_error(exc: pydantic.ValidationError) -> PayloadValidationError:
    error = exc.errors()[0]
    return PayloadValidationError(
        field_path=format_path(error["loc"]),
        rule=error["type"],
        message=error["msg"],
    )


def format_path(loc: tuple[int | str, ...]) -> str:
    """Render a location tuple as ``days[0].meals[1].calories``."""
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else str(part)
    return path


def _check_plan(plan: PlanDraft, day_count: int | None) -> None:
    expected = day_count if day_count is not None else len(plan.days)
    if len(plan.days) != expected:
        raise PayloadValidationError(
            field_path="days",
            rule="day_count",
            message=f"expected {expected} days, got {len(plan.days)}",
        )
    seen: set[int] = set()
    for index, day in enumerate(plan.days):
        if day.day_number > expected:
            raise PayloadValidationError(
                field_path=f"days[{index}].day_number",
                rule="day_range",
                message=f"day {day.day_number} is outside 1..{expected}",
            )
        if day.day_number in seen:
            raise PayloadValidationError(
                field_path=f"days[{index}].day_number",
                rule="duplicate_day",
                message=f"day {day.day_number} appears more than once",
            )
        seen.add(day.day_number)
        _check_meal_types(day.meals, index)


def _check_meal_types(meals: list[PlanMealItem], day_index: int) -> None:
    counts: Counter[str] = Counter()
    for meal_index, meal in enumerate(meals):
        counts[meal.meal_type] += 1
        if meal.meal_type in SINGLE_MEAL_TYPES and counts[meal.meal_type] > 1:
            raise PayloadValidationError(
                field_path=f"days[{day_index}].meals[{meal_index}].meal_type",
                rule="duplicate_meal_type",
                message=f"{meal.meal_type} appears more than once in a day",
            )
