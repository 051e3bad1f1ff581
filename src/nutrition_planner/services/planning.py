"""Meal plan schedule assembly and calorie conformance checks."""

import logging
from collections import Counter
from collections.abc import Sequence

from nutrition_planner.domain.errors import IncompleteSchedule
from nutrition_planner.domain.payloads import MAX_PLAN_DAYS, PlanDay
from nutrition_planner.domain.plans import CalorieFlag, MacroTotals, MealPlan

DEFAULT_CALORIE_TOLERANCE = 0.15

_logger = logging.getLogger(__name__)


def assemble(
    validated_days: Sequence[PlanDay],
    target_calories: int,
    day_count: int,
    *,
    plan_name: str = "",
    tolerance: float = DEFAULT_CALORIE_TOLERANCE,
) -> MealPlan:
    """Arrange validated days into a schedule ordered by day number.

    Raises ``IncompleteSchedule`` unless every day in ``1..day_count``
    appears exactly once. Days whose calorie total is outside the tolerance
    band are flagged on the result rather than rejected.
    """
    if not 1 <= day_count <= MAX_PLAN_DAYS:
        raise ValueError(f"day_count must be between 1 and {MAX_PLAN_DAYS}")
    if target_calories <= 0:
        raise ValueError("target_calories must be positive")

    counts = Counter(day.day_number for day in validated_days)
    expected = range(1, day_count + 1)
    missing = [number for number in expected if counts[number] == 0]
    duplicated = sorted(number for number, seen in counts.items() if seen > 1)
    extra = sorted(number for number in counts if number not in expected)
    if missing or duplicated or extra:
        raise IncompleteSchedule(day_count, missing, duplicated, extra)

    days = tuple(sorted(validated_days, key=lambda day: day.day_number))
    daily_totals = tuple(_day_totals(day) for day in days)
    flags = tuple(
        flag
        for day in days
        if (flag := check_day_calories(day, target_calories, tolerance)) is not None
    )
    for flag in flags:
        _logger.warning(
            "Plan day %s totals %s kcal (%+.0f%% vs target %s)",
            flag.day_number,
            flag.total_calories,
            flag.deviation * 100,
            flag.target_calories,
        )
    return MealPlan(
        plan_name=plan_name,
        day_count=day_count,
        target_calories=target_calories,
        tolerance=tolerance,
        days=days,
        daily_totals=daily_totals,
        calorie_flags=flags,
    )


def check_day_calories(
    day: PlanDay, target_calories: int, tolerance: float
) -> CalorieFlag | None:
    """Return a flag when the day's calories fall outside the band."""
    total = day.total_calories
    deviation = (total - target_calories) / target_calories
    if abs(deviation) <= tolerance:
        return None
    return CalorieFlag(
        day_number=day.day_number,
        total_calories=total,
        target_calories=target_calories,
        deviation=deviation,
    )


def _day_totals(day: PlanDay) -> MacroTotals:
    return MacroTotals(
        calories=float(day.total_calories),
        protein_g=sum(meal.protein_g for meal in day.meals),
        carbs_g=sum(meal.carbs_g for meal in day.meals),
        fat_g=sum(meal.fat_g for meal in day.meals),
    )
