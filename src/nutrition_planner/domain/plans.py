"""Assembled meal plan models."""

from dataclasses import dataclass

from nutrition_planner.domain.payloads import PlanDay


@dataclass(frozen=True)
class MacroTotals:
    """Aggregate macronutrients for a day or plan."""

    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float


@dataclass(frozen=True)
class CalorieFlag:
    """A day whose calorie total falls outside the tolerance band."""

    day_number: int
    total_calories: int
    target_calories: int
    deviation: float

    @property
    def direction(self) -> str:
        return "over" if self.deviation > 0 else "under"


@dataclass(frozen=True)
class MealPlan:
    """Day-indexed schedule built from a validated plan draft."""

    plan_name: str
    day_count: int
    target_calories: int
    tolerance: float
    days: tuple[PlanDay, ...]
    daily_totals: tuple[MacroTotals, ...]
    calorie_flags: tuple[CalorieFlag, ...]

    @property
    def average_daily(self) -> MacroTotals:
        count = len(self.daily_totals)
        return MacroTotals(
            calories=sum(t.calories for t in self.daily_totals) / count,
            protein_g=sum(t.protein_g for t in self.daily_totals) / count,
            carbs_g=sum(t.carbs_g for t in self.daily_totals) / count,
            fat_g=sum(t.fat_g for t in self.daily_totals) / count,
        )

    @property
    def flagged_day_numbers(self) -> list[int]:
        return [flag.day_number for flag in self.calorie_flags]
