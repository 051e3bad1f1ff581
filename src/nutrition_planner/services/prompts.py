"""Deterministic prompt construction for each pipeline intent."""

import json
from dataclasses import dataclass, field

from pydantic import BaseModel

from nutrition_planner.domain.payloads import (
    MAX_RECIPES,
    NutritionEstimate,
    PlanDraft,
    RecipeSet,
)
from nutrition_planner.domain.profile import (
    ActivityLevel,
    ProfileDescriptor,
    RecipePreferences,
)
from nutrition_planner.domain.prompts import PromptDocument, PromptIntent

EXAMPLE_NUTRITION_ESTIMATE: dict[str, object] = {
    "name": "Grilled chicken salad",
    "calories": 420,
    "protein_g": 35,
    "carbs_g": 18,
    "fat_g": 22,
    "fiber_g": 6,
    "confidence": "medium",
    "ingredients": ["chicken breast", "romaine lettuce", "olive oil"],
    "suggestion": "Use a lighter dressing to cut fat.",
}

EXAMPLE_MEAL_PLAN: dict[str, object] = {
    "plan_name": "Balanced starter week",
    "days": [
        {
            "day_number": 1,
            "meals": [
                {
                    "meal_type": "breakfast",
                    "meal_name": "Oatmeal with berries",
                    "calories": 350,
                    "protein_g": 12,
                    "carbs_g": 60,
                    "fat_g": 8,
                    "ingredients": ["1 cup oats", "1 cup berries", "1 tbsp honey"],
                    "instructions": "Cook oats, top with berries and honey.",
                },
                {
                    "meal_type": "lunch",
                    "meal_name": "Turkey wrap",
                    "calories": 550,
                    "protein_g": 35,
                    "carbs_g": 55,
                    "fat_g": 18,
                    "ingredients": ["1 tortilla", "100 g turkey", "lettuce"],
                    "instructions": "Fill the tortilla and roll.",
                },
                {
                    "meal_type": "dinner",
                    "meal_name": "Salmon with rice",
                    "calories": 700,
                    "protein_g": 42,
                    "carbs_g": 70,
                    "fat_g": 24,
                    "ingredients": ["150 g salmon", "1 cup rice", "broccoli"],
                    "instructions": "Bake salmon at 200C for 15 minutes.",
                },
                {
                    "meal_type": "snack",
                    "meal_name": "Greek yogurt",
                    "calories": 200,
                    "protein_g": 18,
                    "carbs_g": 15,
                    "fat_g": 6,
                    "ingredients": ["170 g greek yogurt"],
                    "instructions": "Serve chilled.",
                },
            ],
        }
    ],
}

EXAMPLE_RECIPE_SET: dict[str, object] = {
    "recipes": [
        {
            "name": "Vegetable stir fry",
            "description": "Quick high-fiber stir fry.",
            "prep_time_minutes": 15,
            "cook_time_minutes": 10,
            "servings": 2,
            "calories_per_serving": 380,
            "protein_g": 14,
            "carbs_g": 48,
            "fat_g": 12,
            "ingredients": ["200 g tofu", "1 bell pepper", "1 tbsp soy sauce"],
            "instructions": ["Slice vegetables.", "Stir fry everything for 8 min."],
            "tips": "Press the tofu first for a crispier texture.",
        }
    ]
}

_OUTPUT_RULES = (
    "Output rules:\n"
    "- Respond ONLY with one JSON object matching the schema above.\n"
    "- NO markdown, NO code blocks, NO text before or after the object.\n"
    "- Use plain numbers for numeric fields; never negative values.\n"
    "- Use only the enum values listed in the schema."
)


@dataclass(frozen=True)
class ImageAnalysisInputs:
    """Inputs for analyzing a meal photo; the bytes travel separately."""

    media_type: str


@dataclass(frozen=True)
class PlanInputs:
    profile: ProfileDescriptor
    day_count: int
    tolerance: float = 0.15


@dataclass(frozen=True)
class RecipeInputs:
    ingredients: tuple[str, ...]
    preferences: RecipePreferences = field(default_factory=RecipePreferences)
    recipe_count: int = 3


def build_prompt(
    intent: PromptIntent,
    inputs: ImageAnalysisInputs | PlanInputs | RecipeInputs,
) -> PromptDocument:
    """Build the prompt document for ``intent``."""
    if intent is PromptIntent.ANALYZE_IMAGE and isinstance(
        inputs, ImageAnalysisInputs
    ):
        text = _analyze_image_text(inputs)
    elif intent is PromptIntent.GENERATE_PLAN and isinstance(inputs, PlanInputs):
        text = _generate_plan_text(inputs)
    elif intent is PromptIntent.SUGGEST_RECIPES and isinstance(inputs, RecipeInputs):
        text = _suggest_recipes_text(inputs)
    else:
        raise TypeError(f"{type(inputs).__name__} is not valid input for {intent}")
    return PromptDocument(intent=intent, text=text)


def _contract(model: type[BaseModel], example: dict[str, object]) -> str:
    schema = json.dumps(model.model_json_schema(), indent=2, sort_keys=True)
    sample = json.dumps(example, indent=2)
    return (
        f"Output JSON schema:\n{schema}\n\n"
        f"Minimal valid example:\n{sample}\n\n"
        f"{_OUTPUT_RULES}"
    )


def _analyze_image_text(inputs: ImageAnalysisInputs) -> str:
    return (
        "You are a nutrition expert. Analyze the attached food image "
        f"({inputs.media_type}) and estimate its nutritional content.\n\n"
        "Rules:\n"
        "- Base estimates on visible portion sizes.\n"
        '- If you are unsure, use "medium" or "low" confidence.\n'
        "- Provide realistic values; calories are whole kcal for the full "
        "portion.\n"
        "- List at least one main ingredient you can identify.\n"
        "- Put brief health tips or alternatives in suggestion.\n\n"
        f"{_contract(NutritionEstimate, EXAMPLE_NUTRITION_ESTIMATE)}"
    )


def _generate_plan_text(inputs: PlanInputs) -> str:
    profile = inputs.profile
    target = profile.daily_calorie_target
    low = round(target * (1 - inputs.tolerance))
    high = round(target * (1 + inputs.tolerance))
    restrictions = ", ".join(sorted(profile.dietary_restrictions)) or "none"
    return (
        f"Create a {inputs.day_count}-day personalized meal plan for:\n"
        f"- Age: {profile.age}, Gender: {profile.gender}\n"
        f"- Current weight: {profile.weight_kg}kg, Height: {profile.height_cm}cm\n"
        f"- Activity level: {profile.activity_level} "
        f"({profile.activity_level.rank + 1} of {len(ActivityLevel)})\n"
        f"- Goal: {profile.goal}\n"
        f"- Daily calorie target: {target} calories\n"
        f"- Dietary restrictions: {restrictions}\n\n"
        "Requirements:\n"
        f"- Return exactly {inputs.day_count} days with day_number 1 to "
        f"{inputs.day_count}, each used once.\n"
        "- Each day has exactly one breakfast, one lunch, one dinner and one "
        "or two snacks.\n"
        f"- Each day's total calories must stay between {low} and {high} "
        f"(within {inputs.tolerance:.0%} of {target}).\n"
        "- Include variety across days and balanced macronutrients.\n"
        "- Provide realistic, achievable meals with cooking instructions.\n\n"
        f"{_contract(PlanDraft, EXAMPLE_MEAL_PLAN)}"
    )


def _suggest_recipes_text(inputs: RecipeInputs) -> str:
    preferences = inputs.preferences
    count = min(inputs.recipe_count, MAX_RECIPES)
    lines = [
        f"Suggest {count} healthy recipes using these ingredients: "
        f"{', '.join(inputs.ingredients)}",
        "",
    ]
    if preferences.cuisine:
        lines.append(f"Cuisine preference: {preferences.cuisine}")
    if preferences.dietary_restrictions:
        restrictions = ", ".join(sorted(preferences.dietary_restrictions))
        lines.append(f"Dietary restrictions: {restrictions}")
    if preferences.max_calories:
        lines.append(f"Max calories per serving: {preferences.max_calories}")
    if preferences.max_cooking_time_minutes:
        lines.append(
            f"Max cooking time: {preferences.max_cooking_time_minutes} minutes"
        )
    lines.extend(
        [
            "",
            "List each ingredient with its quantity and each instruction as a "
            "separate step.",
            "",
            _contract(RecipeSet, EXAMPLE_RECIPE_SET),
        ]
    )
    return "\n".join(lines)
