"""Shared test fixtures."""

import json
from dataclasses import dataclass, field

import pytest

from nutrition_planner.config import Settings
from nutrition_planner.containers import AppContainer, build_pipeline
from nutrition_planner.domain.profile import ProfileDescriptor
from nutrition_planner.domain.prompts import ImageAttachment, PromptDocument
from nutrition_planner.services.inference import InferenceGateway
from nutrition_planner.services.pipeline import NutritionPipeline, RetryPolicy


@dataclass
class ScriptedGateway(InferenceGateway):
    """Fake gateway replaying a script of texts or errors, one per call."""

    script: list[str | Exception] = field(default_factory=list)
    calls: list[tuple[PromptDocument, ImageAttachment | None, float]] = field(
        default_factory=list
    )

    async def invoke(
        self,
        prompt: PromptDocument,
        image: ImageAttachment | None = None,
        *,
        timeout_seconds: float,
    ) -> str:
        self.calls.append((prompt, image, timeout_seconds))
        outcome = self.script.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def estimate_payload(**overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "name": "Chicken rice bowl",
        "calories": 640,
        "protein_g": 42.5,
        "carbs_g": 71,
        "fat_g": 14.25,
        "fiber_g": 5,
        "confidence": "high",
        "ingredients": ["chicken thigh", "white rice", "broccoli"],
        "suggestion": "Swap half the rice for greens.",
    }
    payload.update(overrides)
    return payload


def meal(meal_type: str, calories: int, name: str | None = None) -> dict[str, object]:
    return {
        "meal_type": meal_type,
        "meal_name": name or f"{meal_type} plate",
        "calories": calories,
        "protein_g": 20,
        "carbs_g": 40,
        "fat_g": 10,
        "ingredients": ["1 serving"],
        "instructions": "Cook and serve.",
    }


def day_payload(day_number: int, total_calories: int = 2000) -> dict[str, object]:
    snack = 200
    remaining = total_calories - snack
    return {
        "day_number": day_number,
        "meals": [
            meal("breakfast", remaining // 4),
            meal("lunch", remaining // 4),
            meal("dinner", remaining - 2 * (remaining // 4)),
            meal("snack", snack),
        ],
    }


def plan_payload(day_numbers: list[int], total_calories: int = 2000) -> dict:
    return {
        "plan_name": "Lean week",
        "days": [day_payload(number, total_calories) for number in day_numbers],
    }


def recipe_payload(**overrides: object) -> dict[str, object]:
    recipe: dict[str, object] = {
        "name": "Chickpea curry",
        "description": "Weeknight curry.",
        "prep_time_minutes": 10,
        "cook_time_minutes": 25,
        "servings": 4,
        "calories_per_serving": 410,
        "protein_g": 15,
        "carbs_g": 52,
        "fat_g": 13,
        "ingredients": ["400 g chickpeas", "1 onion", "200 ml coconut milk"],
        "instructions": ["Fry onion.", "Add chickpeas and coconut milk.", "Simmer."],
        "tips": None,
    }
    recipe.update(overrides)
    return recipe


def as_model_text(payload: dict[str, object]) -> str:
    return f"Here you go:\n```json\n{json.dumps(payload)}\n```\nEnjoy!"


@pytest.fixture
def profile() -> ProfileDescriptor:
    return ProfileDescriptor(
        age=34,
        gender="female",
        weight_kg=68.5,
        height_cm=170,
        activity_level="moderate",
        goal="maintain",
        daily_calorie_target=2000,
        dietary_restrictions=frozenset({"vegetarian", "gluten-free"}),
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        api_token="api-token",
        openai_api_key="openai-key",
        retry_backoff_seconds=0,
    )


@pytest.fixture
def gateway() -> ScriptedGateway:
    return ScriptedGateway()


@pytest.fixture
def pipeline(gateway: ScriptedGateway) -> NutritionPipeline:
    return NutritionPipeline(
        gateway=gateway, retry_policy=RetryPolicy(backoff_seconds=0)
    )


@pytest.fixture
def container(settings: Settings, gateway: ScriptedGateway) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        gateway=gateway,
        pipeline=build_pipeline(settings, gateway),
        close_resources=close_resources,
    )
