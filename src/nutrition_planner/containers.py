"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from nutrition_planner.adapters.gemini_gateway import GeminiInferenceGateway
from nutrition_planner.adapters.openai_gateway import OpenAIInferenceGateway
from nutrition_planner.config import Settings
from nutrition_planner.services.inference import InferenceGateway
from nutrition_planner.services.pipeline import (
    NutritionPipeline,
    RetryPolicy,
    StageTimeouts,
)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    gateway: InferenceGateway
    pipeline: NutritionPipeline
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    gateway, close_resources = _build_gateway(resolved_settings)
    pipeline = build_pipeline(resolved_settings, gateway)
    return AppContainer(
        settings=resolved_settings,
        gateway=gateway,
        pipeline=pipeline,
        close_resources=close_resources,
    )


def build_pipeline(settings: Settings, gateway: InferenceGateway) -> NutritionPipeline:
    """Create the orchestrator with policy values taken from settings."""
    return NutritionPipeline(
        gateway=gateway,
        retry_policy=RetryPolicy(
            max_transient_retries=settings.max_transient_retries,
            max_content_retries=settings.max_content_retries,
            backoff_seconds=settings.retry_backoff_seconds,
        ),
        timeouts=StageTimeouts(
            image_seconds=settings.image_timeout_seconds,
            plan_seconds=settings.plan_timeout_seconds,
            recipe_seconds=settings.recipe_timeout_seconds,
        ),
        calorie_tolerance=settings.calorie_tolerance,
        debug=settings.debug,
    )


def _build_gateway(
    settings: Settings,
) -> tuple[InferenceGateway, Callable[[], Awaitable[None]]]:
    if settings.inference_provider == "gemini":
        if not settings.gemini_api_key:
            raise ValueError("GEMINI_API_KEY is required for the gemini provider")
        gemini = GeminiInferenceGateway.create(
            api_key=settings.gemini_api_key, model=settings.gemini_model
        )

        async def close_gemini() -> None:
            return None

        return gemini, close_gemini

    if not settings.openai_api_key:
        raise ValueError("OPENAI_API_KEY is required for the openai provider")
    openai_gateway = OpenAIInferenceGateway.create(
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        reasoning_effort=settings.openai_reasoning_effort,
        store=settings.openai_store,
    )
    return openai_gateway, openai_gateway.close
