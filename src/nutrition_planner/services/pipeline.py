"""Pipeline orchestrator for analyze-image, generate-plan and suggest-recipes."""

import asyncio
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import TypeVar

from nutrition_planner.domain.errors import (
    AssemblyError,
    ExtractionError,
    GatewayError,
    PayloadValidationError,
    PipelineError,
    PipelineStage,
)
from nutrition_planner.domain.payloads import (
    MAX_PLAN_DAYS,
    NutritionEstimate,
    PlanDraft,
    RecipeSet,
    RecipeSuggestion,
)
from nutrition_planner.domain.plans import MealPlan
from nutrition_planner.domain.profile import ProfileDescriptor, RecipePreferences
from nutrition_planner.domain.prompts import (
    ImageAttachment,
    PromptDocument,
    PromptIntent,
)
from nutrition_planner.services.extraction import extract
from nutrition_planner.services.inference import InferenceGateway
from nutrition_planner.services.planning import DEFAULT_CALORIE_TOLERANCE, assemble
from nutrition_planner.services.prompts import (
    ImageAnalysisInputs,
    PlanInputs,
    RecipeInputs,
    build_prompt,
)
from nutrition_planner.services.validation import PayloadKind, validate

_logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Bounds for re-issuing a prompt after a failed attempt."""

    max_transient_retries: int = 2
    max_content_retries: int = 1
    backoff_seconds: float = 0.5
    backoff_multiplier: float = 2.0

    def delay(self, retry_number: int) -> float:
        return self.backoff_seconds * self.backoff_multiplier ** (retry_number - 1)


@dataclass(frozen=True)
class StageTimeouts:
    image_seconds: float = 30.0
    plan_seconds: float = 60.0
    recipe_seconds: float = 45.0


@dataclass
class NutritionPipeline:
    """Compose prompt, inference, extraction, validation and assembly.

    Each call is independent; nothing is shared between invocations. If the
    caller cancels while the gateway call is pending, cancellation propagates
    and no result is produced.
    """

    gateway: InferenceGateway
    retry_policy: RetryPolicy = field(default_factory=RetryPolicy)
    timeouts: StageTimeouts = field(default_factory=StageTimeouts)
    calorie_tolerance: float = DEFAULT_CALORIE_TOLERANCE
    debug: bool = False

    async def analyze_image(
        self, image_bytes: bytes, media_type: str
    ) -> NutritionEstimate:
        """Estimate nutrition for a meal photo."""
        if not image_bytes:
            raise PipelineError(PipelineStage.REQUEST, "Image data is required")
        if not media_type.startswith("image/"):
            raise PipelineError(
                PipelineStage.REQUEST, f"Unsupported media type {media_type!r}"
            )
        prompt = build_prompt(
            PromptIntent.ANALYZE_IMAGE, ImageAnalysisInputs(media_type=media_type)
        )
        estimate = await self._run(
            prompt,
            lambda candidate: validate(candidate, PayloadKind.NUTRITION_ESTIMATE),
            image=ImageAttachment(data=image_bytes, media_type=media_type),
            timeout_seconds=self.timeouts.image_seconds,
        )
        if self.debug:
            _logger.info(
                "Analyzed image: name=%s calories=%s confidence=%s",
                estimate.name,
                estimate.calories,
                estimate.confidence,
            )
        return estimate

    async def generate_plan(
        self, profile: ProfileDescriptor, day_count: int
    ) -> MealPlan:
        """Generate and assemble a ``day_count``-day meal plan."""
        if not 1 <= day_count <= MAX_PLAN_DAYS:
            raise PipelineError(
                PipelineStage.REQUEST,
                f"day_count must be between 1 and {MAX_PLAN_DAYS}, got {day_count}",
            )
        prompt = build_prompt(
            PromptIntent.GENERATE_PLAN,
            PlanInputs(
                profile=profile,
                day_count=day_count,
                tolerance=self.calorie_tolerance,
            ),
        )
        draft: PlanDraft = await self._run(
            prompt,
            lambda candidate: validate(
                candidate, PayloadKind.MEAL_PLAN, day_count=day_count
            ),
            timeout_seconds=self.timeouts.plan_seconds,
        )
        try:
            plan = assemble(
                draft.days,
                profile.daily_calorie_target,
                day_count,
                plan_name=draft.plan_name,
                tolerance=self.calorie_tolerance,
            )
        except AssemblyError as exc:
            raise PipelineError(PipelineStage.ASSEMBLY, str(exc)) from exc
        if self.debug:
            _logger.info(
                "Generated plan: days=%s flagged=%s",
                plan.day_count,
                plan.flagged_day_numbers,
            )
        return plan

    async def suggest_recipes(
        self,
        ingredients: Sequence[str],
        preferences: RecipePreferences | None = None,
    ) -> list[RecipeSuggestion]:
        """Suggest recipes built around ``ingredients``."""
        cleaned = tuple(item.strip() for item in ingredients if item.strip())
        if not cleaned:
            raise PipelineError(PipelineStage.REQUEST, "Ingredients are required")
        prompt = build_prompt(
            PromptIntent.SUGGEST_RECIPES,
            RecipeInputs(
                ingredients=cleaned,
                preferences=preferences or RecipePreferences(),
            ),
        )
        recipe_set: RecipeSet = await self._run(
            prompt,
            lambda candidate: validate(candidate, PayloadKind.RECIPE_SET),
            timeout_seconds=self.timeouts.recipe_seconds,
        )
        return list(recipe_set.recipes)

    async def _run(
        self,
        prompt: PromptDocument,
        parse: Callable[[object], T],
        *,
        image: ImageAttachment | None = None,
        timeout_seconds: float,
    ) -> T:
        """Invoke the gateway and parse its output, retrying per policy.

        Quota, rate-limit and availability failures are retried with backoff.
        Extraction and validation failures re-issue the same prompt. Everything
        else surfaces immediately.
        """
        attempts = 0
        transient_retries = 0
        content_retries = 0
        while True:
            attempts += 1
            try:
                raw_text = await self.gateway.invoke(
                    prompt, image, timeout_seconds=timeout_seconds
                )
            except GatewayError as exc:
                name = type(exc).__name__
                if (
                    not exc.retryable
                    or transient_retries >= self.retry_policy.max_transient_retries
                ):
                    raise PipelineError(
                        PipelineStage.INFERENCE, f"{name}: {exc}", attempts
                    ) from exc
                transient_retries += 1
                delay = self.retry_policy.delay(transient_retries)
                _logger.warning(
                    "Inference %s failed (attempt %s, %s); retrying in %.1fs",
                    prompt.intent,
                    attempts,
                    name,
                    delay,
                )
                await asyncio.sleep(delay)
                continue

            try:
                return parse(extract(raw_text))
            except (ExtractionError, PayloadValidationError) as exc:
                stage = (
                    PipelineStage.EXTRACTION
                    if isinstance(exc, ExtractionError)
                    else PipelineStage.VALIDATION
                )
                if content_retries >= self.retry_policy.max_content_retries:
                    raise PipelineError(
                        stage, f"{type(exc).__name__}: {exc}", attempts
                    ) from exc
                content_retries += 1
                _logger.warning(
                    "Inference %s returned unusable output (attempt %s, %s: %s); "
                    "re-issuing prompt",
                    prompt.intent,
                    attempts,
                    stage,
                    exc,
                )
