"""FastAPI application factory."""

import base64
import binascii
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict

from fastapi import Depends, FastAPI, Header, HTTPException, Request, status

from nutrition_planner.api.request_models import (
    AnalyzeFoodRequest,
    GenerateMealPlanRequest,
    RecipeSuggestionsRequest,
)
from nutrition_planner.app_logging import configure_logging
from nutrition_planner.config import parse_tags
from nutrition_planner.containers import AppContainer
from nutrition_planner.domain.errors import (
    InvalidRequest,
    PipelineError,
    PipelineStage,
    QuotaExceeded,
    RateLimited,
    ServiceUnavailable,
)
from nutrition_planner.domain.plans import MealPlan
from nutrition_planner.domain.profile import ProfileDescriptor, RecipePreferences


def _get_api_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.api_token


async def require_api_token(
    x_api_token: str | None = Header(default=None),
    api_token: str = Depends(_get_api_token),
) -> None:
    """Ensure requests include a valid API token."""
    if not x_api_token or x_api_token != api_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(logging.DEBUG if container.settings.debug else logging.INFO)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/analyze-food", dependencies=[Depends(require_api_token)])
    async def analyze_food(
        body: AnalyzeFoodRequest, request: Request
    ) -> dict[str, object]:
        """Estimate nutrition for a base64-encoded meal photo."""
        state_container: AppContainer = request.app.state.container
        image_bytes = _decode_image(body.image)
        try:
            estimate = await state_container.pipeline.analyze_image(
                image_bytes, body.mime_type
            )
        except PipelineError as exc:
            logger.warning("Food analysis failed: %s", exc)
            raise _http_error(exc) from exc
        return estimate.model_dump()

    @app.post("/generate-meal-plan", dependencies=[Depends(require_api_token)])
    async def generate_meal_plan(
        body: GenerateMealPlanRequest, request: Request
    ) -> dict[str, object]:
        """Generate a multi-day plan for the supplied profile."""
        state_container: AppContainer = request.app.state.container
        settings = state_container.settings
        profile = ProfileDescriptor(
            age=body.age,
            gender=body.gender,
            weight_kg=body.weight_kg,
            height_cm=body.height_cm,
            activity_level=body.activity_level,
            goal=body.goal,
            daily_calorie_target=(
                body.daily_calorie_target or settings.default_calorie_target
            ),
            dietary_restrictions=parse_tags(body.dietary_restrictions),
        )
        try:
            plan = await state_container.pipeline.generate_plan(
                profile, body.days or settings.default_plan_days
            )
        except PipelineError as exc:
            logger.warning("Meal plan generation failed: %s", exc)
            raise _http_error(exc) from exc
        return _serialize_plan(plan)

    @app.post("/recipe-suggestions", dependencies=[Depends(require_api_token)])
    async def recipe_suggestions(
        body: RecipeSuggestionsRequest, request: Request
    ) -> dict[str, object]:
        """Suggest recipes for the ingredients on hand."""
        state_container: AppContainer = request.app.state.container
        preferences = None
        if body.preferences is not None:
            preferences = RecipePreferences(
                cuisine=body.preferences.cuisine,
                dietary_restrictions=parse_tags(
                    body.preferences.dietary_restrictions
                ),
                max_calories=body.preferences.max_calories,
                max_cooking_time_minutes=body.preferences.cooking_time,
            )
        try:
            recipes = await state_container.pipeline.suggest_recipes(
                body.ingredients, preferences
            )
        except PipelineError as exc:
            logger.warning("Recipe suggestions failed: %s", exc)
            raise _http_error(exc) from exc
        return {"recipes": [recipe.model_dump() for recipe in recipes]}

    return app


def _decode_image(data: str) -> bytes:
    """Decode base64 image data, accepting an optional data URL prefix."""
    if data.startswith("data:") and "," in data:
        data = data.split(",", 1)[1]
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Image must be base64 encoded",
        ) from exc


def _http_error(exc: PipelineError) -> HTTPException:
    """Map a pipeline failure to an HTTP error response."""
    cause = exc.__cause__
    if exc.stage is PipelineStage.REQUEST or isinstance(cause, InvalidRequest):
        status_code = status.HTTP_400_BAD_REQUEST
    elif isinstance(cause, RateLimited | QuotaExceeded):
        status_code = status.HTTP_429_TOO_MANY_REQUESTS
    elif isinstance(cause, ServiceUnavailable):
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    else:
        status_code = status.HTTP_502_BAD_GATEWAY
    return HTTPException(
        status_code=status_code,
        detail={"stage": str(exc.stage), "error": exc.cause},
    )


def _serialize_plan(plan: MealPlan) -> dict[str, object]:
    return {
        "plan_name": plan.plan_name,
        "day_count": plan.day_count,
        "target_calories": plan.target_calories,
        "days": [
            {**day.model_dump(), "totals": asdict(totals)}
            for day, totals in zip(plan.days, plan.daily_totals, strict=True)
        ],
        "average_daily": asdict(plan.average_daily),
        "calorie_flags": [
            {**asdict(flag), "direction": flag.direction}
            for flag in plan.calorie_flags
        ],
    }
