"""Application configuration."""

import os
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    api_token: str
    inference_provider: Literal["openai", "gemini"] = "openai"
    openai_api_key: str | None = None
    openai_model: str = "gpt-5.2"
    openai_reasoning_effort: str | None = "medium"
    openai_store: bool = False
    gemini_api_key: str | None = None
    gemini_model: str = "gemini-2.5-flash"
    image_timeout_seconds: float = 30.0
    plan_timeout_seconds: float = 60.0
    recipe_timeout_seconds: float = 45.0
    max_transient_retries: int = 2
    max_content_retries: int = 1
    retry_backoff_seconds: float = 0.5
    calorie_tolerance: float = 0.15
    default_plan_days: int = 7
    default_calorie_target: int = 2000
    debug: bool = False
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_tags(raw: str | list[str] | None) -> frozenset[str]:
    """Normalize dietary tags from a comma-separated string or list."""
    if raw is None:
        return frozenset()
    chunks = raw.split(",") if isinstance(raw, str) else raw
    tags: set[str] = set()
    for chunk in chunks:
        value = chunk.strip().lower()
        if value:
            tags.add(value)
    return frozenset(tags)
