"""Prompt documents and attachments sent to the inference service."""

from dataclasses import dataclass
from enum import StrEnum


class PromptIntent(StrEnum):
    ANALYZE_IMAGE = "analyze_image"
    GENERATE_PLAN = "generate_plan"
    SUGGEST_RECIPES = "suggest_recipes"


@dataclass(frozen=True)
class PromptDocument:
    """Text instruction for a single inference call."""

    intent: PromptIntent
    text: str


@dataclass(frozen=True)
class ImageAttachment:
    """Raw image bytes with their declared media type."""

    data: bytes
    media_type: str
