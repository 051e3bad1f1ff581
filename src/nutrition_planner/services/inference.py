"""Inference gateway interface and failure classification."""

from typing import Protocol

from nutrition_planner.domain.errors import (
    GatewayError,
    InvalidRequest,
    QuotaExceeded,
    RateLimited,
    ServiceUnavailable,
    Unauthenticated,
)
from nutrition_planner.domain.prompts import ImageAttachment, PromptDocument

_HTTP_TOO_MANY_REQUESTS = 429
_HTTP_SERVER_ERROR = 500


class InferenceGateway(Protocol):
    """Single-call interface to the generative inference service."""

    async def invoke(
        self,
        prompt: PromptDocument,
        image: ImageAttachment | None = None,
        *,
        timeout_seconds: float,
    ) -> str:
        """Return the raw response text or raise a ``GatewayError``."""


def classify_status(status_code: int, message: str) -> GatewayError:
    """Map an HTTP-style status code from the service to a gateway error."""
    text = f"{status_code}: {message}"
    if status_code in {401, 403}:
        return Unauthenticated(text)
    if status_code == _HTTP_TOO_MANY_REQUESTS:
        if "quota" in message.lower():
            return QuotaExceeded(text)
        return RateLimited(text)
    if status_code in {408, 409} or status_code >= _HTTP_SERVER_ERROR:
        return ServiceUnavailable(text)
    return InvalidRequest(text)
