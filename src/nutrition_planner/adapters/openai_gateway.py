"""OpenAI Responses API inference gateway."""

import asyncio
import base64
from dataclasses import dataclass

import openai
from openai import AsyncOpenAI

from nutrition_planner.domain.errors import (
    GatewayError,
    InvalidRequest,
    QuotaExceeded,
    RateLimited,
    ServiceUnavailable,
    Unauthenticated,
)
from nutrition_planner.domain.prompts import ImageAttachment, PromptDocument
from nutrition_planner.services.inference import InferenceGateway, classify_status


@dataclass
class OpenAIInferenceGateway(InferenceGateway):
    """Gateway backed by the OpenAI Responses API."""

    client: AsyncOpenAI
    model: str
    reasoning_effort: str | None = None
    store: bool = False

    @classmethod
    def create(
        cls,
        api_key: str,
        model: str,
        reasoning_effort: str | None = None,
        store: bool = False,
    ) -> "OpenAIInferenceGateway":
        """Create a gateway; SDK retries are disabled so each invoke is one call."""
        return cls(
            client=AsyncOpenAI(api_key=api_key, max_retries=0),
            model=model,
            reasoning_effort=reasoning_effort,
            store=store,
        )

    async def invoke(
        self,
        prompt: PromptDocument,
        image: ImageAttachment | None = None,
        *,
        timeout_seconds: float,
    ) -> str:
        """Send the prompt (and image) and return the output text."""
        content: list[dict[str, object]] = [
            {"type": "input_text", "text": prompt.text}
        ]
        if image is not None:
            content.append(
                {"type": "input_image", "image_url": _to_data_url(image)}
            )
        request_payload: dict[str, object] = {
            "model": self.model,
            "input": [{"role": "user", "content": content}],
            "store": self.store,
            "timeout": timeout_seconds,
        }
        if self.reasoning_effort:
            request_payload["reasoning"] = {"effort": self.reasoning_effort}

        try:
            response = await asyncio.wait_for(
                self.client.responses.create(**request_payload), timeout_seconds
            )
        except TimeoutError as exc:
            raise ServiceUnavailable(
                f"Inference timed out after {timeout_seconds}s"
            ) from exc
        except openai.OpenAIError as exc:
            raise _classify(exc) from exc
        return response.output_text or ""

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()


def _to_data_url(image: ImageAttachment) -> str:
    """Encode attachment bytes as a base64 data URL for image input."""
    encoded = base64.b64encode(image.data).decode("utf-8")
    return f"data:{image.media_type};base64,{encoded}"


def _classify(exc: openai.OpenAIError) -> GatewayError:  # noqa: PLR0911
    """Map an OpenAI SDK exception to a gateway error."""
    if isinstance(exc, openai.APITimeoutError | openai.APIConnectionError):
        return ServiceUnavailable(str(exc))
    if isinstance(exc, openai.AuthenticationError | openai.PermissionDeniedError):
        return Unauthenticated(str(exc))
    if isinstance(exc, openai.RateLimitError):
        if getattr(exc, "code", None) == "insufficient_quota":
            return QuotaExceeded(str(exc))
        return RateLimited(str(exc))
    if isinstance(exc, openai.InternalServerError):
        return ServiceUnavailable(str(exc))
    if isinstance(exc, openai.APIStatusError):
        return classify_status(exc.status_code, exc.message)
    if isinstance(exc, openai.APIResponseValidationError):
        return ServiceUnavailable(str(exc))
    return InvalidRequest(str(exc))
