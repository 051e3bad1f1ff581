"""Google Gemini inference gateway."""

import asyncio
from dataclasses import dataclass

import httpx
from google import genai
from google.genai import errors, types

from nutrition_planner.domain.errors import ServiceUnavailable
from nutrition_planner.domain.prompts import ImageAttachment, PromptDocument
from nutrition_planner.services.inference import InferenceGateway, classify_status


@dataclass
class GeminiInferenceGateway(InferenceGateway):
    """Gateway backed by the google-genai async client."""

    client: genai.Client
    model: str

    @classmethod
    def create(cls, api_key: str, model: str) -> "GeminiInferenceGateway":
        """Create a Gemini gateway for ``model``."""
        return cls(client=genai.Client(api_key=api_key), model=model)

    async def invoke(
        self,
        prompt: PromptDocument,
        image: ImageAttachment | None = None,
        *,
        timeout_seconds: float,
    ) -> str:
        """Send the prompt with an optional inline image part."""
        contents: list[object] = [prompt.text]
        if image is not None:
            contents.append(
                types.Part.from_bytes(data=image.data, mime_type=image.media_type)
            )
        try:
            response = await asyncio.wait_for(
                self.client.aio.models.generate_content(
                    model=self.model, contents=contents
                ),
                timeout_seconds,
            )
        except TimeoutError as exc:
            raise ServiceUnavailable(
                f"Inference timed out after {timeout_seconds}s"
            ) from exc
        except errors.APIError as exc:
            message = exc.message or exc.status or str(exc)
            raise classify_status(exc.code, message) from exc
        except httpx.TransportError as exc:
            raise ServiceUnavailable(f"Inference transport failed: {exc}") from exc
        return response.text or ""
