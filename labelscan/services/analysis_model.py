"""Multimodal AI backends that turn a batch of images into raw JSON text."""

import json
from typing import Any, Protocol

import anthropic
from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from pydantic import BaseModel, Field

from labelscan.config import Settings
from labelscan.exceptions import AnalysisModelError
from labelscan.logger import get_logger
from labelscan.models.scan import ImagePart

logger = get_logger(__name__)

RESULTS_TOOL_NAME = "report_scan_results"


class AnalysisRequest(BaseModel):
    """Everything sent to the model for one batch."""

    system_instruction: str
    images: list[ImagePart]
    directive: str = Field(description="Count directive sent after the images")
    response_schema: dict[str, Any]


class AnalysisModel(Protocol):
    """Anything that can answer an AnalysisRequest with raw text."""

    def generate(self, request: AnalysisRequest) -> str:
        ...


class AnthropicAnalysisModel:
    """Claude vision backend. The response schema is enforced through a forced tool call."""

    def __init__(self, settings: Settings):
        if not settings.anthropic_api_key:
            raise ValueError(
                "ANTHROPIC_API_KEY not configured. "
                "Add it to your .env file or set AI_PROVIDER=gemini."
            )
        self.client = anthropic.Anthropic(
            api_key=settings.anthropic_api_key, timeout=settings.request_timeout
        )
        self.model = settings.model
        self.max_tokens = settings.max_tokens
        logger.info(f"AnthropicAnalysisModel initialized with model: {self.model}")

    def _build_content(self, request: AnalysisRequest) -> list[dict]:
        content: list[dict] = [
            {
                "type": "image",
                "source": {
                    "type": "base64",
                    "media_type": image.media_type,
                    "data": image.to_base64(),
                },
            }
            for image in request.images
        ]
        content.append({"type": "text", "text": request.directive})
        return content

    def generate(self, request: AnalysisRequest) -> str:
        logger.info(f"Sending {len(request.images)} images to {self.model}")

        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                system=request.system_instruction,
                tools=[
                    {
                        "name": RESULTS_TOOL_NAME,
                        "description": "Report the analysis of every image, one result per image in order",
                        "input_schema": request.response_schema,
                    }
                ],
                tool_choice={"type": "tool", "name": RESULTS_TOOL_NAME},
                messages=[{"role": "user", "content": self._build_content(request)}],
            )
        except anthropic.APIError as e:
            raise AnalysisModelError(f"Claude request failed: {e}") from e

        logger.debug(f"Claude response received, usage: {response.usage}")

        for block in response.content:
            if block.type == "tool_use" and block.name == RESULTS_TOOL_NAME:
                return json.dumps(block.input)

        logger.warning("No tool use found in Claude response, falling back to text blocks")
        return "".join(block.text for block in response.content if block.type == "text")


class GeminiAnalysisModel:
    """Gemini vision backend using JSON mode with a response schema."""

    def __init__(self, settings: Settings):
        if not settings.gemini_api_key:
            raise ValueError(
                "GEMINI_API_KEY not configured. "
                "Add it to your .env file or set AI_PROVIDER=anthropic."
            )
        self.client = genai.Client(
            api_key=settings.gemini_api_key,
            http_options=types.HttpOptions(timeout=int(settings.request_timeout * 1000)),
        )
        self.model = settings.gemini_model
        self.max_tokens = settings.max_tokens
        logger.info(f"GeminiAnalysisModel initialized with model: {self.model}")

    def generate(self, request: AnalysisRequest) -> str:
        logger.info(f"Sending {len(request.images)} images to {self.model}")

        contents: list[Any] = [
            types.Part.from_bytes(data=image.data, mime_type=image.media_type)
            for image in request.images
        ]
        contents.append(request.directive)

        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=contents,
                config=types.GenerateContentConfig(
                    system_instruction=request.system_instruction,
                    response_mime_type="application/json",
                    response_json_schema=request.response_schema,
                    max_output_tokens=self.max_tokens,
                ),
            )
        except genai_errors.APIError as e:
            raise AnalysisModelError(f"Gemini request failed: {e}") from e

        if not response.candidates:
            raise AnalysisModelError("Gemini returned no candidates")
        if response.candidates[0].finish_reason == types.FinishReason.SAFETY:
            raise AnalysisModelError("The images were flagged by Gemini safety filters")

        return response.text or ""


def build_analysis_model(settings: Settings) -> AnalysisModel:
    """Create the backend selected by settings.ai_provider."""
    if settings.ai_provider == "anthropic":
        return AnthropicAnalysisModel(settings)
    if settings.ai_provider == "gemini":
        return GeminiAnalysisModel(settings)
    raise ValueError(f"Unknown AI provider: {settings.ai_provider}")
