"""External AI text services and the stylist client that parses their replies.

Every call returns an :data:`AIResult`. Transport errors, timeouts, non-JSON
replies and schema violations all come back as :class:`AIFailure` so callers
can fall back to the rule-based path without try/except at each call site.
"""

from __future__ import annotations

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Generic, Optional, Sequence, Type, TypeVar, Union

import google.generativeai as genai
import requests
from pydantic import BaseModel

from closet_app.config import EngineConfig
from logic.safety import system_instruction
from logic.validation import (
    OutfitDescription,
    OutfitDescriptionInput,
    StyleAnalysis,
    StyleAnalysisInput,
    summary_payload,
)

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

STYLE_ANALYSIS_FORMAT = """{
  "stylePersonality": "classic|trendy|casual|formal|eclectic|minimalist",
  "dominantThemes": ["theme1", "theme2", "theme3"],
  "colorPalette": ["#color1", "#color2", "#color3"],
  "recommendations": ["recommendation1", "recommendation2", "recommendation3"],
  "confidence": 0.8
}"""

OUTFIT_DESCRIPTION_FORMAT = """{
  "description": "one or two sentences describing the outfit",
  "styleNotes": ["note1", "note2"],
  "occasionFit": "where and when this outfit works",
  "confidence": 0.8
}"""


class AIServiceError(RuntimeError):
    """Raised by a transport when the provider call fails."""


@dataclass(frozen=True)
class AISuccess(Generic[T]):
    payload: T
    confidence: float


@dataclass(frozen=True)
class AIFailure:
    reason: str


AIResult = Union[AISuccess, AIFailure]


class TextGenerationService(ABC):
    """Prompt-in, text-out provider contract."""

    name = "abstract"

    @property
    @abstractmethod
    def available(self) -> bool:
        """Whether the provider is configured well enough to be called."""

    @abstractmethod
    async def generate_text(self, prompt: str) -> str:
        """Return the provider's completion, raising :class:`AIServiceError` on failure."""


class GeminiTextService(TextGenerationService):
    """Google Gemini completions through ``google-generativeai``."""

    name = "gemini"

    def __init__(self, api_key: Optional[str], model: str, timeout_seconds: float = 20.0) -> None:
        self.api_key = api_key
        self.model = model
        self.timeout_seconds = timeout_seconds
        self._model: Any = None

    @property
    def available(self) -> bool:
        return bool(self.api_key)

    def _client(self) -> Any:
        if self._model is None:
            genai.configure(api_key=self.api_key)
            self._model = genai.GenerativeModel(
                model_name=self.model,
                generation_config=genai.types.GenerationConfig(temperature=0.7, max_output_tokens=500),
            )
        return self._model

    async def generate_text(self, prompt: str) -> str:
        if not self.available:
            raise AIServiceError("Gemini API key not configured")
        try:
            response = await asyncio.wait_for(
                asyncio.to_thread(self._client().generate_content, prompt),
                timeout=self.timeout_seconds,
            )
            text = response.text
        except asyncio.TimeoutError as exc:
            raise AIServiceError(f"Gemini call timed out after {self.timeout_seconds}s") from exc
        except Exception as exc:  # noqa: BLE001
            raise AIServiceError(f"Gemini error: {exc}") from exc
        if not text:
            raise AIServiceError("Gemini returned an empty response")
        return text


class HuggingFaceTextService(TextGenerationService):
    """Text generation through the Hugging Face Inference API."""

    name = "huggingface"

    def __init__(
        self,
        token: Optional[str],
        base_url: str,
        model: str,
        timeout_seconds: float = 20.0,
        session: requests.Session | None = None,
    ) -> None:
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()

    @property
    def available(self) -> bool:
        return bool(self.token and self.base_url)

    def _post(self, prompt: str) -> str:
        response = self.session.post(
            f"{self.base_url}/models/{self.model}",
            headers={"Authorization": f"Bearer {self.token}"},
            json={
                "inputs": prompt,
                "parameters": {"max_new_tokens": 500, "temperature": 0.7, "return_full_text": False},
            },
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        data = response.json()
        if isinstance(data, list) and data and isinstance(data[0], dict) and "generated_text" in data[0]:
            return str(data[0]["generated_text"])
        if isinstance(data, dict) and "generated_text" in data:
            return str(data["generated_text"])
        raise AIServiceError(f"Unexpected Hugging Face response shape: {type(data).__name__}")

    async def generate_text(self, prompt: str) -> str:
        if not self.available:
            raise AIServiceError("Hugging Face token not configured")
        try:
            return await asyncio.to_thread(self._post, prompt)
        except AIServiceError:
            raise
        except (requests.RequestException, ValueError) as exc:
            raise AIServiceError(f"Hugging Face error: {exc}") from exc


def build_text_service(config: EngineConfig) -> TextGenerationService | None:
    """Instantiate the configured provider, or None when AI is switched off."""

    if config.ai_provider == "gemini":
        return GeminiTextService(config.google_api_key, config.model, config.ai_timeout_seconds)
    if config.ai_provider == "huggingface":
        return HuggingFaceTextService(
            config.huggingface_token,
            config.huggingface_base_url,
            config.huggingface_model,
            config.ai_timeout_seconds,
        )
    return None


def extract_json_object(text: str) -> Dict[str, Any]:
    """Pull the first JSON object out of a model reply, tolerating Markdown fences."""

    cleaned = text.strip().replace("```json", "").replace("```", "").strip()
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError:
        start, end = cleaned.find("{"), cleaned.rfind("}")
        if start == -1 or end <= start:
            raise ValueError("No JSON object found in AI response")
        data = json.loads(cleaned[start : end + 1])
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    return data


class StyleAIClient:
    """Builds stylist prompts and validates the JSON that comes back."""

    def __init__(self, service: TextGenerationService | None) -> None:
        self.service = service

    @property
    def available(self) -> bool:
        return self.service is not None and self.service.available

    async def analyze_style(self, payload: StyleAnalysisInput) -> AIResult:
        prompt = (
            f"{system_instruction('wardrobe analyst')}\n"
            f"Analyze this wardrobe: {json.dumps(summary_payload(payload))}\n\n"
            f"Provide insights in this exact JSON format:\n{STYLE_ANALYSIS_FORMAT}"
        )
        return await self._request(prompt, StyleAnalysis)

    async def describe_outfit(self, payload: OutfitDescriptionInput) -> AIResult:
        prompt = (
            f"{system_instruction('outfit describer')}\n"
            f"Describe this outfit: {json.dumps(summary_payload(payload))}\n\n"
            f"Respond in this exact JSON format:\n{OUTFIT_DESCRIPTION_FORMAT}"
        )
        return await self._request(prompt, OutfitDescription)

    async def color_advice(self, base_colors: Sequence[str], occasion: str | None = None) -> AIResult:
        """Free-text colour advice; the payload is the raw reply."""

        context = f"for {occasion} occasions" if occasion else "in general"
        prompt = (
            f"{system_instruction('color advisor', json_reply=False)}\n"
            f"Given these base colors: {', '.join(base_colors)}, suggest 3-5 complementary colors "
            f"that would work well {context}. Consider color harmony principles."
        )
        text = await self._generate(prompt)
        if isinstance(text, AIFailure):
            return text
        return AISuccess(payload=text, confidence=1.0)

    async def _generate(self, prompt: str) -> Union[str, AIFailure]:
        if not self.available:
            return AIFailure("AI service not configured")
        try:
            text = await self.service.generate_text(prompt)  # type: ignore[union-attr]
        except Exception as exc:  # noqa: BLE001
            logger.debug("AI provider call failed: %s", exc)
            return AIFailure(f"{type(exc).__name__}: {exc}")
        if not isinstance(text, str):
            return AIFailure(f"Malformed AI payload: expected text, got {type(text).__name__}")
        return text

    async def _request(self, prompt: str, schema: Type[T]) -> AIResult:
        text = await self._generate(prompt)
        if isinstance(text, AIFailure):
            return text
        try:
            parsed = schema.model_validate(extract_json_object(text))
        except ValueError as exc:
            logger.debug("AI payload rejected: %s", exc)
            return AIFailure(f"Malformed AI payload: {exc}")
        return AISuccess(payload=parsed, confidence=float(parsed.confidence))


__all__ = [
    "AIServiceError",
    "AISuccess",
    "AIFailure",
    "AIResult",
    "TextGenerationService",
    "GeminiTextService",
    "HuggingFaceTextService",
    "build_text_service",
    "extract_json_object",
    "StyleAIClient",
]
