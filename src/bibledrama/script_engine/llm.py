from __future__ import annotations

import abc
import json
import logging
from typing import Any, Dict

from google.genai import types

from bibledrama.gemini import GeminiClientProvider

logger = logging.getLogger(__name__)


class LLMClient(abc.ABC):
    """Abstract interface for language models used in the pipeline."""

    @abc.abstractmethod
    def complete(self, prompt: str, **kwargs: Any) -> str:
        raise NotImplementedError


class EchoLLM(LLMClient):
    """Development stub that returns a minimal, well-formed script."""

    def complete(self, prompt: str, **kwargs: Any) -> str:
        def turn(brother: str, sister: str) -> list[Dict[str, str]]:
            return [
                {"speaker": "형제님", "content": brother},
                {"speaker": "자매님", "content": sister},
            ]

        placeholder = {
            "title": "Stub title",
            "sections": {
                "intro": turn("Stub intro", "Stub intro reply"),
                "reading": turn("Stub reading", "아멘"),
                "history": turn("Stub history", "Stub history reply"),
                "sermon": turn("Stub sermon", "Stub sermon reply"),
                "summary": turn("Stub summary", "Stub summary reply"),
                "lordsPrayer": turn("Stub prayer", "Stub prayer reply"),
                "outro": turn("안녕!", "샬롬!"),
            },
            "youtube": {
                "titles": ["Stub title"],
                "thumbnailTitles": ["Stub thumbnail"],
                "imagePrompt": "Stub image prompt",
                "hook": "Stub hook",
                "description": "Stub description",
                "hashtags": ["stub"],
                "tags": ["stub"],
            },
        }
        return json.dumps(placeholder, ensure_ascii=False)


class GeminiLLM(LLMClient):
    """Gemini text model constrained to a JSON response schema."""

    def __init__(
        self,
        provider: GeminiClientProvider,
        model: str = "gemini-3-flash-preview",
        response_schema: Dict[str, Any] | None = None,
    ) -> None:
        self.provider = provider
        self.model = model
        self.response_schema = response_schema

    def complete(self, prompt: str, **kwargs: Any) -> str:
        schema = kwargs.pop("response_schema", self.response_schema)
        config_kwargs: Dict[str, Any] = {"response_mime_type": "application/json"}
        if schema is not None:
            config_kwargs["response_schema"] = schema
        config_kwargs.update(kwargs)
        response = self.provider.get().models.generate_content(
            model=self.model,
            contents=prompt,
            config=types.GenerateContentConfig(**config_kwargs),
        )
        text = getattr(response, "text", None)
        if not text:
            logger.warning("Gemini returned an empty text payload for model %s", self.model)
            return "{}"
        return text
