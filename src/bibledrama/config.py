from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from pydantic import BaseModel

from bibledrama.artifacts.export import DEFAULT_EXPORT_LABEL, TextExporter
from bibledrama.gemini import DEFAULT_API_KEY_ENV, GeminiClientProvider
from bibledrama.media_pipeline.audio import SAMPLE_RATE
from bibledrama.media_pipeline.image_client import AspectRatio, GeminiImageClient, ImageModel
from bibledrama.media_pipeline.speech_client import GeminiSpeechClient
from bibledrama.script_engine.llm import EchoLLM, GeminiLLM, LLMClient
from bibledrama.script_engine.schema import RESPONSE_SCHEMA
from bibledrama.script_engine.speakers import Role

logger = logging.getLogger(__name__)


class StudioConfig(BaseModel):
    output_dir: Path = Path("data/exports")
    api_key_env: str = DEFAULT_API_KEY_ENV
    llm_provider: str = "gemini"
    script_model: str = "gemini-3-flash-preview"
    # Image configuration
    image_model: ImageModel = ImageModel.GEMINI_FLASH_IMAGE
    aspect_ratio: AspectRatio = AspectRatio.LANDSCAPE
    image_size: str = "1K"
    # Speech configuration
    speech_model: str = "gemini-2.5-flash-preview-tts"
    male_voice: str = "Kore"
    female_voice: str = "Puck"
    sample_rate: int = SAMPLE_RATE
    export_label: str = DEFAULT_EXPORT_LABEL

    @classmethod
    def from_file(cls, path: Path) -> "StudioConfig":
        text = Path(path).read_text(encoding="utf-8")
        try:
            payload = json.loads(text)
        except json.JSONDecodeError:
            import yaml  # type: ignore[import-untyped]

            payload = yaml.safe_load(text)
        return cls.model_validate(payload or {})

    def client_provider(self) -> GeminiClientProvider:
        return GeminiClientProvider(api_key_env=self.api_key_env)

    def build_llm(self, provider: GeminiClientProvider | None = None) -> LLMClient:
        name = self.llm_provider.lower()
        if name == "gemini":
            if provider is None and not os.getenv(self.api_key_env):
                logger.warning("No Gemini API key found in %s; script requests will fail", self.api_key_env)
            return GeminiLLM(
                provider=provider or self.client_provider(),
                model=self.script_model,
                response_schema=RESPONSE_SCHEMA,
            )
        if name != "echo":
            logger.warning("Unknown llm_provider '%s'; falling back to EchoLLM", name)
        return EchoLLM()

    def build_image_client(self, provider: GeminiClientProvider | None = None) -> GeminiImageClient:
        return GeminiImageClient(provider=provider or self.client_provider(), image_size=self.image_size)

    def build_speech_client(self, provider: GeminiClientProvider | None = None) -> GeminiSpeechClient:
        return GeminiSpeechClient(
            provider=provider or self.client_provider(),
            model=self.speech_model,
            voices={Role.MALE: self.male_voice, Role.FEMALE: self.female_voice},
        )

    def build_exporter(self) -> TextExporter:
        return TextExporter(output_dir=self.output_dir, default_label=self.export_label)
