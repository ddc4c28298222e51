from __future__ import annotations

import logging
from typing import Mapping

from google.genai import types

from bibledrama.errors import SpeechGenerationFailed
from bibledrama.gemini import GeminiClientProvider, first_inline_blob, inline_bytes
from bibledrama.script_engine.model import BibleScript
from bibledrama.script_engine.prompts import render_speech_prompt
from bibledrama.script_engine.speakers import Role

logger = logging.getLogger(__name__)

DEFAULT_VOICES: Mapping[Role, str] = {
    Role.MALE: "Kore",
    Role.FEMALE: "Puck",
}


class GeminiSpeechClient:
    """Two-speaker speech synthesis returning raw 16-bit PCM at 24 kHz."""

    def __init__(
        self,
        provider: GeminiClientProvider,
        model: str = "gemini-2.5-flash-preview-tts",
        voices: Mapping[Role, str] | None = None,
    ) -> None:
        self.provider = provider
        self.model = model
        self.voices = dict(voices or DEFAULT_VOICES)

    def synthesize(self, script: BibleScript) -> bytes:
        prompt = render_speech_prompt(script)
        try:
            response = self.provider.get().models.generate_content(
                model=self.model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    response_modalities=["AUDIO"],
                    speech_config=self._speech_config(),
                ),
            )
        except Exception as exc:
            logger.error("Speech request to %s failed: %s", self.model, exc)
            raise SpeechGenerationFailed() from exc

        audio = inline_bytes(first_inline_blob(response))
        if not audio:
            raise SpeechGenerationFailed("음성 데이터 없음")
        logger.info("Received %d bytes of PCM audio from %s", len(audio), self.model)
        return audio

    def _speech_config(self) -> types.SpeechConfig:
        return types.SpeechConfig(
            multi_speaker_voice_config=types.MultiSpeakerVoiceConfig(
                speaker_voice_configs=[
                    types.SpeakerVoiceConfig(
                        speaker=role.label,
                        voice_config=types.VoiceConfig(
                            prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=self.voices[role]),
                        ),
                    )
                    for role in (Role.MALE, Role.FEMALE)
                ]
            )
        )
