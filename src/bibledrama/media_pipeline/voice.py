from __future__ import annotations

import logging

from bibledrama.script_engine.model import BibleScript

from .audio import SAMPLE_RATE, AudioBuffer, AudioSink, decode_pcm16
from .speech_client import GeminiSpeechClient

logger = logging.getLogger(__name__)


class VoicePreviewer:
    """Synthesizes a script, decodes it and hands the buffer to a sink."""

    def __init__(
        self,
        speech_client: GeminiSpeechClient,
        sink: AudioSink | None = None,
        sample_rate: int = SAMPLE_RATE,
    ) -> None:
        self.speech_client = speech_client
        self.sink = sink
        self.sample_rate = sample_rate

    def render(self, script: BibleScript) -> AudioBuffer:
        raw = self.speech_client.synthesize(script)
        buffer = decode_pcm16(raw, sample_rate=self.sample_rate)
        logger.info("Decoded %d samples (%.1fs) for '%s'", len(buffer), buffer.duration_sec, script.title)
        return buffer

    def play(self, buffer: AudioBuffer) -> None:
        if self.sink is None:
            logger.warning("No audio sink configured; dropping %.1fs preview", buffer.duration_sec)
            return
        self.sink.play(buffer)
