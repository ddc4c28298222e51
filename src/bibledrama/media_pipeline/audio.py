from __future__ import annotations

import abc
import logging
import wave
from dataclasses import dataclass
from pathlib import Path

import numpy as np

logger = logging.getLogger(__name__)

SAMPLE_RATE = 24000
PCM16_SCALE = 32768.0


@dataclass(frozen=True)
class AudioBuffer:
    """Mono float samples in [-1.0, 1.0]."""

    samples: np.ndarray
    sample_rate: int = SAMPLE_RATE
    channels: int = 1

    def __len__(self) -> int:
        return int(self.samples.shape[0])

    @property
    def duration_sec(self) -> float:
        return len(self) / float(self.sample_rate)

    def to_pcm16(self) -> bytes:
        scaled = np.clip(np.round(self.samples * PCM16_SCALE), -32768, 32767)
        return scaled.astype("<i2").tobytes()


def decode_pcm16(raw: bytes, sample_rate: int = SAMPLE_RATE) -> AudioBuffer:
    """Decode signed 16-bit little-endian PCM into a float buffer."""
    if len(raw) % 2:
        raise ValueError(f"PCM payload has odd byte length {len(raw)}")
    ints = np.frombuffer(raw, dtype="<i2")
    samples = ints.astype(np.float32) / np.float32(PCM16_SCALE)
    return AudioBuffer(samples=samples, sample_rate=sample_rate)


class AudioSink(abc.ABC):
    """Destination for decoded audio, e.g. a speaker or a file."""

    @abc.abstractmethod
    def play(self, buffer: AudioBuffer) -> None:
        raise NotImplementedError


class WavFileSink(AudioSink):
    """Writes each buffer it receives to a mono 16-bit WAV file."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self.written = False

    def play(self, buffer: AudioBuffer) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with wave.open(str(self.path), "wb") as handle:
            handle.setnchannels(buffer.channels)
            handle.setsampwidth(2)
            handle.setframerate(buffer.sample_rate)
            handle.writeframes(buffer.to_pcm16())
        self.written = True
        logger.info("Wrote %.1fs preview to %s", buffer.duration_sec, self.path)
