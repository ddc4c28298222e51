from __future__ import annotations

import sys
from pathlib import Path
from types import SimpleNamespace

import pytest


def pytest_configure(config) -> None:  # pragma: no cover - pytest hook
    root = Path(__file__).resolve().parents[1]
    src_path = root / "src"
    if src_path.exists() and str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


SECTION_KEYS = ("intro", "reading", "history", "sermon", "summary", "lordsPrayer", "outro")


def build_payload(title: str = "여호와는 나의 목자", youtube: bool = True) -> dict:
    sections = {
        key: [
            {"speaker": "형제님", "content": f"{key} 형제 대사 (웃음)"},
            {"speaker": "자매님", "content": f"[효과음] {key} 자매 대사"},
        ]
        for key in SECTION_KEYS
    }
    payload: dict = {"title": title, "sections": sections}
    if youtube:
        payload["youtube"] = {
            "titles": ["제목 하나", "제목 둘"],
            "thumbnailTitles": ["부족함 없는 삶"],
            "imagePrompt": "Two siblings laughing in a sunlit studio.",
            "hook": "목자가 있으면 두렵지 않다",
            "description": "시편 23편 1절을 남매가 함께 읽습니다.",
            "hashtags": ["은혜", "#감사"],
            "tags": ["시편", "말씀쉼터"],
        }
    return payload


@pytest.fixture
def script_payload() -> dict:
    return build_payload()


@pytest.fixture
def bible_script(script_payload):
    from bibledrama.script_engine.model import BibleScriptResponse

    return BibleScriptResponse.model_validate(script_payload)


class RecordingModels:
    """Stand-in for ``genai.Client().models`` that records every request."""

    def __init__(self, content_response=None, images_response=None, error: Exception | None = None) -> None:
        self.content_response = content_response
        self.images_response = images_response
        self.error = error
        self.content_calls: list[dict] = []
        self.image_calls: list[dict] = []

    def generate_content(self, **kwargs):
        self.content_calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.content_response

    def generate_images(self, **kwargs):
        self.image_calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.images_response


def inline_response(*parts) -> SimpleNamespace:
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=list(parts)))])


def inline_part(data, mime_type: str = "image/png") -> SimpleNamespace:
    return SimpleNamespace(text=None, inline_data=SimpleNamespace(data=data, mime_type=mime_type))


def text_part(text: str) -> SimpleNamespace:
    return SimpleNamespace(text=text, inline_data=None)


def provider_for(models: RecordingModels):
    from bibledrama.gemini import GeminiClientProvider

    return GeminiClientProvider(client=SimpleNamespace(models=models))
