from __future__ import annotations


class StudioError(RuntimeError):
    """Base class for failures surfaced to the user."""

    default_message = "오류가 발생했습니다."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def user_message(self) -> str:
        return str(self)


class MalformedResponse(StudioError):
    """Raised when a model response does not contain a parseable JSON object."""

    default_message = "응답을 해석할 수 없습니다."


class ScriptGenerationFailed(StudioError):
    default_message = "대본 생성 중 오류가 발생했습니다."


class ImageGenerationFailed(StudioError):
    default_message = "이미지 생성 실패"


class SpeechGenerationFailed(StudioError):
    default_message = "오디오 생성 실패"


class ClipboardFailed(StudioError):
    default_message = "복사 실패"
