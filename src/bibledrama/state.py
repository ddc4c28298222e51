from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional, Union

from bibledrama.media_pipeline.image_client import AspectRatio, ImageModel
from bibledrama.script_engine.model import BibleScript

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppState:
    input: str = ""
    script: Optional[BibleScript] = None
    script_version: int = 0
    is_loading: bool = False
    is_image_loading: bool = False
    is_audio_loading: bool = False
    generated_image: Optional[str] = None
    error: Optional[str] = None
    alert: Optional[str] = None
    notice: Optional[str] = None
    selected_model: ImageModel = ImageModel.GEMINI_FLASH_IMAGE
    selected_aspect_ratio: AspectRatio = AspectRatio.LANDSCAPE


# Messages ---------------------------------------------------------------


@dataclass(frozen=True)
class InputChanged:
    text: str


@dataclass(frozen=True)
class ModelSelected:
    model: ImageModel


@dataclass(frozen=True)
class AspectRatioSelected:
    aspect_ratio: AspectRatio


@dataclass(frozen=True)
class ScriptRequested:
    pass


@dataclass(frozen=True)
class ScriptGenerated:
    version: int
    script: BibleScript


@dataclass(frozen=True)
class ScriptFailed:
    version: int
    message: str


@dataclass(frozen=True)
class ImageRequested:
    pass


@dataclass(frozen=True)
class ImageGenerated:
    version: int
    data_uri: str


@dataclass(frozen=True)
class ImageFailed:
    version: int
    message: str


@dataclass(frozen=True)
class AudioRequested:
    pass


@dataclass(frozen=True)
class AudioFinished:
    version: int


@dataclass(frozen=True)
class AudioFailed:
    version: int
    message: str


@dataclass(frozen=True)
class CopySucceeded:
    label: str


@dataclass(frozen=True)
class CopyFailed:
    message: str


@dataclass(frozen=True)
class AlertDismissed:
    pass


Message = Union[
    InputChanged,
    ModelSelected,
    AspectRatioSelected,
    ScriptRequested,
    ScriptGenerated,
    ScriptFailed,
    ImageRequested,
    ImageGenerated,
    ImageFailed,
    AudioRequested,
    AudioFinished,
    AudioFailed,
    CopySucceeded,
    CopyFailed,
    AlertDismissed,
]


# Guards -----------------------------------------------------------------


def can_generate_script(state: AppState) -> bool:
    return not state.is_loading and bool(state.input.strip())


def can_generate_image(state: AppState) -> bool:
    return state.script is not None and state.script.youtube is not None and not state.is_image_loading


def can_play_audio(state: AppState) -> bool:
    return state.script is not None and not state.is_audio_loading


def is_current(state: AppState, version: int) -> bool:
    return version == state.script_version and state.script is not None


# Reducer ----------------------------------------------------------------


def reduce(state: AppState, message: Message) -> AppState:
    """Apply one message and return the next state.

    Image and audio results carry the script version active when they were
    dispatched; results for a superseded script only clear the busy flag.
    """
    if isinstance(message, InputChanged):
        return replace(state, input=message.text)
    if isinstance(message, ModelSelected):
        return replace(state, selected_model=ImageModel(message.model))
    if isinstance(message, AspectRatioSelected):
        return replace(state, selected_aspect_ratio=AspectRatio(message.aspect_ratio))

    if isinstance(message, ScriptRequested):
        return replace(
            state,
            script_version=state.script_version + 1,
            is_loading=True,
            script=None,
            generated_image=None,
            error=None,
        )
    if isinstance(message, ScriptGenerated):
        if message.version != state.script_version:
            logger.info("Discarding script for superseded version %s", message.version)
            return state
        return replace(state, script=message.script, is_loading=False)
    if isinstance(message, ScriptFailed):
        if message.version != state.script_version:
            return state
        return replace(state, error=message.message, is_loading=False)

    if isinstance(message, ImageRequested):
        return replace(state, is_image_loading=True)
    if isinstance(message, ImageGenerated):
        if not is_current(state, message.version):
            logger.info("Discarding stale image for script version %s", message.version)
            return replace(state, is_image_loading=False)
        return replace(state, generated_image=message.data_uri, is_image_loading=False)
    if isinstance(message, ImageFailed):
        if not is_current(state, message.version):
            return replace(state, is_image_loading=False)
        return replace(state, alert=message.message, is_image_loading=False)

    if isinstance(message, AudioRequested):
        return replace(state, is_audio_loading=True)
    if isinstance(message, AudioFinished):
        return replace(state, is_audio_loading=False)
    if isinstance(message, AudioFailed):
        if not is_current(state, message.version):
            return replace(state, is_audio_loading=False)
        return replace(state, alert=message.message, is_audio_loading=False)

    if isinstance(message, CopySucceeded):
        return replace(state, notice=f"{message.label} 완료!")
    if isinstance(message, CopyFailed):
        return replace(state, alert=message.message)
    if isinstance(message, AlertDismissed):
        return replace(state, alert=None, notice=None)

    raise TypeError(f"Unknown message type {type(message).__name__}")
