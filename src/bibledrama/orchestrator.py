from __future__ import annotations

import abc
import asyncio
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from bibledrama.artifacts.export import MASTER_SCRIPT_SUFFIX, SCRIPT_JSON_SUFFIX, YOUTUBE_KIT_SUFFIX, TextExporter
from bibledrama.artifacts.formatter import format_master_script, format_youtube_kit
from bibledrama.config import StudioConfig
from bibledrama.credentials import CredentialSelector, EnvCredentialSelector, ensure_credential
from bibledrama.errors import (
    ClipboardFailed,
    ImageGenerationFailed,
    ScriptGenerationFailed,
    SpeechGenerationFailed,
)
from bibledrama.gemini import GeminiClientProvider
from bibledrama.media_pipeline.audio import AudioSink
from bibledrama.media_pipeline.image_client import AspectRatio, GeminiImageClient, ImageAsset, ImageModel
from bibledrama.media_pipeline.voice import VoicePreviewer
from bibledrama.script_engine.engine import ScriptEngine
from bibledrama.script_engine.prompts import render_image_prompt
from bibledrama.state import (
    AlertDismissed,
    AppState,
    AspectRatioSelected,
    AudioFailed,
    AudioFinished,
    AudioRequested,
    CopyFailed,
    CopySucceeded,
    ImageFailed,
    ImageGenerated,
    ImageRequested,
    InputChanged,
    Message,
    ModelSelected,
    ScriptFailed,
    ScriptGenerated,
    ScriptRequested,
    can_generate_image,
    can_generate_script,
    can_play_audio,
    is_current,
    reduce,
)

logger = logging.getLogger(__name__)


class ClipboardPort(abc.ABC):
    @abc.abstractmethod
    def copy(self, text: str) -> None:
        raise NotImplementedError


@dataclass
class StudioSession:
    """Drives one user's script, image and audio requests against shared state.

    Each operation runs its blocking call in a worker thread; results are
    folded back into ``state`` on the event loop through ``reduce``.
    """

    script_engine: ScriptEngine
    image_client: GeminiImageClient
    voice_previewer: VoicePreviewer
    credentials: CredentialSelector
    exporter: TextExporter
    clipboard: Optional[ClipboardPort] = None
    state: AppState = field(default_factory=AppState)
    last_image: Optional[ImageAsset] = None

    @classmethod
    def default(
        cls,
        config: StudioConfig | None = None,
        *,
        sink: AudioSink | None = None,
        clipboard: ClipboardPort | None = None,
        credentials: CredentialSelector | None = None,
        provider: GeminiClientProvider | None = None,
    ) -> "StudioSession":
        config = config or StudioConfig()
        provider = provider or config.client_provider()
        return cls(
            script_engine=ScriptEngine(llm=config.build_llm(provider)),
            image_client=config.build_image_client(provider),
            voice_previewer=VoicePreviewer(
                speech_client=config.build_speech_client(provider),
                sink=sink,
                sample_rate=config.sample_rate,
            ),
            credentials=credentials or EnvCredentialSelector(api_key_env=config.api_key_env),
            exporter=config.build_exporter(),
            clipboard=clipboard,
            state=AppState(
                selected_model=config.image_model,
                selected_aspect_ratio=config.aspect_ratio,
            ),
        )

    def dispatch(self, message: Message) -> AppState:
        self.state = reduce(self.state, message)
        return self.state

    # Inputs -------------------------------------------------------------

    def set_input(self, text: str) -> AppState:
        return self.dispatch(InputChanged(text))

    def select_model(self, model: ImageModel | str) -> AppState:
        return self.dispatch(ModelSelected(ImageModel(model)))

    def select_aspect_ratio(self, aspect_ratio: AspectRatio | str) -> AppState:
        return self.dispatch(AspectRatioSelected(AspectRatio(aspect_ratio)))

    def dismiss_alert(self) -> AppState:
        return self.dispatch(AlertDismissed())

    # Generation ---------------------------------------------------------

    async def generate_script(self) -> AppState:
        if not can_generate_script(self.state):
            logger.debug("Ignoring script request (busy or empty input)")
            return self.state
        verse = self.state.input
        version = self.dispatch(ScriptRequested()).script_version
        self.last_image = None
        logger.info("Generating script for %s (version %s)", verse, version)
        try:
            script = await asyncio.to_thread(self.script_engine.generate_script, verse)
        except ScriptGenerationFailed as exc:
            return self.dispatch(ScriptFailed(version, exc.user_message))
        return self.dispatch(ScriptGenerated(version, script))

    async def generate_image(self) -> AppState:
        if not can_generate_image(self.state):
            logger.debug("Ignoring image request (no script or already running)")
            return self.state
        model = self.state.selected_model
        aspect_ratio = self.state.selected_aspect_ratio
        script = self.state.script
        version = self.state.script_version
        prompt = render_image_prompt(script.youtube.image_prompt)

        self.dispatch(ImageRequested())
        try:
            await asyncio.to_thread(ensure_credential, self.credentials, model)
            asset = await asyncio.to_thread(self.image_client.generate, prompt, model, aspect_ratio)
        except ImageGenerationFailed as exc:
            return self.dispatch(ImageFailed(version, exc.user_message))
        except Exception as exc:
            logger.error("Credential selection failed: %s", exc)
            return self.dispatch(ImageFailed(version, ImageGenerationFailed().user_message))
        state = self.dispatch(ImageGenerated(version, asset.data_uri))
        if state.generated_image is not None:
            self.last_image = asset
        return state

    async def play_audio(self) -> AppState:
        if not can_play_audio(self.state):
            logger.debug("Ignoring audio request (no script or already running)")
            return self.state
        script = self.state.script
        version = self.state.script_version

        self.dispatch(AudioRequested())
        try:
            buffer = await asyncio.to_thread(self.voice_previewer.render, script)
        except SpeechGenerationFailed as exc:
            return self.dispatch(AudioFailed(version, exc.user_message))
        except ValueError as exc:
            logger.error("Could not decode speech payload: %s", exc)
            return self.dispatch(AudioFailed(version, SpeechGenerationFailed().user_message))

        if is_current(self.state, version):
            try:
                await asyncio.to_thread(self.voice_previewer.play, buffer)
            except Exception as exc:
                logger.error("Audio playback failed: %s", exc)
                return self.dispatch(AudioFailed(version, SpeechGenerationFailed().user_message))
        else:
            logger.info("Discarding audio for superseded script version %s", version)
        return self.dispatch(AudioFinished(version))

    # Artifacts ----------------------------------------------------------

    def master_script(self) -> str:
        if self.state.script is None:
            return ""
        return format_master_script(self.state.script)

    def youtube_kit(self) -> str:
        if self.state.script is None:
            return ""
        return format_youtube_kit(self.state.script, self.state.input)

    def copy_text(self, text: str, label: str) -> bool:
        try:
            if self.clipboard is None:
                raise ClipboardFailed("Clipboard is not available")
            self.clipboard.copy(text)
        except Exception as exc:
            logger.warning("Copy of %s failed: %s", label, exc)
            self.dispatch(CopyFailed(ClipboardFailed().user_message))
            return False
        self.dispatch(CopySucceeded(label))
        return True

    def save_text(self, suffix: str, text: str) -> Path:
        return self.exporter.save(self.state.input, suffix, text)

    def save_master_script(self) -> Path:
        return self.save_text(MASTER_SCRIPT_SUFFIX, self.master_script())

    def save_youtube_kit(self) -> Path:
        return self.save_text(YOUTUBE_KIT_SUFFIX, self.youtube_kit())

    def save_script_json(self) -> Optional[Path]:
        if self.state.script is None:
            return None
        payload = json.dumps(self.state.script.to_payload(), ensure_ascii=False, indent=2)
        return self.exporter.save(self.state.input, SCRIPT_JSON_SUFFIX, payload, extension="json")
