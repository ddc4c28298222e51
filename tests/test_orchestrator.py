from __future__ import annotations

import asyncio
import json
import threading

from bibledrama.artifacts.export import TextExporter
from bibledrama.credentials import CredentialSelector
from bibledrama.errors import ImageGenerationFailed, SpeechGenerationFailed
from bibledrama.media_pipeline.audio import AudioBuffer, AudioSink
from bibledrama.media_pipeline.image_client import ImageAsset, ImageModel
from bibledrama.media_pipeline.voice import VoicePreviewer
from bibledrama.orchestrator import ClipboardPort, StudioSession
from bibledrama.script_engine.engine import ScriptEngine
from bibledrama.script_engine.llm import LLMClient

from conftest import build_payload


class CannedLLM(LLMClient):
    def __init__(self, response: str) -> None:
        self.response = response
        self.calls = 0

    def complete(self, prompt: str, **kwargs) -> str:
        self.calls += 1
        return self.response


class StubImageClient:
    def __init__(self, events: list[str], gate: threading.Event | None = None, fail: bool = False) -> None:
        self.events = events
        self.gate = gate
        self.fail = fail
        self.calls: list[tuple] = []

    def generate(self, prompt, model, aspect_ratio) -> ImageAsset:
        self.events.append("image")
        self.calls.append((prompt, model, aspect_ratio))
        if self.gate is not None:
            self.gate.wait(timeout=5)
        if self.fail:
            raise ImageGenerationFailed()
        return ImageAsset(data=b"png")


class StubSpeechClient:
    def __init__(
        self,
        payload: bytes = b"\x00\x40\x00\xc0",
        error: Exception | None = None,
        gate: threading.Event | None = None,
    ) -> None:
        self.payload = payload
        self.error = error
        self.gate = gate
        self.calls = 0

    def synthesize(self, script) -> bytes:
        self.calls += 1
        if self.gate is not None:
            self.gate.wait(timeout=5)
        if self.error is not None:
            raise self.error
        return self.payload


class RecordingSink(AudioSink):
    def __init__(self) -> None:
        self.buffers: list[AudioBuffer] = []
        self.threads: list[threading.Thread] = []

    def play(self, buffer: AudioBuffer) -> None:
        self.buffers.append(buffer)
        self.threads.append(threading.current_thread())


class StubCredentials(CredentialSelector):
    def __init__(self, events: list[str], present: bool) -> None:
        self.events = events
        self.present = present

    def has_credential(self) -> bool:
        self.events.append("check")
        return self.present

    def select_credential(self) -> None:
        self.events.append("select")
        self.present = True


class RecordingClipboard(ClipboardPort):
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.copied: list[str] = []

    def copy(self, text: str) -> None:
        if self.fail:
            raise OSError("no display")
        self.copied.append(text)


def build_session(tmp_path, *, llm=None, image_client=None, speech_client=None, credentials=None, clipboard=None):
    events: list[str] = []
    sink = RecordingSink()
    session = StudioSession(
        script_engine=ScriptEngine(llm=llm or CannedLLM(json.dumps(build_payload()))),
        image_client=image_client or StubImageClient(events),
        voice_previewer=VoicePreviewer(speech_client or StubSpeechClient(), sink=sink),
        credentials=credentials or StubCredentials(events, present=True),
        exporter=TextExporter(tmp_path),
        clipboard=clipboard,
    )
    session.set_input("시편 23:1")
    return session, sink


def test_generate_script_populates_state(tmp_path):
    session, _ = build_session(tmp_path)

    state = asyncio.run(session.generate_script())

    assert state.script is not None
    assert state.script.title == "여호와는 나의 목자"
    assert not state.is_loading
    assert state.error is None


def test_script_failure_is_shown_inline(tmp_path):
    session, _ = build_session(tmp_path, llm=CannedLLM("not json at all"))

    state = asyncio.run(session.generate_script())

    assert state.script is None
    assert state.error == "대본 생성 중 오류가 발생했습니다."
    assert not state.is_loading


def test_empty_input_is_ignored(tmp_path):
    llm = CannedLLM(json.dumps(build_payload()))
    session, _ = build_session(tmp_path, llm=llm)
    session.set_input("  ")

    state = asyncio.run(session.generate_script())

    assert llm.calls == 0
    assert state.script_version == 0


def test_image_generation_stores_data_uri(tmp_path):
    events: list[str] = []
    image_client = StubImageClient(events)
    session, _ = build_session(tmp_path, image_client=image_client)

    async def scenario():
        await session.generate_script()
        return await session.generate_image()

    state = asyncio.run(scenario())

    assert state.generated_image == ImageAsset(data=b"png").data_uri
    assert session.last_image is not None
    prompt, model, ratio = image_client.calls[0]
    assert prompt.startswith("Two siblings laughing in a sunlit studio. ")
    assert model is ImageModel.GEMINI_FLASH_IMAGE
    assert ratio.value == "16:9"


def test_premium_model_selects_credential_before_request(tmp_path):
    events: list[str] = []
    session, _ = build_session(
        tmp_path,
        image_client=StubImageClient(events),
        credentials=StubCredentials(events, present=False),
    )
    session.select_model(ImageModel.GEMINI_3_PRO_IMAGE)

    async def scenario():
        await session.generate_script()
        await session.generate_image()

    asyncio.run(scenario())

    assert events == ["check", "select", "image"]


def test_free_model_skips_credential_check(tmp_path):
    events: list[str] = []
    session, _ = build_session(
        tmp_path,
        image_client=StubImageClient(events),
        credentials=StubCredentials(events, present=False),
    )

    async def scenario():
        await session.generate_script()
        await session.generate_image()

    asyncio.run(scenario())

    assert events == ["image"]


def test_image_failure_raises_alert_and_keeps_script(tmp_path):
    session, _ = build_session(tmp_path, image_client=StubImageClient([], fail=True))

    async def scenario():
        await session.generate_script()
        return await session.generate_image()

    state = asyncio.run(scenario())

    assert state.alert == "이미지 생성 실패"
    assert state.script is not None
    assert state.generated_image is None


def test_late_image_for_replaced_script_is_discarded(tmp_path):
    gate = threading.Event()
    image_client = StubImageClient([], gate=gate)
    session, _ = build_session(tmp_path, image_client=image_client)

    async def scenario():
        await session.generate_script()
        image_task = asyncio.create_task(session.generate_image())
        while not session.state.is_image_loading:
            await asyncio.sleep(0)
        # repeated trigger while busy is a no-op
        await session.generate_image()
        await session.generate_script()
        gate.set()
        return await image_task

    state = asyncio.run(scenario())

    assert len(image_client.calls) == 1
    assert state.script_version == 2
    assert state.script is not None
    assert state.generated_image is None
    assert session.last_image is None
    assert not state.is_image_loading


def test_play_audio_decodes_and_hands_buffer_to_sink(tmp_path):
    session, sink = build_session(tmp_path)

    async def scenario():
        await session.generate_script()
        return await session.play_audio()

    state = asyncio.run(scenario())

    assert not state.is_audio_loading
    assert state.alert is None
    assert sink.buffers[0].samples.tolist() == [0.5, -0.5]
    assert sink.threads[0] is not threading.main_thread()


def test_late_audio_for_replaced_script_never_reaches_sink(tmp_path):
    gate = threading.Event()
    speech_client = StubSpeechClient(gate=gate)
    session, sink = build_session(tmp_path, speech_client=speech_client)

    async def scenario():
        await session.generate_script()
        audio_task = asyncio.create_task(session.play_audio())
        while not session.state.is_audio_loading:
            await asyncio.sleep(0)
        await session.play_audio()
        await session.generate_script()
        gate.set()
        return await audio_task

    state = asyncio.run(scenario())

    assert speech_client.calls == 1
    assert sink.buffers == []
    assert state.script_version == 2
    assert not state.is_audio_loading
    assert state.alert is None


def test_speech_failure_raises_alert(tmp_path):
    session, sink = build_session(tmp_path, speech_client=StubSpeechClient(error=SpeechGenerationFailed("음성 데이터 없음")))

    async def scenario():
        await session.generate_script()
        return await session.play_audio()

    state = asyncio.run(scenario())

    assert state.alert == "음성 데이터 없음"
    assert not sink.buffers


def test_undecodable_audio_raises_generic_alert(tmp_path):
    session, sink = build_session(tmp_path, speech_client=StubSpeechClient(payload=b"\x01"))

    async def scenario():
        await session.generate_script()
        return await session.play_audio()

    state = asyncio.run(scenario())

    assert state.alert == "오디오 생성 실패"
    assert not state.is_audio_loading


def test_artifacts_copy_and_save(tmp_path):
    clipboard = RecordingClipboard()
    session, _ = build_session(tmp_path, clipboard=clipboard)
    assert session.master_script() == ""
    assert session.youtube_kit() == ""

    asyncio.run(session.generate_script())

    assert session.copy_text(session.master_script(), "TTS 마스터 키트")
    assert clipboard.copied[0].startswith("[TTS Style Instructions]")
    assert session.state.notice == "TTS 마스터 키트 완료!"

    script_path = session.save_master_script()
    kit_path = session.save_youtube_kit()
    assert script_path.name == "시편 23-1_대본.txt"
    assert kit_path.name == "시편 23-1_유튜브_키트.txt"
    assert kit_path.read_text(encoding="utf-8").startswith("시편 23:1 : 여호와는 나의 목자")


def test_clipboard_failure_raises_alert(tmp_path):
    session, _ = build_session(tmp_path, clipboard=RecordingClipboard(fail=True))

    assert not session.copy_text("text", "유튜브 정보")
    assert session.state.alert == "복사 실패"


def test_missing_clipboard_raises_alert(tmp_path):
    session, _ = build_session(tmp_path)

    assert not session.copy_text("text", "유튜브 정보")
    assert session.state.alert == "복사 실패"


def test_save_script_json_uses_response_field_names(tmp_path):
    session, _ = build_session(tmp_path)
    assert session.save_script_json() is None

    asyncio.run(session.generate_script())
    path = session.save_script_json()

    assert path.name == "시편 23-1_원본.json"
    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload == build_payload()
