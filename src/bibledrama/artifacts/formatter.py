from __future__ import annotations

from typing import Iterable, List

from bibledrama.script_engine.model import BibleScript, ScriptPart
from bibledrama.script_engine.prompts import clean_content
from bibledrama.script_engine.speakers import Role, classify_speaker

TTS_STYLE_HEADER = (
    "[TTS Style Instructions]\n"
    f"- Speakers: 2 persons ({Role.MALE.label}, {Role.FEMALE.label}).\n"
    "- Vibe: Modern sibling chemistry.\n"
    "- Rule: Alternate strictly."
)


def format_section(parts: Iterable[ScriptPart]) -> str:
    return "\n".join(
        f"{classify_speaker(part.speaker).label}: {clean_content(part.content)}" for part in parts
    )


def format_master_script(script: BibleScript) -> str:
    """Style-annotated full transcript meant to be pasted into a TTS prompt."""
    header = f"{TTS_STYLE_HEADER}\n\n[Full Script for '{script.title}']"
    body = "\n\n".join(format_section(parts) for _, parts in script.sections.ordered())
    return f"{header}\n\n{body}"


def _bullets(items: Iterable[str]) -> str:
    return "\n".join(f"- {item}" for item in items)


def format_hashtags(hashtags: Iterable[str]) -> str:
    return " ".join(tag if tag.startswith("#") else f"#{tag}" for tag in hashtags)


def format_youtube_kit(script: BibleScript, verse_input: str) -> str:
    """Upload guide for the publishing step; empty when metadata is missing."""
    yt = script.youtube
    if yt is None:
        return ""

    blocks: List[str] = [
        f"{verse_input} : {script.title}",
        "[유튜브 업로드 가이드]",
        f"제목 후보들:\n{_bullets(yt.titles)}",
        f"썸네일 텍스트 후보:\n{_bullets(yt.thumbnail_titles)}",
        f'메인 카피 (Hook):\n"{yt.hook}"',
        f"영상 설명란:\n{yt.description}",
        f"해시태그:\n{format_hashtags(yt.hashtags)}",
        f"키워드 태그:\n{', '.join(yt.tags)}",
    ]
    return "\n\n".join(blocks)
