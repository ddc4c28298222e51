from __future__ import annotations

import re
from textwrap import dedent

from .model import BibleScript
from .speakers import classify_speaker

SCRIPT_GENERATION_PROMPT = dedent(
    """
    성경 개역개정 4판 기반의 방송 대본을 생성해줘. 구절: "{verse}"
    호스트: 형제님(Brother, 오빠), 자매님(Sister, 여동생). 둘은 현실 남매 케미(투닥거리지만 친함).

    [대본 생성 철칙 - 화자 관리]
    - **동일한 화자가 연속으로 두 번 말하게 하지 마.**
    - 한 화자가 길게 말해야 한다면 하나의 'content' 안에 모든 내용을 합칠 것.
    - 반드시 형제님-자매님-형제님-자매님 순으로 티카타카가 이어지도록 구성.

    [섹션별 고정 규칙]
    1. Intro: 말씀 주제 관련 일상 남매 콩트.
    2. Bible Reading:
       - **반드시** 첫 대사는 "오늘 우리에게 주시는 {verse} 말씀입니다."로 시작.
       - 이후 형제/자매가 한 절씩 번갈아가며 교독 (절 숫자 제거).
       - 마지막은 자매님이 "아멘"으로 마무리.
    3. Commentary & Drama: 시대적 배경(history) 및 현실 상황극(sermon).
    4. Summary: 핵심 요약 남매 꽁트.
    5. Lord's Prayer: 자매님이 반드시 "{prayer_intro}"라고 말한 뒤 교독.
    6. Outro: 마무리 요약 콩트 + '말씀쉼터' 채널 홍보 + 형제님 "안녕!", 자매님 "샬롬!" 고정.

    [유튜브 메타데이터 및 이미지 프롬프트]
    - hook: 아주 짧고 강렬한 한 줄 문구.
    - imagePrompt: Cinematic visual metaphor. NO TEXT.
      * Characters: A trendy Korean male and a stunning female sibling in a modern studio.
      * Female Fashion Detail: Wearing a short mini-skirt and a tight-fitting short crop-top.
        The fabric of the top must be solid and opaque (NOT see-through, NOT sheer).
      * Visual Style: High-quality YouTube skit thumbnail style, realistic, attractive, and high-contrast lighting.

    [응답 형식]
    반드시 아래 JSON 구조를 유지할 것. JSON 이외의 설명은 붙이지 마.
    """
).strip()

LORDS_PRAYER_INTRO = "사랑이 많으신 우리 주님이 가르쳐 주신 주기도문으로 함께 기도하겠습니다"

IMAGE_STYLE_SUFFIX = (
    "Photorealistic, attractive, modern high-end fashion, high-contrast lighting, "
    "solid opaque fabric, NO TEXT, NO LETTERS."
)

SPEECH_PROMPT_HEADER = "성경 드라마 대화입니다:"

_ANNOTATION_PATTERN = re.compile(r"\(.*?\)|\[.*?\]")


def clean_content(text: str | None) -> str:
    """Drop stage directions in parentheses or brackets and trim the result."""
    if not text:
        return ""
    return _ANNOTATION_PATTERN.sub("", text).strip()


def render_script_prompt(verse: str) -> str:
    return SCRIPT_GENERATION_PROMPT.format(verse=verse, prayer_intro=LORDS_PRAYER_INTRO)


def render_image_prompt(image_prompt: str) -> str:
    sentence = " ".join(image_prompt.split()).rstrip(". ")
    if not sentence:
        return IMAGE_STYLE_SUFFIX
    return f"{sentence}. {IMAGE_STYLE_SUFFIX}"


def render_speech_prompt(script: BibleScript) -> str:
    lines = [
        f"{classify_speaker(part.speaker).label}: {clean_content(part.content)}"
        for part in script.sections.all_parts()
    ]
    return "\n".join([SPEECH_PROMPT_HEADER, *lines])
