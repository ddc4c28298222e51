from __future__ import annotations

from typing import Iterator, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

SECTION_ORDER: Tuple[str, ...] = (
    "intro",
    "reading",
    "history",
    "sermon",
    "summary",
    "lords_prayer",
    "outro",
)


class ScriptPart(BaseModel):
    """Single dialogue turn; ``speaker`` is a free-form label."""

    speaker: str
    content: str


class ScriptSections(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    intro: List[ScriptPart]
    reading: List[ScriptPart] = Field(description="Alternating verse reading, closed by the sister's amen")
    history: List[ScriptPart] = Field(description="Historical background commentary")
    sermon: List[ScriptPart] = Field(description="Dramatized sermon skit")
    summary: List[ScriptPart]
    lords_prayer: List[ScriptPart] = Field(alias="lordsPrayer")
    outro: List[ScriptPart]

    def ordered(self) -> Iterator[Tuple[str, List[ScriptPart]]]:
        for name in SECTION_ORDER:
            yield name, getattr(self, name)

    def all_parts(self) -> List[ScriptPart]:
        return [part for _, parts in self.ordered() for part in parts]


class YouTubeMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    titles: List[str]
    thumbnail_titles: List[str] = Field(alias="thumbnailTitles")
    image_prompt: str = Field(alias="imagePrompt")
    hook: str
    description: str
    hashtags: List[str]
    tags: List[str]


class BibleScript(BaseModel):
    title: str
    sections: ScriptSections
    youtube: Optional[YouTubeMetadata] = None

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class BibleScriptResponse(BibleScript):
    """Wire contract of a script generation result; metadata is mandatory."""

    youtube: YouTubeMetadata
