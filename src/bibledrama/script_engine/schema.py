from __future__ import annotations

from typing import Any, Dict

SCHEMA_VERSION = "2024-06"

_SCRIPT_PART: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "speaker": {"type": "STRING"},
        "content": {"type": "STRING"},
    },
    "required": ["speaker", "content"],
}

SECTION_FIELDS = ("intro", "reading", "history", "sermon", "summary", "lordsPrayer", "outro")

YOUTUBE_FIELDS = ("titles", "thumbnailTitles", "imagePrompt", "hook", "description", "hashtags", "tags")

RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "title": {"type": "STRING"},
        "sections": {
            "type": "OBJECT",
            "properties": {
                name: {"type": "ARRAY", "items": _SCRIPT_PART} for name in SECTION_FIELDS
            },
            "required": list(SECTION_FIELDS),
        },
        "youtube": {
            "type": "OBJECT",
            "properties": {
                "titles": {"type": "ARRAY", "items": {"type": "STRING"}},
                "thumbnailTitles": {"type": "ARRAY", "items": {"type": "STRING"}},
                "imagePrompt": {"type": "STRING"},
                "hook": {"type": "STRING"},
                "description": {"type": "STRING"},
                "hashtags": {"type": "ARRAY", "items": {"type": "STRING"}},
                "tags": {"type": "ARRAY", "items": {"type": "STRING"}},
            },
            "required": list(YOUTUBE_FIELDS),
        },
    },
    "required": ["title", "sections", "youtube"],
}
