from __future__ import annotations

import logging
import re
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_EXPORT_LABEL = "말씀쉼터"
MASTER_SCRIPT_SUFFIX = "대본"
YOUTUBE_KIT_SUFFIX = "유튜브_키트"
SCRIPT_JSON_SUFFIX = "원본"

_UNSAFE_FILENAME_CHARS = re.compile(r'[/\\?%*:|"<>]')


def sanitize_stem(verse_input: str) -> str:
    """Make a verse reference safe to use as a filename stem.

    Reserved characters are replaced with ``-`` rather than dropped, so
    ``시편 23:1`` and ``시편 231`` still map to different files.
    """
    return _UNSAFE_FILENAME_CHARS.sub("-", verse_input or "").strip()


def export_filename(
    verse_input: str,
    suffix: str,
    default_label: str = DEFAULT_EXPORT_LABEL,
    extension: str = "txt",
) -> str:
    stem = sanitize_stem(verse_input) or default_label
    return f"{stem}_{suffix}.{extension}"


class TextExporter:
    """Saves text bundles as UTF-8 files named after the verse."""

    def __init__(self, output_dir: Path, default_label: str = DEFAULT_EXPORT_LABEL) -> None:
        self.output_dir = Path(output_dir)
        self.default_label = default_label

    def path_for(self, verse_input: str, suffix: str, extension: str = "txt") -> Path:
        return self.output_dir / export_filename(verse_input, suffix, self.default_label, extension)

    def save(self, verse_input: str, suffix: str, text: str, extension: str = "txt") -> Path:
        target = self.path_for(verse_input, suffix, extension)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text, encoding="utf-8")
        logger.info("Saved %s", target)
        return target
