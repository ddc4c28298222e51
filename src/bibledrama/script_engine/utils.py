from __future__ import annotations

import json
import logging
from typing import Any, Dict

from bibledrama.errors import MalformedResponse

logger = logging.getLogger(__name__)


def extract_json_block(text: str) -> str:
    """Return the span from the first ``{`` to the last ``}`` of a model response.

    Models occasionally wrap the requested JSON in a preamble or trailing
    commentary. When no such span exists the text is returned untouched.
    """
    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end != -1 and end >= start:
        return text[start : end + 1]
    return text


def load_json_object(raw: str) -> Dict[str, Any]:
    cleaned = extract_json_block(raw or "")
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        logger.error("Model response is not valid JSON: %s", exc)
        raise MalformedResponse(f"Model response is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise MalformedResponse(f"Expected a JSON object, got {type(payload).__name__}")
    return payload
