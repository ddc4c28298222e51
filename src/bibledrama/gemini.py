from __future__ import annotations

import base64
import logging
import os
from typing import Any, Optional

from google import genai

logger = logging.getLogger(__name__)

DEFAULT_API_KEY_ENV = "GEMINI_API_KEY"


def build_genai_client(api_key_env: str = DEFAULT_API_KEY_ENV) -> genai.Client:
    """Create a Gemini client from the key currently in the environment."""
    api_key = os.getenv(api_key_env)
    if not api_key:
        raise RuntimeError(f"Missing Gemini API key. Set {api_key_env} in your environment.")
    return genai.Client(api_key=api_key)


class GeminiClientProvider:
    """Hands out the injected client, or a fresh one per request.

    Building per request means a key selected mid-session is honoured by the
    next call.
    """

    def __init__(self, client: Optional[genai.Client] = None, api_key_env: str = DEFAULT_API_KEY_ENV) -> None:
        self._client = client
        self.api_key_env = api_key_env

    def get(self) -> genai.Client:
        if self._client is not None:
            return self._client
        return build_genai_client(self.api_key_env)


def inline_bytes(blob: Any) -> Optional[bytes]:
    """Raw bytes of an inline payload; text payloads are base64-decoded."""
    if blob is None:
        return None
    data = getattr(blob, "data", None)
    if not data:
        return None
    if isinstance(data, str):
        return base64.b64decode(data)
    return bytes(data)


def first_inline_blob(response: Any) -> Any:
    """Return the first part carrying inline data in the first candidate."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return None
    content = getattr(candidates[0], "content", None)
    for part in getattr(content, "parts", None) or []:
        blob = getattr(part, "inline_data", None)
        if blob is not None and getattr(blob, "data", None):
            return blob
    return None
