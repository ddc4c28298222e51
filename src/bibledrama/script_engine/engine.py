from __future__ import annotations

import logging

from pydantic import ValidationError

from bibledrama.errors import MalformedResponse, ScriptGenerationFailed

from .llm import EchoLLM, LLMClient
from .model import BibleScript, BibleScriptResponse
from .prompts import render_script_prompt
from .schema import RESPONSE_SCHEMA, SCHEMA_VERSION
from .utils import load_json_object

logger = logging.getLogger(__name__)


class ScriptEngine:
    def __init__(self, llm: LLMClient | None = None) -> None:
        self.llm = llm or EchoLLM()

    def generate_script(self, verse: str) -> BibleScript:
        prompt = render_script_prompt(verse)
        try:
            raw = self.llm.complete(prompt, response_schema=RESPONSE_SCHEMA)
        except Exception as exc:
            logger.error("Script request failed for %r: %s", verse, exc)
            raise ScriptGenerationFailed() from exc
        logger.debug("LLM raw response: %s", raw)

        try:
            payload = load_json_object(raw)
        except MalformedResponse as exc:
            raise ScriptGenerationFailed() from exc

        try:
            return BibleScriptResponse.model_validate(payload)
        except ValidationError as exc:
            logger.error("Response does not match script schema %s: %s", SCHEMA_VERSION, exc)
            raise ScriptGenerationFailed() from exc
