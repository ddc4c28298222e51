from __future__ import annotations

import abc
import getpass
import logging
import os
from typing import Callable, FrozenSet

from bibledrama.gemini import DEFAULT_API_KEY_ENV
from bibledrama.media_pipeline.image_client import ImageModel

logger = logging.getLogger(__name__)

PREMIUM_IMAGE_MODELS: FrozenSet[ImageModel] = frozenset(
    {ImageModel.GEMINI_3_PRO_IMAGE, ImageModel.GEMINI_3_FLASH}
)


class CredentialSelector(abc.ABC):
    """Host-provided hook for picking the API key used by paid models."""

    @abc.abstractmethod
    def has_credential(self) -> bool:
        raise NotImplementedError

    @abc.abstractmethod
    def select_credential(self) -> None:
        raise NotImplementedError


class EnvCredentialSelector(CredentialSelector):
    """Reads the key from the environment, prompting for it when absent."""

    def __init__(
        self,
        api_key_env: str = DEFAULT_API_KEY_ENV,
        prompt: Callable[[str], str] = getpass.getpass,
    ) -> None:
        self.api_key_env = api_key_env
        self.prompt = prompt

    def has_credential(self) -> bool:
        return bool(os.getenv(self.api_key_env))

    def select_credential(self) -> None:
        value = self.prompt(f"{self.api_key_env}: ").strip()
        if not value:
            logger.warning("No API key entered for %s", self.api_key_env)
            return
        os.environ[self.api_key_env] = value
        logger.info("Stored API key in %s for this session", self.api_key_env)


def ensure_credential(selector: CredentialSelector, model: ImageModel | str) -> None:
    """Ask the host for a key before calling a premium image model."""
    if ImageModel(model) not in PREMIUM_IMAGE_MODELS:
        return
    if not selector.has_credential():
        logger.info("Model %s requires a selected API key", ImageModel(model).value)
        selector.select_credential()
