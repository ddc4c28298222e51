from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from google.genai import types

from bibledrama.errors import ImageGenerationFailed
from bibledrama.gemini import GeminiClientProvider, first_inline_blob, inline_bytes

logger = logging.getLogger(__name__)


class ImageModel(str, Enum):
    IMAGEN_4 = "imagen-4.0-generate-001"
    GEMINI_3_PRO_IMAGE = "gemini-3-pro-image-preview"
    GEMINI_FLASH_IMAGE = "gemini-2.5-flash-image"
    GEMINI_3_FLASH = "gemini-3-flash-preview"


class AspectRatio(str, Enum):
    SQUARE = "1:1"
    PORTRAIT = "9:16"
    LANDSCAPE = "16:9"


@dataclass(frozen=True)
class ImageAsset:
    data: bytes
    mime_type: str = "image/png"

    @property
    def data_uri(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"

    def save(self, target: Path) -> Path:
        target = Path(target)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(self.data)
        return target


class GeminiImageClient:
    """Still-image generation through Imagen or Gemini image models."""

    def __init__(self, provider: GeminiClientProvider, image_size: str = "1K") -> None:
        self.provider = provider
        self.image_size = image_size

    def generate(self, prompt: str, model: ImageModel | str, aspect_ratio: AspectRatio | str) -> ImageAsset:
        model = ImageModel(model)
        aspect_ratio = AspectRatio(aspect_ratio)
        logger.info("Requesting %s image from %s", aspect_ratio.value, model.value)
        try:
            if model is ImageModel.IMAGEN_4:
                asset = self._generate_with_imagen(prompt, model, aspect_ratio)
            else:
                asset = self._generate_with_gemini(prompt, model, aspect_ratio)
        except ImageGenerationFailed:
            raise
        except Exception as exc:
            logger.error("Image request to %s failed: %s", model.value, exc)
            raise ImageGenerationFailed() from exc
        logger.info("Received %d-byte image from %s", len(asset.data), model.value)
        return asset

    def _generate_with_imagen(self, prompt: str, model: ImageModel, aspect_ratio: AspectRatio) -> ImageAsset:
        response = self.provider.get().models.generate_images(
            model=model.value,
            prompt=prompt,
            config=types.GenerateImagesConfig(
                number_of_images=1,
                aspect_ratio=aspect_ratio.value,
                output_mime_type="image/png",
            ),
        )
        images = getattr(response, "generated_images", None) or []
        image = getattr(images[0], "image", None) if images else None
        data = getattr(image, "image_bytes", None) if image is not None else None
        if not data:
            raise ImageGenerationFailed("Imagen response did not include an image")
        if isinstance(data, str):
            data = base64.b64decode(data)
        return ImageAsset(data=bytes(data), mime_type="image/png")

    def _generate_with_gemini(self, prompt: str, model: ImageModel, aspect_ratio: AspectRatio) -> ImageAsset:
        image_config = types.ImageConfig(aspect_ratio=aspect_ratio.value)
        if model is ImageModel.GEMINI_3_PRO_IMAGE:
            image_config = types.ImageConfig(aspect_ratio=aspect_ratio.value, image_size=self.image_size)
        response = self.provider.get().models.generate_content(
            model=model.value,
            contents=prompt,
            config=types.GenerateContentConfig(image_config=image_config),
        )
        blob = first_inline_blob(response)
        data = inline_bytes(blob)
        if not data:
            raise ImageGenerationFailed()
        return ImageAsset(data=data, mime_type=getattr(blob, "mime_type", None) or "image/png")
