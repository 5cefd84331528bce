"""Gateway to the vision, text and embedding models."""

import asyncio
import base64
import logging
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Protocol, TypeVar

from food_recommender.domain.errors import UpstreamModelError
from food_recommender.services.prompts import caption_prompt

_T = TypeVar("_T")

_logger = logging.getLogger(__name__)


class LanguageModelClient(Protocol):
    """Interface for generation and embedding calls."""

    async def generate(
        self, *, model: str, prompt: str, image_data_url: str | None = None
    ) -> str | None:
        """Return generated text, or None when the model produced nothing."""

    async def embed(self, *, model: str, text: str) -> object:
        """Return the raw embedding produced for the text."""


@dataclass
class LanguageModelService:
    """Service that bounds model calls and validates their text output."""

    client: LanguageModelClient
    vision_model: str
    text_model: str
    embedding_model: str
    timeout_seconds: float = 600.0

    async def caption(self, image_bytes: bytes) -> str:
        """Describe the dish shown in an image."""
        data_url = _to_data_url(image_bytes)
        text = await self._bounded(
            self.client.generate(
                model=self.vision_model,
                prompt=caption_prompt(),
                image_data_url=data_url,
            ),
            action=f"caption with {self.vision_model}",
        )
        return _require_text(text, model=self.vision_model)

    async def complete(self, prompt: str) -> str:
        """Generate text for a prompt with the text model."""
        text = await self._bounded(
            self.client.generate(model=self.text_model, prompt=prompt),
            action=f"generate with {self.text_model}",
        )
        return _require_text(text, model=self.text_model)

    async def embed(self, text: str) -> object:
        """Return the raw embedding for a text; decoding is left to the codec."""
        return await self._bounded(
            self.client.embed(model=self.embedding_model, text=text),
            action=f"embed with {self.embedding_model}",
        )

    async def _bounded(self, call: Awaitable[_T], *, action: str) -> _T:
        try:
            return await asyncio.wait_for(call, timeout=self.timeout_seconds)
        except TimeoutError as exc:
            _logger.warning("Model call timed out: %s", action)
            raise UpstreamModelError(
                f"{action} timed out after {self.timeout_seconds:g}s"
            ) from exc


def _require_text(text: str | None, *, model: str) -> str:
    if not text or not text.strip():
        raise UpstreamModelError(f"No valid response from {model}")
    return text.strip()


def _to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
