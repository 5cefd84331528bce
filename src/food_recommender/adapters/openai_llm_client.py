"""OpenAI-compatible client for generation and embeddings."""

from dataclasses import dataclass

import httpx
from openai import AsyncOpenAI, OpenAIError

from food_recommender.domain.errors import UpstreamModelError
from food_recommender.services.llm import LanguageModelClient


@dataclass
class OpenAILanguageModelClient(LanguageModelClient):
    """Language model client backed by an OpenAI-compatible endpoint."""

    client: AsyncOpenAI

    @classmethod
    def create(
        cls, api_key: str, base_url: str | None, timeout_seconds: float
    ) -> "OpenAILanguageModelClient":
        """Create a client; a local Ollama server works through its /v1 API."""
        return cls(
            client=AsyncOpenAI(
                api_key=api_key,
                base_url=base_url,
                max_retries=0,
                http_client=httpx.AsyncClient(timeout=timeout_seconds),
            )
        )

    async def generate(
        self, *, model: str, prompt: str, image_data_url: str | None = None
    ) -> str | None:
        """Call the chat completions API, attaching the image when given."""
        content: list[dict[str, object]] = [{"type": "text", "text": prompt}]
        if image_data_url:
            content.append(
                {"type": "image_url", "image_url": {"url": image_data_url}}
            )
        try:
            response = await self.client.chat.completions.create(
                model=model,
                messages=[{"role": "user", "content": content}],
            )
        except OpenAIError as exc:
            raise UpstreamModelError(f"{model} generation failed: {exc}") from exc
        if not response.choices:
            return None
        return response.choices[0].message.content

    async def embed(self, *, model: str, text: str) -> object:
        """Call the embeddings API and return the first vector."""
        try:
            response = await self.client.embeddings.create(model=model, input=text)
        except OpenAIError as exc:
            raise UpstreamModelError(f"{model} embedding failed: {exc}") from exc
        if not response.data:
            return None
        return response.data[0].embedding

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
