"""Tests for the OpenAI-compatible model adapter."""

import asyncio

import httpx
import openai
import pytest

from food_recommender.adapters.openai_llm_client import OpenAILanguageModelClient
from food_recommender.domain.errors import UpstreamModelError


def _obj(**fields: object) -> object:
    return type("Obj", (), fields)()


class _FakeCompletions:
    def __init__(self, content: str | None) -> None:
        self.content = content
        self.last_payload: dict[str, object] | None = None

    async def create(self, **kwargs):  # type: ignore[no-untyped-def]
        self.last_payload = kwargs
        message = _obj(content=self.content)
        return _obj(choices=[_obj(message=message)])


class _FakeEmbeddings:
    def __init__(self) -> None:
        self.last_payload: dict[str, object] | None = None

    async def create(self, **kwargs):  # type: ignore[no-untyped-def]
        self.last_payload = kwargs
        return _obj(data=[_obj(embedding=[0.25, 0.75])])


class _FailingEmbeddings:
    async def create(self, **kwargs):  # type: ignore[no-untyped-def]
        raise openai.APIConnectionError(
            request=httpx.Request("POST", "http://localhost:11434/v1/embeddings")
        )


class _FakeOpenAI:
    def __init__(self, content: str | None = "A bowl of ramen.") -> None:
        self.chat = _obj(completions=_FakeCompletions(content))
        self.embeddings = _FakeEmbeddings()


def test_generate_attaches_image_content() -> None:
    fake = _FakeOpenAI()
    client = OpenAILanguageModelClient(client=fake)

    text = asyncio.run(
        client.generate(
            model="llava:7b",
            prompt="Describe the dish",
            image_data_url="data:image/jpeg;base64,ZmFrZQ==",
        )
    )

    assert text == "A bowl of ramen."
    payload = fake.chat.completions.last_payload
    assert payload is not None
    assert payload["model"] == "llava:7b"
    content = payload["messages"][0]["content"]
    assert content[0] == {"type": "text", "text": "Describe the dish"}
    assert content[1]["image_url"] == {"url": "data:image/jpeg;base64,ZmFrZQ=="}


def test_generate_text_only_prompt() -> None:
    fake = _FakeOpenAI(content=None)
    client = OpenAILanguageModelClient(client=fake)

    text = asyncio.run(client.generate(model="mistral", prompt="Hi"))

    assert text is None
    payload = fake.chat.completions.last_payload
    assert payload is not None
    assert len(payload["messages"][0]["content"]) == 1


def test_embed_returns_first_vector() -> None:
    fake = _FakeOpenAI()
    client = OpenAILanguageModelClient(client=fake)

    vector = asyncio.run(client.embed(model="mistral", text='{"age": 30}'))

    assert vector == [0.25, 0.75]
    assert fake.embeddings.last_payload == {"model": "mistral", "input": '{"age": 30}'}


def test_embed_translates_sdk_errors() -> None:
    fake = _FakeOpenAI()
    fake.embeddings = _FailingEmbeddings()
    client = OpenAILanguageModelClient(client=fake)

    with pytest.raises(UpstreamModelError, match="mistral embedding failed"):
        asyncio.run(client.embed(model="mistral", text="x"))


def test_create_configures_local_endpoint() -> None:
    client = OpenAILanguageModelClient.create(
        api_key="ollama",
        base_url="http://localhost:11434/v1",
        timeout_seconds=30,
    )

    assert str(client.client.base_url).startswith("http://localhost:11434/v1")
    asyncio.run(client.close())
