"""Tests for the OpenAI-backed clients against an in-process stand-in."""

import asyncio
from types import SimpleNamespace

import httpx
import openai
import pytest

from app.errors import CollaboratorFailure
from app.services.llm_client import OpenAIImageClient, OpenAITextClient, parse_json_object

_REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def _completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


class _Completions:
    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.kwargs = []

    async def create(self, **kwargs):
        self.kwargs.append(kwargs)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def _text_client(*outcomes, max_attempts=3):
    completions = _Completions(outcomes)
    fake = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return OpenAITextClient(fake, "gpt-4o-mini", max_attempts), completions


class TestOpenAITextClient:
    def test_returns_message_content(self):
        client, completions = _text_client(_completion("Olá"))
        assert asyncio.run(client.complete([{"role": "user", "content": "oi"}])) == "Olá"
        assert "response_format" not in completions.kwargs[0]

    def test_json_schema_sets_response_format(self):
        schema = {"name": "product_analysis", "strict": True, "schema": {"type": "object"}}
        client, completions = _text_client(_completion("{}"))
        asyncio.run(client.complete([{"role": "user", "content": "oi"}], json_schema=schema))
        assert completions.kwargs[0]["response_format"] == {"type": "json_schema", "json_schema": schema}

    def test_transient_error_retried(self):
        client, completions = _text_client(
            openai.APIConnectionError(request=_REQUEST), _completion("ok"), max_attempts=2
        )
        assert asyncio.run(client.complete([{"role": "user", "content": "oi"}])) == "ok"
        assert len(completions.kwargs) == 2

    def test_auth_error_not_retried(self):
        error = openai.AuthenticationError(
            "invalid key", response=httpx.Response(401, request=_REQUEST), body=None
        )
        client, completions = _text_client(error, _completion("ok"))
        with pytest.raises(CollaboratorFailure) as exc_info:
            asyncio.run(client.complete([{"role": "user", "content": "oi"}]))
        assert exc_info.value.cause is error
        assert len(completions.kwargs) == 1

    def test_empty_content(self):
        client, _ = _text_client(_completion(None))
        with pytest.raises(CollaboratorFailure):
            asyncio.run(client.complete([{"role": "user", "content": "oi"}]))


class _Images:
    def __init__(self, image):
        self.image = image

    async def generate(self, **kwargs):
        return SimpleNamespace(data=[self.image] if self.image else [])


def _image_client(image):
    return OpenAIImageClient(SimpleNamespace(images=_Images(image)), "dall-e-3")


class TestOpenAIImageClient:
    def test_url(self):
        client = _image_client(SimpleNamespace(url="https://img.example/a.png", b64_json=None))
        assert asyncio.run(client.generate("prompt")) == "https://img.example/a.png"

    def test_base64_payload_becomes_data_url(self):
        client = _image_client(SimpleNamespace(url=None, b64_json="aGVsbG8="))
        assert asyncio.run(client.generate("prompt")) == "data:image/png;base64,aGVsbG8="

    def test_no_image(self):
        with pytest.raises(CollaboratorFailure):
            asyncio.run(_image_client(None).generate("prompt"))


class TestParseJsonObject:
    def test_object(self):
        assert parse_json_object('{"productName": "Curso"}') == {"productName": "Curso"}

    @pytest.mark.parametrize("text", ["", "nao json", "[1, 2]", '"texto"'])
    def test_rejects_non_objects(self, text):
        with pytest.raises(CollaboratorFailure):
            parse_json_object(text)
