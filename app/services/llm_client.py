"""Clients for the text- and image-generation collaborators.

The pipeline only depends on the :class:`TextGenerator` and
:class:`ImageGenerator` protocols; the OpenAI implementations below are
built from settings in :mod:`app.dependencies` and injected per request.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Protocol

import openai
from openai import AsyncOpenAI
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from app.config import Settings
from app.errors import CollaboratorFailure

logger = logging.getLogger(__name__)

Message = Dict[str, str]

# Worth another attempt; anything else (auth, bad request) is final
TRANSIENT_ERRORS = (
    openai.APIConnectionError,
    openai.RateLimitError,
    openai.InternalServerError,
)


class TextGenerator(Protocol):
    async def complete(
        self, messages: List[Message], *, json_schema: Optional[Dict[str, Any]] = None
    ) -> str:
        """Return the completion text (schema-conforming JSON when *json_schema* is set)."""
        ...


class ImageGenerator(Protocol):
    async def generate(self, prompt: str) -> str:
        """Return the URL of an image generated from *prompt*."""
        ...


def _retrying(max_attempts: int) -> AsyncRetrying:
    return AsyncRetrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=1, max=8),
        retry=retry_if_exception_type(TRANSIENT_ERRORS),
        reraise=True,
    )


class OpenAITextClient:
    """Chat-completions wrapper with bounded retries on transient errors."""

    def __init__(
        self,
        client: AsyncOpenAI,
        model: str,
        max_attempts: int = 3,
    ) -> None:
        self.client = client
        self.model = model
        self.max_attempts = max_attempts

    @classmethod
    def from_settings(cls, settings: Settings) -> "OpenAITextClient":
        client = AsyncOpenAI(
            api_key=settings.openai_api_key or None,
            base_url=settings.openai_base_url,
            timeout=settings.openai_timeout,
            max_retries=0,
        )
        return cls(client, settings.openai_model, settings.llm_max_attempts)

    async def complete(
        self, messages: List[Message], *, json_schema: Optional[Dict[str, Any]] = None
    ) -> str:
        kwargs: Dict[str, Any] = {"model": self.model, "messages": messages}
        if json_schema is not None:
            kwargs["response_format"] = {"type": "json_schema", "json_schema": json_schema}

        try:
            async for attempt in _retrying(self.max_attempts):
                with attempt:
                    response = await self.client.chat.completions.create(**kwargs)
        except openai.OpenAIError as exc:
            logger.error("Text generation failed (model=%s): %s", self.model, exc)
            raise CollaboratorFailure("Erro ao gerar criativo. Tente novamente.", cause=exc)

        content = response.choices[0].message.content if response.choices else None
        if not content:
            logger.error("Text generation returned an empty message (model=%s)", self.model)
            raise CollaboratorFailure("Erro ao gerar criativo. Tente novamente.")
        return content


class OpenAIImageClient:
    def __init__(
        self,
        client: AsyncOpenAI,
        model: str,
        size: str = "1024x1024",
        max_attempts: int = 3,
    ) -> None:
        self.client = client
        self.model = model
        self.size = size
        self.max_attempts = max_attempts

    @classmethod
    def from_settings(cls, settings: Settings) -> "OpenAIImageClient":
        client = AsyncOpenAI(
            api_key=settings.openai_api_key or None,
            base_url=settings.openai_base_url,
            timeout=settings.openai_timeout,
            max_retries=0,
        )
        return cls(client, settings.openai_image_model, max_attempts=settings.llm_max_attempts)

    async def generate(self, prompt: str) -> str:
        try:
            async for attempt in _retrying(self.max_attempts):
                with attempt:
                    response = await self.client.images.generate(
                        model=self.model, prompt=prompt, size=self.size, n=1
                    )
        except openai.OpenAIError as exc:
            logger.error("Image generation failed (model=%s): %s", self.model, exc)
            raise CollaboratorFailure("Erro ao gerar imagem. Tente novamente.", cause=exc)

        image = response.data[0] if response.data else None
        if image is not None and image.url:
            return image.url
        # Some models only return base64 payloads
        if image is not None and image.b64_json:
            return f"data:image/png;base64,{image.b64_json}"
        logger.error("Image generation returned no image (model=%s)", self.model)
        raise CollaboratorFailure("Erro ao gerar imagem. Tente novamente.")


def parse_json_object(text: str) -> Dict[str, Any]:
    """Parse a structured-output answer, raising CollaboratorFailure if it is not an object."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        logger.error("Collaborator returned invalid JSON: %.200s", text)
        raise CollaboratorFailure("Erro ao analisar o produto. Tente novamente.", cause=exc)
    if not isinstance(data, dict):
        raise CollaboratorFailure("Erro ao analisar o produto. Tente novamente.")
    return data
