"""FastAPI dependency providers for the external collaborators.

Clients are built from settings here rather than at import time; tests
replace any of them through ``app.dependency_overrides``.
"""

from functools import lru_cache

from fastapi import Depends

from app.config import Settings, get_settings
from app.services.document_extractor import PdfConverter
from app.services.llm_client import (
    ImageGenerator,
    OpenAIImageClient,
    OpenAITextClient,
    TextGenerator,
)
from app.services.pdf_converter import PdfToTextConverter
from app.services.pipeline import CreativePipeline


@lru_cache(maxsize=1)
def _text_client(settings: Settings) -> OpenAITextClient:
    return OpenAITextClient.from_settings(settings)


@lru_cache(maxsize=1)
def _image_client(settings: Settings) -> OpenAIImageClient:
    return OpenAIImageClient.from_settings(settings)


def get_text_client(settings: Settings = Depends(get_settings)) -> TextGenerator:
    return _text_client(settings)


def get_image_client(settings: Settings = Depends(get_settings)) -> ImageGenerator:
    return _image_client(settings)


def get_pdf_converter(settings: Settings = Depends(get_settings)) -> PdfConverter:
    return PdfToTextConverter(settings.pdftotext_bin, settings.pdftotext_timeout)


def get_pipeline(
    settings: Settings = Depends(get_settings),
    text_client: TextGenerator = Depends(get_text_client),
    pdf_converter: PdfConverter = Depends(get_pdf_converter),
) -> CreativePipeline:
    """A fresh pipeline per request; only the HTTP clients are reused."""
    return CreativePipeline(
        text_client, pdf_converter, strategy=settings.extraction_strategy
    )
