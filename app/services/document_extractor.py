"""Uploaded-file extraction (PDF or plain text) into :class:`ExtractedContent`."""

import base64
import binascii
import logging
import re
from typing import List, Protocol, Union

from app.errors import InsufficientSource, InvalidInputError
from app.models.content import ExtractedContent
from app.services.patterns import FULL_TEXT_MAX_CHARS, find_prices, is_cta_text

logger = logging.getLogger(__name__)

PLAIN_TEXT_TITLE = "Arquivo enviado"

# Below this the converter "worked" but the PDF is effectively an image
MIN_PDF_TEXT_CHARS = 50
# Below this there is text, but too little to structure
MIN_STRUCTURED_PDF_CHARS = 150

MAX_TITLE_CHARS = 100
MAX_DESCRIPTION_CHARS = 200
MAX_HEADINGS = 10
MAX_BULLETS = 20
MAX_CTAS = 5

_BULLET_RE = re.compile(r"^[-•*→]\s*")


class PdfConverter(Protocol):
    async def convert(self, pdf_bytes: bytes) -> str: ...


def is_pdf(mime_type: str) -> bool:
    return "pdf" in (mime_type or "").lower()


def _decode_pdf(content: Union[str, bytes]) -> bytes:
    if isinstance(content, bytes):
        return content
    # Accept data URLs (FileReader.readAsDataURL) and MIME-wrapped lines
    if content.startswith("data:") and "," in content:
        content = content.split(",", 1)[1]
    try:
        return base64.b64decode("".join(content.split()), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidInputError("O arquivo PDF enviado não está em base64 válido.", cause=exc)


def _structure_pdf_text(text: str) -> ExtractedContent:
    lines = [line.strip() for line in text.split("\n") if line.strip()]

    headings = [
        line for line in lines if 5 < len(line) < 100 and line == line.upper()
    ][:MAX_HEADINGS]
    bullets: List[str] = []
    for line in lines:
        if _BULLET_RE.match(line):
            bullet = _BULLET_RE.sub("", line).strip()
            if bullet:
                bullets.append(bullet)
    ctas = [line for line in lines if is_cta_text(line)][:MAX_CTAS]

    return ExtractedContent(
        source_kind="pdf",
        title=lines[0][:MAX_TITLE_CHARS] if lines else "",
        description=lines[1][:MAX_DESCRIPTION_CHARS] if len(lines) > 1 else "",
        full_text=text[:FULL_TEXT_MAX_CHARS],
        headings=headings,
        bullets=bullets[:MAX_BULLETS],
        prices=find_prices(text),
        ctas=ctas,
    )


async def extract_pdf(content: Union[str, bytes], converter: PdfConverter) -> ExtractedContent:
    """Convert a PDF and structure its text.

    Raises:
        InvalidInputError: if *content* is text but not valid base64.
        CollaboratorFailure: if the converter fails (propagated).
        InsufficientSource: if the converter produced under 50 characters.
    """
    pdf_bytes = _decode_pdf(content)
    text = (await converter.convert(pdf_bytes)).strip()

    if len(text) < MIN_PDF_TEXT_CHARS:
        logger.warning("PDF produced only %d characters of text", len(text))
        raise InsufficientSource(
            "PDF não contém texto legível suficiente. "
            "Verifique se o arquivo não está protegido ou é apenas imagem."
        )

    if len(text) < MIN_STRUCTURED_PDF_CHARS:
        logger.info("PDF text too short to structure (%d characters)", len(text))
        return ExtractedContent.empty("pdf")

    return _structure_pdf_text(text)


def extract_plain_text(content: Union[str, bytes]) -> ExtractedContent:
    text = content.decode("utf-8", errors="replace") if isinstance(content, bytes) else content
    return ExtractedContent(
        source_kind="text",
        title=PLAIN_TEXT_TITLE,
        full_text=text[:FULL_TEXT_MAX_CHARS],
    )


async def extract_document(
    content: Union[str, bytes], mime_type: str, converter: PdfConverter
) -> ExtractedContent:
    """Extract an uploaded file according to its declared MIME type."""
    if is_pdf(mime_type):
        return await extract_pdf(content, converter)
    return extract_plain_text(content)
