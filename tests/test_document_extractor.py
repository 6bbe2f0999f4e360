"""Tests for uploaded-file extraction (PDF and plain text)."""

import asyncio
import base64

import pytest
from conftest import FakePdfConverter

from app.errors import CollaboratorFailure, InsufficientSource, InvalidInputError
from app.services.document_extractor import PLAIN_TEXT_TITLE, extract_document

_PDF_BYTES = b"%PDF-1.4 fake"
_PDF_B64 = base64.b64encode(_PDF_BYTES).decode()

_PDF_TEXT = """Mentoria Vendas Online
Aprenda a vender todos os dias pela internet com método validado.

O QUE VOCÊ VAI APRENDER
- Criar ofertas irresistíveis
• Montar funis de venda
* Escalar campanhas
→ Fechar vendas no WhatsApp

Investimento de R$ 1.497,00 ou 12x de R$ 149,70
Garanta sua vaga na próxima turma
"""


def _extract(content, mime="application/pdf", converter=None):
    return asyncio.run(extract_document(content, mime, converter or FakePdfConverter(_PDF_TEXT)))


class TestPdfStructuring:
    def test_title_and_description_from_first_lines(self):
        content = _extract(_PDF_B64)
        assert content.source_kind == "pdf"
        assert content.title == "Mentoria Vendas Online"
        assert content.description.startswith("Aprenda a vender")

    def test_uppercase_lines_become_headings(self):
        assert _extract(_PDF_B64).headings == ["O QUE VOCÊ VAI APRENDER"]

    def test_bullet_glyphs_stripped(self):
        assert _extract(_PDF_B64).bullets == [
            "Criar ofertas irresistíveis",
            "Montar funis de venda",
            "Escalar campanhas",
            "Fechar vendas no WhatsApp",
        ]

    def test_prices_and_ctas(self):
        content = _extract(_PDF_B64)
        assert content.prices == ["R$ 1.497,00", "R$ 149,70"]
        assert content.ctas == ["Garanta sua vaga na próxima turma"]

    def test_sufficient(self):
        assert _extract(_PDF_B64).is_sufficient is True

    def test_raw_bytes_accepted(self):
        converter = FakePdfConverter(_PDF_TEXT)
        _extract(_PDF_BYTES, converter=converter)
        assert converter.calls == 1

    def test_data_url_accepted(self):
        content = _extract(f"data:application/pdf;base64,{_PDF_B64}")
        assert content.title == "Mentoria Vendas Online"

    def test_mime_wrapped_base64_accepted(self):
        wrapped = base64.encodebytes(b"%PDF-1.4 " + b"x" * 120).decode()
        assert "\n" in wrapped
        converter = FakePdfConverter(_PDF_TEXT)
        assert _extract(wrapped, converter=converter).title == "Mentoria Vendas Online"

    def test_long_title_truncated(self):
        text = "T" * 150 + "\n" + "linha de descrição " * 20
        assert len(_extract(_PDF_B64, converter=FakePdfConverter(text)).title) == 100


class TestPdfThresholds:
    def test_under_50_chars_raises(self):
        converter = FakePdfConverter("x" * 40)
        with pytest.raises(InsufficientSource):
            _extract(_PDF_B64, converter=converter)

    def test_between_50_and_150_returns_empty_insufficient(self):
        content = _extract(_PDF_B64, converter=FakePdfConverter("Produto incrível. " * 5))
        assert content.title == ""
        assert content.full_text == ""
        assert content.headings == []
        assert content.is_sufficient is False

    def test_200_chars_is_structured(self):
        content = _extract(_PDF_B64, converter=FakePdfConverter("Linha de texto útil " * 10))
        assert len(content.full_text) == 199  # stripped
        assert content.is_sufficient is True

    def test_converter_failure_propagates(self):
        converter = FakePdfConverter(error=CollaboratorFailure("pdftotext falhou"))
        with pytest.raises(CollaboratorFailure):
            _extract(_PDF_B64, converter=converter)

    def test_invalid_base64(self):
        with pytest.raises(InvalidInputError):
            _extract("isto não é base64!!")


class TestPlainText:
    def test_plain_text_result(self):
        converter = FakePdfConverter(_PDF_TEXT)
        content = _extract("Descrição do produto. " * 20, mime="text/plain", converter=converter)
        assert content.source_kind == "text"
        assert content.title == PLAIN_TEXT_TITLE
        assert content.headings == []
        assert content.is_sufficient is True
        assert converter.calls == 0

    def test_short_plain_text_insufficient(self):
        content = _extract("curto demais", mime="text/plain")
        assert content.is_sufficient is False

    def test_plain_text_capped(self):
        content = _extract("a" * 9000, mime="text/markdown")
        assert len(content.full_text) == 5000

    def test_bytes_decoded(self):
        content = _extract("Olá mundo".encode() * 30, mime="text/plain")
        assert content.full_text.startswith("Olá mundo")
