from app.models.request import GenerateCopyRequest
from app.services.manual_copy import build_manual_prompt, parse_sections


class TestParseSections:
    def test_markdown_bold_labels(self):
        text = (
            "**HEADLINE:** Venda mais no WhatsApp\n\n"
            "**Texto do anúncio:**\nMensagens automáticas para sua loja.\n\n"
            "**CTA:** Fale conosco\n"
        )
        assert parse_sections(text) == {
            "headline": "Venda mais no WhatsApp",
            "body": "Mensagens automáticas para sua loja.",
            "cta": "Fale conosco",
        }

    def test_first_occurrence_wins(self):
        text = "HEADLINE:\nPrimeira\nCTA:\nAgora\nHEADLINE:\nSegunda"
        assert parse_sections(text)["headline"] == "Primeira"

    def test_label_inside_sentence_ignored(self):
        text = "HEADLINE:\nUm CTA: forte\nCTA:\nCompre já"
        sections = parse_sections(text)
        assert sections["headline"] == "Um CTA: forte"
        assert sections["cta"] == "Compre já"

    def test_no_labels(self):
        assert parse_sections("texto livre sem formato") == {}


def test_prompt_carries_every_descriptor():
    request = GenerateCopyRequest(
        niche="Moda fitness",
        audience="Mulheres de 25 a 40 anos",
        objective="WhatsApp",
        awareness="Quente",
        tone="Urgente",
    )
    prompt = build_manual_prompt(request)
    for value in ("Moda fitness", "Mulheres de 25 a 40 anos", "WhatsApp", "Quente", "Urgente"):
        assert value in prompt
    assert "IDEIA DE CRIATIVO:" in prompt
