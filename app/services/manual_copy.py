"""Manual mode: a complete ad from user-typed descriptors in one LLM call.

The collaborator answers in labelled sections which are parsed back into
fields.  A missing headline, body or CTA section fails the request; the
emotional angle and creative idea are optional.
"""

import logging
import re
from typing import Dict

from app.errors import CollaboratorFailure
from app.models.request import GenerateCopyRequest
from app.models.response import GenerateCopyResponse
from app.services.llm_client import TextGenerator

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "Você é um especialista em copywriting para Facebook Ads. "
    "Sempre responda no formato exato solicitado."
)

_SECTION_FIELDS = {
    "HEADLINE": "headline",
    "TEXTO DO ANÚNCIO": "body",
    "CTA": "cta",
    "ÂNGULO EMOCIONAL": "emotional_angle",
    "IDEIA DE CRIATIVO": "creative_idea",
}
_REQUIRED_FIELDS = ("headline", "body", "cta")

# A label at the start of a line, optionally wrapped in markdown bold
_SECTION_RE = re.compile(
    r"^[ \t]*\**[ \t]*(" + "|".join(_SECTION_FIELDS) + r")[ \t]*\**[ \t]*:[ \t]*\**",
    re.IGNORECASE | re.MULTILINE,
)


def build_manual_prompt(request: GenerateCopyRequest) -> str:
    return f"""Você é um especialista em Facebook Ads com mais de 10 anos de experiência.

Crie UM anúncio persuasivo com base nas informações abaixo:

Nicho do produto: {request.niche}
Público-alvo: {request.audience}
Objetivo do anúncio: {request.objective}
Nível de consciência: {request.awareness}
Tom da comunicação: {request.tone}

Regras:
- Linguagem simples e direta
- Não usar palavras proibidas pelo Facebook
- Não prometer ganhos ou resultados irreais
- Focar em dor, solução e ação

Entregue EXATAMENTE neste formato:

HEADLINE:
(escreva uma headline curta e impactante)

TEXTO DO ANÚNCIO:
(escreva até 3 parágrafos curtos)

CTA:
(chamada clara para ação)

ÂNGULO EMOCIONAL:
(emoção principal explorada)

IDEIA DE CRIATIVO:
(descreva uma ideia de imagem ou vídeo)"""


def parse_sections(text: str) -> Dict[str, str]:
    """Split a labelled answer into ``{field: text}``; first occurrence wins."""
    sections: Dict[str, str] = {}
    matches = list(_SECTION_RE.finditer(text))
    for index, match in enumerate(matches):
        end = matches[index + 1].start() if index + 1 < len(matches) else len(text)
        field = _SECTION_FIELDS[match.group(1).upper()]
        if field not in sections:
            sections[field] = text[match.end():end].strip().strip("*").strip()
    return sections


class ManualCopyGenerator:
    def __init__(self, text_client: TextGenerator) -> None:
        self.text_client = text_client

    async def generate(self, request: GenerateCopyRequest) -> GenerateCopyResponse:
        answer = await self.text_client.complete(
            [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_manual_prompt(request)},
            ]
        )
        sections = parse_sections(answer)
        missing = [name for name in _REQUIRED_FIELDS if not sections.get(name)]
        if missing:
            logger.error("Creative answer is missing sections: %s", ", ".join(missing))
            raise CollaboratorFailure("Erro ao gerar criativo. Tente novamente.")

        return GenerateCopyResponse(
            headline=sections["headline"],
            body=sections["body"],
            cta=sections["cta"],
            emotional_angle=sections.get("emotional_angle", ""),
            creative_idea=sections.get("creative_idea", ""),
        )
