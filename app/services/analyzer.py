"""Product analysis: extracted text -> :class:`ProductProfile` via one LLM call."""

import logging
from typing import Literal

from app.errors import InsufficientAnalysis, InsufficientSource
from app.models.profile import NOT_IDENTIFIED, PROFILE_FIELDS, ProductProfile
from app.services.llm_client import TextGenerator, parse_json_object
from app.services.sufficiency import is_profile_usable

logger = logging.getLogger(__name__)

AnalysisSource = Literal["link", "pdf", "file"]

MIN_ANALYSIS_CHARS = 50
MAX_ANALYSIS_CHARS = 4000

_SOURCE_LABELS = {
    "link": "uma landing page",
    "pdf": "um PDF",
    "file": "um arquivo enviado",
}

_SOURCE_HINTS = {
    "link": "Verifique se a URL está correta e acessível.",
    "pdf": "Verifique se o PDF contém texto legível (não apenas imagens).",
    "file": "Verifique se o arquivo contém texto legível sobre o produto.",
}

SYSTEM_PROMPT = (
    "Você é um analista de marketing que extrai informações REAIS de conteúdo. "
    "Nunca invente dados."
)

# Every field is required and typed as a plain string: unevidenced fields
# come back as the not-identified sentinel rather than being omitted.
PRODUCT_ANALYSIS_SCHEMA = {
    "name": "product_analysis",
    "strict": True,
    "schema": {
        "type": "object",
        "properties": {key: {"type": "string"} for key in PROFILE_FIELDS.values()},
        "required": list(PROFILE_FIELDS.values()),
        "additionalProperties": False,
    },
}


def build_analysis_prompt(source_type: AnalysisSource, text: str) -> str:
    return f"""Você é um analista de marketing especializado em produtos digitais e físicos.

Analise o seguinte conteúdo extraído de {_SOURCE_LABELS[source_type]} e retorne APENAS informações REAIS encontradas no conteúdo.

CONTEÚDO:
{text}

INSTRUÇÕES CRÍTICAS:
- NÃO invente ou assuma informações
- NÃO use exemplos genéricos
- Se não houver informação clara sobre algum campo, retorne "{NOT_IDENTIFIED}"
- Base sua análise EXCLUSIVAMENTE no conteúdo fornecido

Retorne um JSON com a seguinte estrutura:
{{
  "productName": "Nome real do produto encontrado",
  "targetAudience": "Público-alvo identificado no conteúdo",
  "mainPain": "Principal dor/problema que o produto resolve (mencionado no conteúdo)",
  "mainBenefit": "Principal benefício oferecido (mencionado no conteúdo)",
  "centralPromise": "Promessa central do produto (extraída do conteúdo)",
  "communicationTone": "Tom de comunicação usado (formal/informal/técnico/emocional)",
  "niche": "Nicho/categoria do produto"
}}"""


class ProductAnalyzer:
    def __init__(self, text_client: TextGenerator) -> None:
        self.text_client = text_client

    async def analyze(self, source_type: AnalysisSource, extracted_text: str) -> ProductProfile:
        """Identify the product described by *extracted_text*.

        Raises:
            InsufficientSource: the text is under 50 characters; the
                collaborator is not called.
            CollaboratorFailure: the call failed or returned malformed JSON.
            InsufficientAnalysis: the product name or main benefit could not
                be identified.
        """
        if not extracted_text or len(extracted_text.strip()) < MIN_ANALYSIS_CHARS:
            raise InsufficientSource(
                "Conteúdo insuficiente para análise. " + _SOURCE_HINTS[source_type]
            )

        prompt = build_analysis_prompt(source_type, extracted_text[:MAX_ANALYSIS_CHARS])
        answer = await self.text_client.complete(
            [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            json_schema=PRODUCT_ANALYSIS_SCHEMA,
        )

        profile = ProductProfile.from_analysis(parse_json_object(answer))

        if not is_profile_usable(profile):
            logger.warning(
                "Analysis could not identify the product",
                extra={"source_type": source_type, "product_name": profile.product_name},
            )
            raise InsufficientAnalysis(
                "Não foi possível identificar informações suficientes do produto. "
                "Verifique se o conteúdo fornecido contém informações claras sobre o produto."
            )

        logger.info("Product identified: %s", profile.product_name)
        return profile
