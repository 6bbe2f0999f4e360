"""Ad copy generation from a :class:`ProductProfile`.

One collaborator call per asset.  Length guidance is part of the prompt
only: the generated text is returned as written, never truncated.
"""

import asyncio
import logging

from app.errors import CollaboratorFailure, InsufficientAnalysis
from app.models.creative import AssetType, CopyAssets
from app.models.profile import ProductProfile
from app.services.llm_client import TextGenerator
from app.services.sufficiency import is_profile_usable

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "Você é um copywriter profissional que cria textos baseados em dados reais. "
    "Nunca invente informações."
)

_ASSET_LABELS = {
    AssetType.HEADLINE: "headline",
    AssetType.BODY: "anúncio",
    AssetType.CTA: "cta",
}


def build_copy_prompt(profile: ProductProfile, asset_type: AssetType, objective: str) -> str:
    return f"""Você é um copywriter profissional especializado em anúncios para Facebook Ads.

DADOS REAIS DO PRODUTO:
- Nome: {profile.display("product_name")}
- Público-alvo: {profile.display("target_audience")}
- Dor principal: {profile.display("main_pain")}
- Benefício principal: {profile.display("main_benefit")}
- Promessa central: {profile.display("central_promise")}
- Tom de comunicação: {profile.display("communication_tone")}
- Nicho: {profile.display("niche")}

OBJETIVO: {objective}

TIPO DE COPY: {_ASSET_LABELS[asset_type]}

INSTRUÇÕES CRÍTICAS:
- Use APENAS as informações reais fornecidas acima
- NÃO invente benefícios ou características
- NÃO use exemplos genéricos
- Seja específico e direto
- Mantenha o tom de comunicação identificado

{asset_type.guidance}

Retorne APENAS o texto da copy, sem explicações ou comentários."""


class CopyGenerator:
    def __init__(self, text_client: TextGenerator) -> None:
        self.text_client = text_client

    async def generate_copy(
        self, profile: ProductProfile, asset_type: AssetType, objective: str
    ) -> str:
        if not is_profile_usable(profile):
            raise InsufficientAnalysis(
                "Dados insuficientes para gerar copy. Análise do produto incompleta."
            )

        answer = await self.text_client.complete(
            [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_copy_prompt(profile, asset_type, objective)},
            ]
        )
        text = answer.strip()
        if not text:
            raise CollaboratorFailure("Erro ao gerar copy. Tente novamente.")
        return text

    async def generate_all(self, profile: ProductProfile, objective: str) -> CopyAssets:
        """Generate headline, body and CTA concurrently.

        The three calls are independent.  If any of them fails the others
        are cancelled and the error propagates: there is no partial result.
        """
        tasks = [
            asyncio.ensure_future(self.generate_copy(profile, asset_type, objective))
            for asset_type in (AssetType.HEADLINE, AssetType.BODY, AssetType.CTA)
        ]
        try:
            headline, body, cta = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            # Let cancelled siblings settle so none outlives the request
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        return CopyAssets(headline=headline, body=body, cta=cta)
