import logging

from app.errors import CollaboratorFailure
from app.models.profile import ProductProfile
from app.services.llm_client import TextGenerator

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "Você é um diretor de arte que cria briefings para imagens profissionais."


def build_briefing_prompt(profile: ProductProfile) -> str:
    return f"""Você é um diretor de arte especializado em criativos para Facebook Ads.

DADOS REAIS DO PRODUTO:
- Nome: {profile.display("product_name")}
- Nicho: {profile.display("niche")}
- Benefício principal: {profile.display("main_benefit")}
- Tom: {profile.display("communication_tone")}

Crie um briefing PROFISSIONAL para geração de imagem que:
- Seja executivo e premium (NÃO pareça IA genérica)
- Represente o produto de forma realista
- Use elementos visuais adequados ao nicho
- Tenha aparência de anúncio profissional

Retorne APENAS o prompt para geração de imagem, sem explicações.
Máximo 200 caracteres."""


class BriefingGenerator:
    """Writes the image-generation directive for a product.

    The 200-character limit is a prompt instruction, not a truncation.
    """

    def __init__(self, text_client: TextGenerator) -> None:
        self.text_client = text_client

    async def generate_briefing(self, profile: ProductProfile) -> str:
        answer = await self.text_client.complete(
            [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_briefing_prompt(profile)},
            ]
        )
        briefing = answer.strip()
        if not briefing:
            raise CollaboratorFailure("Erro ao gerar briefing. Tente novamente.")
        if len(briefing) > 200:
            logger.info("Briefing exceeds the requested length (%d characters)", len(briefing))
        return briefing
