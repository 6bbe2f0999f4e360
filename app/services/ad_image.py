from app.models.request import GenerateImageRequest
from app.services.llm_client import ImageGenerator


def build_image_prompt(request: GenerateImageRequest) -> str:
    """Square ad-image prompt; the creative briefing, when given, leads the visual."""
    briefing = f"\nDireção visual:\n{request.briefing}\n" if request.briefing else ""
    return f"""Crie uma imagem publicitária realista e de alta conversão para Facebook e Instagram Ads.

Contexto do anúncio:
- Nicho: {request.niche}
- Público-alvo: {request.audience}
- Objetivo: {request.objective}
- Tom: {request.tone}

Mensagem principal do anúncio:
{request.headline}
{briefing}
Estilo da imagem:
- Visual profissional
- Alto impacto
- Estilo publicitário
- Sem textos longos na imagem

Formato:
- 1:1 (quadrado)
- Alta qualidade
- Fundo limpo ou desfocado
- Elemento visual central claro

Não adicionar texto excessivo.
A imagem deve comunicar a ideia principal do anúncio visualmente."""


async def generate_ad_image(request: GenerateImageRequest, image_client: ImageGenerator) -> str:
    """Return the URL of the generated ad image."""
    return await image_client.generate(build_image_prompt(request))
