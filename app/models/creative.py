from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict

from app.models.profile import ProductProfile

Objective = Literal["Vendas", "Leads", "WhatsApp"]
Awareness = Literal["Frio", "Morno", "Quente"]
Tone = Literal["Emocional", "Profissional", "Direto", "Urgente"]


class AssetType(str, Enum):
    """One piece of ad copy.

    ``guidance`` is the length instruction sent to the collaborator.  It is
    advisory: generated text is returned as written, never truncated.
    """

    HEADLINE = "headline"
    BODY = "body"
    CTA = "cta"

    @property
    def guidance(self) -> str:
        return _ASSET_GUIDANCE[self]


_ASSET_GUIDANCE = {
    AssetType.HEADLINE: "Crie uma headline impactante (máximo 40 caracteres)",
    AssetType.BODY: "Crie um texto de anúncio completo (100-150 palavras)",
    AssetType.CTA: "Crie um CTA (call-to-action) poderoso (máximo 20 caracteres)",
}


class CopyAssets(BaseModel):
    model_config = ConfigDict(frozen=True)

    headline: str
    body: str
    cta: str


class ProductSource(BaseModel):
    """What a pipeline run starts from: a landing-page URL or an uploaded file."""

    model_config = ConfigDict(frozen=True)

    source_type: Literal["link", "file"]
    url: Optional[str] = None
    content: Optional[str] = None  # base64 for PDFs, raw text otherwise
    file_type: Optional[str] = None


class CreativeResult(BaseModel):
    """Everything one complete pipeline run produces."""

    model_config = ConfigDict(frozen=True)

    profile: ProductProfile
    copy_assets: CopyAssets
    briefing: str
