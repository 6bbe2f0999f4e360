from typing import Optional

from pydantic import BaseModel

from app.models.creative import CreativeResult


class AnalyzeProductResponse(BaseModel):
    product_name: str
    target_audience: Optional[str]
    main_pain: Optional[str]
    main_benefit: str
    central_promise: Optional[str]
    communication_tone: Optional[str]
    niche: Optional[str]
    headline: str
    body: str
    cta: str
    briefing: str
    """Image-generation directive (about 200 characters, not enforced)."""

    @classmethod
    def from_result(cls, result: CreativeResult) -> "AnalyzeProductResponse":
        return cls(
            **result.profile.model_dump(),
            **result.copy_assets.model_dump(),
            briefing=result.briefing,
        )


class GenerateCopyResponse(BaseModel):
    headline: str
    body: str
    cta: str
    emotional_angle: str
    creative_idea: str


class GenerateImageResponse(BaseModel):
    url: str
    success: bool = True
