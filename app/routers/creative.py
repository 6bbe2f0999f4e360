"""Creative endpoints: automatic analysis, manual copy and ad image generation.

Pipeline errors propagate to the handler registered in :mod:`app.main`,
which turns them into ``{"error": <category>, "detail": <message>}``.
"""

import logging

from fastapi import APIRouter, Depends, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.dependencies import get_image_client, get_pipeline, get_text_client
from app.models.request import AnalyzeProductRequest, GenerateCopyRequest, GenerateImageRequest
from app.models.response import AnalyzeProductResponse, GenerateCopyResponse, GenerateImageResponse
from app.services.ad_image import generate_ad_image
from app.services.llm_client import ImageGenerator, TextGenerator
from app.services.manual_copy import ManualCopyGenerator
from app.services.pipeline import CreativePipeline

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter(prefix="/creative", tags=["Creative"])


@router.post(
    "/analyze",
    response_model=AnalyzeProductResponse,
    summary="Analyse a product source and generate a complete ad",
    description=(
        "Extracts the product from a landing-page URL (`source_type=link`) or an "
        "uploaded file (`source_type=file`, base64 content for PDFs), identifies "
        "it with the language model, then writes headline, body, CTA and an "
        "image briefing.\n\n"
        "The request fails as a whole if any stage fails; no partial ad is "
        "returned."
    ),
)
@limiter.limit("5/minute")
async def analyze_product(
    request: Request,
    body: AnalyzeProductRequest,
    pipeline: CreativePipeline = Depends(get_pipeline),
) -> AnalyzeProductResponse:
    logger.info(
        "Analyze request received",
        extra={
            "source_type": body.source_type,
            "url": str(body.url) if body.url else None,
            "file_type": body.file_type,
        },
    )
    result = await pipeline.run(body.to_source(), objective=body.objective)
    return AnalyzeProductResponse.from_result(result)


@router.post(
    "/generate",
    response_model=GenerateCopyResponse,
    summary="Generate an ad from manual descriptors",
)
@limiter.limit("10/minute")
async def generate_copy(
    request: Request,
    body: GenerateCopyRequest,
    text_client: TextGenerator = Depends(get_text_client),
) -> GenerateCopyResponse:
    logger.info(
        "Manual copy request received",
        extra={"objective": body.objective, "awareness": body.awareness, "tone": body.tone},
    )
    return await ManualCopyGenerator(text_client).generate(body)


@router.post(
    "/image",
    response_model=GenerateImageResponse,
    summary="Generate the ad image",
)
@limiter.limit("5/minute")
async def generate_image(
    request: Request,
    body: GenerateImageRequest,
    image_client: ImageGenerator = Depends(get_image_client),
) -> GenerateImageResponse:
    logger.info("Image request received", extra={"objective": body.objective, "tone": body.tone})
    url = await generate_ad_image(body, image_client)
    return GenerateImageResponse(url=url, success=True)
