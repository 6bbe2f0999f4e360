"""End-to-end creative pipeline.

Stages run strictly in order::

    RECEIVED -> EXTRACTING -> EXTRACTED -> ANALYZING -> ANALYZED
             -> GENERATING_COPY -> GENERATING_BRIEFING -> COMPLETE

A run ends in ``REJECTED_INSUFFICIENT_SOURCE`` when extraction finds too
little signal, in ``REJECTED_INSUFFICIENT_ANALYSIS`` when the product cannot
be identified, and in ``FAILED`` on any other error.  Rejections and failures
propagate to the caller; a :class:`CreativeResult` exists only for complete
runs.  There is no retry at this level.
"""

import logging
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, List, Optional

from app.errors import (
    InsufficientAnalysis,
    InsufficientSource,
    InvalidInputError,
)
from app.models.content import ExtractedContent
from app.models.creative import CreativeResult, ProductSource
from app.services.analyzer import AnalysisSource, ProductAnalyzer
from app.services.briefing import BriefingGenerator
from app.services.copywriter import CopyGenerator
from app.services.document_extractor import PdfConverter, extract_document, is_pdf
from app.services.fetcher import fetch_url
from app.services.html_extractor import extract_html
from app.services.llm_client import TextGenerator

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], Awaitable[str]]


class PipelineStage(str, Enum):
    RECEIVED = "received"
    EXTRACTING = "extracting"
    EXTRACTED = "extracted"
    ANALYZING = "analyzing"
    ANALYZED = "analyzed"
    GENERATING_COPY = "generating_copy"
    GENERATING_BRIEFING = "generating_briefing"
    COMPLETE = "complete"
    REJECTED_INSUFFICIENT_SOURCE = "rejected_insufficient_source"
    REJECTED_INSUFFICIENT_ANALYSIS = "rejected_insufficient_analysis"
    FAILED = "failed"


@dataclass
class PipelineRun:
    """Per-request stage history.  Never shared between requests."""

    run_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    stages: List[PipelineStage] = field(default_factory=list)

    @property
    def stage(self) -> Optional[PipelineStage]:
        return self.stages[-1] if self.stages else None

    def enter(self, stage: PipelineStage) -> None:
        self.stages.append(stage)
        logger.info("Pipeline stage: %s", stage.value, extra={"run_id": self.run_id})


_INSUFFICIENT_SOURCE_MESSAGES = {
    "link": (
        "O conteúdo da página é insuficiente para análise. "
        "Verifique se a URL está correta e se a página descreve o produto."
    ),
    "pdf": (
        "O PDF não contém texto legível suficiente. "
        "Verifique se o arquivo não está protegido ou é apenas imagem."
    ),
    "file": "O arquivo enviado não contém texto suficiente sobre o produto.",
}


class CreativePipeline:
    """Sequences extraction, gating, analysis, copy and briefing for one source."""

    def __init__(
        self,
        text_client: TextGenerator,
        pdf_converter: PdfConverter,
        fetcher: Fetcher = fetch_url,
        strategy: str = "regex",
    ) -> None:
        self.fetcher = fetcher
        self.pdf_converter = pdf_converter
        self.strategy = strategy
        self.analyzer = ProductAnalyzer(text_client)
        self.copywriter = CopyGenerator(text_client)
        self.briefing = BriefingGenerator(text_client)

    async def run(
        self,
        source: ProductSource,
        objective: str = "Vendas",
        run: Optional[PipelineRun] = None,
    ) -> CreativeResult:
        run = run or PipelineRun()
        run.enter(PipelineStage.RECEIVED)
        try:
            return await self._run(source, objective, run)
        except InsufficientSource:
            run.enter(PipelineStage.REJECTED_INSUFFICIENT_SOURCE)
            raise
        except InsufficientAnalysis:
            run.enter(PipelineStage.REJECTED_INSUFFICIENT_ANALYSIS)
            raise
        except Exception:
            run.enter(PipelineStage.FAILED)
            raise

    async def _run(self, source: ProductSource, objective: str, run: PipelineRun) -> CreativeResult:
        run.enter(PipelineStage.EXTRACTING)
        analysis_source = _analysis_source(source)
        content = await self._extract(source)
        if not content.is_sufficient:
            logger.warning(
                "Extracted content is insufficient",
                extra={
                    "run_id": run.run_id,
                    "source_type": analysis_source,
                    "title_len": len(content.title),
                    "text_len": len(content.full_text),
                    "headings": len(content.headings),
                },
            )
            raise InsufficientSource(_INSUFFICIENT_SOURCE_MESSAGES[analysis_source])
        run.enter(PipelineStage.EXTRACTED)

        run.enter(PipelineStage.ANALYZING)
        profile = await self.analyzer.analyze(analysis_source, content.to_analysis_text())
        run.enter(PipelineStage.ANALYZED)

        run.enter(PipelineStage.GENERATING_COPY)
        copy_assets = await self.copywriter.generate_all(profile, objective)

        run.enter(PipelineStage.GENERATING_BRIEFING)
        briefing = await self.briefing.generate_briefing(profile)

        run.enter(PipelineStage.COMPLETE)
        return CreativeResult(profile=profile, copy_assets=copy_assets, briefing=briefing)

    async def _extract(self, source: ProductSource) -> ExtractedContent:
        if source.source_type == "link":
            if not source.url:
                raise InvalidInputError("A URL é obrigatória.")
            html = await self.fetcher(source.url)
            return extract_html(html, source.url, self.strategy)

        if not source.content:
            raise InvalidInputError("O conteúdo do arquivo é obrigatório.")
        return await extract_document(
            source.content, source.file_type or "text/plain", self.pdf_converter
        )


def _analysis_source(source: ProductSource) -> AnalysisSource:
    if source.source_type == "link":
        return "link"
    return "pdf" if is_pdf(source.file_type or "") else "file"
