from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, model_validator

from app.models.creative import Awareness, Objective, ProductSource, Tone


class AnalyzeProductRequest(BaseModel):
    """Automatic mode: analyse a landing page or an uploaded file."""

    model_config = ConfigDict(str_strip_whitespace=True)

    source_type: Literal["link", "file"]
    url: Optional[HttpUrl] = None
    content: Optional[str] = Field(
        default=None,
        description="File content: base64 for PDFs, raw text for text files.",
    )
    file_type: Optional[str] = Field(
        default=None,
        description="MIME type of the uploaded file, e.g. 'application/pdf'.",
        examples=["application/pdf", "text/plain"],
    )
    objective: Objective = "Vendas"

    @model_validator(mode="after")
    def _check_source(self) -> "AnalyzeProductRequest":
        if self.source_type == "link" and self.url is None:
            raise ValueError("A URL é obrigatória quando source_type é 'link'.")
        if self.source_type == "file" and not self.content:
            raise ValueError("O conteúdo do arquivo é obrigatório quando source_type é 'file'.")
        return self

    def to_source(self) -> ProductSource:
        return ProductSource(
            source_type=self.source_type,
            url=str(self.url) if self.url is not None else None,
            content=self.content,
            file_type=self.file_type or "text/plain",
        )


class GenerateCopyRequest(BaseModel):
    """Manual mode: write an ad from descriptors typed by the user."""

    model_config = ConfigDict(str_strip_whitespace=True)

    niche: str = Field(min_length=1, description="Nicho do produto.")
    audience: str = Field(min_length=1, description="Público-alvo.")
    objective: Objective
    awareness: Awareness
    tone: Tone


class GenerateImageRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    niche: str = Field(min_length=1)
    audience: str = Field(min_length=1)
    objective: Objective
    tone: Tone
    headline: str = Field(min_length=1)
    briefing: Optional[str] = Field(
        default=None,
        max_length=1000,
        description="Creative briefing returned by /creative/analyze, if any.",
    )
