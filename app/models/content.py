from typing import Dict, List, Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field

from app.services import sufficiency

SourceKind = Literal["html", "pdf", "text"]


class ExtractedContent(BaseModel):
    """Normalised result of extraction, whatever the source was.

    ``is_sufficient`` is derived by the sufficiency gate and cannot be
    passed in by an extractor.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    source_kind: SourceKind
    title: str = ""
    description: str = ""
    full_text: str = Field(default="", max_length=5000)
    meta_tags: Dict[str, str] = Field(default_factory=dict)
    headings: List[str] = Field(default_factory=list)
    bullets: List[str] = Field(default_factory=list, max_length=20)
    prices: List[str] = Field(default_factory=list)
    ctas: List[str] = Field(default_factory=list)
    # Only populated by the DOM strategy
    paragraphs: List[str] = Field(default_factory=list, max_length=20)
    images: List[str] = Field(default_factory=list, max_length=5)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_sufficient(self) -> bool:
        return sufficiency.is_content_sufficient(self)

    @classmethod
    def empty(cls, source_kind: SourceKind) -> "ExtractedContent":
        return cls(source_kind=source_kind)

    def to_analysis_text(self) -> str:
        """Render the structured fields as plain text for the analyzer."""
        sections = []
        if self.title:
            sections.append(f"TÍTULO: {self.title}")
        if self.description:
            sections.append(f"DESCRIÇÃO: {self.description}")
        if self.headings:
            sections.append("SEÇÕES:\n" + "\n".join(f"- {h}" for h in self.headings))
        if self.bullets:
            sections.append("TÓPICOS:\n" + "\n".join(f"- {b}" for b in self.bullets))
        if self.prices:
            sections.append("PREÇOS: " + ", ".join(self.prices))
        if self.ctas:
            sections.append("CHAMADAS PARA AÇÃO: " + ", ".join(self.ctas))
        if self.full_text:
            sections.append(f"TEXTO DA PÁGINA:\n{self.full_text}")
        return "\n\n".join(sections)
