from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict

# Literal the analysis collaborator is told to answer for unevidenced fields
NOT_IDENTIFIED = "Não identificado"

PROFILE_FIELDS = {
    "product_name": "productName",
    "target_audience": "targetAudience",
    "main_pain": "mainPain",
    "main_benefit": "mainBenefit",
    "central_promise": "centralPromise",
    "communication_tone": "communicationTone",
    "niche": "niche",
}


def _resolve(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = " ".join(value.split())
    if not value or value.casefold() == NOT_IDENTIFIED.casefold():
        return None
    return value


class ProductProfile(BaseModel):
    """What is being sold, to whom, and why.

    Fields the analysis could not evidence are ``None``.
    """

    model_config = ConfigDict(frozen=True)

    product_name: Optional[str] = None
    target_audience: Optional[str] = None
    main_pain: Optional[str] = None
    main_benefit: Optional[str] = None
    central_promise: Optional[str] = None
    communication_tone: Optional[str] = None
    niche: Optional[str] = None

    @classmethod
    def from_analysis(cls, data: Dict[str, Any]) -> "ProductProfile":
        """Build a profile from the collaborator's camelCase JSON answer.

        The not-identified sentinel, blanks and non-string values all become
        ``None``.
        """
        return cls(**{field: _resolve(data.get(key)) for field, key in PROFILE_FIELDS.items()})

    def display(self, field: str) -> str:
        """Return *field* for prompt rendering, with the sentinel for gaps."""
        return getattr(self, field) or NOT_IDENTIFIED
