"""Sufficiency gate.

Two independent, side-effect free predicates that decide whether a request
has enough real signal to justify the next (paid) collaborator call:

- :func:`is_content_sufficient` runs on extracted content, before analysis.
- :func:`is_profile_usable` runs on the analysis result, before copy and
  briefing generation.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from app.models.content import ExtractedContent
    from app.models.profile import ProductProfile

MIN_HTML_TITLE_LEN = 5  # exclusive
MIN_HTML_TEXT_LEN = 300  # exclusive
MIN_HTML_HEADINGS = 2
MIN_PDF_TEXT_LEN = 150
MIN_PLAIN_TEXT_LEN = 200  # exclusive


def is_content_sufficient(content: "ExtractedContent") -> bool:
    if content.source_kind == "html":
        return len(content.title) > MIN_HTML_TITLE_LEN and (
            len(content.full_text) > MIN_HTML_TEXT_LEN
            or len(content.headings) >= MIN_HTML_HEADINGS
        )
    if content.source_kind == "pdf":
        return len(content.full_text) >= MIN_PDF_TEXT_LEN
    return len(content.full_text) > MIN_PLAIN_TEXT_LEN


def _present(value: Optional[str]) -> bool:
    return bool(value and value.strip())


def is_profile_usable(profile: "ProductProfile") -> bool:
    """A profile is usable only when the product and its benefit were identified."""
    return _present(profile.product_name) and _present(profile.main_benefit)
