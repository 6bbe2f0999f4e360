"""Patterns shared by every extraction strategy."""

import re
from typing import Iterable, List

FULL_TEXT_MAX_CHARS = 5000

# Brazilian currency tokens: R$ 1.234,56 / R$97 / R$ 19,90
PRICE_RE = re.compile(r"R\$\s?\d{1,3}(?:\.\d{3})*(?:,\d{2})?")

# Action-verb vocabulary of Portuguese-market calls to action
CTA_VOCABULARY_RE = re.compile(
    r"comprar|assinar|quero|obter|acesso|inscrever|garantir|vaga", re.IGNORECASE
)

_ENTITIES = (
    ("&nbsp;", " "),
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
)

_WHITESPACE_RE = re.compile(r"\s+")


def decode_entities(text: str) -> str:
    """Decode the five core HTML entities (plus ``&nbsp;``) and nothing else."""
    for entity, char in _ENTITIES:
        text = text.replace(entity, char)
    return text


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def clean_text(text: str) -> str:
    return collapse_whitespace(decode_entities(text))


def find_prices(text: str) -> List[str]:
    return unique(match.group(0) for match in PRICE_RE.finditer(text))


def is_cta_text(text: str) -> bool:
    return bool(CTA_VOCABULARY_RE.search(text))


def unique(items: Iterable[str]) -> List[str]:
    """Deduplicate *items*, keeping the first occurrence of each."""
    seen: set = set()
    result: List[str] = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result
