"""HTML extraction: turns a landing page into :class:`ExtractedContent`.

Two strategies implement the same capability ``(html, base_url) ->
ExtractedContent``:

``"regex"`` (canonical)
    Pattern matching over the raw markup.  Never raises: an empty or
    malformed page yields a well-formed result with ``is_sufficient=False``.

``"dom"``
    BeautifulSoup over a sanitised tree (see :mod:`app.services.dom_extractor`).
    Also collects paragraphs and images, and raises
    :class:`~app.errors.InsufficientSource` when the page has no title,
    headings or paragraphs at all.

Neither strategy does network I/O; fetching lives in
:mod:`app.services.fetcher`.
"""

import re
from typing import Callable, Dict, List, Optional

from app.models.content import ExtractedContent
from app.services.dom_extractor import extract_with_dom
from app.services.patterns import (
    FULL_TEXT_MAX_CHARS,
    clean_text,
    collapse_whitespace,
    decode_entities,
    find_prices,
    is_cta_text,
    unique,
)

MAX_BULLETS = 20

_META_TAG_RE = re.compile(r"<meta\b[^>]*>", re.IGNORECASE)
_ATTR_RE = re.compile(r"""([a-zA-Z_:][-\w:.]*)\s*=\s*(?:"([^"]*)"|'([^']*)')""")
_TITLE_RE = re.compile(r"<title[^>]*>([^<]+)</title>", re.IGNORECASE)
_H1_RE = re.compile(r"<h1[^>]*>([^<]+)</h1>", re.IGNORECASE)
_HEADING_RE = re.compile(r"<h([1-3])[^>]*>([^<]+)</h\1>", re.IGNORECASE)
_LI_RE = re.compile(r"<li[^>]*>([^<]+)</li>", re.IGNORECASE)
_CTA_RE = re.compile(r"<(?:button|a)\b[^>]*>([^<]{3,30})</(?:button|a)>", re.IGNORECASE)
_SCRIPT_RE = re.compile(r"<script[^>]*>[\s\S]*?</script>", re.IGNORECASE)
_STYLE_RE = re.compile(r"<style[^>]*>[\s\S]*?</style>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]+>")


def _parse_meta_tags(html: str) -> List[Dict[str, str]]:
    """Return the attributes of every ``<meta>`` tag, in document order."""
    tags = []
    for match in _META_TAG_RE.finditer(html):
        attrs = {}
        for name, double_quoted, single_quoted in _ATTR_RE.findall(match.group(0)):
            attrs[name.lower()] = double_quoted or single_quoted
        tags.append(attrs)
    return tags


def _meta_key(attrs: Dict[str, str]) -> Optional[str]:
    return attrs.get("property") or attrs.get("name") or None


def _extract_meta_tags(tags: List[Dict[str, str]]) -> Dict[str, str]:
    meta: Dict[str, str] = {}
    for attrs in tags:
        key = _meta_key(attrs)
        content = attrs.get("content")
        if key and content:
            meta[key] = clean_text(content)
    return meta


def _first_meta(tags: List[Dict[str, str]], *keys: str) -> str:
    for attrs in tags:
        if _meta_key(attrs) in keys and attrs.get("content"):
            value = clean_text(attrs["content"])
            if value:
                return value
    return ""


def _extract_title(html: str, tags: List[Dict[str, str]]) -> str:
    og_title = _first_meta(tags, "og:title")
    if og_title:
        return og_title
    for pattern in (_TITLE_RE, _H1_RE):
        match = pattern.search(html)
        if match:
            value = clean_text(match.group(1))
            if value:
                return value
    return ""


def _extract_description(tags: List[Dict[str, str]]) -> str:
    return _first_meta(tags, "og:description") or _first_meta(tags, "description")


def _extract_headings(html: str) -> List[str]:
    headings = []
    for match in _HEADING_RE.finditer(html):
        heading = clean_text(match.group(2))
        if len(heading) > 3:
            headings.append(heading)
    return headings


def _extract_bullets(html: str) -> List[str]:
    bullets = []
    for match in _LI_RE.finditer(html):
        bullet = clean_text(match.group(1))
        if len(bullet) > 5:
            bullets.append(bullet)
    return bullets[:MAX_BULLETS]


def _extract_ctas(html: str) -> List[str]:
    ctas = []
    for match in _CTA_RE.finditer(html):
        text = clean_text(match.group(1))
        if len(text) > 3 and is_cta_text(text):
            ctas.append(text)
    return unique(ctas)


def extract_full_text(html: str) -> str:
    """Visible text of *html*: no scripts/styles/tags, single-spaced, capped."""
    text = _SCRIPT_RE.sub("", html)
    text = _STYLE_RE.sub("", text)
    text = _TAG_RE.sub(" ", text)
    text = collapse_whitespace(decode_entities(text))
    return text[:FULL_TEXT_MAX_CHARS]


def extract_with_regex(html: str, base_url: str = "") -> ExtractedContent:
    """Extract structured content from *html* with regular expressions."""
    tags = _parse_meta_tags(html)
    return ExtractedContent(
        source_kind="html",
        title=_extract_title(html, tags),
        description=_extract_description(tags),
        full_text=extract_full_text(html),
        meta_tags=_extract_meta_tags(tags),
        headings=_extract_headings(html),
        bullets=_extract_bullets(html),
        prices=find_prices(html),
        ctas=_extract_ctas(html),
    )


Strategy = Callable[[str, str], ExtractedContent]

STRATEGIES: Dict[str, Strategy] = {
    "regex": extract_with_regex,
    "dom": extract_with_dom,
}


def extract_html(html: str, base_url: str = "", strategy: str = "regex") -> ExtractedContent:
    """Extract *html* with the named strategy."""
    try:
        extractor = STRATEGIES[strategy]
    except KeyError:
        raise ValueError(f"Unknown extraction strategy '{strategy}'.")
    return extractor(html, base_url)
