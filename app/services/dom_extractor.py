"""DOM-based extraction strategy built on BeautifulSoup."""

from typing import Dict, List
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from app.errors import InsufficientSource
from app.models.content import ExtractedContent
from app.services.patterns import (
    FULL_TEXT_MAX_CHARS,
    collapse_whitespace,
    find_prices,
    is_cta_text,
    unique,
)
from app.services.sanitizer import sanitize

MAX_BULLETS = 20
MAX_PARAGRAPHS = 20
MAX_IMAGES = 5


def _text(node) -> str:
    return collapse_whitespace(node.get_text(" "))


def _meta_content(soup: BeautifulSoup, attr: str, value: str) -> str:
    meta = soup.find("meta", attrs={attr: value})
    if meta and meta.get("content"):
        return collapse_whitespace(str(meta["content"]))
    return ""


def _extract_meta_tags(soup: BeautifulSoup) -> Dict[str, str]:
    meta_tags: Dict[str, str] = {}
    for meta in soup.find_all("meta"):
        key = meta.get("property") or meta.get("name")
        content = meta.get("content")
        if key and content:
            meta_tags[str(key)] = collapse_whitespace(str(content))
    return meta_tags


def _extract_title(soup: BeautifulSoup) -> str:
    og_title = _meta_content(soup, "property", "og:title")
    if og_title:
        return og_title
    for name in ("title", "h1"):
        node = soup.find(name)
        if node:
            text = _text(node)
            if text:
                return text
    return ""


def _extract_description(soup: BeautifulSoup) -> str:
    return _meta_content(soup, "property", "og:description") or _meta_content(
        soup, "name", "description"
    )


def _collect(soup: BeautifulSoup, names, min_len: int) -> List[str]:
    texts = []
    for node in soup.find_all(names):
        text = _text(node)
        if len(text) > min_len:
            texts.append(text)
    return texts


def _extract_ctas(soup: BeautifulSoup) -> List[str]:
    ctas = []
    for node in soup.find_all(["button", "a"]):
        text = _text(node)
        if 3 <= len(text) <= 30 and is_cta_text(text):
            ctas.append(text)
    return unique(ctas)


def _extract_images(soup: BeautifulSoup, base_url: str) -> List[str]:
    images: List[str] = []
    for img in soup.find_all("img"):
        src = img.get("src") or img.get("data-src")
        if not src or str(src).startswith("data:"):
            continue
        abs_url = urljoin(base_url, str(src).strip())
        if abs_url not in images:
            images.append(abs_url)
        if len(images) == MAX_IMAGES:
            break
    return images


def extract_with_dom(html: str, base_url: str = "") -> ExtractedContent:
    """Extract structured content from *html* through a parsed, sanitised tree.

    Raises:
        InsufficientSource: if the page has no title, no headings and no
            paragraphs, i.e. there is nothing to analyse.
    """
    soup = sanitize(html)

    title = _extract_title(soup)
    headings = _collect(soup, ["h1", "h2", "h3"], 3)
    paragraphs = _collect(soup, "p", 20)[:MAX_PARAGRAPHS]

    if not title and not headings and not paragraphs:
        raise InsufficientSource(
            "Não foi possível extrair informações suficientes da página. "
            "Verifique se a URL está correta e acessível."
        )

    body = soup.find("body") or soup
    body_text = _text(body)

    return ExtractedContent(
        source_kind="html",
        title=title,
        description=_extract_description(soup),
        full_text=body_text[:FULL_TEXT_MAX_CHARS],
        meta_tags=_extract_meta_tags(soup),
        headings=headings,
        bullets=_collect(soup, "li", 5)[:MAX_BULLETS],
        prices=find_prices(body_text),
        ctas=_extract_ctas(soup),
        paragraphs=paragraphs,
        images=_extract_images(soup, base_url),
    )
