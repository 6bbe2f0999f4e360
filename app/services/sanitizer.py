import re

from bs4 import BeautifulSoup, Comment, Tag

# Inline styles that hide an element from visitors
_HIDDEN_STYLE_RE = re.compile(
    r"(display\s*:\s*none|visibility\s*:\s*hidden)", re.IGNORECASE
)

# id/class fragments of cookie and privacy banners (LGPD on Brazilian pages)
_CONSENT_RE = re.compile(r"cookie|gdpr|lgpd|consent", re.IGNORECASE)

# Never visible copy: scripting, embeds and graphics
_INVISIBLE_TAGS = [
    "script",
    "style",
    "noscript",
    "iframe",
    "object",
    "embed",
    "template",
    "svg",
    "canvas",
]

# Document skeleton; cookie plugins mark <body> with classes like "cookies-not-set"
_STRUCTURAL_TAGS = {"html", "head", "body"}


def _is_consent_banner(tag: Tag) -> bool:
    markers = [str(tag.get("id") or "")] + list(tag.get("class") or [])
    return any(_CONSENT_RE.search(marker) for marker in markers if marker)


def _is_hidden(tag: Tag) -> bool:
    if tag.has_attr("hidden"):
        return True
    style = tag.get("style") or ""
    return bool(style and _HIDDEN_STYLE_RE.search(style))


def sanitize(html: str) -> BeautifulSoup:
    """Parse *html* and drop what a visitor of the landing page would not read.

    ``<meta>`` and ``<title>`` survive so metadata can still be read from the
    returned tree.  Navigation and footers survive too: landing pages often
    put their buy buttons there.
    """
    soup = BeautifulSoup(html, "lxml")

    for tag in soup.find_all(_INVISIBLE_TAGS):
        tag.decompose()

    for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
        comment.extract()

    # Snapshot first: decomposing a parent also decomposes its descendants
    for tag in list(soup.find_all(True)):
        if tag.decomposed or tag.name in _STRUCTURAL_TAGS:
            continue
        if _is_consent_banner(tag) or _is_hidden(tag):
            tag.decompose()

    return soup
