import asyncio
import ipaddress
import logging
import socket
from typing import Optional
from urllib.parse import urljoin, urlparse

import httpx

from app.errors import SourceUnreachable

logger = logging.getLogger(__name__)

MAX_CONTENT_SIZE = 10 * 1024 * 1024  # 10 MB
TIMEOUT = 15  # seconds, per connect or read
TOTAL_TIMEOUT = 30  # seconds, whole fetch
MAX_REDIRECTS = 5
ALLOWED_SCHEMES = {"http", "https"}

HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "pt-BR,pt;q=0.9,en-US;q=0.8,en;q=0.7",
}


def _is_private_address(hostname: str) -> bool:
    """Return True if *hostname* resolves to a private, loopback, or link-local address."""
    try:
        infos = socket.getaddrinfo(hostname, None)
    except socket.gaierror:
        return False

    for info in infos:
        # Strip IPv6 zone IDs (e.g. "::1%eth0" → "::1")
        raw_ip = info[4][0].split("%")[0]
        try:
            addr = ipaddress.ip_address(raw_ip)
        except ValueError:
            continue
        if addr.is_private or addr.is_loopback or addr.is_link_local or addr.is_reserved:
            return True
    return False


def _validate_url(url: str) -> None:
    """Raise SourceUnreachable (400) if *url* fails SSRF / scheme validation."""
    parsed = urlparse(url)

    if parsed.scheme not in ALLOWED_SCHEMES:
        raise SourceUnreachable("URL inválida. Use http:// ou https://", status_code=400)

    hostname = parsed.hostname
    if not hostname:
        raise SourceUnreachable("URL inválida: endereço sem domínio.", status_code=400)

    if _is_private_address(hostname):
        raise SourceUnreachable(
            "Endereços internos ou privados não são permitidos.", status_code=400
        )


def _status_error(url: str, status: int) -> SourceUnreachable:
    logger.warning("Source returned HTTP %s: %s", status, url)
    if status == 403:
        message = "Acesso negado pela página. Ela pode estar protegida contra scraping."
    elif status == 404:
        message = "Página não encontrada (404)."
    else:
        message = f"Erro ao acessar a página: HTTP {status}."
    return SourceUnreachable(message)


async def fetch_url(url: str, transport: Optional[httpx.AsyncBaseTransport] = None) -> str:
    """Fetch *url* and return the response body as a string.

    Redirects are followed manually so that every redirect destination is
    validated against the SSRF rules before the next request is made.  Every
    failure is classified into a :class:`SourceUnreachable` whose message
    names the cause.

    ``TIMEOUT`` bounds each connect and read; ``TOTAL_TIMEOUT`` bounds the
    whole fetch, redirects and body included, so a server trickling bytes
    cannot hold the request open.

    Args:
        url: Page to fetch (http/https, public host).
        transport: Optional httpx transport, used by tests.
    """
    _validate_url(url)

    try:
        return await asyncio.wait_for(_fetch(url, transport), TOTAL_TIMEOUT)
    except asyncio.TimeoutError as exc:
        logger.error("Fetch exceeded %ss: %s", TOTAL_TIMEOUT, url)
        raise SourceUnreachable(
            "Tempo limite excedido ao acessar a página.", status_code=504, cause=exc
        )


async def _fetch(url: str, transport: Optional[httpx.AsyncBaseTransport]) -> str:
    current_url = url
    try:
        async with httpx.AsyncClient(
            follow_redirects=False, timeout=TIMEOUT, headers=HEADERS, transport=transport
        ) as client:
            for _ in range(MAX_REDIRECTS + 1):
                async with client.stream("GET", current_url) as response:
                    if response.is_redirect:
                        location = response.headers.get("location", "")
                        next_url = urljoin(current_url, location)
                        _validate_url(next_url)
                        current_url = next_url
                        continue

                    if not response.is_success:
                        raise _status_error(current_url, response.status_code)

                    content_length = response.headers.get("content-length")
                    if content_length and int(content_length) > MAX_CONTENT_SIZE:
                        raise SourceUnreachable("A página excede o tamanho máximo permitido.")

                    chunks = []
                    total = 0
                    async for chunk in response.aiter_bytes():
                        total += len(chunk)
                        if total > MAX_CONTENT_SIZE:
                            raise SourceUnreachable("A página excede o tamanho máximo permitido.")
                        chunks.append(chunk)

                    return b"".join(chunks).decode(response.encoding or "utf-8", errors="replace")
    except httpx.TimeoutException as exc:
        logger.error("Timeout fetching URL: %s", current_url)
        raise SourceUnreachable(
            "Tempo limite excedido ao acessar a página.", status_code=504, cause=exc
        )
    except httpx.ConnectError as exc:
        logger.error("Could not connect to %s: %s", current_url, exc)
        raise SourceUnreachable(
            "URL não encontrada. Verifique se o endereço está correto.", cause=exc
        )
    except httpx.HTTPError as exc:
        logger.error("Error fetching URL %s: %s", current_url, exc)
        raise SourceUnreachable(f"Erro ao acessar a página: {exc}", cause=exc)

    raise SourceUnreachable("A página redirecionou vezes demais.")
