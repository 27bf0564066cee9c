"""Fallback fetch through the r.jina.ai rendering proxy.

The proxy fetches the page server-side and answers with already-formatted
Markdown, so whatever it returns is stored without conversion.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from url2md.config import settings
from url2md.scraper.errors import ProxyError
from url2md.scraper.models import TargetAddress

logger = logging.getLogger(__name__)

PROXY_USER_AGENT = "url2md-proxy/1.0 (+https://github.com)"

_DETAIL_LIMIT = 256


@dataclass(frozen=True)
class ProxyConfig:
    """Everything the proxy leg needs; nothing is read from the environment here."""

    base_url: str = "https://r.jina.ai/"
    api_key: Optional[str] = None
    timeout: float = 45.0
    user_agent: str = PROXY_USER_AGENT

    @classmethod
    def from_settings(cls) -> "ProxyConfig":
        return cls(
            base_url=settings.proxy_base_url,
            api_key=settings.jina_api_key or None,
            timeout=settings.proxy_timeout,
        )


def _status_line(response: httpx.Response) -> str:
    return f"{response.status_code} {response.reason_phrase}".strip()


def _error_detail(response: httpx.Response) -> str:
    """Return the first 256 characters of the body, or ``""`` if it isn't text."""
    try:
        text = response.content.decode(response.encoding or "utf-8")
    except (UnicodeDecodeError, LookupError):
        return ""

    detail = text.strip()
    if len(detail) > _DETAIL_LIMIT:
        detail = detail[:_DETAIL_LIMIT] + "…"
    return detail


def fetch_via_proxy(target: TargetAddress, config: Optional[ProxyConfig] = None) -> bytes:
    """Fetch *target* through the rendering proxy and return the body verbatim.

    Uses a fresh client, so no cookies from the primary attempt are sent.
    A single attempt is made.

    Raises:
        ProxyError: On a transport fault or a non-2xx proxy response.
    """
    if config is None:
        config = ProxyConfig.from_settings()

    proxy_url = config.base_url + target.url
    headers = {"User-Agent": config.user_agent}
    if config.api_key:
        headers["Authorization"] = f"Bearer {config.api_key}"

    logger.debug("Requesting %s via proxy", proxy_url)
    try:
        with httpx.Client(timeout=config.timeout, follow_redirects=True) as client:
            response = client.get(proxy_url, headers=headers)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise ProxyError(None, message=f"proxy request failed: {exc}") from exc

    if not response.is_success:
        status = _status_line(response)
        detail = _error_detail(response)
        message = f"proxy request status {status}"
        if detail:
            message += f": {detail}"
        raise ProxyError(response.status_code, detail, message)

    return response.content
