"""Primary HTTP fetcher with a rendering-proxy fallback for defensive origins.

Each call owns one ``httpx.Client`` and its cookie jar.  A warm-up request to
the origin root lets the site set challenge cookies before the real request.
When the origin still answers defensively (challenge page, rate limit, auth
gate) the document is fetched through the rendering proxy instead.
"""

from __future__ import annotations

import logging
import time
from typing import Optional

import httpx

from url2md.config import settings
from url2md.scraper.errors import FetchBlocked, FetchError, ProxyError
from url2md.scraper.models import ContentKind, FetchOutcome, TargetAddress
from url2md.scraper.proxy import ProxyConfig, fetch_via_proxy

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Defensive-response detection
# ---------------------------------------------------------------------------
DEFENSIVE_STATUS_CODES = frozenset({401, 403, 429, 503})

# Substrings of the ``Server`` header that identify an anti-bot vendor.
ANTI_BOT_SERVER_TOKENS = ("cloudflare", "ddos-guard", "sucuri")

# ---------------------------------------------------------------------------
# Browser impersonation headers
# ---------------------------------------------------------------------------
_BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/126.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
    "Sec-CH-UA": '"Not/A)Brand";v="8", "Chromium";v="126", "Google Chrome";v="126"',
    "Sec-CH-UA-Mobile": "?0",
    "Sec-CH-UA-Platform": '"macOS"',
}

# Sent on the main request only: a user-initiated top-level navigation.
_NAVIGATION_HEADERS = {
    "Sec-Fetch-Dest": "document",
    "Sec-Fetch-Mode": "navigate",
    "Sec-Fetch-Site": "none",
    "Sec-Fetch-User": "?1",
    "Upgrade-Insecure-Requests": "1",
}


def classify_response(response: httpx.Response) -> Optional[str]:
    """Return a diagnostic reason if *response* is defensive, else ``None``."""
    if response.status_code not in DEFENSIVE_STATUS_CODES:
        return None

    server = response.headers.get("Server", "").lower()
    if any(token in server for token in ANTI_BOT_SERVER_TOKENS):
        return "challenge detected"
    return f"defensive status code {response.status_code}"


def _remaining(deadline: float) -> float:
    return deadline - time.monotonic()


def _warm_up(client: httpx.Client, target: TargetAddress, deadline: float) -> None:
    """GET the origin root so it can set cookies.  Failures are ignored."""
    budget = _remaining(deadline)
    if budget <= 0:
        return
    try:
        client.get(target.root, timeout=budget)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        logger.debug("Warm-up request to %s failed: %s", target.root, exc)


def _fallback(target: TargetAddress, reason: str, status_code: int,
              proxy: Optional[ProxyConfig]) -> FetchOutcome:
    try:
        body = fetch_via_proxy(target, proxy)
    except ProxyError as exc:
        logger.info("%s, proxy fallback failed: %s", reason, exc)
        raise FetchBlocked(target.url, reason, status_code, exc) from exc

    logger.info("%s, fetched content via proxy", reason)
    return FetchOutcome(
        url=target.url,
        payload=body,
        kind=ContentKind.PRE_RENDERED_TEXT,
        status_code=status_code,
        fallback_reason=reason,
    )


def fetch_document(
    target: TargetAddress,
    *,
    timeout: Optional[float] = None,
    proxy: Optional[ProxyConfig] = None,
) -> FetchOutcome:
    """Fetch *target* and return a :class:`FetchOutcome`.

    The warm-up and main requests share one deadline of *timeout* seconds
    (``settings.request_timeout`` by default).  The proxy leg, if taken, runs
    on its own timeout from *proxy* and is not charged against that deadline.

    Raises:
        FetchError: On a transport fault, an exhausted deadline, or a
            non-2xx status that is not defensive.
        FetchBlocked: If the origin answered defensively and the proxy
            fallback failed as well.
    """
    if timeout is None:
        timeout = settings.request_timeout
    deadline = time.monotonic() + timeout

    with httpx.Client(headers=_BROWSER_HEADERS, follow_redirects=True) as client:
        _warm_up(client, target, deadline)

        budget = _remaining(deadline)
        if budget <= 0:
            raise FetchError(target.url, f"timed out after {timeout:g}s")

        try:
            response = client.get(target.url, headers=_NAVIGATION_HEADERS, timeout=budget)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise FetchError(target.url, str(exc) or type(exc).__name__) from exc

    reason = classify_response(response)
    if reason is not None:
        return _fallback(target, reason, response.status_code, proxy)

    if not response.is_success:
        raise FetchError(
            target.url,
            f"HTTP status {response.status_code} {response.reason_phrase}".strip(),
            status_code=response.status_code,
        )

    return FetchOutcome(
        url=target.url,
        payload=response.content,
        kind=ContentKind.RAW_MARKUP,
        status_code=response.status_code,
    )
