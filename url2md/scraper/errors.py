"""Exception hierarchy for the fetch pipeline.

Every failure a retrieval can end in is one of these.  Library code raises
them; only the CLI turns them into messages and exit codes.
"""

from __future__ import annotations

from typing import Optional


class Url2MdError(Exception):
    """Base class for all url2md errors."""


class InvalidTarget(Url2MdError):
    """The user-supplied address is malformed or has no host."""

    def __init__(self, raw: str, reason: str) -> None:
        self.raw = raw
        self.reason = reason
        super().__init__(reason)


class FetchError(Url2MdError):
    """Non-2xx, non-defensive status or a transport fault on the primary path."""

    def __init__(self, url: str, message: str, status_code: Optional[int] = None) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class ProxyError(Url2MdError):
    """The rendering proxy failed.

    ``status_code`` is ``None`` when the request never produced a response.
    ``detail`` is the (truncated) response body, possibly empty.
    """

    def __init__(
        self,
        status_code: Optional[int],
        detail: str = "",
        message: Optional[str] = None,
    ) -> None:
        self.status_code = status_code
        self.detail = detail
        super().__init__(message or detail or f"proxy request status {status_code}")


class FetchBlocked(Url2MdError):
    """The origin answered defensively and the proxy fallback failed too."""

    def __init__(
        self,
        url: str,
        reason: str,
        status_code: int,
        proxy_error: ProxyError,
    ) -> None:
        self.url = url
        self.reason = reason
        self.status_code = status_code
        self.proxy_error = proxy_error
        super().__init__(
            f"{reason} (HTTP {status_code}) and proxy fallback failed: {proxy_error}"
        )


class ConversionError(Url2MdError):
    """The markup could not be converted to Markdown."""
