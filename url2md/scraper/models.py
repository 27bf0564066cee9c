"""Data models for the fetch pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class TargetAddress:
    """A resolved address.  ``scheme`` and ``host`` are never empty.

    ``host`` is the host name plus any port, without credentials; those live
    in ``userinfo`` and only appear in :attr:`url`.
    """

    scheme: str
    host: str
    path: str = ""
    query: str = ""
    fragment: str = ""
    userinfo: str = ""

    @property
    def origin(self) -> str:
        return f"{self.scheme}://{self.host}"

    @property
    def root(self) -> str:
        """Address of the origin's root document, used for the warm-up."""
        return f"{self.origin}/"

    @property
    def url(self) -> str:
        netloc = f"{self.userinfo}@{self.host}" if self.userinfo else self.host
        url = f"{self.scheme}://{netloc}{self.path}"
        if self.query:
            url += f"?{self.query}"
        if self.fragment:
            url += f"#{self.fragment}"
        return url

    def __str__(self) -> str:
        return self.url


class ContentKind(str, Enum):
    """How a fetched payload must be treated before it is stored."""

    RAW_MARKUP = "raw-markup"
    PRE_RENDERED_TEXT = "pre-rendered-text"


@dataclass(frozen=True)
class FetchOutcome:
    """A successful fetch: the payload bytes and what kind of content they are."""

    url: str
    payload: bytes
    kind: ContentKind
    status_code: int = 200
    fallback_reason: Optional[str] = None

    @property
    def via_proxy(self) -> bool:
        return self.fallback_reason is not None
