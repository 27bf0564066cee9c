"""Address resolution and artifact naming."""

from __future__ import annotations

import re
from typing import Optional
from urllib.parse import SplitResult, urlsplit

import httpx

from url2md.scraper.errors import InvalidTarget
from url2md.scraper.models import TargetAddress

DEFAULT_SCHEME = "https"

_NON_ALNUM = re.compile(r"[^A-Za-z0-9]+")

# Characters that can never appear in a host name.
_BAD_HOST_CHARS = re.compile(r"[\s\x00-\x1f\x7f<>\"{}|\\^`/?#@\[\]]")


def _split(raw: str) -> Optional[SplitResult]:
    try:
        parts = urlsplit(raw)
        # Accessing .port validates it; urlsplit alone does not.
        parts.port
    except ValueError:
        return None
    return parts


def _valid_host(parts: SplitResult) -> bool:
    hostname = parts.hostname
    if not hostname or _BAD_HOST_CHARS.search(hostname):
        return False
    try:
        httpx.URL(parts.geturl())
    except httpx.InvalidURL:
        return False
    return True


def _to_target(parts: SplitResult, scheme: str) -> TargetAddress:
    userinfo, _, host = parts.netloc.rpartition("@")
    return TargetAddress(
        scheme=scheme.lower(),
        host=host,
        path=parts.path,
        query=parts.query,
        fragment=parts.fragment,
        userinfo=userinfo,
    )


def resolve_target(raw: str) -> TargetAddress:
    """Turn a user-supplied string into a :class:`TargetAddress`.

    A missing scheme defaults to ``https``.  Inputs such as
    ``example.com/path`` parse as a bare path, so when the first parse finds
    no host the string is re-parsed with ``https://`` forced in front of it.

    Raises:
        InvalidTarget: If the input cannot be parsed, no host is found, or
            the host contains characters no host name can hold.
    """
    text = raw.strip()
    if not text:
        raise InvalidTarget(raw, "missing host")

    parts = _split(text)
    if parts is None:
        raise InvalidTarget(raw, f"cannot parse {raw!r}")

    if parts.netloc:
        if not _valid_host(parts):
            raise InvalidTarget(raw, f"invalid host in {raw!r}")
        return _to_target(parts, parts.scheme or DEFAULT_SCHEME)

    if "://" not in text:
        guessed = _split(f"{DEFAULT_SCHEME}://{text}")
        if guessed is not None and guessed.hostname:
            if not _valid_host(guessed):
                raise InvalidTarget(raw, f"invalid host in {raw!r}")
            return _to_target(guessed, DEFAULT_SCHEME)

    raise InvalidTarget(raw, "missing host")


def output_filename(target: TargetAddress) -> str:
    """Derive a filesystem-safe ``.md`` name from the host and path.

    The query string and fragment are ignored, so
    ``https://example.com/a/b?x=1`` becomes ``example_com_a_b.md``.
    """
    base = (target.host + target.path).strip("/")
    if not base:
        base = target.host

    base = _NON_ALNUM.sub("_", base).strip("_")
    if not base:
        base = "output"

    return base + ".md"
