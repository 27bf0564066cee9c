"""Retrieval pipeline.

``retrieve`` orchestrates one run from a raw address to a tagged payload:

    resolve → primary fetch → (proxy fallback) → done

``render_artifact`` then turns the payload into the bytes to store, and
``write_artifact`` puts them on disk under a deterministic name.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from url2md.scraper.converter import convert_to_markdown
from url2md.scraper.errors import FetchBlocked
from url2md.scraper.fetcher import fetch_document
from url2md.scraper.models import ContentKind, FetchOutcome, TargetAddress
from url2md.scraper.proxy import ProxyConfig
from url2md.scraper.target import output_filename, resolve_target

logger = logging.getLogger(__name__)


class Stage(str, Enum):
    RESOLVING = "resolving"
    FETCHING_PRIMARY = "fetching-primary"
    FETCHING_PROXY = "fetching-proxy"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class Retrieval:
    """Result of a successful :func:`retrieve` run."""

    target: TargetAddress
    outcome: FetchOutcome

    @property
    def needs_conversion(self) -> bool:
        return self.outcome.kind is ContentKind.RAW_MARKUP


def _enter(stage: Stage, target: object) -> None:
    logger.debug("[%s] %s", stage.value, target)


def retrieve(
    raw_url: str,
    *,
    timeout: Optional[float] = None,
    proxy: Optional[ProxyConfig] = None,
) -> Retrieval:
    """Resolve *raw_url* and fetch it, falling back to the proxy if blocked.

    Raises:
        InvalidTarget: Before any network I/O, if *raw_url* has no host.
        FetchError: If the primary fetch fails for a non-defensive reason.
        FetchBlocked: If the origin was defensive and the proxy failed too.
    """
    _enter(Stage.RESOLVING, raw_url)
    try:
        target = resolve_target(raw_url)
    except Exception:
        _enter(Stage.FAILED, raw_url)
        raise

    _enter(Stage.FETCHING_PRIMARY, target)
    logger.info("Fetching %s …", target)
    try:
        outcome = fetch_document(target, timeout=timeout, proxy=proxy)
    except FetchBlocked:
        _enter(Stage.FETCHING_PROXY, target)
        _enter(Stage.FAILED, target)
        raise
    except Exception:
        _enter(Stage.FAILED, target)
        raise

    if outcome.via_proxy:
        _enter(Stage.FETCHING_PROXY, target)
    _enter(Stage.DONE, target)
    return Retrieval(target=target, outcome=outcome)


def render_artifact(retrieval: Retrieval) -> bytes:
    """Return the bytes to store for *retrieval*.

    Raw markup goes through the Markdown converter; pre-rendered text from the
    proxy is returned untouched.

    Raises:
        ConversionError: If the markup cannot be converted.
    """
    if retrieval.needs_conversion:
        logger.info("Converting HTML to Markdown")
        markdown = convert_to_markdown(retrieval.outcome.payload, retrieval.target.url)
        return markdown.encode("utf-8")

    logger.info("Using preformatted Markdown response")
    return retrieval.outcome.payload


def write_artifact(content: bytes, target: TargetAddress, output_dir: Path) -> Path:
    """Write *content* to ``output_dir / output_filename(target)`` and return the path."""
    path = Path(output_dir) / output_filename(target)
    logger.info("Saving to %s", path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return path
