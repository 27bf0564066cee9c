"""Scraper package — address resolution, resilient fetch & Markdown conversion."""

from url2md.scraper.converter import convert_to_markdown
from url2md.scraper.errors import (
    ConversionError,
    FetchBlocked,
    FetchError,
    InvalidTarget,
    ProxyError,
    Url2MdError,
)
from url2md.scraper.fetcher import fetch_document
from url2md.scraper.models import ContentKind, FetchOutcome, TargetAddress
from url2md.scraper.proxy import ProxyConfig, fetch_via_proxy
from url2md.scraper.retrieval import Retrieval, render_artifact, retrieve, write_artifact
from url2md.scraper.target import output_filename, resolve_target

__all__ = [
    "resolve_target",
    "output_filename",
    "fetch_document",
    "fetch_via_proxy",
    "convert_to_markdown",
    "retrieve",
    "render_artifact",
    "write_artifact",
    "TargetAddress",
    "FetchOutcome",
    "ContentKind",
    "ProxyConfig",
    "Retrieval",
    "Url2MdError",
    "InvalidTarget",
    "FetchError",
    "FetchBlocked",
    "ProxyError",
    "ConversionError",
]
