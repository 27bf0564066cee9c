"""Markup conversion: turns fetched HTML into a portable Markdown document."""

from __future__ import annotations

import re
from typing import Union
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from markdownify import MarkdownConverter

from url2md.scraper.errors import ConversionError

# Elements that never contribute document text
_DROP_TAGS = ["script", "style", "noscript", "template"]

_BLANK_RUNS = re.compile(r"\n{3,}")


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _absolutize(soup: BeautifulSoup, base_url: str) -> None:
    """Rewrite relative ``href``/``src`` attributes against *base_url* in place.

    Fragment-only links are left alone so in-page anchors keep working.
    """
    for tag, attr in (("a", "href"), ("img", "src")):
        for node in soup.find_all(tag, attrs={attr: True}):
            value = node[attr].strip()
            if not value or value.startswith("#"):
                continue
            node[attr] = urljoin(base_url, value)


def _tidy(markdown: str) -> str:
    markdown = _BLANK_RUNS.sub("\n\n", markdown).strip()
    return markdown + "\n" if markdown else ""


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def convert_to_markdown(markup: Union[bytes, str], base_url: str) -> str:
    """Convert *markup* to Markdown, resolving links against *base_url*.

    Byte input is handed to BeautifulSoup as-is so it can sniff the encoding
    from the document itself.

    Raises:
        ConversionError: If parsing or rendering fails.
    """
    try:
        soup = BeautifulSoup(markup, "html.parser")
        for tag in soup(_DROP_TAGS):
            tag.decompose()
        _absolutize(soup, base_url)
        converter = MarkdownConverter(heading_style="ATX", bullets="-")
        markdown = converter.convert_soup(soup)
    except Exception as exc:
        raise ConversionError(str(exc)) from exc

    return _tidy(markdown)
