"""Centralised settings for url2md.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the working
directory (loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

# Load .env from the directory the tool is run in (or the nearest parent)
load_dotenv(find_dotenv(usecwd=True), override=False)


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Primary fetch
    # ------------------------------------------------------------------
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("URL2MD_TIMEOUT", "45.0"))
    )

    # ------------------------------------------------------------------
    # Rendering proxy
    # ------------------------------------------------------------------
    proxy_base_url: str = field(
        default_factory=lambda: os.environ.get(
            "URL2MD_PROXY_BASE_URL", "https://r.jina.ai/"
        )
    )
    proxy_timeout: float = field(
        default_factory=lambda: float(os.environ.get("URL2MD_PROXY_TIMEOUT", "45.0"))
    )
    jina_api_key: str = field(
        default_factory=lambda: os.environ.get("JINA_API_KEY", "").strip()
    )

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------
    output_dir: Path = field(
        default_factory=lambda: Path(os.environ.get("URL2MD_OUTPUT_DIR", "."))
    )


# Module-level singleton — import this everywhere:
#   from url2md.config import settings
settings = Settings()
