"""url2md CLI — save a single web page as a Markdown file.

Usage:
    url2md [-v] [-o DIR] <url>
    python cli/main.py --help

Exit codes:
    0  success
    1  fetch, conversion or write failure
    2  bad arguments or an invalid URL
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from url2md.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import logging
from typing import Optional

import typer

from url2md.config import settings
from url2md.scraper.errors import ConversionError, InvalidTarget, Url2MdError
from url2md.scraper.retrieval import render_artifact, retrieve, write_artifact

app = typer.Typer(
    name="url2md",
    help="Download a web page and save it as Markdown.",
    add_completion=False,
)

_stderr_handler: Optional[logging.Handler] = None


def _configure_logging(verbose: bool) -> None:
    """Route the url2md loggers to stderr when *verbose* is set."""
    global _stderr_handler

    logger = logging.getLogger("url2md")
    # Drop the handler from a previous run; it may hold a stale stream.
    if _stderr_handler is not None:
        logger.removeHandler(_stderr_handler)
        _stderr_handler = None

    if not verbose:
        logger.setLevel(logging.WARNING)
        return

    _stderr_handler = logging.StreamHandler(sys.stderr)
    _stderr_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(_stderr_handler)
    logger.setLevel(logging.INFO)


def _fail(message: str, code: int) -> typer.Exit:
    typer.echo(message, err=True)
    return typer.Exit(code=code)


@app.command()
def main(
    url: str = typer.Argument(..., help="Page to download; the scheme is optional."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging."),
    output_dir: Optional[Path] = typer.Option(
        None,
        "--output-dir",
        "-o",
        help="Directory for the Markdown file (default: $URL2MD_OUTPUT_DIR or .).",
    ),
) -> None:
    """Fetch URL and write it to a Markdown file named after its host and path."""
    _configure_logging(verbose)

    try:
        retrieval = retrieve(url)
    except InvalidTarget as exc:
        raise _fail(f"invalid url: {exc}", 2)
    except Url2MdError as exc:
        target = getattr(exc, "url", url)
        raise _fail(f"failed to download {target}: {exc}", 1)

    try:
        content = render_artifact(retrieval)
    except ConversionError as exc:
        raise _fail(f"failed to convert markup: {exc}", 1)

    try:
        path = write_artifact(content, retrieval.target, output_dir or settings.output_dir)
    except OSError as exc:
        raise _fail(f"failed to write file: {exc}", 1)

    if verbose:
        typer.echo(f"Done. Wrote {path}", err=True)


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
