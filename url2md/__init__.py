"""url2md — save a web page as Markdown, with a rendering-proxy fallback."""

__version__ = "1.0.0"
