"""Load raw chart text from a file, standard input, or a web page.

``.html`` / ``.htm`` files and fetched pages are run through
:func:`~chordchart.sanitize.strip_html`; everything else is returned as-is.
"""

import logging
import sys
from pathlib import Path

import httpx

from .exceptions import FetchError, SourceError
from .sanitize import strip_html

logger = logging.getLogger(__name__)

_FETCH_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept-Language": "en-US,en;q=0.9",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
}

FETCH_TIMEOUT = 15

_HTML_SUFFIXES = {".html", ".htm"}


def is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def fetch(url: str) -> str:
    """GET *url* and return the response body.

    Raises FetchError on transport failures (status 0) and non-200 responses.
    """
    logger.debug("Fetching %s", url)
    try:
        resp = httpx.get(url, headers=_FETCH_HEADERS, follow_redirects=True, timeout=FETCH_TIMEOUT)
    except httpx.RequestError as exc:
        raise FetchError(url, 0) from exc
    if resp.status_code != 200:
        raise FetchError(url, resp.status_code)
    return resp.text


def load_text(source: str) -> str:
    """Return chart text from *source*: a URL, ``-`` for stdin, or a file path."""
    if is_url(source):
        return strip_html(fetch(source))

    if source == "-":
        return sys.stdin.read()

    path = Path(source)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise SourceError(source, "no such file") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceError(source, str(exc)) from exc

    if path.suffix.lower() in _HTML_SUFFIXES:
        logger.debug("Stripping HTML from %s", source)
        return strip_html(text)
    return text
