"""HTML → plain chart text.

Chord charts pasted from web pages arrive as HTML fragments.  Line breaks are
recovered from ``<br>`` and from the ends of ``<p>`` / ``<div>`` blocks; every
other tag is dropped and entities are unescaped.  Text nodes are kept exactly
as they are so chord columns still line up with the lyrics.
"""

from bs4 import BeautifulSoup

# Blocks whose closing tag ends a line.
_BLOCK_TAGS = ["p", "div"]


def strip_html(html: str) -> str:
    """Return the text of *html* with block and ``<br>`` boundaries as newlines."""
    soup = BeautifulSoup(html, "html.parser")

    for br in soup.find_all("br"):
        br.replace_with("\n")
    for block in soup.find_all(_BLOCK_TAGS):
        block.append("\n")

    # &nbsp; decodes to U+00A0; charts use plain spaces for alignment.
    return soup.get_text().replace("\u00a0", " ")
