"""Line reconciler: raw chord-chart text → list of :class:`SongLine`.

Pairs each chord line with the lyric line it sits above and attaches pending
section labels to the next emitted line.  Two strategies share the classifier:

``ReconcileMode.CANONICAL``
    Used for stored content.  Blank lines are dropped, and a chord line looks
    past blank lines for its lyric partner, stopping at the next chord line or
    section marker.

``ReconcileMode.PREVIEW``
    Used for live preview while typing.  Blank lines are kept as empty
    separator rows, and a chord line only pairs with the line directly below.

Neither mode raises: every input string produces a list of lines.
"""

import logging
import re
from enum import Enum

from .chords import LineType, classify_line, extract_chord_positions, parse_section_marker
from .models import SongLine
from .sanitize import strip_html

logger = logging.getLogger(__name__)

_ROOT_RE = re.compile(r"^([A-G][#b]?)")


class ReconcileMode(Enum):
    CANONICAL = "canonical"
    PREVIEW = "preview"


def split_lines(text: str) -> list[str]:
    """Split on ``\\n``, dropping a trailing ``\\r`` from CRLF input."""
    return [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]


def parse_to_song_lines(text: str, mode: ReconcileMode = ReconcileMode.CANONICAL) -> list[SongLine]:
    """Parse chart text into song lines.

    Example::

        [Chorus]
                G                D
        Quando eu digo que deixei de te amar

    becomes one line with lyrics ``"Quando eu digo que deixei de te amar"``,
    chords ``G@8`` and ``D@25`` and section ``"Chorus"``.
    """
    lines = split_lines(text)
    types = [classify_line(line) for line in lines]
    result: list[SongLine] = []
    section: str | None = None

    i = 0
    while i < len(lines):
        lt = types[i]

        if lt == LineType.BLANK:
            if mode == ReconcileMode.PREVIEW:
                result.append(SongLine())
            i += 1
            continue

        if lt == LineType.SECTION:
            # A later marker overwrites one that was never consumed.
            section = parse_section_marker(lines[i])
            i += 1
            continue

        if lt == LineType.CHORD:
            chords = extract_chord_positions(lines[i])
            if mode == ReconcileMode.CANONICAL:
                partner = _find_lyric_partner(types, i + 1)
            else:
                partner = i + 1 if i + 1 < len(lines) and types[i + 1] == LineType.LYRIC else None

            if partner is not None:
                result.append(SongLine(lyrics=lines[partner], chords=chords, section=section))
                i = partner + 1
            else:
                # Chord-only row (intro, instrumental, turnaround)
                result.append(SongLine(lyrics="", chords=chords, section=section))
                i += 1
            section = None
            continue

        # LineType.LYRIC — lyric with no chord line above it
        result.append(SongLine(lyrics=lines[i], chords=[], section=section))
        section = None
        i += 1

    logger.debug("Parsed %d raw lines into %d song lines (%s)", len(lines), len(result), mode.value)
    return result


def _find_lyric_partner(types: list[LineType], start: int) -> int | None:
    """Index of the first lyric line at or after *start*, skipping blanks.

    Returns None if a chord line or section marker comes first.
    """
    for j in range(start, len(types)):
        if types[j] == LineType.BLANK:
            continue
        return j if types[j] == LineType.LYRIC else None
    return None


def parse_html(html: str, mode: ReconcileMode = ReconcileMode.CANONICAL) -> list[SongLine]:
    """Strip HTML markup from *html* and parse the remaining text."""
    return parse_to_song_lines(strip_html(html), mode)


def generate_plain_text(lines: list[SongLine]) -> str:
    """Join the non-empty lyrics, one per line, for full-text search."""
    return "\n".join(line.lyrics for line in lines if line.lyrics)


def detect_key(lines: list[SongLine]) -> str | None:
    """Return the root of the first chord in the song, or None if there are no chords.

    ``Am7`` → ``"A"``, ``C#m`` → ``"C#"``.
    """
    for line in lines:
        for position in line.chords:
            m = _ROOT_RE.match(position.chord)
            return m.group(1) if m else None
    return None
