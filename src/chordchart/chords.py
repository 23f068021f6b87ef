"""Chord classification and position extraction for chord-above-lyric text.

  1. is_chord_token()          — does one whitespace token spell a chord?
  2. is_chord_line()           — is a whole line predominantly chords?
  3. parse_section_marker()    — label of a ``[Chorus]`` / ``(Verse 2)`` line
  4. classify_line()           — BLANK / SECTION / CHORD / LYRIC
  5. extract_chord_positions() — chords of a chord line with their columns
"""

import re
from enum import Enum, auto

from .models import ChordPosition

# ---------------------------------------------------------------------------
# Regexes
# ---------------------------------------------------------------------------

# Full chord symbol. Handles:
#   Standard:       A, Am, Am7, Amaj7, Asus4, Cadd9, Bdim, Caug
#   Accidentals:    C#m, Bb7, Ebmaj7
#   Extensions:     G7(b9), A7(9)
#   Slash bass:     G/B, C#m7/G#
CHORD_RE = re.compile(
    r"^[A-G][#b]?"
    r"(?:m|dim|aug|maj|sus|add)?"
    r"\d*"
    r"(?:\([^)]+\))?"
    r"(?:/[A-G][#b]?)?$"
)

# A whole line made of one bracketed or parenthesised label: [Chorus], (Verse 2)
SECTION_MARKER_RE = re.compile(r"^[\[(]([^\])]+)[\])]$")

_TOKEN_RE = re.compile(r"\S+")

# Fraction of tokens that must be chords for the line to count as a chord line.
# Tolerates stray annotations such as "x4" next to the chords.
CHORD_LINE_THRESHOLD = 0.5


# ---------------------------------------------------------------------------
# LineType
# ---------------------------------------------------------------------------


class LineType(Enum):
    BLANK = auto()  # empty or whitespace only
    SECTION = auto()  # section marker: [Chorus], (Verse 2)
    CHORD = auto()  # chord line: G   D/F#   Em7
    LYRIC = auto()  # everything else


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


def is_chord_token(token: str) -> bool:
    """Return True if the whole of *token* is a chord symbol."""
    return CHORD_RE.match(token.strip()) is not None


def is_chord_line(line: str) -> bool:
    """Return True if at least half of the line's tokens are chords.

    Blank lines are never chord lines.
    """
    tokens = line.split()
    if not tokens:
        return False
    chord_count = sum(1 for token in tokens if is_chord_token(token))
    return chord_count / len(tokens) >= CHORD_LINE_THRESHOLD


def parse_section_marker(line: str) -> str | None:
    """Return the label of a section-marker line, or None.

    ``[Verse 1]`` → ``"Verse 1"``; ``( Chorus )`` → ``"Chorus"``.
    """
    m = SECTION_MARKER_RE.match(line.strip())
    if not m:
        return None
    return m.group(1).strip() or None


def classify_line(line: str) -> LineType:
    """Classify a single line of chart text."""
    if not line.strip():
        return LineType.BLANK
    if parse_section_marker(line) is not None:
        return LineType.SECTION
    if is_chord_line(line):
        return LineType.CHORD
    return LineType.LYRIC


# ---------------------------------------------------------------------------
# Chord extraction
# ---------------------------------------------------------------------------


def extract_chord_positions(chord_line: str) -> list[ChordPosition]:
    """Return the chords of *chord_line* with their 0-based columns.

    Columns are raw character offsets into the untrimmed line.  Tokens that
    are not chords ("x4", "riff") are dropped.
    """
    return [
        ChordPosition(chord=m.group(), position=m.start())
        for m in _TOKEN_RE.finditer(chord_line)
        if is_chord_token(m.group())
    ]
