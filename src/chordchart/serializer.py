"""Song lines → editable / displayable chart text.

:func:`content_to_text` is the inverse of
:func:`~chordchart.parser.parse_to_song_lines`: section labels come back as
``[Label]`` marker lines, chords are laid out at their stored columns on a
line of their own, and every song line contributes its lyric row (blank rows
included).  :func:`render_text` produces the same layout with every chord
transposed, for display.
"""

from .models import ChordPosition, SongLine
from .transpose import transpose_chord


def _layout_chords(chords: list[ChordPosition]) -> str:
    chord_line = ""
    last_end = 0
    for cp in chords:
        chord_line += " " * max(0, cp.position - last_end) + cp.chord
        last_end = cp.position + len(cp.chord)
    return chord_line


def render_chord_line(chords: list[ChordPosition], semitones: int = 0, preference: str = "sharp") -> str:
    """Lay out *chords* at their columns, transposing each one first.

    A chord that grew when transposed (``A`` → ``A#``) pushes the chords
    after it to the right; neighbouring chords always keep at least one
    space between them.
    """
    if semitones == 0:
        return _layout_chords(chords)

    chord_line = ""
    for cp in chords:
        name = transpose_chord(cp.chord, semitones, preference)
        gap = 1 if chord_line else 0
        chord_line += " " * max(gap, cp.position - len(chord_line)) + name
    return chord_line


def render_text(lines: list[SongLine], semitones: int = 0, preference: str = "sharp") -> str:
    """Render song lines as chart text, chords shifted by *semitones*.

    A ``[Section]`` marker is written before the first line of each run of
    lines whose section differs from the last one written.
    """
    out: list[str] = []
    last_section: str | None = None

    for line in lines:
        if line.section and line.section != last_section:
            out.append(f"[{line.section}]")
            last_section = line.section
        if line.chords:
            out.append(render_chord_line(line.chords, semitones, preference))
        out.append(line.lyrics)

    return "\n".join(out)


def content_to_text(lines: list[SongLine]) -> str:
    """Turn stored song lines back into the text a user would edit."""
    return render_text(lines)
