"""ChordPro exporter.

Renders a :class:`~chordchart.models.Song` to ChordPro (``.cho``) text, with
chords merged inline into the lyrics at the columns they were parsed from.

Section label → ChordPro directive mapping
------------------------------------------

+--------------------------------------+------------------------------------+
| Label (case-insensitive first word)  | Directive pair                     |
+======================================+====================================+
| ``Verse``, ``Verse N``               | ``{start_of_verse: Verse N}`` /    |
|                                      | ``{end_of_verse}``                 |
+--------------------------------------+------------------------------------+
| ``Chorus``                           | ``{start_of_chorus}`` /            |
|                                      | ``{end_of_chorus}``                |
+--------------------------------------+------------------------------------+
| ``Bridge``                           | ``{start_of_bridge}`` /            |
|                                      | ``{end_of_bridge}``                |
+--------------------------------------+------------------------------------+
| anything else (``Intro``, ``Solo``,  | ``{comment: <label>}``             |
| ``Refrão``, ``Ponte`` …)             |                                    |
+--------------------------------------+------------------------------------+
| ``None`` / unlabeled                 | no wrapper directive               |
+--------------------------------------+------------------------------------+

A section starts at a labelled song line and runs until the next one.

Usage::

    from chordchart.chordpro import ChordProFormatter
    text = ChordProFormatter(semitones=2).render(song)
    Path("output.cho").write_text(text)
"""

from dataclasses import dataclass, field

from .models import ChordPosition, Song, SongLine
from .transpose import key_after_shift, transpose_chord

# Section labels whose directives ChordPro has standardised.
_STRUCTURED = {
    "verse": ("start_of_verse", "end_of_verse"),
    "chorus": ("start_of_chorus", "end_of_chorus"),
    "bridge": ("start_of_bridge", "end_of_bridge"),
}


@dataclass
class _Block:
    label: str | None
    lines: list[SongLine] = field(default_factory=list)


class ChordProFormatter:
    """Render a :class:`~chordchart.models.Song` to ChordPro text."""

    def __init__(self, semitones: int = 0, preference: str = "sharp"):
        self.semitones = semitones
        self.preference = preference

    def render(self, song: Song) -> str:
        """Return ChordPro text for *song*.

        The returned string ends with a single newline and uses Unix line
        endings (``\\n``) throughout.
        """
        parts: list[str] = []

        # --- Metadata block ---
        parts.append(f"{{title: {song.title}}}")
        parts.append(f"{{artist: {song.artist}}}")
        if song.original_key:
            parts.append(f"{{key: {key_after_shift(song.original_key, self.semitones, self.preference)}}}")
        if song.bpm:
            parts.append(f"{{tempo: {song.bpm}}}")

        # --- Section blocks ---
        for block in _group_blocks(song.content):
            parts.append("")  # blank line before every section
            parts.extend(self._render_block(block))

        return "\n".join(parts) + "\n"

    def _render_block(self, block: _Block) -> list[str]:
        lines = [self._render_line(line) for line in block.lines]
        # Blank separator rows at the edges of a block add nothing.
        while lines and not lines[-1]:
            lines.pop()

        label = block.label
        if not label:
            return lines

        first_word = label.lower().split()[0]
        if first_word in _STRUCTURED:
            start_dir, end_dir = _STRUCTURED[first_word]
            # Full label for verse (e.g. "Verse 1"), bare directive for chorus/bridge
            if first_word == "verse":
                start_line = f"{{{start_dir}: {label}}}"
            else:
                start_line = f"{{{start_dir}}}"
            return [start_line, *lines, f"{{{end_dir}}}"]

        return [f"{{comment: {label}}}", *lines]

    def _render_line(self, line: SongLine) -> str:
        chords = [
            ChordPosition(transpose_chord(cp.chord, self.semitones, self.preference), cp.position)
            for cp in line.chords
        ]
        if not line.lyrics:
            # Chord-only passage (intro, turnaround)
            return " ".join(f"[{cp.chord}]" for cp in chords)
        return merge_chords_inline(chords, line.lyrics)


def merge_chords_inline(chords: list[ChordPosition], lyrics: str) -> str:
    """Insert ``[Chord]`` brackets into *lyrics* at each chord's column.

    Example::

        chords = [G@8, D@25]
        lyrics = "Quando eu digo que deixei de te amar"
        result = "Quando e[G]u digo que deixei[D] de te amar"

    A chord whose column lies beyond the end of the lyric is appended rather
    than dropped.
    """
    result = lyrics
    inserted = 0  # total characters inserted so far (shifts all later columns)

    for cp in chords:
        bracket = f"[{cp.chord}]"
        pos = min(cp.position + inserted, len(result))
        result = result[:pos] + bracket + result[pos:]
        inserted += len(bracket)

    return result


def _group_blocks(lines: list[SongLine]) -> list[_Block]:
    blocks: list[_Block] = []
    current = _Block(label=None)
    for line in lines:
        if line.section:
            if current.lines:
                blocks.append(current)
            current = _Block(label=line.section)
        elif line.is_blank and not current.lines:
            continue
        current.lines.append(line)
    if current.lines:
        blocks.append(current)
    return blocks
