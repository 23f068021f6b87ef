"""Chord transposition and key arithmetic.

Only the root and the optional slash-bass note of a chord are pitch-shifted;
the quality suffix (``m7``, ``sus4``, ``7(b9)``) is carried through verbatim.
Names that do not start with a note letter come back unchanged.

Accidental preference
---------------------

``"sharp"`` spells shifted notes from ``C C# D D# E F F# G G# A A# B`` and
``"flat"`` from ``C Db D Eb E F Gb G Ab A Bb B``.  Unshifted chords
(``semitones == 0``) keep their original spelling.
"""

import re

from .exceptions import UnknownNoteError

NOTES_SHARP = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]
NOTES_FLAT = ["C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B"]

# Flat spellings mapped onto the sharp scale for lookup.
_FLAT_TO_SHARP = {"Db": "C#", "Eb": "D#", "Gb": "F#", "Ab": "G#", "Bb": "A#"}

_CHORD_ROOT_RE = re.compile(r"^([A-G][#b]?)(.*)$", re.DOTALL)
_SLASH_BASS_RE = re.compile(r"^(.*)/([A-G][#b]?)$", re.DOTALL)
_KEY_ROOT_RE = re.compile(r"^([A-G][#b]?)")


def _index(note: str) -> int | None:
    note = _FLAT_TO_SHARP.get(note, note)
    if note in NOTES_SHARP:
        return NOTES_SHARP.index(note)
    return None


def note_index(note: str) -> int:
    """Return the chromatic index (C = 0) of a note name such as ``"Eb"``.

    Raises :class:`~chordchart.exceptions.UnknownNoteError` for anything that
    is not one of the 17 spellings in the sharp and flat scales.
    """
    index = _index(note.strip())
    if index is None:
        raise UnknownNoteError(note)
    return index


def transpose_note(note: str, semitones: int, preference: str = "sharp") -> str:
    """Shift a bare note name; unknown names are returned unchanged."""
    index = _index(note)
    if index is None:
        return note
    names = NOTES_FLAT if preference == "flat" else NOTES_SHARP
    return names[(index + semitones) % 12]


def transpose_chord(chord: str, semitones: int, preference: str = "sharp") -> str:
    """Transpose a chord symbol by *semitones*.

    >>> transpose_chord("C/G", 2)
    'D/A'
    >>> transpose_chord("Am7", 3, "flat")
    'Cm7'
    """
    if semitones == 0:
        return chord

    m = _CHORD_ROOT_RE.match(chord)
    if not m:
        return chord
    root, suffix = m.groups()
    new_root = transpose_note(root, semitones, preference)

    bass = _SLASH_BASS_RE.match(suffix)
    if bass:
        middle, bass_note = bass.groups()
        return f"{new_root}{middle}/{transpose_note(bass_note, semitones, preference)}"

    return f"{new_root}{suffix}"


def key_root(key: str | None) -> str | None:
    """Return the leading note of a key name (``"F#m"`` → ``"F#"``), or None."""
    if not key:
        return None
    m = _KEY_ROOT_RE.match(key)
    return m.group(1) if m else None


def semitones_between(from_key: str | None, to_key: str | None) -> int:
    """Upward distance in semitones from *from_key* to *to_key*, in ``range(12)``.

    Quality suffixes are ignored (``"Em"`` and ``"E7"`` are both E).  Returns 0
    when *from_key* is missing or either key has no recognisable root.
    """
    from_root = key_root(from_key)
    to_root = key_root(to_key)
    if from_root is None or to_root is None:
        return 0

    from_index = _index(from_root)
    to_index = _index(to_root)
    if from_index is None or to_index is None:
        return 0

    return (to_index - from_index) % 12


def key_after_shift(original_key: str | None, semitones: int, preference: str = "sharp") -> str:
    """Name of *original_key* after shifting it by *semitones*.

    Returns ``"?"`` when there is no original key.
    """
    if not original_key:
        return "?"
    if semitones == 0:
        return original_key
    return transpose_chord(original_key, semitones, preference)
