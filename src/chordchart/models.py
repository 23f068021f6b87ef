import json
from dataclasses import dataclass, field


@dataclass
class ChordPosition:
    """A chord symbol and the column it occupied in its chord line.

    ``chord`` is kept exactly as written in the source ("Am7", "G/B", "C#m").
    ``position`` is the 0-based character column of the chord's first letter.
    """

    chord: str
    position: int

    def to_dict(self) -> dict:
        return {"chord": self.chord, "position": self.position}

    @classmethod
    def from_dict(cls, data: dict) -> "ChordPosition":
        return cls(chord=data["chord"], position=int(data["position"]))


@dataclass
class SongLine:
    """One rendering row: chords positioned above a (possibly empty) lyric.

    ``section`` is set only on the first line following a section marker.
    A line with no chords and empty lyrics is a deliberate blank separator.
    """

    lyrics: str = ""
    chords: list[ChordPosition] = field(default_factory=list)
    section: str | None = None

    @property
    def is_blank(self) -> bool:
        return not self.chords and not self.lyrics and not self.section

    def to_dict(self) -> dict:
        data = {
            "lyrics": self.lyrics,
            "chords": [c.to_dict() for c in self.chords],
        }
        if self.section:
            data["section"] = self.section
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "SongLine":
        return cls(
            lyrics=data.get("lyrics") or "",
            chords=[ChordPosition.from_dict(c) for c in data.get("chords") or []],
            section=data.get("section") or None,
        )


@dataclass
class Song:
    """A chord chart together with the metadata derived from it."""

    title: str
    artist: str
    content: list[SongLine] = field(default_factory=list)
    original_key: str | None = None
    bpm: int | None = None
    plain_text: str = ""

    @classmethod
    def from_text(
        cls,
        title: str,
        artist: str,
        text: str,
        original_key: str | None = None,
        bpm: int | None = None,
        mode=None,
    ) -> "Song":
        """Parse *text* and build a Song, detecting the key when none is given."""
        # Imported here: parser depends on this module.
        from .parser import ReconcileMode, detect_key, generate_plain_text, parse_to_song_lines

        content = parse_to_song_lines(text, mode or ReconcileMode.CANONICAL)
        return cls(
            title=title,
            artist=artist,
            content=content,
            original_key=original_key or detect_key(content),
            bpm=bpm,
            plain_text=generate_plain_text(content),
        )


def content_to_json(lines: list[SongLine], indent: int | None = None) -> str:
    """Serialize song content to the JSON shape stored by the persistence layer."""
    return json.dumps([line.to_dict() for line in lines], indent=indent, ensure_ascii=False)


def content_from_json(text: str) -> list[SongLine]:
    return [SongLine.from_dict(item) for item in json.loads(text)]


def section_color(label: str) -> str:
    """Return a stable CSS ``hsl()`` colour for a section label."""
    h = 0
    for ch in label:
        h = (ord(ch) + (h << 5) - h) & 0xFFFFFFFF
    # Signed 32-bit
    if h >= 0x80000000:
        h -= 0x100000000
    return f"hsl({abs(h) % 360}, 70%, 55%)"
