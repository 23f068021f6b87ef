from chordchart.chordpro import ChordProFormatter, merge_chords_inline
from chordchart.models import ChordPosition, Song, SongLine


def _song(**kwargs) -> Song:
    defaults = dict(title="Amazing Grace", artist="John Newton")
    defaults.update(kwargs)
    return Song(**defaults)


def _render(song: Song, **kwargs) -> str:
    return ChordProFormatter(**kwargs).render(song)


# ---------------------------------------------------------------------------
# Metadata
# ---------------------------------------------------------------------------


def test_title_and_artist_in_output():
    out = _render(_song())
    assert "{title: Amazing Grace}" in out
    assert "{artist: John Newton}" in out


def test_optional_metadata_omitted_when_none():
    out = _render(_song())
    assert "{key:" not in out
    assert "{tempo:" not in out


def test_key_emitted():
    assert "{key: G}" in _render(_song(original_key="G"))


def test_tempo_emitted():
    assert "{tempo: 72}" in _render(_song(bpm=72))


def test_key_transposed_with_chords():
    assert "{key: Bb}" in _render(_song(original_key="G"), semitones=3, preference="flat")


# ---------------------------------------------------------------------------
# Inline chords
# ---------------------------------------------------------------------------


def test_merge_inserts_at_column():
    lyrics = "Quando eu digo que deixei de te amar"
    result = merge_chords_inline([ChordPosition("G", 8), ChordPosition("D", 25)], lyrics)
    assert result == "Quando e[G]u digo que deixei[D] de te amar"


def test_merge_chord_beyond_lyric_appended():
    assert merge_chords_inline([ChordPosition("D", 20)], "Short") == "Short[D]"


def test_merge_no_chords_returns_lyric_unchanged():
    assert merge_chords_inline([], "Some lyrics") == "Some lyrics"


def test_chord_only_line_rendered_as_brackets():
    song = _song(content=[SongLine("", [ChordPosition("G", 0), ChordPosition("D", 4)])])
    assert "[G] [D]" in _render(song)


def test_chords_transposed_in_output():
    song = _song(content=[SongLine("Amazing grace", [ChordPosition("G", 0)])])
    assert "[A]Amazing grace" in _render(song, semitones=2)


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------


def test_verse_section_directives():
    song = _song(content=[SongLine("some lyrics", [ChordPosition("D", 0)], "Verse 1")])
    out = _render(song)
    assert "{start_of_verse: Verse 1}" in out
    assert "{end_of_verse}" in out
    assert "[D]some lyrics" in out


def test_chorus_section_directives():
    song = _song(content=[SongLine("chorus line", [], "Chorus")])
    out = _render(song)
    assert "{start_of_chorus}" in out
    assert "{end_of_chorus}" in out


def test_bridge_section_directives():
    out = _render(_song(content=[SongLine("bridge", [], "Bridge")]))
    assert "{start_of_bridge}" in out
    assert "{end_of_bridge}" in out


def test_other_labels_rendered_as_comment():
    out = _render(_song(content=[SongLine("", [ChordPosition("D", 0)], "Intro")]))
    assert "{comment: Intro}" in out
    assert "{start_of_intro}" not in out


def test_section_runs_until_next_label():
    song = _song(content=[
        SongLine("one", [], "Verse 1"),
        SongLine("two"),
        SongLine("three", [], "Chorus"),
    ])
    out = _render(song)
    assert out.index("two") < out.index("{end_of_verse}") < out.index("{start_of_chorus}")


def test_unlabeled_content_no_directive():
    out = _render(_song(content=[SongLine("plain line")]))
    assert "plain line" in out
    assert "{start_of" not in out
    assert "{comment" not in out


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------


def test_trailing_blank_rows_dropped_from_section():
    song = _song(content=[SongLine("one", [], "Verse"), SongLine(), SongLine()])
    assert "one\n{end_of_verse}" in _render(song)


def test_output_ends_with_newline():
    assert _render(_song()).endswith("\n")


def test_metadata_comes_before_sections():
    song = _song(original_key="D", content=[SongLine("lyric", [], "Verse 1")])
    out = _render(song)
    assert out.index("{title:") < out.index("{start_of_verse")
