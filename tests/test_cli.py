import json
from unittest.mock import patch

from click.testing import CliRunner

from chordchart.cli import _slugify, main
from chordchart.exceptions import FetchError

CHART = "[Chorus]\n        G                D\nQuando eu digo que deixei de te amar\n"

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_chart(tmp_path, text=CHART, name="song.txt"):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return str(path)


def _invoke(*args):
    return CliRunner().invoke(main, list(args))


# ---------------------------------------------------------------------------
# _slugify
# ---------------------------------------------------------------------------


def test_slugify_basic():
    assert _slugify("Amazing Grace") == "amazing-grace"


def test_slugify_apostrophe():
    assert _slugify("Blowin' in the Wind") == "blowin-in-the-wind"


# ---------------------------------------------------------------------------
# --help
# ---------------------------------------------------------------------------


def test_help_output():
    result = _invoke("--help")
    assert result.exit_code == 0
    assert "Parse, transpose and export chord charts" in result.output
    for command in ("parse", "show", "chordpro", "key"):
        assert command in result.output


# ---------------------------------------------------------------------------
# parse
# ---------------------------------------------------------------------------


def test_parse_outputs_json(tmp_path):
    result = _invoke("parse", _write_chart(tmp_path))
    assert result.exit_code == 0
    assert json.loads(result.output) == [
        {
            "lyrics": "Quando eu digo que deixei de te amar",
            "chords": [{"chord": "G", "position": 8}, {"chord": "D", "position": 25}],
            "section": "Chorus",
        }
    ]


def test_parse_preview_keeps_blank_rows(tmp_path):
    path = _write_chart(tmp_path, "One\n\nTwo")
    data = json.loads(_invoke("parse", "--preview", path).output)
    assert [row["lyrics"] for row in data] == ["One", "", "Two"]


def test_parse_missing_file_reports_error(tmp_path):
    result = _invoke("parse", str(tmp_path / "missing.txt"))
    assert result.exit_code == 1
    assert "Error:" in result.output


def test_parse_fetch_error_reports_status():
    with patch("chordchart.cli.load_text", side_effect=FetchError("https://example.com/x", 403)):
        result = _invoke("parse", "https://example.com/x")
    assert result.exit_code == 1
    assert "HTTP 403" in result.output
    assert "save the page" in result.output


# ---------------------------------------------------------------------------
# show
# ---------------------------------------------------------------------------


def test_show_untransposed(tmp_path):
    result = _invoke("show", _write_chart(tmp_path))
    assert result.exit_code == 0
    assert result.output.startswith("Key: G\n")
    assert "        G                D\n" in result.output


def test_show_semitones(tmp_path):
    result = _invoke("show", "--semitones", "2", _write_chart(tmp_path))
    assert "Key: A\n" in result.output
    assert "        A                E\n" in result.output


def test_show_negative_semitones_flat(tmp_path):
    result = _invoke("show", "-s", "-1", "--flat", _write_chart(tmp_path))
    assert "Key: Gb\n" in result.output
    assert "        Gb               Db\n" in result.output


def test_show_to_key(tmp_path):
    result = _invoke("show", "--to-key", "D", _write_chart(tmp_path))
    assert result.exit_code == 0
    assert "Key: D\n" in result.output
    assert "        D                A\n" in result.output


def test_show_rejects_invalid_key(tmp_path):
    result = _invoke("show", "--to-key", "H", _write_chart(tmp_path))
    assert result.exit_code == 2
    assert "Unknown note" in result.output


def test_show_without_chords_has_unknown_key(tmp_path):
    result = _invoke("show", _write_chart(tmp_path, "Just words"))
    assert result.output.startswith("Key: ?\n")


# ---------------------------------------------------------------------------
# chordpro
# ---------------------------------------------------------------------------


def test_chordpro_stdout(tmp_path):
    result = _invoke("chordpro", "--title", "Te Amo", "--artist", "Banda", "--stdout", _write_chart(tmp_path))
    assert result.exit_code == 0
    assert "{title: Te Amo}" in result.output
    assert "{key: G}" in result.output
    assert "Quando e[G]u digo" in result.output


def test_chordpro_writes_default_file(tmp_path):
    chart = _write_chart(tmp_path)
    runner = CliRunner()
    with runner.isolated_filesystem(temp_dir=tmp_path):
        result = runner.invoke(main, ["chordpro", "--title", "Te Amo", "--artist", "Banda", chart])
        assert result.exit_code == 0
        assert "Written to banda-te-amo.cho" in result.output
        with open("banda-te-amo.cho", encoding="utf-8") as f:
            assert "{start_of_chorus}" in f.read()


def test_chordpro_output_path(tmp_path):
    dest = tmp_path / "out.cho"
    result = _invoke("chordpro", "--title", "T", "--artist", "A", "-o", str(dest), _write_chart(tmp_path))
    assert result.exit_code == 0
    assert dest.read_text(encoding="utf-8").startswith("{title: T}")


# ---------------------------------------------------------------------------
# key
# ---------------------------------------------------------------------------


def test_key_detected(tmp_path):
    assert _invoke("key", _write_chart(tmp_path, "  Am  F\nWords")).output == "A\n"


def test_key_unknown(tmp_path):
    assert _invoke("key", _write_chart(tmp_path, "Words")).output == "?\n"
