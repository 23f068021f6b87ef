import logging
import re
import sys
from pathlib import Path

import click

from .chordpro import ChordProFormatter
from .exceptions import ChordChartError, FetchError, UnknownNoteError
from .models import Song, content_to_json
from .parser import ReconcileMode, detect_key, parse_to_song_lines
from .serializer import render_text
from .sources import load_text
from .transpose import key_after_shift, key_root, note_index, semitones_between

logger = logging.getLogger(__name__)


def _slugify(text: str) -> str:
    """Convert a string to a lowercase hyphenated slug suitable for filenames."""
    text = text.lower()
    text = re.sub(r"[^\w\s-]", "", text)   # drop punctuation
    text = re.sub(r"[\s_]+", "-", text)     # spaces/underscores → hyphens
    text = re.sub(r"-{2,}", "-", text)      # collapse multiple hyphens
    return text.strip("-")


def _default_filename(artist: str, title: str) -> str:
    return f"{_slugify(artist)}-{_slugify(title)}.cho"


def _fail(exc: ChordChartError) -> None:
    msg = f"Error: {exc}"
    if isinstance(exc, FetchError) and exc.status_code == 403:
        msg += " (the site blocks automated requests; save the page and pass the file instead)"
    click.echo(msg, err=True)
    sys.exit(1)


def _load(source: str) -> str:
    try:
        return load_text(source)
    except ChordChartError as exc:
        _fail(exc)


def _validate_key(ctx, param, value: str | None) -> str | None:
    if value is None:
        return None
    try:
        note_index(key_root(value) or value)
    except UnknownNoteError as exc:
        raise click.BadParameter(str(exc)) from exc
    return value


def _preference(flat: bool) -> str:
    return "flat" if flat else "sharp"


@click.group()
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log debug output to stderr.")
def main(verbose: bool) -> None:
    """Parse, transpose and export chord charts.

    \b
    SOURCE is a chart file (chords above lyrics), an .html file,
    an http(s) URL, or - for standard input.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("source")
@click.option("--preview", is_flag=True, default=False,
              help="Keep blank lines and pair chords only with the line directly below.")
@click.option("--indent", default=2, show_default=True, help="JSON indentation.")
def parse(source: str, preview: bool, indent: int) -> None:
    """Print the parsed song lines of SOURCE as JSON."""
    mode = ReconcileMode.PREVIEW if preview else ReconcileMode.CANONICAL
    lines = parse_to_song_lines(_load(source), mode)
    click.echo(content_to_json(lines, indent=indent))


@main.command()
@click.argument("source")
@click.option("-s", "--semitones", default=0, show_default=True, help="Semitones to shift (may be negative).")
@click.option("--to-key", default=None, callback=_validate_key, help="Transpose into this key instead.")
@click.option("--from-key", default=None, callback=_validate_key,
              help="Original key (default: detected from the first chord).")
@click.option("--flat", is_flag=True, default=False, help="Spell transposed notes with flats.")
def show(source: str, semitones: int, to_key: str | None, from_key: str | None, flat: bool) -> None:
    """Print SOURCE as a chart, optionally transposed."""
    lines = parse_to_song_lines(_load(source))
    original_key = from_key or detect_key(lines)
    if to_key:
        semitones = semitones_between(original_key, to_key)
    preference = _preference(flat)

    logger.debug("Original key %s, shifting %d semitones", original_key, semitones)
    click.echo(f"Key: {key_after_shift(original_key, semitones, preference)}")
    click.echo()
    click.echo(render_text(lines, semitones, preference))


@main.command()
@click.argument("source")
@click.option("--title", required=True, help="Song title.")
@click.option("--artist", required=True, help="Song artist.")
@click.option("--key", "original_key", default=None, callback=_validate_key,
              help="Original key (default: detected from the first chord).")
@click.option("--bpm", type=int, default=None, help="Tempo in beats per minute.")
@click.option("-s", "--semitones", default=0, show_default=True, help="Semitones to shift (may be negative).")
@click.option("--flat", is_flag=True, default=False, help="Spell transposed notes with flats.")
@click.option("-o", "--output", "output_path", default=None, metavar="PATH",
              help="Output file path (default: <artist>-<title>.cho)")
@click.option("--stdout", is_flag=True, default=False,
              help="Print to stdout instead of writing a file.")
def chordpro(
    source: str,
    title: str,
    artist: str,
    original_key: str | None,
    bpm: int | None,
    semitones: int,
    flat: bool,
    output_path: str | None,
    stdout: bool,
) -> None:
    """Convert SOURCE to ChordPro format."""
    song = Song.from_text(title, artist, _load(source), original_key=original_key, bpm=bpm)
    chordpro_text = ChordProFormatter(semitones, _preference(flat)).render(song)

    if stdout:
        click.echo(chordpro_text, nl=False)
        return

    dest = Path(output_path) if output_path else Path(_default_filename(song.artist, song.title))
    dest.write_text(chordpro_text, encoding="utf-8")
    click.echo(f"Written to {dest}")


@main.command()
@click.argument("source")
def key(source: str) -> None:
    """Print the key detected from the first chord of SOURCE."""
    click.echo(detect_key(parse_to_song_lines(_load(source))) or "?")
