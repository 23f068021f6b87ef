class ChordChartError(Exception):
    """Base exception for chordchart."""


class SourceError(ChordChartError):
    """Raised when chart text cannot be read from a file or stream."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Could not read {source}: {reason}")


class FetchError(ChordChartError):
    """Raised when an HTTP request fails."""

    def __init__(self, url: str, status_code: int):
        self.url = url
        self.status_code = status_code
        super().__init__(f"HTTP {status_code} fetching {url}")


class UnknownNoteError(ChordChartError):
    """Raised when a key or note name has no valid root."""

    def __init__(self, note: str):
        self.note = note
        super().__init__(f"Unknown note: {note!r}")
