"""
Record parsing for multi-field query output.

Each line holds the fields of one record joined by ``|||``, a sequence that
does not occur in ordinary metadata and needs no escaping in AppleScript.
"""

from typing import Dict, Iterable, List, Sequence

from .models import (
    PLAYLIST_TRACK_FIELDS,
    TRACK_FIELDS,
    PlaylistTrackRecord,
    TrackRecord,
)

FIELD_SEPARATOR = "|||"


def split_fields(line: str, field_count: int) -> List[str]:
    """
    Split a raw line into exactly ``field_count`` values.

    Missing trailing fields become empty strings and extra fields are dropped.

    Example:
        split_fields("Song|||Artist", 4) -> ["Song", "Artist", "", ""]
    """
    parts = (line or "").split(FIELD_SEPARATOR)[:field_count]
    return parts + [""] * (field_count - len(parts))


def parse_record(line: str, field_order: Sequence[str]) -> Dict[str, str]:
    """Parse a raw line into a mapping keyed by ``field_order``. Never raises."""
    return dict(zip(field_order, split_fields(line, len(field_order))))


def parse_tracks(lines: Iterable[str]) -> List[TrackRecord]:
    """Parse tracks query output, skipping blank lines."""
    return [
        TrackRecord(*split_fields(line, len(TRACK_FIELDS)))
        for line in lines
        if line
    ]


def parse_playlist_tracks(lines: Iterable[str]) -> List[PlaylistTrackRecord]:
    """Parse playlist-tracks query output, skipping blank lines."""
    return [
        PlaylistTrackRecord(*split_fields(line, len(PLAYLIST_TRACK_FIELDS)))
        for line in lines
        if line
    ]
